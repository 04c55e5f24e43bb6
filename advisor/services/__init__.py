"""Analysis services: handler, response parser, rule-based fallback."""
