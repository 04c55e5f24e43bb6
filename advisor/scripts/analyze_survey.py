"""Run the survey analysis for a JSON file and print the recommendations.

Usage:
    python -m advisor.scripts.analyze_survey survey.json
    python -m advisor.scripts.analyze_survey survey.json --fallback-only
    cat survey.json | survey-advisor-analyze -

Uses the same settings as the API (GEMINI_API_KEY, LLM_PROVIDER, ...).
--fallback-only skips the LLM and prints the rule-based analysis.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from advisor.config import get_settings
from advisor.schemas.survey import SurveyInput
from advisor.services.analysis import ConfigurationError, SurveyAnalyzer
from advisor.services.fallback import generate_fallback_analysis


def _load_survey(source: str) -> SurveyInput:
    raw = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    return SurveyInput.model_validate(json.loads(raw))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Analyze a survey JSON file")
    parser.add_argument("survey", help="Path to survey JSON, or '-' for stdin")
    parser.add_argument(
        "--fallback-only",
        action="store_true",
        help="Skip the LLM and print the rule-based analysis",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    try:
        survey = _load_survey(args.survey)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        print(f"Invalid survey input: {e}", file=sys.stderr)
        return 2

    if args.fallback_only:
        result = generate_fallback_analysis(survey)
    else:
        try:
            result = asyncio.run(SurveyAnalyzer(get_settings()).analyze(survey))
        except ConfigurationError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return 1

    print(json.dumps(result.model_dump(by_alias=True), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
