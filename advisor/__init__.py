"""Survey Advisor: AI opportunity recommendations from a business survey."""

__version__ = "0.1.0"
