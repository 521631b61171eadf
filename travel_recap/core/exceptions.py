"""
Errors raised at the edges of the ingestion pipeline.

The core parsing and statistics functions never raise on malformed records;
these are for the callers that decide a whole file is unusable.
"""

from typing import Any


class TimelineError(Exception):
    """Base class for timeline ingestion errors."""


class InvalidTimelineJSONError(TimelineError):
    """The uploaded file is not valid JSON."""


class NoSegmentsFoundError(TimelineError):
    """The document parsed, but no timeline segments could be extracted."""

    def __init__(self, data: Any):
        self.data = data
        super().__init__("Invalid JSON structure. No timeline segments found" + self.hint(data))

    @staticmethod
    def hint(data: Any) -> str:
        if isinstance(data, list):
            return " (root array was empty)"
        if isinstance(data, dict):
            keys = ", ".join(str(k) for k in list(data.keys())[:5])
            return f" (expected semanticSegments or root array; got keys: {keys})"
        return f" (expected semanticSegments or root array; got {type(data).__name__})"


class ConfigError(ValueError):
    """Invalid configuration value."""
