from __future__ import annotations


class ReviewExporterError(Exception):
    """Base class for errors raised by the review exporter."""


class DocumentParseError(ReviewExporterError):
    """A single uploaded document could not be read or parsed as JSON."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Error parsing JSON from {name}: {reason}")


class EmptyExportError(ReviewExporterError):
    """Export was requested with no reviews loaded or no fields selected."""


class UnparseableTimestamp(ReviewExporterError, ValueError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Cannot parse timestamp: {value!r}")
