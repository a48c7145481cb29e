from __future__ import annotations


class ReportError(Exception):
    """Base class for errors that abort the current report operation."""


class ParseError(ReportError):
    """Raised when an input document is not valid JSON."""


class ValidationError(ReportError):
    """Raised when a parsed document does not match the cost-center schema."""

    def __init__(self, message: str, *, index: int | None = None, resource_index: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.index = index
        self.resource_index = resource_index


class NetworkError(ReportError):
    """Raised when the billing API cannot be reached or answers with an error status."""

    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not-found"
    OTHER = "other"

    def __init__(self, message: str, *, kind: str = OTHER, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code


class ConfigurationError(ReportError):
    """Raised when API credentials are missing or incomplete."""


class DatasetNotLoaded(ReportError):
    """Raised when an operation needs a dataset and none is loaded."""


class StaleResponseError(ReportError):
    """Raised when a fetch completes after a newer load replaced the dataset."""
