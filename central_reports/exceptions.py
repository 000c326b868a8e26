"""Custom exceptions for the Central report builder."""


class CentralReportsError(Exception):
    """Base exception for the report builder."""


class SelectionError(CentralReportsError):
    """Raised when a selection patch or saved query is malformed."""


class CatalogError(CentralReportsError):
    """Raised when the value catalog cannot be loaded."""


class ServiceError(CentralReportsError):
    """Base exception for in-process deck and data-view services."""


class DeckNotFoundError(ServiceError):
    """Raised when a deck identifier does not match any deck."""


class DataViewNotFoundError(ServiceError):
    """Raised when a data view identifier does not match any view."""


class InvalidEmailError(ServiceError):
    """Raised when a share permission is requested for a malformed email."""


class PermissionExistsError(ServiceError):
    """Raised when a deck is shared with an email that already has access."""


class DeckUpdateError(ServiceError):
    """Raised when a deck update names read-only, unknown or invalid fields."""


class CountApiError(CentralReportsError):
    """Base exception for record count API failures."""


class CountApiAuthenticationError(CountApiError):
    """Raised when the count API rejects the access token."""


class CountApiRateLimitError(CountApiError):
    """Raised when the count API rate limits requests despite retries."""


class ReportGenerationError(CentralReportsError):
    """Raised when report generation fails."""
