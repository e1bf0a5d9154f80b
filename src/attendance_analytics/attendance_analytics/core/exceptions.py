class DomainError(Exception):
    """Base exception for analytics rule violations."""


class ValidationError(DomainError):
    """Raised when request input (dates, filters) is invalid."""


class DataSourceError(DomainError):
    """Raised when attendance records cannot be fetched from the data source."""


class InvalidFilterError(ValidationError):
    """Raised when a filter value has the wrong shape (e.g. a non-numeric id)."""
