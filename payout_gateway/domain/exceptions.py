"""Domain-specific exceptions"""

from typing import Any, Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Payout request is missing required fields or carries invalid values"""

    pass


class UpstreamError(DomainException):
    """payOS (or another upstream) returned an error or is unavailable"""

    def __init__(self, message: str, status_code: Optional[int] = None, detail: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail


class DirectoryUnavailable(DomainException):
    """Every bank-code candidate endpoint and the local fallback file failed"""

    pass


class SecondaryDirectoryError(DomainException):
    """Public bank listing could not be fetched"""

    def __init__(self, message: str, detail: Any = None):
        super().__init__(message)
        self.message = message
        self.detail = detail
