"""
Exception classes for the domain shortlist system.

All exceptions inherit from DomainShortlistError and provide structured
error information with codes, messages, and optional details.
"""

from typing import Optional


class DomainShortlistError(Exception):
    """Base exception for all domain shortlist errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainShortlistError):
    """Raised when client input is missing or has the wrong shape."""

    pass


class ProviderError(DomainShortlistError):
    """Raised when the external availability provider cannot be used."""

    pass


class DNSLookupError(DomainShortlistError):
    """Raised when the DNS fallback lookup fails."""

    pass


class PersistenceError(DomainShortlistError):
    """Raised when the domain list cannot be read or written."""

    pass


class ConfigurationError(DomainShortlistError):
    """Raised when a configuration file cannot be loaded."""

    pass
