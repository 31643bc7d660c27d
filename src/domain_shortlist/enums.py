"""
Enumeration types for the domain shortlist system.

These enums provide type-safe constants for availability states, lookup
sources, error codes, and logging options throughout the system.
"""

from enum import Enum
from typing import Optional


class Availability(Enum):
    """Tri-state availability of a single name.tld."""

    AVAILABLE = "available"
    TAKEN = "taken"
    UNKNOWN = "unknown"

    def to_json(self) -> Optional[bool]:
        """Wire/storage form: true, false or null."""
        if self is Availability.AVAILABLE:
            return True
        if self is Availability.TAKEN:
            return False
        return None

    @classmethod
    def from_json(cls, value: object) -> "Availability":
        """
        Parse the wire/storage form.

        Anything other than a JSON boolean is treated as unknown so that
        hand-edited or corrupt values never leak out as a fourth state.
        """
        if value is True:
            return cls.AVAILABLE
        if value is False:
            return cls.TAKEN
        return cls.UNKNOWN


class LookupSource(Enum):
    """Which signal source produced an availability value."""

    PROVIDER = "provider"
    DNS = "dns"
    NONE = "none"


class ProviderErrorCode(Enum):
    """Error codes for availability provider operations."""

    MISSING_CREDENTIALS = "missing_credentials"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    RATE_LIMITED = "rate_limited"
    PARSE_ERROR = "parse_error"
    SIMULATION = "simulation"


class DNSErrorCode(Enum):
    """Error codes for DNS fallback lookups."""

    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    PARSE_ERROR = "parse_error"
    SIMULATION = "simulation"


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
