"""
Domain Shortlist - shared domain-name shortlist with multi-TLD availability checks.

This package checks candidate names across several TLDs through an external
availability provider with a DNS fallback, keeps a shared list of results on
disk, and serves both through an HTTP API and a command-line interface.
"""

__version__ = "0.1.0"
__author__ = "Domain Shortlist Team"

from domain_shortlist.exceptions import (
    DomainShortlistError,
    ValidationError,
    ProviderError,
    DNSLookupError,
    PersistenceError,
    ConfigurationError,
)
from domain_shortlist.enums import (
    Availability,
    LookupSource,
    ProviderErrorCode,
    DNSErrorCode,
    LogLevel,
)
from domain_shortlist.config import (
    ProviderConfig,
    DNSFallbackConfig,
    PacingConfig,
    PersistenceConfig,
    ServerConfig,
    LoggingConfig,
    SystemConfig,
    load_config_from_env,
    load_config_from_file,
    save_config_to_file,
    validate_config,
)
from domain_shortlist.models import (
    TLDCheck,
    DomainResult,
    DomainSuggestion,
)
from domain_shortlist.normalizer import (
    DomainNormalizer,
    NormalizationResult,
)
from domain_shortlist.rate_limiter import (
    RateLimiter,
    RateLimitStatus,
)
from domain_shortlist.provider_client import (
    AvailabilityProviderClient,
    ProviderResponse,
    ProviderFailure,
)
from domain_shortlist.dns_fallback import (
    DNSFallbackChecker,
    DNSResponse,
    DNSFailure,
)
from domain_shortlist.checker import DomainChecker
from domain_shortlist.domain_store import (
    DomainStore,
    JSONFileDomainStore,
)
from domain_shortlist.service import (
    ShortlistService,
    build_service,
)
from domain_shortlist.audit_logger import (
    AuditLogger,
    LogEntry,
)
from domain_shortlist.i18n import (
    get_message,
    get_missing_translations,
    TRANSLATIONS,
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
)
from domain_shortlist.reporting import (
    filter_suggestions,
    status_label,
    export_csv,
)

__all__ = [
    "__version__",
    # Exceptions
    "DomainShortlistError",
    "ValidationError",
    "ProviderError",
    "DNSLookupError",
    "PersistenceError",
    "ConfigurationError",
    # Enums
    "Availability",
    "LookupSource",
    "ProviderErrorCode",
    "DNSErrorCode",
    "LogLevel",
    # Config
    "ProviderConfig",
    "DNSFallbackConfig",
    "PacingConfig",
    "PersistenceConfig",
    "ServerConfig",
    "LoggingConfig",
    "SystemConfig",
    "load_config_from_env",
    "load_config_from_file",
    "save_config_to_file",
    "validate_config",
    # Models
    "TLDCheck",
    "DomainResult",
    "DomainSuggestion",
    # Normalizer
    "DomainNormalizer",
    "NormalizationResult",
    # Rate Limiter
    "RateLimiter",
    "RateLimitStatus",
    # Provider Client
    "AvailabilityProviderClient",
    "ProviderResponse",
    "ProviderFailure",
    # DNS Fallback
    "DNSFallbackChecker",
    "DNSResponse",
    "DNSFailure",
    # Checker
    "DomainChecker",
    # Store
    "DomainStore",
    "JSONFileDomainStore",
    # Service
    "ShortlistService",
    "build_service",
    # Audit Logger
    "AuditLogger",
    "LogEntry",
    # I18n
    "get_message",
    "get_missing_translations",
    "TRANSLATIONS",
    "SUPPORTED_LANGUAGES",
    "DEFAULT_LANGUAGE",
    # Reporting
    "filter_suggestions",
    "status_label",
    "export_csv",
]
