"""
Configuration dataclasses for the domain shortlist system.

This module defines all configuration structures used throughout the system,
including the availability provider, the DNS fallback, request pacing,
persistence, the HTTP server and logging, plus helpers that build a
configuration from the environment (and a `.env` file) or a JSON file.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .audit_logger import OUTPUT_FORMATS, parse_log_level
from .exceptions import ConfigurationError
from .i18n import SUPPORTED_LANGUAGES


DEFAULT_TLDS = ["com", "ai", "se", "no"]
DEFAULT_PROVIDER_HOST = "domainr.p.rapidapi.com"
DEFAULT_DNS_RESOLVER_URL = "https://dns.google/resolve"
DEFAULT_DATA_DIR = Path("data")
DEFAULT_STATIC_DIR = Path(__file__).resolve().parent / "static"

API_KEY_ENV = "RAPIDAPI_KEY"
API_HOST_ENV = "RAPIDAPI_HOST"


@dataclass
class ProviderConfig:
    """
    External availability provider settings.

    `api_key` and `api_host` are normally left unset so the provider client
    reads RAPIDAPI_KEY / RAPIDAPI_HOST from the environment on every call.
    """

    api_key: Optional[str] = None
    api_host: Optional[str] = None
    timeout_seconds: float = 10.0

    def resolve_api_key(self) -> Optional[str]:
        """Return the configured key, falling back to the environment."""
        key = self.api_key if self.api_key is not None else os.getenv(API_KEY_ENV)
        key = (key or "").strip()
        return key or None

    def resolve_api_host(self) -> str:
        """Return the configured host, falling back to the environment."""
        host = self.api_host or os.getenv(API_HOST_ENV) or DEFAULT_PROVIDER_HOST
        return host.strip()


@dataclass
class DNSFallbackConfig:
    """DNS-over-HTTPS fallback settings."""

    resolver_url: str = DEFAULT_DNS_RESOLVER_URL
    timeout_seconds: float = 5.0


@dataclass
class PacingConfig:
    """Fixed delays between successive external lookups."""

    tld_delay_seconds: float = 1.5
    domain_delay_seconds: float = 2.0


@dataclass
class PersistenceConfig:
    """Location of the shared domain list."""

    data_dir: Path = DEFAULT_DATA_DIR
    file_name: str = "domains.json"

    @property
    def file_path(self) -> Path:
        return self.data_dir / self.file_name


@dataclass
class ServerConfig:
    """HTTP server settings."""

    host: str = "0.0.0.0"
    port: int = 3001
    static_dir: Path = DEFAULT_STATIC_DIR


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class SystemConfig:
    """Main system configuration combining all sub-configurations."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    dns: DNSFallbackConfig = field(default_factory=DNSFallbackConfig)
    pacing: PacingConfig = field(default_factory=PacingConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    default_tlds: list[str] = field(default_factory=lambda: list(DEFAULT_TLDS))
    language: str = "en"  # 'de' or 'en'
    simulation_mode: bool = False


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return default


def parse_tld_list(value: str) -> list[str]:
    """
    Parse a comma/whitespace separated TLD list.

    Leading dots are dropped, entries are lowercased and de-duplicated
    while keeping their first-seen order.
    """
    if not value:
        return []
    raw = [p.strip() for chunk in value.replace(";", ",").split(",") for p in chunk.split()]
    seen, out = set(), []
    for item in raw:
        tld = item.lstrip(".").lower()
        if tld and tld not in seen:
            out.append(tld)
            seen.add(tld)
    return out


def _invalid_value(field_name: str, value, expected: str) -> ConfigurationError:
    return ConfigurationError(
        code="invalid_value",
        message=f"Invalid configuration value for {field_name}: {value!r} ({expected})",
        details={"field": field_name, "value": value},
    )


def validate_config(config: SystemConfig) -> SystemConfig:
    """
    Check the values that would otherwise only fail once the service is built.

    Returns:
        The same configuration

    Raises:
        ConfigurationError: With code 'invalid_value' for the first bad field
    """
    for field_name, value in (
        ("provider.timeout_seconds", config.provider.timeout_seconds),
        ("dns.timeout_seconds", config.dns.timeout_seconds),
    ):
        if not value > 0:
            raise _invalid_value(field_name, value, "must be > 0")

    for field_name, value in (
        ("pacing.tld_delay_seconds", config.pacing.tld_delay_seconds),
        ("pacing.domain_delay_seconds", config.pacing.domain_delay_seconds),
    ):
        if not value >= 0:
            raise _invalid_value(field_name, value, "must be >= 0")

    if not 1 <= config.server.port <= 65535:
        raise _invalid_value("server.port", config.server.port, "must be between 1 and 65535")

    try:
        parse_log_level(str(config.logging.level))
    except ValueError:
        raise _invalid_value(
            "logging.level", config.logging.level, "debug, info, warn or error"
        ) from None

    if config.logging.output_format not in OUTPUT_FORMATS:
        raise _invalid_value(
            "logging.output_format", config.logging.output_format, ", ".join(OUTPUT_FORMATS)
        )

    if not isinstance(config.language, str) or config.language not in SUPPORTED_LANGUAGES:
        raise _invalid_value("language", config.language, "de or en")

    return config


def load_config_from_env(dotenv_path: Optional[Path] = None) -> SystemConfig:
    """
    Build a configuration from environment variables.

    A `.env` file is loaded first (without overriding variables that are
    already set). Malformed numeric values fall back to their defaults;
    values that parse but are out of range are rejected.

    Args:
        dotenv_path: Optional explicit path to a .env file

    Returns:
        SystemConfig populated from the environment

    Raises:
        ConfigurationError: If a value is out of range
    """
    load_dotenv(dotenv_path)

    tlds = parse_tld_list(os.getenv("DEFAULT_TLDS", "")) or list(DEFAULT_TLDS)
    language = (os.getenv("LANGUAGE", "en") or "en").lower()
    if language not in ("de", "en"):
        language = "en"

    return validate_config(SystemConfig(
        provider=ProviderConfig(
            timeout_seconds=_float_env("PROVIDER_TIMEOUT", 10.0),
        ),
        dns=DNSFallbackConfig(
            resolver_url=os.getenv("DNS_RESOLVER_URL", DEFAULT_DNS_RESOLVER_URL),
            timeout_seconds=_float_env("DNS_TIMEOUT", 5.0),
        ),
        pacing=PacingConfig(
            tld_delay_seconds=_float_env("TLD_DELAY_SECONDS", 1.5),
            domain_delay_seconds=_float_env("DOMAIN_DELAY_SECONDS", 2.0),
        ),
        persistence=PersistenceConfig(
            data_dir=Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR))),
        ),
        server=ServerConfig(
            host=os.getenv("HOST", "0.0.0.0"),
            port=_int_env("PORT", 3001),
            static_dir=Path(os.getenv("STATIC_DIR", str(DEFAULT_STATIC_DIR))),
        ),
        logging=LoggingConfig(
            level=(os.getenv("LOG_LEVEL", "info") or "info").lower(),
            output_format=(os.getenv("LOG_FORMAT", "text") or "text").lower(),
        ),
        default_tlds=tlds,
        language=language,
        simulation_mode=os.getenv("SIMULATION_MODE", "0") == "1",
    ))


def load_config_from_file(config_path: Path) -> SystemConfig:
    """
    Load configuration from a JSON file.

    Missing sections keep their defaults. The provider API key is never
    read from the file; it always comes from the environment.

    Args:
        config_path: Path to the configuration file

    Returns:
        SystemConfig built from the file

    Raises:
        ConfigurationError: If the file cannot be read, has the wrong shape
            or holds an out-of-range value
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(
            code="not_found",
            message=f"Configuration file not found: {config_path}",
            details={"config_path": str(config_path)},
        ) from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            code="parse_error",
            message=f"Failed to load configuration: {e}",
            details={"config_path": str(config_path)},
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            code="parse_error",
            message="Configuration root must be a JSON object",
            details={"config_path": str(config_path)},
        )

    try:
        provider_data = data.get("provider", {})
        dns_data = data.get("dns", {})
        pacing_data = data.get("pacing", {})
        persistence_data = data.get("persistence", {})
        server_data = data.get("server", {})
        logging_data = data.get("logging", {})

        config = SystemConfig(
            provider=ProviderConfig(
                api_host=provider_data.get("api_host"),
                timeout_seconds=float(provider_data.get("timeout_seconds", 10.0)),
            ),
            dns=DNSFallbackConfig(
                resolver_url=dns_data.get("resolver_url", DEFAULT_DNS_RESOLVER_URL),
                timeout_seconds=float(dns_data.get("timeout_seconds", 5.0)),
            ),
            pacing=PacingConfig(
                tld_delay_seconds=float(pacing_data.get("tld_delay_seconds", 1.5)),
                domain_delay_seconds=float(pacing_data.get("domain_delay_seconds", 2.0)),
            ),
            persistence=PersistenceConfig(
                data_dir=Path(persistence_data.get("data_dir", str(DEFAULT_DATA_DIR))),
                file_name=persistence_data.get("file_name", "domains.json"),
            ),
            server=ServerConfig(
                host=server_data.get("host", "0.0.0.0"),
                port=int(server_data.get("port", 3001)),
                static_dir=Path(server_data.get("static_dir", str(DEFAULT_STATIC_DIR))),
            ),
            logging=LoggingConfig(
                level=logging_data.get("level", "info"),
                output_format=logging_data.get("output_format", "text"),
            ),
            default_tlds=parse_tld_list(",".join(data.get("default_tlds", [])))
            or list(DEFAULT_TLDS),
            language=data.get("language", "en"),
            simulation_mode=bool(data.get("simulation_mode", False)),
        )
    except (AttributeError, TypeError, ValueError) as e:
        raise ConfigurationError(
            code="invalid_value",
            message=f"Invalid configuration value: {e}",
            details={"config_path": str(config_path)},
        ) from e

    try:
        return validate_config(config)
    except ConfigurationError as e:
        e.details["config_path"] = str(config_path)
        raise


def save_config_to_file(config: SystemConfig, config_path: Path) -> None:
    """
    Save configuration to a JSON file.

    Args:
        config: SystemConfig to save
        config_path: Path to save the configuration

    Raises:
        ConfigurationError: If the file cannot be written
    """
    data = {
        "provider": {
            "api_host": config.provider.api_host,
            "timeout_seconds": config.provider.timeout_seconds,
        },
        "dns": {
            "resolver_url": config.dns.resolver_url,
            "timeout_seconds": config.dns.timeout_seconds,
        },
        "pacing": {
            "tld_delay_seconds": config.pacing.tld_delay_seconds,
            "domain_delay_seconds": config.pacing.domain_delay_seconds,
        },
        "persistence": {
            "data_dir": str(config.persistence.data_dir),
            "file_name": config.persistence.file_name,
        },
        "server": {
            "host": config.server.host,
            "port": config.server.port,
            "static_dir": str(config.server.static_dir),
        },
        "logging": {
            "level": config.logging.level,
            "output_format": config.logging.output_format,
        },
        "default_tlds": config.default_tlds,
        "language": config.language,
        "simulation_mode": config.simulation_mode,
    }

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise ConfigurationError(
            code="io_error",
            message=f"Failed to write configuration: {e}",
            details={"config_path": str(config_path)},
        ) from e
