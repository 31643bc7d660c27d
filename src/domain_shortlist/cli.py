"""
Command-line interface for the domain shortlist system.

This module provides the main CLI entry point with commands for:
- serve: Run the HTTP API and client shell
- check: Check names without storing them
- add / list / favorite / remove / reverify / clear: Manage the shared list
- export: Write the list as CSV
- config: Configuration management
"""

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from . import __version__
from .audit_logger import AuditLogger, create_logger
from .config import (
    SystemConfig,
    load_config_from_env,
    load_config_from_file,
    parse_tld_list,
    save_config_to_file,
)
from .enums import Availability
from .exceptions import ConfigurationError, ValidationError
from .i18n import get_message
from .models import AvailabilityMap
from .reporting import export_csv, filter_suggestions, format_timestamp, status_label
from .service import ShortlistService, build_service


DEFAULT_CONFIG_PATH = Path.home() / ".domain_shortlist" / "config.json"

STATUS_ICONS = {
    Availability.AVAILABLE: "✓",
    Availability.TAKEN: "✗",
    Availability.UNKNOWN: "?",
}


def load_config(args: argparse.Namespace) -> SystemConfig:
    """
    Build the configuration for a command.

    A `--config` file wins over the environment; `--dry-run` and
    `--language` override whatever was loaded.

    Raises:
        ConfigurationError: If the configuration file cannot be loaded
    """
    if args.config:
        config = load_config_from_file(Path(args.config))
    else:
        config = load_config_from_env()

    if args.dry_run:
        config = replace(config, simulation_mode=True)
    if args.language:
        config = replace(config, language=args.language)
    return config


def create_cli_logger(config: SystemConfig, verbose: bool) -> Optional[AuditLogger]:
    """Verbose runs log everything to stderr; quiet runs log nothing."""
    if not verbose:
        return None
    return create_logger(config.logging.output_format, "debug")


def resolve_tlds(value: Optional[str], config: SystemConfig) -> list[str]:
    return parse_tld_list(value or "") or list(config.default_tlds)


def format_availability(availability: AvailabilityMap, tlds: list[str], language: str) -> str:
    cells = []
    for tld in tlds:
        state = availability.get(tld, Availability.UNKNOWN)
        cells.append(f".{tld} {STATUS_ICONS[state]} {status_label(state, language)}")
    return "  ".join(cells)


def print_records(records, tlds: list[str], language: str) -> None:
    for record in records:
        star = "★" if record.is_favorite else " "
        print(
            f"{star} {record.domain:<24} {format_availability(record.availability, tlds, language)}"
            f"  ({format_timestamp(record.last_checked)})  [{record.id}]"
        )


def read_names(args: argparse.Namespace) -> list[str]:
    """Collect raw names from positional arguments and an optional file."""
    names = list(args.domains or [])
    if getattr(args, "file", None):
        with open(args.file, "r", encoding="utf-8") as f:
            names.extend(
                line.strip() for line in f if line.strip() and not line.startswith("#")
            )
    return names


async def run_check(service: ShortlistService, names: list[str], tlds: list[str], language: str) -> int:
    print(get_message("cli.checking", language, count=len(names), tlds=", ".join(tlds)))
    async with service.checker:
        results = await service.check_domains(names, tlds)
    for result in results:
        if result.error:
            print(f"  {result.domain:<24} {result.error}")
            continue
        print(f"  {result.domain:<24} {format_availability(result.availability, tlds, language)}")
    return 1 if any(result.error for result in results) else 0


async def run_add(service: ShortlistService, names: list[str], tlds: list[str], language: str) -> int:
    print(get_message("cli.checking", language, count=len(names), tlds=", ".join(tlds)))
    async with service.checker:
        records = await service.check_and_add(names, tlds)
    added = len(service.normalizer.normalize_many(names))
    print(get_message("cli.added", language, count=added, total=len(records)))
    print_records(records[:added], tlds, language)
    return 0


async def run_reverify(service: ShortlistService, tlds: list[str], language: str) -> int:
    favorites = [r for r in service.store.get_all_domains() if r.is_favorite]
    if not favorites:
        print(get_message("cli.no_favorites", language))
        return 0
    async with service.checker:
        records = await service.reverify_favorites(tlds)
    print(get_message("cli.reverified", language, count=len(favorites)))
    print_records([r for r in records if r.is_favorite], tlds, language)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle the 'serve' command."""
    import uvicorn

    from .api import create_app

    config = load_config(args)
    host = args.host or config.server.host
    port = args.port or config.server.port
    logger = create_logger(
        config.logging.output_format,
        "debug" if args.verbose else config.logging.level,
    )

    if config.simulation_mode:
        print(get_message("simulation.enabled", config.language))
    print(get_message("cli.serving", config.language, host=host, port=port))

    app = create_app(config=config, logger=logger)
    uvicorn.run(app, host=host, port=port, log_level="debug" if args.verbose else "info")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the 'check' command."""
    config = load_config(args)
    service = build_service(config, create_cli_logger(config, args.verbose))
    names = read_names(args)
    if not names:
        print(get_message("cli.no_domains", config.language), file=sys.stderr)
        return 1
    if config.simulation_mode:
        print(get_message("simulation.enabled", config.language))

    return asyncio.run(run_check(service, names, resolve_tlds(args.tlds, config), config.language))


def cmd_add(args: argparse.Namespace) -> int:
    """Handle the 'add' command."""
    config = load_config(args)
    service = build_service(config, create_cli_logger(config, args.verbose))
    names = read_names(args)
    if not names:
        print(get_message("cli.no_domains", config.language), file=sys.stderr)
        return 1
    if config.simulation_mode:
        print(get_message("simulation.enabled", config.language))

    try:
        return asyncio.run(run_add(service, names, resolve_tlds(args.tlds, config), config.language))
    except ValidationError:
        print(get_message("cli.no_domains", config.language), file=sys.stderr)
        return 1


def cmd_list(args: argparse.Namespace) -> int:
    """Handle the 'list' command."""
    config = load_config(args)
    service = build_service(config, create_cli_logger(config, args.verbose))
    tlds = resolve_tlds(args.tlds, config)

    records = filter_suggestions(
        service.store.get_all_domains(),
        search_text=args.search or "",
        only_available=args.available,
        tlds=tlds,
        only_favorites=args.favorites,
    )
    if not records:
        print(get_message("cli.empty_list", config.language))
        return 0

    print_records(records, tlds, config.language)
    return 0


def cmd_favorite(args: argparse.Namespace) -> int:
    """Handle the 'favorite' command."""
    config = load_config(args)
    service = build_service(config, create_cli_logger(config, args.verbose))

    if not any(r.id == args.id for r in service.store.get_all_domains()):
        print(get_message("cli.not_found", config.language, id=args.id), file=sys.stderr)
        return 1

    records = service.store.toggle_favorite(args.id)
    record = next(r for r in records if r.id == args.id)
    state = "★" if record.is_favorite else "☆"
    print(get_message("cli.favorite_toggled", config.language, domain=record.domain, state=state))
    return 0


def cmd_remove(args: argparse.Namespace) -> int:
    """Handle the 'remove' command."""
    config = load_config(args)
    service = build_service(config, create_cli_logger(config, args.verbose))

    if not any(r.id == args.id for r in service.store.get_all_domains()):
        print(get_message("cli.not_found", config.language, id=args.id), file=sys.stderr)
        return 1

    service.store.remove_domain(args.id)
    print(get_message("cli.removed", config.language, id=args.id))
    return 0


def cmd_reverify(args: argparse.Namespace) -> int:
    """Handle the 'reverify' command."""
    config = load_config(args)
    service = build_service(config, create_cli_logger(config, args.verbose))
    if config.simulation_mode:
        print(get_message("simulation.enabled", config.language))
    return asyncio.run(run_reverify(service, resolve_tlds(args.tlds, config), config.language))


def cmd_clear(args: argparse.Namespace) -> int:
    """Handle the 'clear' command."""
    config = load_config(args)
    service = build_service(config, create_cli_logger(config, args.verbose))

    if not service.store.clear_all_domains():
        print(get_message("cli.clear_failed", config.language), file=sys.stderr)
        return 1
    print(get_message("cli.cleared", config.language))
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Handle the 'export' command."""
    config = load_config(args)
    service = build_service(config, create_cli_logger(config, args.verbose))
    tlds = resolve_tlds(args.tlds, config)

    content = export_csv(service.store.get_all_domains(), tlds, config.language)
    if not args.output:
        sys.stdout.write(content)
        return 0

    output_file = Path(args.output)
    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        with open(output_file, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        print(f"Error writing export: {e}", file=sys.stderr)
        return 1
    print(get_message("export.written", config.language, path=output_file))
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Handle the 'config' command."""
    config_path = Path(args.path) if args.path else DEFAULT_CONFIG_PATH

    if args.action == "show":
        config = load_config_from_file(config_path)
        print(f"Configuration from: {config_path}")
        print(f"  Language: {config.language}")
        print(f"  Simulation mode: {config.simulation_mode}")
        print(f"  Default TLDs: {', '.join(config.default_tlds)}")
        print(f"  Provider host: {config.provider.resolve_api_host()}")
        print(f"  DNS resolver: {config.dns.resolver_url}")
        print(f"  Pacing: {config.pacing.tld_delay_seconds}s per TLD, "
              f"{config.pacing.domain_delay_seconds}s per domain")
        print(f"  Data file: {config.persistence.file_path}")
        print(f"  Server: {config.server.host}:{config.server.port}")
        print(f"  Log level: {config.logging.level}")
        return 0

    elif args.action == "init":
        if config_path.exists() and not args.force:
            print(f"Configuration already exists at: {config_path}")
            print("Use --force to overwrite.")
            return 1

        config = SystemConfig(language=args.language or "en")
        save_config_to_file(config, config_path)
        print(f"Configuration created at: {config_path}")
        return 0

    elif args.action == "validate":
        load_config_from_file(config_path)
        print(f"Configuration at {config_path} is valid.")
        return 0

    return 1


def add_tlds_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--tlds", "-t",
        help="Comma separated TLDs (default: configured default TLDs)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="domain-shortlist",
        description="Shared domain-name shortlist with multi-TLD availability checks",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--config", "-c",
        help="Path to configuration file (default: environment and .env)",
    )
    parser.add_argument(
        "--language", "-l",
        choices=["de", "en"],
        help="Output language (default: configured language)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Simulation mode - no real network requests",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'serve' command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API and client application",
    )
    serve_parser.add_argument("--host", help="Bind address (default: HOST or 0.0.0.0)")
    serve_parser.add_argument("--port", "-p", type=int, help="Port (default: PORT or 3001)")
    serve_parser.set_defaults(func=cmd_serve)

    # 'check' command
    check_parser = subparsers.add_parser(
        "check",
        help="Check names without adding them to the list",
    )
    check_parser.add_argument("domains", nargs="*", help="Names to check (e.g., nordicai)")
    check_parser.add_argument("--file", "-f", help="File with one name per line")
    add_tlds_argument(check_parser)
    check_parser.set_defaults(func=cmd_check)

    # 'add' command
    add_parser = subparsers.add_parser(
        "add",
        help="Check names and add them to the list",
    )
    add_parser.add_argument("domains", nargs="*", help="Names to add")
    add_parser.add_argument("--file", "-f", help="File with one name per line")
    add_tlds_argument(add_parser)
    add_parser.set_defaults(func=cmd_add)

    # 'list' command
    list_parser = subparsers.add_parser(
        "list",
        help="Show the shared list",
    )
    list_parser.add_argument("--favorites", action="store_true", help="Only favorites")
    list_parser.add_argument(
        "--available",
        action="store_true",
        help="Only names available under at least one shown TLD",
    )
    list_parser.add_argument("--search", "-s", help="Filter by name substring")
    add_tlds_argument(list_parser)
    list_parser.set_defaults(func=cmd_list)

    # 'favorite' command
    favorite_parser = subparsers.add_parser(
        "favorite",
        help="Toggle the favorite flag of a record",
    )
    favorite_parser.add_argument("id", help="Record id (see 'list')")
    favorite_parser.set_defaults(func=cmd_favorite)

    # 'remove' command
    remove_parser = subparsers.add_parser(
        "remove",
        help="Remove a record from the list",
    )
    remove_parser.add_argument("id", help="Record id (see 'list')")
    remove_parser.set_defaults(func=cmd_remove)

    # 'reverify' command
    reverify_parser = subparsers.add_parser(
        "reverify",
        help="Re-check availability of all favorites",
    )
    add_tlds_argument(reverify_parser)
    reverify_parser.set_defaults(func=cmd_reverify)

    # 'clear' command
    clear_parser = subparsers.add_parser(
        "clear",
        help="Remove every record from the list",
    )
    clear_parser.set_defaults(func=cmd_clear)

    # 'export' command
    export_parser = subparsers.add_parser(
        "export",
        help="Export the list as CSV",
    )
    export_parser.add_argument("--output", "-o", help="Path to write the CSV (default: stdout)")
    add_tlds_argument(export_parser)
    export_parser.set_defaults(func=cmd_export)

    # 'config' command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
    )
    config_parser.add_argument(
        "action",
        choices=["show", "init", "validate"],
        help="Configuration action",
    )
    config_parser.add_argument(
        "--path", "-p",
        help="Path to configuration file",
    )
    config_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Force overwrite existing configuration",
    )
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
