"""weather-lookup CLI: look up weather for a place and manage the provider preference."""

from __future__ import annotations

import argparse
import logging
import sys
import uuid

from rich.console import Console

from .config import Settings, load_settings
from .exceptions import ConfigError, JournalError, WeatherLookupError
from .journal import JournalWriter
from .log_setup import setup_logger
from .lookup import LookupResult, WeatherLookup
from .preferences import ProviderPreference, ProviderPreferenceStore
from .providers.capabilities import available_providers, parse_provider
from .providers.models import Provider
from .providers.planner import NOW
from .render import render_providers, render_record


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="weather-lookup",
        description="Look up current, forecast or historical weather for a place.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    get_parser = subparsers.add_parser("get", help="Fetch weather for an address or 'lat, lon'.")
    get_parser.add_argument("address", help="Place name, or coordinates as 'lat, lon'.")
    get_parser.add_argument(
        "date",
        nargs="?",
        default=NOW,
        help="Date to look up (default: now). Past dates request historical data.",
    )
    get_parser.add_argument(
        "--provider",
        default=None,
        help=f"Provider to use for this lookup ({', '.join(available_providers())}).",
    )
    get_parser.add_argument(
        "--max-print",
        type=int,
        default=None,
        help="Number of hourly values to print.",
    )

    configure_parser = subparsers.add_parser("configure", help="Set the default provider.")
    configure_parser.add_argument("provider", help=", ".join(available_providers()))

    subparsers.add_parser("providers", help="List providers and their capabilities.")
    return parser.parse_args(argv)


def _select_provider(args: argparse.Namespace, settings: Settings) -> Provider:
    if args.provider:
        return parse_provider(args.provider)
    if settings.weather_provider:
        return parse_provider(settings.weather_provider)
    return ProviderPreferenceStore(settings.config_dir).load().provider


def _build_lookup(settings: Settings, logger: logging.Logger) -> WeatherLookup:
    return WeatherLookup(settings=settings, logger=logger)


def _journal_result(journal: JournalWriter, result: LookupResult) -> None:
    raw_path = journal.write_raw_snapshot(
        f"{result.query.provider.value}_{result.query.request_type.value}",
        result.raw_payload,
    )
    journal.write_event(
        "weather_lookup_success",
        payload={
            "query": result.query.model_dump(mode="json"),
            "record": result.record.model_dump(mode="json"),
            "raw_payload_path": str(raw_path),
        },
    )


def _run_configure(args: argparse.Namespace, settings: Settings, console: Console) -> None:
    provider = parse_provider(args.provider)
    ProviderPreferenceStore(settings.config_dir).save(ProviderPreference(provider=provider))
    console.print(f"Default provider set to {provider.value}")


def _run_get(
    args: argparse.Namespace,
    settings: Settings,
    logger: logging.Logger,
    console: Console,
) -> int:
    if args.max_print is not None and args.max_print <= 0:
        logger.error("--max-print must be > 0 when provided.")
        return 2
    try:
        provider = _select_provider(args, settings)
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    journal: JournalWriter | None = None
    if settings.journal_enabled:
        try:
            journal = JournalWriter(
                journal_dir=settings.journal_dir,
                raw_payload_dir=settings.raw_payload_dir,
                session_id=uuid.uuid4().hex[:12],
            )
            journal.write_event(
                "weather_lookup_start",
                payload={"address": args.address, "date": args.date, "provider": provider.value},
                metadata=settings.safe_summary(),
            )
        except JournalError as exc:
            logger.error("Failed to initialize journal: %s", exc)
            return 3

    try:
        with _build_lookup(settings, logger) as lookup:
            result = lookup.lookup(args.address, args.date, provider=provider)
        if journal is not None:
            _journal_result(journal, result)
    except WeatherLookupError as exc:
        logger.error("Weather lookup failure: %s", exc, extra={"category": exc.category})
        if journal is not None:
            try:
                journal.write_event(
                    "weather_lookup_failure",
                    payload={"error": str(exc), "category": exc.category},
                )
            except JournalError:
                logger.error("Failed to write weather_lookup_failure event.")
        return 4
    except JournalError as exc:
        logger.error("Failed writing journal: %s", exc)
        return 3

    max_print = args.max_print or settings.weather_max_print
    render_record(console, result.record, max_print=max_print)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the weather-lookup CLI."""
    args = parse_args(argv)
    logger = setup_logger(level=logging.INFO if args.verbose else logging.WARNING)
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    try:
        if args.command == "providers":
            render_providers(console)
            return 0
        if args.command == "configure":
            try:
                _run_configure(args, settings, console)
            except ConfigError as exc:
                logger.error("Configuration failure: %s", exc)
                return 2
            return 0
        return _run_get(args, settings, logger, console)
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected weather-lookup failure: %s", exc)
        return 99


if __name__ == "__main__":
    sys.exit(main())
