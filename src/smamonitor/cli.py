"""Command-line interface for the monitor runtime."""

from __future__ import annotations

import argparse
import json
import sys

from smamonitor.config import CACHE_BACKENDS, OUTPUT_SIZES, Settings, parse_tickers
from smamonitor.errors import ConfigError
from smamonitor.logging.logger import setup_logger
from smamonitor.runtime import run


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Fetch daily closes and report technical-indicator signals"
    )
    parser.add_argument("--tickers", type=str, help="Comma-separated tickers (e.g. MSFT,NVDA)")
    parser.add_argument("--cache-ttl", type=float, help="Seconds a cached response stays valid")
    parser.add_argument(
        "--rate-limit-delay",
        type=float,
        help="Minimum seconds between Alpha Vantage calls",
    )
    parser.add_argument("--cache-backend", choices=sorted(CACHE_BACKENDS), help="Cache store")
    parser.add_argument("--cache-db", type=str, help="SQLite cache database path")
    parser.add_argument(
        "--output-size",
        choices=sorted(OUTPUT_SIZES),
        help="Alpha Vantage outputsize (compact = last 100 days)",
    )
    parser.add_argument("--log-level", type=str, help="Logging level (DEBUG, INFO, ...)")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print analysis results as JSON to stdout",
    )
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    overrides: dict[str, object] = {}
    if args.tickers:
        overrides["tickers"] = parse_tickers(args.tickers, settings.tickers)
    if args.cache_ttl is not None:
        overrides["cache_ttl_seconds"] = args.cache_ttl
    if args.rate_limit_delay is not None:
        overrides["rate_limit_delay_seconds"] = args.rate_limit_delay
    if args.cache_backend:
        overrides["cache_backend"] = args.cache_backend
    if args.cache_db:
        overrides["cache_db_path"] = args.cache_db
    if args.output_size:
        overrides["output_size"] = args.output_size
    if args.log_level:
        overrides["log_level"] = args.log_level.strip().upper()
    return settings.with_overrides(**overrides)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
        settings.require_api_key()
    except ConfigError as exc:
        print(f"Configuration error: {exc}")
        return 2

    logger = setup_logger(settings.log_level, settings.log_file)
    try:
        results = run(settings)
    except Exception as exc:  # pragma: no cover - top-level guard
        logger.exception("Unexpected fatal error: %s", exc)
        return 1

    if args.json:
        print(json.dumps([result.to_record() for result in results], indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
