# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Final

from dotenv import load_dotenv

from ledgerquote.adapters.quote_files import QuoteFileError, QuoteFileFeed
from ledgerquote.adapters.sqlalchemy.unit_of_work import StartupError
from ledgerquote.app import list_symbols, update_quotes
from ledgerquote.config import ConfigurationError, configure_logging, get_schema_catalog
from ledgerquote.domain.errors import StorageFailure

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

RUN_FAILURE_EXIT_CODE: Final[int] = 3
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile online quotes into a ledger")
    parser.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy URL of the ledger (defaults to DATABASE_URI or the data dir)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Logging threshold (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    update = subparsers.add_parser("update", help="Apply a file of quotes to the ledger")
    update.add_argument(
        "quotes",
        type=Path,
        help="CSV (header row = column names) or JSON Lines file of quote rows",
    )
    update.add_argument(
        "--stale-days",
        type=int,
        help="Age in days after which a repeated quote counts as stale (defaults to config)",
    )
    update.add_argument(
        "--schema-dir",
        type=Path,
        help="Directory holding security.toml/currency.toml column schema overrides",
    )

    subparsers.add_parser("symbols", help="Print every symbol tracked for online quotes")

    return parser.parse_args(list(argv))


def _print_symbols(database_uri: str | None) -> None:
    for instrument in list_symbols(database_uri=database_uri):
        if instrument.country:
            print(f"{instrument.symbol},{instrument.country}")
        else:
            print(instrument.symbol)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=parsed_args.log_level)

    try:
        if parsed_args.command == "update":
            if parsed_args.stale_days is not None and parsed_args.stale_days < 0:
                raise ConfigurationError("Stale days must be non-negative")  # noqa: TRY301
            catalog = get_schema_catalog(
                schema_dir=parsed_args.schema_dir,
                stale_days=parsed_args.stale_days,
            )
            result = update_quotes(
                QuoteFileFeed(parsed_args.quotes),
                catalog=catalog,
                database_uri=parsed_args.database_uri,
            )
            sys.exit(result.exit_code)
        elif parsed_args.command == "symbols":
            _print_symbols(parsed_args.database_uri)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except (ConfigurationError, StartupError, StorageFailure, QuoteFileError, OSError):
        log.exception("Fatal error during quote update")
        sys.exit(RUN_FAILURE_EXIT_CODE)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
