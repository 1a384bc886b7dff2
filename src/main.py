import argparse
import logging
import os
import sys
from typing import List, Optional

from engine import PaymentsEngine
from errors import TransactionParseError
from transaction_csv import write_summaries

LOG_LEVEL_ENV = "PAYMENTS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Apply a CSV of transactions and print the resulting client accounts.",
    )
    parser.add_argument("input", help="path to the transactions CSV")
    parser.add_argument(
        "--log-level",
        default=os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL),
        choices=LOG_LEVELS,
        type=str.upper,
        help=f"log verbosity on stderr (default: ${LOG_LEVEL_ENV} or {DEFAULT_LOG_LEVEL})",
    )
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    # argparse doesn't check choices against a default taken from the environment.
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid log level {args.log_level!r} from ${LOG_LEVEL_ENV}, choose from {', '.join(LOG_LEVELS)}")
    configure_logging(args.log_level)

    engine = PaymentsEngine()
    try:
        ledger = engine.process_file(args.input)
    except FileNotFoundError:
        logger.error(f"Input file not found: {args.input}")
        return 1
    except TransactionParseError as e:
        logger.error(str(e))
        return 1

    write_summaries(ledger.snapshot(), sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
