"""Command line entry point."""

import argparse
import logging
import sys
from pathlib import Path

from .consolidator import SearchPathError, TableConsolidator

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)-7s %(message)s"
PAUSE_PROMPT = "All CSV files have been processed successfully, press enter to continue."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tablegrouper",
        description=(
            "Group CSV and spreadsheet files whose headers overlap by at least 50% "
            "and write one combined CSV per group to the working directory."
        ),
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="File or directory to search (default: current directory)",
    )
    return parser


def pause(prompt: str = PAUSE_PROMPT) -> None:
    """Wait for the user to press enter."""
    try:
        input(prompt)
    except EOFError:
        pass


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    search_path = Path(args.path) if args.path is not None else Path.cwd()
    consolidator = TableConsolidator()

    try:
        created = consolidator.consolidate(search_path)
    except SearchPathError as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.error("Failed to write output: %s", e)
        return 1

    if not consolidator.get_files():
        return 0

    logger.info("Processing complete! Created %d output files", len(created))
    pause()
    return 0


if __name__ == "__main__":
    sys.exit(main())
