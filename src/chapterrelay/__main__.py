"""Main entry point for the ChapterRelay command-line interface."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .config import RelayConfig, load_config
from .errors import SourceFetchError
from .logging_utils import setup_logging
from .workflow import run_job

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments for the ChapterRelay CLI.

    Returns:
        argparse.Namespace: An object containing the parsed command-line arguments.

    """
    parser = argparse.ArgumentParser(description="Batch-translate title/content records with fallback backends.")
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"ChapterRelay {__version__}",
        help="Show the version number and exit.",
    )
    parser.add_argument(
        "source",
        nargs="?",
        default=os.getenv("JSON_URL"),
        help="URL or path of the JSON list to translate (default: $JSON_URL).",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        default="result",
        help="Directory for the result file (default: result).",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to a YAML configuration file.",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Translate item contents one at a time instead of concurrently.",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum number of in-flight translation calls.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug level logging.",
    )
    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> RelayConfig:
    """Load the configuration file if one was given and apply command-line overrides."""
    if args.config:
        logger.info("Loading configuration from: %s", args.config)
        config = load_config(args.config)
    else:
        config = RelayConfig()

    overrides: dict[str, object] = {}
    if args.sequential:
        overrides["concurrent"] = False
    if args.concurrency is not None:
        overrides["concurrency_limit"] = args.concurrency
    if overrides:
        config = RelayConfig.from_dict({**config.model_dump(), **overrides})
    return config


def main(argv: list[str] | None = None) -> None:
    """
    Run the main entry point for the ChapterRelay command-line interface.

    Orchestrates the entire process:
    1. Parses command-line arguments.
    2. Loads the configuration.
    3. Fetches, translates, and saves the items.
    """
    args = _parse_args(argv)
    setup_logging(version=__version__, debug=args.debug, log_dir=Path(args.output_dir) / "logs")

    if not args.source:
        logger.critical("No source given. Pass a URL or path, or set the JSON_URL environment variable.")
        sys.exit(1)

    try:
        config = _load_config(args)
        result_path = asyncio.run(run_job(args.source, args.output_dir, config))
    except (FileNotFoundError, ValueError) as e:
        logger.critical("Invalid configuration: %s", e)
        sys.exit(1)
    except SourceFetchError as e:
        logger.critical("An error occurred during the translation process: %s", e)
        sys.exit(1)
    except Exception:
        logger.exception("An unexpected error occurred")
        logger.critical("An unrecoverable error occurred. Please check the logs for details.")
        sys.exit(1)

    logger.info("Translation complete. File saved to: %s", result_path)


if __name__ == "__main__":
    main()
