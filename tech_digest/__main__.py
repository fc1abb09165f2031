"""Command-line entry point for generating the tech news digest."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigError, load_config, load_local_env
from .digest import run, write_digest
from .summarizer import SummarizerError

LOGGER = logging.getLogger("tech_digest")


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Curate recent tech news and post a digest to Slack")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the digest instead of posting it to Slack",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional path to also write the digest text to",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)
    load_local_env()

    try:
        config = load_config(require_webhook=not args.dry_run)
        result = run(config, dry_run=args.dry_run)
    except (ConfigError, SummarizerError) as exc:
        LOGGER.error("%s", exc)
        return 1

    if args.output:
        write_digest(result.text, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
