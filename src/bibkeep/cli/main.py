from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console

from bibkeep.application.services.bibliography_service import BibliographyService
from bibkeep.cli.commands import check_cmd, format_cmd, show_cmd, strings_cmd
from bibkeep.cli.context import CLIContext
from bibkeep.core.config import load_settings
from bibkeep.core.errors import BibKeepError, ParseError
from bibkeep.core.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bibkeep",
        description="Parse and rewrite BibTeX files without losing @string macros",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    subparsers = parser.add_subparsers(dest="command", required=True)
    check_cmd.register(subparsers)
    format_cmd.register(subparsers)
    show_cmd.register(subparsers)
    strings_cmd.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    try:
        settings = load_settings()
    except BibKeepError as exc:
        logger.error(str(exc))
        return 1
    ctx = CLIContext(settings=settings, console=console, service=BibliographyService(settings))

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 2

    try:
        return handler(args, ctx)
    except ParseError as exc:
        logger.error(exc.render(settings.excerpt_width))
        return 1
    except BibKeepError as exc:
        logger.error(str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
