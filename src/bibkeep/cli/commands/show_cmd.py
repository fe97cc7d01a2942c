from __future__ import annotations

import argparse
from pathlib import Path

from rich.markup import escape
from rich.table import Table

from bibkeep.cli.context import CLIContext
from bibkeep.core.errors import BibKeepError
from bibkeep.domain.render import render_value
from bibkeep.infrastructure.exporters.bibtex_exporter import format_value


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("show", help="Show one entry with its macros expanded")
    parser.add_argument("bib_path", help="Path to .bib file")
    parser.add_argument("key", help="Citation key of the entry")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    db = ctx.service.load(Path(args.bib_path))
    entry = db.entries.get(args.key)
    if entry is None:
        raise BibKeepError(f"No entry with key {args.key!r} in {args.bib_path}")

    table = Table(title=f"@{entry.type}{{{escape(entry.key)}}}")
    table.add_column("Field")
    table.add_column("Source", overflow="fold")
    table.add_column("Text", overflow="fold")

    for field in sorted(entry.fields):
        value = entry.fields[field]
        table.add_row(
            field,
            escape(format_value(value)),
            escape(render_value(value, db.strings)),
        )

    ctx.console.print(table)
    return 0
