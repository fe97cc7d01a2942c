from __future__ import annotations

import argparse
from pathlib import Path

from rich.markup import escape
from rich.table import Table

from bibkeep.cli.context import CLIContext
from bibkeep.domain.render import render_value
from bibkeep.infrastructure.exporters.bibtex_exporter import format_value


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("strings", help="List @string macro definitions")
    parser.add_argument("bib_path", help="Path to .bib file")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    db = ctx.service.load(Path(args.bib_path))

    table = Table(title=f"String macros ({len(db.strings)})")
    table.add_column("Name")
    table.add_column("Definition", overflow="fold")
    table.add_column("Text", overflow="fold")

    for name, value in db.strings.items():
        table.add_row(
            escape(name),
            escape(format_value(value)),
            escape(render_value(value, db.strings)),
        )

    ctx.console.print(table)
    return 0
