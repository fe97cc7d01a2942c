from __future__ import annotations

import argparse
from pathlib import Path

from bibkeep.cli.context import CLIContext


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("format", help="Rewrite a BibTeX file in canonical form")
    parser.add_argument("bib_path", help="Path to .bib file")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Write to this file instead of stdout")
    parser.add_argument("--paren", action="store_true", help="Use '(…)' instead of '{…}' around entries")
    parser.add_argument("--force", action="store_true", help="Overwrite the output file if it exists")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    db = ctx.service.load(Path(args.bib_path))
    opening = "(" if args.paren else None

    if args.output is None:
        ctx.console.print(
            ctx.service.dumps(db, opening=opening),
            end="",
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )
        return 0

    path = ctx.service.save(args.output, db, overwrite=args.force, opening=opening)
    ctx.console.print(f"[green]Wrote[/green] {len(db.entries)} entries to {path}")
    return 0
