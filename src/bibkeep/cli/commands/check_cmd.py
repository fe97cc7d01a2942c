from __future__ import annotations

import argparse
from collections import Counter
from pathlib import Path

from rich.panel import Panel

from bibkeep.cli.context import CLIContext


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("check", help="Parse a BibTeX file and summarize its content")
    parser.add_argument("bib_path", help="Path to .bib file")
    parser.add_argument("--debug", action="store_true", help="Log every entry header while parsing")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    db = ctx.service.load(Path(args.bib_path), debug=args.debug)

    types = Counter(entry.type for entry in db.entries.values())
    lines = [
        f"Preamble blocks: {len(db.preamble)}",
        f"String macros: {len(db.strings)}",
        f"Entries: {len(db.entries)}",
    ]
    lines.extend(f"  @{entry_type}: {count}" for entry_type, count in sorted(types.items()))

    ctx.console.print(Panel.fit("\n".join(lines), title=str(args.bib_path)))
    return 0
