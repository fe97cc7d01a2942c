from __future__ import annotations

from io import StringIO

from bibkeep.core.config import CLOSING_FOR
from bibkeep.core.errors import SerializationError
from bibkeep.domain.models.bibliography import BibDatabase, Value

ENCODING_HEADER = "% Encoding: UTF-8\n"


def format_value(value: Value) -> str:
    return " # ".join(str(piece) for piece in value)


def dumps_bibtex(db: BibDatabase, *, opening: str = "{") -> str:
    closing = CLOSING_FOR.get(opening)
    if closing is None:
        raise SerializationError(f"opening character must be '{{' or '(', got {opening!r}")

    out = StringIO()
    out.write(ENCODING_HEADER)

    for value in db.preamble:
        out.write(f"\n@preamble{opening} {format_value(value)} {closing}")
    if db.preamble:
        out.write("\n")

    for name, value in db.strings.items():
        out.write(f"\n@string{opening} {name} = {format_value(value)} {closing}")
    if db.strings:
        out.write("\n")

    for key, entry in db.entries.items():
        out.write(f"\n@{entry.type}{opening}{key}")
        # Sorted so that re-saving a file yields a stable diff.
        for field in sorted(entry.fields):
            out.write(f",\n    {field} = {format_value(entry.fields[field])}")
        if entry.fields:
            out.write("\n")
        out.write(f"{closing}\n")

    return out.getvalue()
