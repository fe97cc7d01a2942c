from __future__ import annotations

from collections.abc import Mapping

from bibkeep.core.errors import RenderError
from bibkeep.domain.models.bibliography import BibDatabase, Macro, Piece, Value


def render_value(value: Value, strings: Mapping[str, Value]) -> str:
    """Return the plain text of ``value`` with every macro substituted.

    Literal pieces lose their outer delimiters and their grouping braces.
    """
    chunks: list[str] = []
    for piece in value:
        _render_piece(piece, strings, chunks, ())
    return "".join(chunks)


def render_field(db: BibDatabase, key: str, name: str) -> str:
    return render_value(db.entries[key][name], db.strings)


def _render_piece(
    piece: Piece,
    strings: Mapping[str, Value],
    chunks: list[str],
    expanding: tuple[str, ...],
) -> None:
    if isinstance(piece, Macro):
        if piece.name in expanding:
            raise RenderError(f"circular macro definition for `{piece.name}`")
        definition = strings.get(piece.name)
        if definition is None:
            raise RenderError(f"undefined BibTeX string `{piece.name}`")
        for inner in definition:
            _render_piece(inner, strings, chunks, expanding + (piece.name,))
    elif isinstance(piece, int):
        chunks.append(str(piece))
    else:
        chunks.append(strip_delimiters(piece))


def strip_delimiters(text: str) -> str:
    if not text:
        return ""
    if not (
        len(text) >= 2
        and ((text[0] == '"' and text[-1] == '"') or (text[0] == "{" and text[-1] == "}"))
    ):
        raise RenderError(f'invalid BibTeX string {text!r}, should be "…" or {{…}}')
    depth = 0
    out: list[str] = []
    for ch in text[1:-1]:
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth < 0:
                raise RenderError("too many }'s in BibTeX string")
        else:
            out.append(ch)
    if depth > 0:
        raise RenderError("too many {'s in BibTeX string")
    return "".join(out)
