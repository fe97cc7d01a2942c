from __future__ import annotations

from dataclasses import dataclass

ELLIPSIS = "[…]"
RULE_CHAR = "─"
MARKER = "╯"

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}


@dataclass(frozen=True, slots=True)
class CursorSnapshot:
    """Frozen copy of a cursor position, kept for error reporting only."""

    text: str
    index: int
    start: int
    stop: int
    line: int


def escape_for_display(text: str) -> str:
    chunks: list[str] = []
    for ch in text:
        escaped = _ESCAPES.get(ch)
        if escaped is not None:
            chunks.append(escaped)
        elif ch.isprintable():
            chunks.append(ch)
        elif ord(ch) <= 0xFF:
            chunks.append(f"\\x{ord(ch):02x}")
        else:
            chunks.append(f"\\u{ord(ch):04x}")
    return "".join(chunks)


def render_excerpt(snapshot: CursorSnapshot, width: int = 20) -> str:
    """Render two lines showing where parsing stopped.

    The first line is a quoted window of the text around the cursor, the
    second a rule whose marker sits under the character at the cursor (or
    under the closing quote when the cursor is exhausted).
    """
    start, stop = snapshot.start, snapshot.stop
    index = min(max(snapshot.index, start), stop)

    before_start = max(start, index - width)
    before = escape_for_display(snapshot.text[before_start:index])
    if before_start > start:
        before = ELLIPSIS + before

    after_stop = min(stop, index + width + 1)
    after = escape_for_display(snapshot.text[index:after_stop])
    if after_stop < stop:
        after += ELLIPSIS

    align = 1 + len(before)
    if snapshot.index < start:
        align = 0
    return f'"{before}{after}"\n{RULE_CHAR * align}{MARKER}'
