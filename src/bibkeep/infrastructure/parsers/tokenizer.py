"""Tokens of a BibTeX value.

A value is a sequence of pieces joined by ``#``; a piece is a braced string,
a quoted string, a decimal integer or a macro name. Every fetch either
consumes a token or leaves the cursor untouched and returns ``None``.
Malformed tokens raise a ``ParseError`` subclass.
"""

from __future__ import annotations

from bibkeep.core.errors import IntegerOverflowError, UnterminatedStringError
from bibkeep.domain.models.bibliography import Macro, Piece, Value
from bibkeep.infrastructure.parsers.charclass import is_digit, is_ident, is_ident_start, is_key
from bibkeep.infrastructure.parsers.cursor import Cursor

# Largest integer literal accepted in a value.
MAX_INTEGER = 2**63 - 1


def fetch_ident(cursor: Cursor) -> str | None:
    return cursor.fetch(is_ident_start, is_ident)


def fetch_key(cursor: Cursor, closing: str = "}") -> str | None:
    return cursor.fetch(lambda ch: is_key(ch) and ch != closing)


def fetch_piece(cursor: Cursor) -> Piece | None:
    if cursor.exhausted:
        return None
    ch = cursor.peek()
    if ch == '"':
        return _fetch_quoted(cursor)
    if ch == "{":
        return _fetch_braced(cursor)
    if is_digit(ch):
        return _fetch_integer(cursor)
    if is_ident_start(ch):
        return Macro(fetch_ident(cursor))
    return None


def fetch_value(cursor: Cursor) -> Value:
    """Fetch pieces joined by ``#``.

    On return the cursor sits right after the last piece (spaces skipped),
    or on the ``#`` that was not followed by a piece.
    """
    index = cursor.index
    value: Value = []
    while True:
        piece = fetch_piece(cursor)
        if piece is None:
            cursor.index = index
            break
        value.append(piece)
        if not cursor.skip_spaces().starts_with("#"):
            break
        index = cursor.index
        cursor.advance().skip_spaces()
    return value


def _fetch_quoted(cursor: Cursor) -> str:
    text, begin, stop = cursor.text, cursor.index, cursor.stop
    depth = 0
    i = begin + 1
    while i < stop:
        ch = text[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth < 0:
                raise UnterminatedStringError(
                    cursor.snapshot(), "unbalanced braces in quoted string"
                )
        elif ch == '"' and depth == 0:
            cursor.index = i + 1
            return text[begin : i + 1]
        elif ch == "\n" or ch == "\r":
            raise UnterminatedStringError(cursor.snapshot(), "line break in quoted string")
        i += 1
    raise UnterminatedStringError(cursor.snapshot(), "unterminated quoted string")


def _fetch_braced(cursor: Cursor) -> str:
    text, begin, stop = cursor.text, cursor.index, cursor.stop
    depth = 1
    lines = 0
    i = begin + 1
    while i < stop:
        ch = text[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                cursor.index = i + 1
                cursor.line += lines
                return text[begin : i + 1]
        elif cursor.is_line_break_at(i):
            lines += 1
        i += 1
    raise UnterminatedStringError(cursor.snapshot(), "unterminated braced string")


def _fetch_integer(cursor: Cursor) -> int:
    text, i, stop = cursor.text, cursor.index, cursor.stop
    value = 0
    while i < stop and is_digit(text[i]):
        value = value * 10 + (ord(text[i]) - ord("0"))
        if value > MAX_INTEGER:
            cursor.index = i
            raise IntegerOverflowError(cursor.snapshot(), "integer overflow")
        i += 1
    cursor.index = i
    return value
