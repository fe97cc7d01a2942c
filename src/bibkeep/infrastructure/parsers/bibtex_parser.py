"""Structure-preserving BibTeX parser.

Recognized grammar (spaces allowed between tokens)::

    comment  = '@' 'comment'
    preamble = '@' 'preamble' ( '{' value '}' | '(' value ')' )
    string   = '@' 'string' ( '{' ident '=' value '}' | '(' ident '=' value ')' )
    entry    = '@' ident ( '{' key (',' ident '=' value)* ','? '}'
                         | '(' key (',' ident '=' value)* ','? ')' )
    value    = piece ( '#' piece )*
    piece    = [0-9]+ | '{' balanced* '}' | '"' ([^"] balanced)* '"' | ident

Anything not matching ``'@' ident`` is treated as a comment. Entry types and
field names are folded to lowercase; keys and @string names keep their case.
"""

from __future__ import annotations

import logging

from bibkeep.core.config import CLOSING_FOR
from bibkeep.core.errors import (
    DuplicateFieldError,
    DuplicateKeyError,
    DuplicateMacroError,
    ParseError,
)
from bibkeep.domain.models.bibliography import BibDatabase, Entry
from bibkeep.infrastructure.parsers.cursor import Cursor
from bibkeep.infrastructure.parsers.tokenizer import fetch_ident, fetch_key, fetch_value

logger = logging.getLogger(__name__)


def parse_bibtex(
    text: str,
    *,
    start: int | None = None,
    stop: int | None = None,
    line: int = 1,
    debug: bool = False,
) -> BibDatabase:
    return parse_cursor(Cursor(text, start, stop, line), debug=debug)


def try_parse_bibtex(
    text: str,
    *,
    start: int | None = None,
    stop: int | None = None,
    line: int = 1,
) -> BibDatabase | None:
    try:
        return parse_bibtex(text, start=start, stop=stop, line=line)
    except ParseError:
        return None


def parse_cursor(cursor: Cursor, *, debug: bool = False) -> BibDatabase:
    db = BibDatabase()
    while cursor.find_next("@"):
        keyword = fetch_ident(cursor.skip_spaces())
        if keyword is None:
            continue
        entry_type = keyword.lower()
        if debug:
            logger.debug('got entry "@%s" at line %d', entry_type, cursor.line)
        if entry_type == "comment":
            continue

        opening = cursor.skip_spaces().peek()
        closing = CLOSING_FOR.get(opening)
        if closing is None:
            raise ParseError(cursor.snapshot(), f"expecting '{{' or '(' after \"@{entry_type}\"")
        cursor.advance().skip_spaces()

        if entry_type == "preamble":
            _parse_preamble(cursor, db, opening, closing)
        elif entry_type == "string":
            _parse_string(cursor, db, opening, closing)
        else:
            _parse_entry(cursor, db, entry_type, opening, closing)
    return db


def _expect(cursor: Cursor, token: str, message: str) -> None:
    if not cursor.skip_spaces().starts_with(token):
        raise ParseError(cursor.snapshot(), message)


def _parse_preamble(cursor: Cursor, db: BibDatabase, opening: str, closing: str) -> None:
    value = fetch_value(cursor)
    if value:
        db.preamble.append(value)
    _expect(cursor, closing, f"expecting '{closing}' after \"@preamble{opening}…\" entry")


def _parse_string(cursor: Cursor, db: BibDatabase, opening: str, closing: str) -> None:
    name = fetch_ident(cursor)
    if name is None:
        raise ParseError(cursor.snapshot(), f'expecting name after "@string{opening}"')
    if name in db.strings:
        raise DuplicateMacroError(cursor.snapshot(), f'duplicate `@string` name "{name}"')
    _expect(cursor, "=", f"expecting '=' after \"@string{opening}{name}\"")
    value = fetch_value(cursor.advance().skip_spaces())
    if not value:
        raise ParseError(cursor.snapshot(), f'empty value after "@string{opening}{name} = "')
    _expect(cursor, closing, f"expecting '{closing}' after \"@string{opening}{name} = …\" entry")
    db.strings[name] = value


def _parse_entry(
    cursor: Cursor,
    db: BibDatabase,
    entry_type: str,
    opening: str,
    closing: str,
) -> None:
    key = fetch_key(cursor, closing)
    if key is None:
        raise ParseError(cursor.snapshot(), f'expecting BibTeX key after "@{entry_type}{opening}"')
    if key in db.entries:
        raise DuplicateKeyError(cursor.snapshot(), f'duplicate BibTeX key "{key}"')
    entry = Entry(type=entry_type, key=key)
    db.entries[key] = entry

    while cursor.skip_spaces().starts_with(","):
        name = fetch_ident(cursor.advance().skip_spaces())
        if name is None:
            # Trailing comma, or a malformed field that the closing check reports.
            break
        field = name.lower()
        if field in entry.fields:
            raise DuplicateFieldError(
                cursor.snapshot(), f'duplicate field "{field}" in "{key}" entry'
            )
        _expect(cursor, "=", f"expecting '=' after field \"{field}\" in \"{key}\" entry")
        value = fetch_value(cursor.advance().skip_spaces())
        if not value:
            raise ParseError(
                cursor.snapshot(), f'empty value for field "{field}" in "{key}" entry'
            )
        entry.fields[field] = value

    _expect(cursor, closing, f"expecting '{closing}' in \"{key}\" entry")
