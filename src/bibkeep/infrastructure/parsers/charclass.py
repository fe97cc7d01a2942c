"""Lexical character classes for the BibTeX grammar.

ASCII characters are looked up in a table of role bits built once at import
time. The table is a tuple so parses running in separate threads can share
it freely. Non-ASCII characters are classified on the fly.
"""

from __future__ import annotations

import unicodedata

NONE = 0
IDENT_START = 1 << 0
IDENT_CONTINUE = 1 << 1
KEY_CHAR = 1 << 2
ALL_ROLES = IDENT_START | IDENT_CONTINUE | KEY_CHAR

NOT_IN_IDENT = "\"#%'(),={}"
NOT_IN_KEY = ",}"


def _build_table() -> tuple[int, ...]:
    table = [NONE] * 128
    # Printable ASCII, space excluded.
    for code in range(0x21, 0x7F):
        table[code] = ALL_ROLES
    for ch in "0123456789":
        table[ord(ch)] &= ~IDENT_START
    for ch in NOT_IN_IDENT:
        table[ord(ch)] &= ~(IDENT_START | IDENT_CONTINUE)
    for ch in NOT_IN_KEY:
        table[ord(ch)] &= ~KEY_CHAR
    return tuple(table)


CATEGORY_TABLE = _build_table()


def category(ch: str) -> int:
    code = ord(ch)
    if code < 0x80:
        return CATEGORY_TABLE[code]
    if ch.isalpha():
        return ALL_ROLES
    if ch.isspace() and unicodedata.category(ch) == "Cc":
        return NONE
    return ALL_ROLES


def is_ident_start(ch: str) -> bool:
    return bool(category(ch) & IDENT_START)


def is_ident(ch: str) -> bool:
    return bool(category(ch) & IDENT_CONTINUE)


def is_key(ch: str) -> bool:
    return bool(category(ch) & KEY_CHAR)


def is_space(ch: str) -> bool:
    return ch.isspace()


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def is_line_break(ch: str) -> bool:
    return ch == "\n" or ch == "\r"
