"""Read position over an immutable text buffer.

All scanning methods report "no match" through their return value and never
raise. When a fetch does not match, the cursor is left exactly where it was,
which is what lets the tokenizer backtrack by restoring ``index``.
"""

from __future__ import annotations

from collections.abc import Callable

from bibkeep.core.diagnostics import CursorSnapshot
from bibkeep.infrastructure.parsers.charclass import is_space

NULL_CHAR = "\0"

CharPredicate = Callable[[str], bool]


def _as_predicate(match: str | CharPredicate) -> CharPredicate:
    if isinstance(match, str):
        return lambda ch: ch == match
    return match


class Cursor:
    """Mutable view of ``text[start:stop]``.

    ``index`` always lies in ``[start, stop]``; ``index == stop`` means the
    cursor is exhausted. ``line`` counts consumed line terminators, with
    ``\\r\\n`` counting once.
    """

    __slots__ = ("text", "index", "start", "stop", "line")

    def __init__(
        self,
        text: str,
        start: int | None = None,
        stop: int | None = None,
        line: int = 1,
    ) -> None:
        size = len(text)
        first = 0 if start is None else start
        last = size if stop is None else stop
        if not 0 <= first <= size:
            raise ValueError(f"invalid string index start={start}")
        if not 0 <= last <= size:
            raise ValueError(f"invalid string index stop={stop}")
        self.text = text
        self.start = first
        self.stop = max(first, last)
        self.index = first
        self.line = int(line)

    def __repr__(self) -> str:
        return f"Cursor(index={self.index}, stop={self.stop}, line={self.line})"

    @property
    def exhausted(self) -> bool:
        return self.index >= self.stop

    def snapshot(self) -> CursorSnapshot:
        return CursorSnapshot(
            text=self.text,
            index=self.index,
            start=self.start,
            stop=self.stop,
            line=self.line,
        )

    def peek(self) -> str:
        if self.start <= self.index < self.stop:
            return self.text[self.index]
        return NULL_CHAR

    def advance(self) -> Cursor:
        self.index = min(self.index + 1, self.stop)
        return self

    def starts_with(self, match: str | CharPredicate) -> bool:
        if self.exhausted:
            return False
        return _as_predicate(match)(self.text[self.index])

    def is_line_break_at(self, index: int) -> bool:
        ch = self.text[index]
        return ch == "\r" or (ch == "\n" and (index == 0 or self.text[index - 1] != "\r"))

    def skip_while(self, predicate: CharPredicate) -> Cursor:
        text, i, stop = self.text, self.index, self.stop
        while i < stop:
            if not predicate(text[i]):
                break
            if self.is_line_break_at(i):
                self.line += 1
            i += 1
        self.index = i
        return self

    def skip_spaces(self) -> Cursor:
        return self.skip_while(is_space)

    def find_next(self, match: str | CharPredicate) -> bool:
        """Move just past the next matching character.

        Returns ``False`` and leaves the cursor exhausted when there is none.
        """
        predicate = _as_predicate(match)
        text, i, stop = self.text, self.index, self.stop
        while i < stop:
            ch = text[i]
            if self.is_line_break_at(i):
                self.line += 1
            i += 1
            if predicate(ch):
                self.index = i
                return True
        self.index = stop
        return False

    def fetch(
        self,
        first: CharPredicate,
        rest: CharPredicate | None = None,
    ) -> str | None:
        """Consume a maximal run of matching characters and return it.

        ``first`` checks the character at the cursor and ``rest`` (``first``
        when omitted) each one after it.
        """
        if rest is None:
            rest = first
        text, i, stop = self.text, self.index, self.stop
        if i >= stop or not first(text[i]):
            return None
        begin = i
        while True:
            if self.is_line_break_at(i):
                self.line += 1
            i += 1
            if i >= stop or not rest(text[i]):
                break
        self.index = i
        return text[begin:i]
