from __future__ import annotations

from bibkeep.core.diagnostics import CursorSnapshot, render_excerpt


class BibKeepError(Exception):
    """Base error for all user-facing bibkeep exceptions."""


class ConfigurationError(BibKeepError):
    """Raised when configuration is invalid or incomplete."""


class ParseError(BibKeepError, ValueError):
    """Raised when BibTeX source text cannot be parsed.

    The error keeps a read-only snapshot of the cursor at the failure point.
    The excerpt is only built when the error is rendered.
    """

    def __init__(self, snapshot: CursorSnapshot, message: str) -> None:
        super().__init__(message)
        self.snapshot = snapshot
        self.message = message

    @property
    def line(self) -> int:
        return self.snapshot.line

    def render(self, width: int = 20) -> str:
        return f"{self.message} (line {self.line})\n\n{render_excerpt(self.snapshot, width)}"

    def __str__(self) -> str:
        return self.render()


class DuplicateKeyError(ParseError):
    """Raised when two entries share a citation key."""


class DuplicateMacroError(ParseError):
    """Raised when a @string name is defined twice."""


class DuplicateFieldError(ParseError):
    """Raised when a field appears twice in one entry."""


class IntegerOverflowError(ParseError):
    """Raised when a numeric literal does not fit in a 64-bit signed integer."""


class UnterminatedStringError(ParseError):
    """Raised for unbalanced braces or unterminated quoted/braced strings."""


class EntryExistsError(BibKeepError, ValueError):
    """Raised when adding an entry whose key is already in the database."""


class SerializationError(BibKeepError, ValueError):
    """Raised when a database cannot be written with the requested options."""


class DestinationExistsError(BibKeepError, FileExistsError):
    """Raised when saving would clobber an existing file."""


class SourceNotFoundError(BibKeepError, FileNotFoundError):
    """Raised when a BibTeX file to load does not exist."""


class RenderError(BibKeepError):
    """Raised when a value cannot be rendered to plain text."""
