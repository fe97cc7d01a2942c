from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from bibkeep.core.errors import EntryExistsError


@dataclass(frozen=True, slots=True)
class Macro:
    """Reference to a @string definition inside a value."""

    name: str

    def __str__(self) -> str:
        return self.name


# Literal text keeps its own "..." or {...} delimiters.
Piece = Union[str, Macro, int]
Value = list[Piece]


@dataclass(slots=True)
class Entry:
    type: str
    key: str
    fields: dict[str, Value] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Value:
        return self.fields[name.lower()]

    def __setitem__(self, name: str, value: Value) -> None:
        self.fields[name.lower()] = value

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self.fields

    def get(self, name: str, default: Value | None = None) -> Value | None:
        return self.fields.get(name.lower(), default)


@dataclass(slots=True)
class BibDatabase:
    preamble: list[Value] = field(default_factory=list)
    strings: dict[str, Value] = field(default_factory=dict)
    entries: dict[str, Entry] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __getitem__(self, key: str) -> Entry:
        return self.entries[key]

    def add_entry(self, entry: Entry) -> None:
        if entry.key in self.entries:
            raise EntryExistsError(f'duplicate BibTeX key "{entry.key}"')
        self.entries[entry.key] = entry

    def remove_entry(self, key: str) -> Entry:
        return self.entries.pop(key)
