"""Ini entities are either a section header, an option or a comment.

The same classes are produced by the reader, stored inside sections and consumed
by the writer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias


class IniType(Enum):
    """Kind of an ini entity."""

    SECTION = "section"
    KEY = "key"
    EMPTY = "empty"


@dataclass(slots=True)
class SectionHeader:
    """A section header line, i.e. ``[name]`` with an optional trailing comment."""

    name: str
    comment: str | None = None

    @property
    def type(self) -> IniType:
        return IniType.SECTION


@dataclass(slots=True)
class Option:
    """A key/value line with an optional trailing comment."""

    key: str
    value: str = ""
    comment: str | None = None

    @property
    def type(self) -> IniType:
        return IniType.KEY


@dataclass(slots=True)
class Comment:
    """A comment line. If content is None, the line is blank."""

    content: str | None = None

    @property
    def type(self) -> IniType:
        return IniType.EMPTY

    @property
    def is_blank(self) -> bool:
        return self.content is None


Entity: TypeAlias = SectionHeader | Option | Comment
"""Any entity the reader produces."""
Item: TypeAlias = Option | Comment
"""An entity that lives inside a section."""
