"""Character level ini reader. Turns ini text into a stream of entities."""

from enum import Enum
from typing import Iterator, Self, TextIO
from .args import Parameters
from .entities import Comment, Entity, IniType, Option, SectionHeader
from .exceptions_warnings import ParseError
from .globals import QUOTE, WHITESPACE

_EOF = ""


class IniReadState(Enum):
    INITIAL = "initial"
    INTERACTIVE = "interactive"
    END_OF_FILE = "end_of_file"
    CLOSED = "closed"


class IniReader:
    """Reads one entity (section header, option or comment/blank line) per line.

    Usage::

        with IniReader(stream, parameters) as reader:
            for entity in reader:
                ...

    or step by step with ``read()`` and the ``entity``/``type``/``name``/``value``/
    ``comment`` properties.
    """

    def __init__(self, source: TextIO | str, parameters: Parameters | None = None):
        """
        Args:
            source (TextIO | str): Text stream to read from or the ini text itself.
            parameters (Parameters | None, optional): Reading parameters. If None,
                will use Parameters(). Defaults to None.
        """
        self.parameters = Parameters() if parameters is None else parameters
        if isinstance(source, str):
            self._stream: TextIO | None = None
            self._text: str | None = source
        else:
            self._stream = source
            self._text = None
        self._pos = 0
        self._line = 1
        self._column = 0
        self._entity_line = 0
        self._state = IniReadState.INITIAL
        self._entity: Entity | None = None

    # ---------- #
    # State
    # ---------- #

    @property
    def read_state(self) -> IniReadState:
        return self._state

    @property
    def line_number(self) -> int:
        """1-based line the reader is currently at."""
        return self._line

    @property
    def line_position(self) -> int:
        """1-based column of the next character to read."""
        return self._column + 1

    @property
    def entity_line_number(self) -> int:
        """1-based line the current entity was read from."""
        return self._entity_line

    @property
    def entity(self) -> Entity | None:
        """The entity of the last successful read()."""
        return self._entity

    @property
    def type(self) -> IniType | None:
        return None if self._entity is None else self._entity.type

    @property
    def name(self) -> str | None:
        match self._entity:
            case SectionHeader(name=name):
                return name
            case Option(key=key):
                return key
        return None

    @property
    def value(self) -> str | None:
        return self._entity.value if isinstance(self._entity, Option) else None

    @property
    def comment(self) -> str | None:
        match self._entity:
            case Comment(content=content):
                return content
            case SectionHeader(comment=comment) | Option(comment=comment):
                return comment
        return None

    # ---------- #
    # Public methods
    # ---------- #

    def read(self) -> bool:
        """Advance to the next entity.

        Raises:
            ParseError: If the next line is malformed.

        Returns:
            bool: False if the end of input is reached (or the reader is closed),
                True otherwise.
        """
        if self._state in {IniReadState.END_OF_FILE, IniReadState.CLOSED}:
            return False
        if self._text is None:
            assert self._stream is not None
            self._text = self._stream.read()
        self._state = IniReadState.INTERACTIVE

        self._entity_line = self._line
        self._entity = self._read_next()
        if self._entity is None:
            self._state = IniReadState.END_OF_FILE
            return False
        return True

    def close(self) -> None:
        """Close the reader and its underlying stream."""
        if self._stream is not None:
            self._stream.close()
        self._state = IniReadState.CLOSED

    def __iter__(self) -> Iterator[Entity]:
        while self.read():
            assert self._entity is not None
            yield self._entity

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ---------- #
    # Lines
    # ---------- #

    def _read_next(self) -> Entity | None:
        """Read the next line.

        Returns:
            Entity | None: The line's entity or None at the end of input.
        """
        self._skip_whitespace()
        ch = self._peek()
        if ch == _EOF:
            return None
        if ch == "\n":
            self._read_char()
            return Comment()
        if self._is_comment(ch):
            self._read_char()
            return self._read_comment()
        if ch == "[":
            return self._read_section()
        return self._read_key()

    def _read_comment(self) -> Comment:
        text = self._read_to_end_of_line()
        if self.parameters.ignore_comments:
            return Comment()
        return Comment(_clean_comment(text))

    def _read_section(self) -> SectionHeader:
        self._read_char()  # [
        name: list[str] = []
        while (ch := self._peek()) != "]":
            if _end_of_line(ch):
                raise self._error("Expected section end (])")
            name.append(self._read_char())
        self._read_char()  # ]

        if not (section_name := "".join(name).strip()):
            raise self._error("Expected section name")

        if self.parameters.accept_comment_after_key:
            comment = self._search_for_comment()
        else:
            self._read_to_end_of_line()
            comment = None
        return SectionHeader(section_name, comment)

    def _read_key(self) -> Option:
        name: list[str] = []
        while True:
            ch = self._peek()
            if self._is_assign(ch):
                self._read_char()
                break
            if _end_of_line(ch):
                if not self.parameters.accept_no_assignment_operator:
                    raise self._error(
                        "Expected assignment operator"
                        f" ({self.parameters.assign_delimiters[0]})"
                    )
                # flag without value, e.g. "skip-external-locking"
                self._read_char()
                return Option("".join(name).rstrip(), "")
            name.append(self._read_char())

        if not (key := "".join(name).rstrip()):
            raise self._error("Expected key name")

        value = self._read_value()

        if self.parameters.accept_comment_after_key:
            comment = self._search_for_comment()
        else:
            self._read_to_end_of_line()
            comment = None
        return Option(key, value, comment)

    def _read_value(self) -> str:
        """Read the value of a key line up to (not including) its end or comment."""
        self._skip_whitespace()
        value: list[str] = []

        if self.parameters.consume_all_key_text:
            while not _end_of_line(self._peek()):
                value.append(self._read_char())
            return _rstrip("".join(value))

        if self._peek() == QUOTE:
            self._read_char()
            while (ch := self._peek()) != QUOTE:
                if _end_of_line(ch):
                    raise self._error(f"Expected closing quote ({QUOTE})")
                value.append(self._read_char())
            self._read_char()
            return "".join(value)

        while not _end_of_line(ch := self._peek()):
            if self.parameters.line_continuation and ch == "\\":
                self._read_char()
                trailing: list[str] = []
                while self._peek() in WHITESPACE:
                    trailing.append(self._read_char())
                if self._peek() == "\n":
                    # joined with the next physical line
                    self._read_char()
                    continue
                value.append(ch)
                value.extend(trailing)
                continue
            if self.parameters.accept_comment_after_key and self._is_comment(ch):
                break
            value.append(self._read_char())
        return _rstrip("".join(value))

    def _search_for_comment(self) -> str | None:
        """Consume the rest of the line and return the comment found in it, if any."""
        while not _end_of_line(ch := self._read_char()):
            if self._is_comment(ch):
                text = self._read_to_end_of_line()
                return None if self.parameters.ignore_comments else _clean_comment(text)
        return None

    # ---------- #
    # Characters
    # ---------- #

    def _peek(self) -> str:
        assert self._text is not None
        return self._text[self._pos] if self._pos < len(self._text) else _EOF

    def _read_char(self) -> str:
        assert self._text is not None
        if self._pos >= len(self._text):
            return _EOF
        ch = self._text[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._column = 0
        else:
            self._column += 1
        return ch

    def _read_to_end_of_line(self) -> str:
        """Consume up to and including the line terminator.

        Returns:
            str: The consumed text without the terminating newline.
        """
        out: list[str] = []
        while not _end_of_line(ch := self._read_char()):
            out.append(ch)
        return "".join(out)

    def _skip_whitespace(self) -> None:
        while self._peek() in WHITESPACE:
            self._read_char()

    def _is_comment(self, ch: str) -> bool:
        return ch != _EOF and ch in self.parameters.comment_delimiters

    def _is_assign(self, ch: str) -> bool:
        return ch != _EOF and ch in self.parameters.assign_delimiters

    def _error(self, message: str) -> ParseError:
        return ParseError(message, self.line_number, self.line_position)


def _end_of_line(ch: str) -> bool:
    return ch == "\n" or ch == _EOF


def _rstrip(text: str) -> str:
    return text.rstrip("".join(WHITESPACE))


def _clean_comment(text: str) -> str:
    """Strip the space following the comment delimiter and trailing whitespace."""
    if text.startswith(" "):
        text = text[1:]
    return _rstrip(text)
