"""Ini writer. Serializes entities line by line."""

from enum import Enum
from typing import Self, TextIO
from .args import WriteParameters
from .entities import Comment, Entity, Option, SectionHeader
from .exceptions_warnings import InvalidWriterStateError
from .globals import COMMENT_MARKERS, QUOTE


class IniWriteState(Enum):
    START = "start"
    BEFORE_FIRST_SECTION = "before_first_section"
    SECTION = "section"
    CLOSED = "closed"


class IniWriter:
    """Writes section headers, keys and comments to a text stream.

    A key can only be written after a section was opened. Closing the writer
    closes the underlying stream; the writer should be used as a context manager so
    that happens on every exit path.
    """

    def __init__(self, stream: TextIO, parameters: WriteParameters | None = None):
        """
        Args:
            stream (TextIO): The stream to write to. Owned by the writer from now on.
            parameters (WriteParameters | None, optional): Writing parameters. If None,
                will use WriteParameters(). Defaults to None.
        """
        self._stream = stream
        self.parameters = WriteParameters() if parameters is None else parameters
        self._state = IniWriteState.START

    @property
    def write_state(self) -> IniWriteState:
        return self._state

    @property
    def stream(self) -> TextIO:
        return self._stream

    # ---------- #
    # Writing
    # ---------- #

    def write_section(self, name: str, comment: str | None = None) -> None:
        """Write a section header and open the section.

        Args:
            name (str): The section name.
            comment (str | None, optional): Trailing comment. Defaults to None.
        """
        self._validate_state()
        self._state = IniWriteState.SECTION
        self._write_line(f"[{name}]{self._comment(comment)}")

    def write_key(self, key: str, value: str, comment: str | None = None) -> None:
        """Write a key line into the open section.

        Args:
            key (str): The key.
            value (str): The value. Newlines are removed.
            comment (str | None, optional): Trailing comment. Defaults to None.

        Raises:
            InvalidWriterStateError: If no section is open or the writer is closed.
        """
        self._validate_state()
        if self._state is not IniWriteState.SECTION:
            raise InvalidWriterStateError("The WriteState is not Section")
        self._write_line(
            " " * self.parameters.indentation
            + f"{key} {self.parameters.assign_delimiter} {self._key_value(value)}"
            + self._comment(comment)
        )

    def write_empty(self, comment: str | None = None) -> None:
        """Write a comment line, or a blank line if comment is None.

        Args:
            comment (str | None, optional): The comment. Defaults to None.
        """
        self._validate_state()
        if self._state is IniWriteState.START:
            self._state = IniWriteState.BEFORE_FIRST_SECTION
        self._write_line(
            "" if comment is None else f"{self.parameters.comment_delimiter} {comment}"
        )

    def write(self, entity: Entity) -> None:
        """Write any entity with the matching write method."""
        match entity:
            case SectionHeader():
                self.write_section(entity.name, entity.comment)
            case Option():
                self.write_key(entity.key, entity.value, entity.comment)
            case Comment():
                self.write_empty(entity.content)
            case _:
                raise TypeError(f"Can't write {entity!r}.")

    def flush(self) -> None:
        self._stream.flush()

    def close(self) -> None:
        """Flush and close the underlying stream. Further writes will raise."""
        if self._state is IniWriteState.CLOSED:
            return
        self._state = IniWriteState.CLOSED
        self._stream.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ---------- #
    # Helpers
    # ---------- #

    def _validate_state(self) -> None:
        if self._state is IniWriteState.CLOSED:
            raise InvalidWriterStateError("The writer is closed")

    def _comment(self, text: str | None) -> str:
        return "" if text is None else f" {self.parameters.comment_delimiter} {text}"

    def _key_value(self, text: str) -> str:
        text = single_line(text)
        if self.parameters.use_value_quotes or (
            self.parameters.quote_when_needed and self._needs_quotes(text)
        ):
            text = f"{QUOTE}{text}{QUOTE}"
        return text

    def _needs_quotes(self, text: str) -> bool:
        """Whether text would be read back differently without quotes."""
        if not text or QUOTE in text:
            # a quoted value ends at its first quote
            return False
        return (
            text != text.strip()
            or text.endswith("\\")
            or any(marker in text for marker in COMMENT_MARKERS)
        )

    def _write_line(self, line: str) -> None:
        self._stream.write(line + self.parameters.eol)


def single_line(text: str) -> str:
    """Remove line breaks. Values never span lines, so they are dropped rather
    than escaped."""
    return text.replace("\r", "").replace("\n", "")
