"""Ordered in-memory model of an ini file: sections holding options and comments."""

import io
import locale
import logging
import os
import shutil
import tempfile
import warnings
from pathlib import Path
from typing import Any, Iterable, Iterator, TextIO, overload
from .args import Parameters, WriteParameters
from .dialects import IniFileType, reader_parameters, writer_parameters
from .entities import Comment, Entity, Item, Option, SectionHeader
from .exceptions_warnings import (
    DuplicateKeyWarning,
    DuplicateSectionError,
    InvalidArgumentError,
    ParseError,
)
from .globals import COMMENT_NAME_PREFIX
from .reader import IniReader
from .utils import OrderedMap
from .writer import IniWriter

logger = logging.getLogger(__name__)

_KEEP: Any = object()


class Section:
    """A configuration section. Holds Options and Comments in file order."""

    def __init__(self, name: str, comment: str | None = None) -> None:
        """
        Args:
            name (str): Name of the section.
            comment (str | None, optional): Comment of the section header line.
                Defaults to None.
        """
        if not name:
            raise ValueError("Section name must not be empty.")
        self.name = name
        self.comment = comment
        self._items: OrderedMap[str, Item] = OrderedMap()
        self._comment_count = 0

    def __repr__(self) -> str:
        return f"Section({self.name!r}, items={len(self._items)})"

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items.values())

    def __contains__(self, key: object) -> bool:
        return isinstance(self._items.get(key), Option)  # type: ignore[arg-type]

    @property
    def header(self) -> SectionHeader:
        return SectionHeader(self.name, self.comment)

    def get_item(self, index: int) -> Item:
        """Get an item (Option or Comment) by position."""
        return self._items.iloc[index][1]

    def get_option(self, key: str) -> Option | None:
        item = self._items.get(key)
        return item if isinstance(item, Option) else None

    def get_value(self, key: str) -> str | None:
        """Get the value of a key.

        Args:
            key (str): The key.

        Returns:
            str | None: The value or None if the key doesn't exist.
        """
        option = self.get_option(key)
        return None if option is None else option.value

    def keys(self) -> list[str]:
        """Keys of all options in order."""
        return [item.key for item in self._items.values() if isinstance(item, Option)]

    def options(self) -> list[Option]:
        return [item for item in self._items.values() if isinstance(item, Option)]

    def set(self, key: str, value: str, comment: str | None = _KEEP) -> Option:
        """Set the value of a key. A new key is appended to the section.

        Args:
            key (str): The key.
            value (str): The new value.
            comment (str | None, optional): The key's trailing comment. If not given,
                an existing key keeps its comment.

        Returns:
            Option: The (new or updated) option.
        """
        if not key:
            raise ValueError("Key must not be empty.")
        if "\n" in key or "\r" in key:
            raise ValueError("Keys must not contain line breaks.")
        if (option := self.get_option(key)) is not None:
            option.value = value
            if comment is not _KEEP:
                option.comment = comment
            return option
        option = Option(key, value, None if comment is _KEEP else comment)
        self._items[key] = option
        return option

    def add_comment(self, content: str | None = None) -> Comment:
        """Append a comment (or a blank line if content is None)."""
        comment = Comment(content)
        self._items[f"{COMMENT_NAME_PREFIX}{self._comment_count}"] = comment
        self._comment_count += 1
        return comment

    def remove(self, key: str) -> bool:
        """Remove a key.

        Returns:
            bool: Whether the key existed.
        """
        if key not in self:
            return False
        del self._items[key]
        return True


class SectionCollection:
    """Ordered, name-keyed collection of sections."""

    def __init__(self, sections: Iterable[Section] = ()) -> None:
        self._sections: OrderedMap[str, Section] = OrderedMap()
        for section in sections:
            self.add(section)

    @overload
    def __getitem__(self, key: int) -> Section: ...
    @overload
    def __getitem__(self, key: str) -> Section: ...

    def __getitem__(self, key: int | str) -> Section:
        if isinstance(key, int):
            return self._sections.iloc[key][1]
        return self._sections[key]

    def get(self, name: str) -> Section | None:
        return self._sections.get(name)

    def __len__(self) -> int:
        return len(self._sections)

    def __iter__(self) -> Iterator[Section]:
        return iter(self._sections.values())

    def __contains__(self, name: object) -> bool:
        return name in self._sections

    def names(self) -> list[str]:
        return list(self._sections)

    def add(self, section: Section) -> None:
        """Append a section.

        Raises:
            DuplicateSectionError: If a section with the same name exists.
        """
        if section.name in self._sections:
            raise DuplicateSectionError(section.name)
        self._sections[section.name] = section

    def remove(self, name: str) -> bool:
        """Remove a section.

        Returns:
            bool: Whether the section existed.
        """
        if name not in self._sections:
            return False
        del self._sections[name]
        return True

    def clear(self) -> None:
        self._sections.clear()


class IniDocument:
    """An ini file's content: preamble comments followed by sections."""

    def __init__(self, file_type: IniFileType = IniFileType.STANDARD) -> None:
        """
        Args:
            file_type (IniFileType, optional): The dialect used for reading and
                writing. Defaults to IniFileType.STANDARD.
        """
        self.file_type = IniFileType(file_type)
        self.preamble: list[str | None] = []
        self.sections = SectionCollection()

    @property
    def file_type(self) -> IniFileType:
        return self._file_type

    @file_type.setter
    def file_type(self, value: IniFileType) -> None:
        self._file_type = IniFileType(value)
        self.read_parameters: Parameters = reader_parameters(self._file_type)
        self.write_parameters: WriteParameters = writer_parameters(self._file_type)

    @classmethod
    def from_string(
        cls, text: str, file_type: IniFileType = IniFileType.STANDARD
    ) -> "IniDocument":
        """Create a document from ini text."""
        document = cls(file_type)
        document.load(IniReader(text, document.read_parameters))
        return document

    # ---------- #
    # Loading
    # ---------- #

    def load(
        self, source: str | Path | TextIO | IniReader, encoding: str | None = None
    ) -> None:
        """Load the document, replacing the current content.

        Args:
            source (str | Path | TextIO | IniReader): A path to an ini file, an open
                text stream or an IniReader. Streams and readers are closed after
                loading.
            encoding (str | None, optional): Encoding if source is a path. If None,
                the platform's preferred encoding is used. Defaults to None.

        Raises:
            ParseError: If the content is malformed. The document is unchanged then.
        """
        if isinstance(source, IniReader):
            reader = source
        elif isinstance(source, (str, Path)):
            reader = IniReader(
                open(source, "r", encoding=encoding, newline=""), self.read_parameters
            )
        else:
            reader = IniReader(source, self.read_parameters)

        preamble: list[str | None] = []
        sections = SectionCollection()
        section: Section | None = None

        with reader:
            for entity in reader:
                match entity:
                    case Comment(content=content):
                        if section is None:
                            preamble.append(content)
                        else:
                            section.add_comment(content)
                    case SectionHeader(name=name, comment=comment):
                        # a repeated section overrides the earlier definition
                        if sections.remove(name):
                            logger.debug(
                                "Section '%s' redefined in line %s, overriding.",
                                name,
                                reader.entity_line_number,
                            )
                        section = Section(name, comment)
                        sections.add(section)
                    case Option(key=key, value=value, comment=comment):
                        if section is None:
                            raise ParseError(
                                f"Key '{key}' outside of any section",
                                reader.entity_line_number,
                                1,
                            )
                        if key in section:
                            warnings.warn(
                                f"Key '{key}' is defined twice in section"
                                f" '{section.name}' (line {reader.entity_line_number}),"
                                " keeping the first definition.",
                                DuplicateKeyWarning,
                                stacklevel=2,
                            )
                        else:
                            section.set(key, value, comment)

        self.preamble = preamble
        self.sections = sections
        logger.debug(
            "Loaded %d section(s) (%s dialect).", len(sections), self.file_type.value
        )

    # ---------- #
    # Saving
    # ---------- #

    def save(self, target: str | Path | TextIO, encoding: str | None = None) -> None:
        """Write the document.

        A path is replaced in one step: the content is rendered and encoded first,
        written to a temporary file in the same directory and then moved over the
        target. If anything fails, the target is left as it was.

        Args:
            target (str | Path | TextIO): Path to write to (will be overwritten) or
                an open text stream. The stream is closed afterwards.
            encoding (str | None, optional): Encoding if target is a path. If None,
                the platform's preferred encoding is used. Defaults to None.

        Raises:
            UnicodeEncodeError: If the content can't be encoded with encoding.
        """
        if not isinstance(target, (str, Path)):
            with IniWriter(target, self.write_parameters) as writer:
                self._write(writer)
            return

        data = self.to_string().encode(encoding or locale.getpreferredencoding(False))
        target = Path(target)
        handle, temp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
        try:
            with os.fdopen(handle, "wb") as stream:
                stream.write(data)
            if target.exists():
                shutil.copymode(target, temp_name)
            os.replace(temp_name, target)
        except BaseException:
            os.unlink(temp_name)
            raise

    def check_writable(
        self, section: str, key: str | None = None, value: str = ""
    ) -> None:
        """Make sure a section name (and a key with its value) is read back
        unchanged after writing it in this document's dialect.

        Args:
            section (str): The section name.
            key (str | None, optional): The key. If None, only the section name is
                checked. Defaults to None.
            value (str, optional): The key's value. Defaults to "".

        Raises:
            InvalidArgumentError: If the dialect can't represent the name, key or
                value.
        """
        expected: list[Entity] = [SectionHeader(section)]
        if key is not None:
            expected.append(Option(key, value))

        buffer = io.StringIO()
        writer = IniWriter(buffer, self.write_parameters)
        for entity in expected:
            writer.write(entity)
        text = buffer.getvalue()
        writer.close()

        try:
            with IniReader(text, self.read_parameters) as reader:
                entities = list(reader)
        except ParseError:
            entities = []
        if entities == expected:
            return
        if key is None:
            raise InvalidArgumentError(
                f"Section name {section!r} can't be written in the"
                f" {self.file_type.value} dialect."
            )
        raise InvalidArgumentError(
            f"Key {key!r} with value {value!r} can't be written in the"
            f" {self.file_type.value} dialect without changing it."
        )

    def to_string(self) -> str:
        """Render the document as ini text."""
        buffer = io.StringIO()
        writer = IniWriter(buffer, self.write_parameters)
        self._write(writer)
        text = buffer.getvalue()
        writer.close()
        return text

    def _write(self, writer: IniWriter) -> None:
        for comment in self.preamble:
            writer.write_empty(comment)
        for section in self.sections:
            writer.write_section(section.name, section.comment)
            for item in section:
                writer.write(item)
