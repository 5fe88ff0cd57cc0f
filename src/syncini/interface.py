"""The IniFile handle: a lock-guarded, self-reloading view onto one ini file."""

import locale
import logging
from pathlib import Path
from typing import Any, Iterable, Self, TypeAlias, overload
from charset_normalizer import from_bytes as read_from_bytes
from .dialects import IniFileType
from .document import IniDocument, Section, SectionCollection
from .exceptions_warnings import (
    InvalidArgumentError,
    KeyNotFoundError,
    ParseError,
    SectionNotFoundError,
)
from .locks import ReadWriteLock
from .reader import IniReader
from .type_converters import TypeCodec, codec_for
from .watch import FileWatcher, NullWatcher, WatcherFactory, polling_watcher_factory
from .writer import single_line

logger = logging.getLogger(__name__)

_MISSING: Any = object()

ValueType: TypeAlias = type | TypeCodec
"""A declared value type (str, int, list[int], ...) or a codec."""


class IniFile:
    """Thread-safe handle onto an ini file on disk.

    Reads share a read lock, mutations are exclusive and are saved to disk right
    away. External changes to the file are picked up by a watcher and reloaded.

    Usage::

        with IniFile("server.ini") as ini:
            port = ini.get("Server", "port", value_type=int)
            ini.set("Server", "port", port + 1, value_type=int)
    """

    def __init__(
        self,
        path: str | Path,
        encoding: str | None = None,
        file_type: IniFileType = IniFileType.STANDARD,
        *,
        watch: bool = True,
        poll_interval: float = 1.0,
        watcher_factory: WatcherFactory | None = None,
    ) -> None:
        """Open (or create) an ini file and load it.

        Args:
            path (str | Path): Path to the ini file. Created (empty) if missing.
            encoding (str | None, optional): The file's encoding. If None, the
                encoding is detected on every load. Defaults to None.
            file_type (IniFileType, optional): The dialect.
                Defaults to IniFileType.STANDARD.
            watch (bool, optional): Whether to reload on external changes.
                Defaults to True.
            poll_interval (float, optional): Seconds between two checks of the
                default watcher. Defaults to 1.0.
            watcher_factory (WatcherFactory | None, optional): Creates the watcher
                instead of the default polling one (ignores watch and
                poll_interval). Defaults to None.

        Raises:
            ParseError: If the file is malformed.
        """
        self._path = Path(path).absolute()
        self._detect_encoding = encoding is None
        self._encoding = encoding
        self._lock = ReadWriteLock()
        self._document = IniDocument(file_type)
        self._closed = False

        self._path.touch(exist_ok=True)
        self._document = self._read()

        if watcher_factory is None:
            watcher_factory = (
                polling_watcher_factory(poll_interval) if watch else NullWatcher
            )
        self._watcher: FileWatcher = watcher_factory(self._path, self._on_file_changed)
        self._watcher.start()

    def __repr__(self) -> str:
        return f"IniFile({str(self._path)!r}, {self._encoding!r}, {self.file_type})"

    @property
    def path(self) -> Path:
        return self._path

    @property
    def encoding(self) -> str | None:
        """The encoding used for reading and saving (the detected one if none was
        given)."""
        return self._encoding

    @property
    def file_type(self) -> IniFileType:
        return self._document.file_type

    @property
    def closed(self) -> bool:
        return self._closed

    # ---------- #
    # Reading
    # ---------- #

    @overload
    def get(self, section: str, key: str, *, value_type: ValueType = str) -> Any: ...
    @overload
    def get(
        self, section: str, key: str, default: Any, *, value_type: ValueType = str
    ) -> tuple[Any, bool, bool]: ...

    def get(
        self,
        section: str,
        key: str,
        default: Any = _MISSING,
        *,
        value_type: ValueType = str,
    ) -> Any:
        """Get the value of a key.

        Args:
            section (str): The section name.
            key (str): The key.
            default (Any, optional): If given, missing sections or keys don't raise;
                a (value, section_existed, key_existed) tuple is returned instead,
                with value being default if the key is missing.
            value_type (ValueType, optional): Type to decode the value to.
                Defaults to str.

        Raises:
            SectionNotFoundError: If the section doesn't exist (no default given).
            KeyNotFoundError: If the key doesn't exist (no default given).
            TypeConversionError: If the value can't be decoded to value_type.

        Returns:
            Any: The value, or (value, section_existed, key_existed) if default is
                given.
        """
        codec = codec_for(value_type)
        with self._lock.read():
            value, section_existed = self._lookup(section, key)

        if default is _MISSING:
            if not section_existed:
                raise SectionNotFoundError(str(self._path), section)
            if value is None:
                raise KeyNotFoundError(str(self._path), section, key)
            return codec.decode(value)

        if value is None:
            return default, section_existed, False
        return codec.decode(value), True, True

    @overload
    def get_many(self, section: str, keys: Iterable[str]) -> list[tuple[str, str]]: ...
    @overload
    def get_many(
        self, section: str, keys: Iterable[str], default: Any
    ) -> list[tuple[str, Any, bool, bool]]: ...

    def get_many(
        self, section: str, keys: Iterable[str], default: Any = _MISSING
    ) -> list[tuple]:
        """Get the raw values of several keys of one section in one read.

        Args:
            section (str): The section name.
            keys (Iterable[str]): The keys.
            default (Any, optional): If given, missing sections or keys don't raise
                and (key, value, section_existed, key_existed) tuples are returned.

        Raises:
            SectionNotFoundError: If the section doesn't exist (no default given).
            KeyNotFoundError: If a key doesn't exist (no default given).

        Returns:
            list[tuple]: (key, value) tuples, or (key, value, section_existed,
                key_existed) tuples if default is given. In the order of keys.
        """
        keys = list(keys)
        with self._lock.read():
            current = self._document.sections.get(section)
            values = [None if current is None else current.get_value(k) for k in keys]

        if default is _MISSING:
            if current is None:
                raise SectionNotFoundError(str(self._path), section)
            for key, value in zip(keys, values):
                if value is None:
                    raise KeyNotFoundError(str(self._path), section, key)
            return list(zip(keys, values))

        return [
            (
                (key, default, current is not None, False)
                if value is None
                else (key, value, True, True)
            )
            for key, value in zip(keys, values)
        ]

    @overload
    def list_key_values(self, section: str) -> list[tuple[str, str]]: ...
    @overload
    def list_key_values(self, section: None = None) -> list[tuple[str, str, str]]: ...

    def list_key_values(self, section: str | None = None) -> list[tuple]:
        """List key value pairs in file order.

        Args:
            section (str | None, optional): Section to list. If None, lists every
                section. Defaults to None.

        Raises:
            SectionNotFoundError: If section doesn't exist.

        Returns:
            list[tuple]: (key, value) tuples of section, or (section, key, value)
                tuples of the whole file if section is None.
        """
        with self._lock.read():
            if section is None:
                return [
                    (current.name, option.key, option.value)
                    for current in self._document.sections
                    for option in current.options()
                ]
            if (current := self._document.sections.get(section)) is None:
                raise SectionNotFoundError(str(self._path), section)
            return [(option.key, option.value) for option in current.options()]

    def list_sections(self) -> list[str]:
        """Names of all sections in file order."""
        with self._lock.read():
            return self._document.sections.names()

    def to_string(self) -> str:
        """The current content as ini text."""
        with self._lock.read():
            return self._document.to_string()

    # ---------- #
    # Writing
    # ---------- #

    def set(
        self, section: str, key: str, value: Any, *, value_type: ValueType = str
    ) -> tuple[bool, bool, str | None]:
        """Set the value of a key and save. Missing sections and keys are created.
        Setting the current value again doesn't touch the file.

        Args:
            section (str): The section name.
            key (str): The key.
            value (Any): The new value. None is stored as an empty string, line
                breaks of the encoded value are removed.
            value_type (ValueType, optional): Type to encode value as.
                Defaults to str.

        Raises:
            TypeConversionError: If value can't be encoded as value_type.
            InvalidArgumentError: If the section, key or encoded value would not be
                read back unchanged in the file's dialect.
            OSError: If saving fails. The content is unchanged then.

        Returns:
            tuple[bool, bool, str | None]: Whether the section existed, whether the
                key existed and the raw old value (None if the key didn't exist).
        """
        text = single_line(codec_for(value_type).encode(value))
        with self._lock.upgradeable_read():
            value_before, section_existed = self._lookup(section, key)
            if value_before == text:
                return True, True, value_before
            self._document.check_writable(section, key, text)
            with self._lock.write():
                self._assign(section, key, text)
                try:
                    self._save()
                except Exception:
                    self._unassign(section, key, value_before, section_existed)
                    raise
        return section_existed, value_before is not None, value_before

    def set_many(
        self,
        assignments: Iterable[tuple[str, str, Any]],
        *,
        value_type: ValueType = str,
    ) -> list[tuple[bool, bool, str | None]]:
        """Set several values at once. The file is saved at most once.

        Args:
            assignments (Iterable[tuple[str, str, Any]]): (section, key, value)
                triples, applied in order.
            value_type (ValueType, optional): Type to encode every value as.
                Defaults to str.

        Raises:
            TypeConversionError: If a value can't be encoded. Nothing is changed then.
            InvalidArgumentError: If an assignment would not be read back unchanged.
                Nothing is changed then.
            OSError: If saving fails. The content is unchanged then.

        Returns:
            list[tuple[bool, bool, str | None]]: One (section_existed, key_existed,
                old_value) tuple per assignment.
        """
        codec = codec_for(value_type)
        encoded = [(s, k, single_line(codec.encode(v))) for s, k, v in assignments]
        for section, key, text in encoded:
            self._document.check_writable(section, key, text)

        results: list[tuple[bool, bool, str | None]] = []
        applied: list[tuple[str, str, str | None, bool]] = []
        with self._lock.write():
            for section, key, text in encoded:
                value_before, section_existed = self._lookup(section, key)
                results.append(
                    (section_existed, value_before is not None, value_before)
                )
                if value_before != text:
                    self._assign(section, key, text)
                    applied.append((section, key, value_before, section_existed))
            if applied:
                try:
                    self._save()
                except Exception:
                    for undo in reversed(applied):
                        self._unassign(*undo)
                    raise
        return results

    def add_section(self, section: str) -> bool:
        """Add an empty section and save.

        Raises:
            InvalidArgumentError: If the name would not be read back unchanged.
            OSError: If saving fails. The section isn't added then.

        Returns:
            bool: False if the section already existed.
        """
        self._document.check_writable(section)
        with self._lock.write():
            if section in self._document.sections:
                return False
            self._document.sections.add(Section(section))
            try:
                self._save()
            except Exception:
                self._document.sections.remove(section)
                raise
            return True

    def remove_section(self, section: str) -> bool:
        """Remove a section with all its keys and save.

        Raises:
            OSError: If saving fails. The section is kept then.

        Returns:
            bool: False if the section didn't exist.
        """
        with self._lock.write():
            sections_before = list(self._document.sections)
            if not self._document.sections.remove(section):
                return False
            try:
                self._save()
            except Exception:
                self._document.sections = SectionCollection(sections_before)
                raise
            return True

    # ---------- #
    # Persistence
    # ---------- #

    def save(self) -> None:
        """Write the current content to the file."""
        with self._lock.write():
            self._save()

    def save_as(self, path: str | Path, encoding: str | None = None) -> None:
        """Write the current content to another file. The handle stays bound to its
        own file.

        Args:
            path (str | Path): The target file (will be overwritten).
            encoding (str | None, optional): Encoding of the target file. If None,
                uses this file's encoding. Defaults to None.

        Raises:
            InvalidArgumentError: If path is this handle's file.
        """
        target = Path(path).absolute()
        if target.resolve() == self._path.resolve():
            raise InvalidArgumentError(
                f"'{path}' is the handle's own file, use save() instead."
            )
        with self._lock.read():
            self._document.save(target, encoding or self._encoding)
        logger.debug("Saved a copy of %s to %s.", self._path, target)

    def reload(self) -> None:
        """Reload the file from disk, discarding unsaved changes.

        Raises:
            ParseError: If the file is malformed. The content is unchanged then.
        """
        with self._lock.write():
            self._document = self._read()

    def close(self) -> None:
        """Stop watching the file. The loaded content stays readable."""
        if self._closed:
            return
        self._closed = True
        self._watcher.stop()
        logger.debug("Closed %s.", self._path)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ---------- #
    # Helpers, callers hold the lock
    # ---------- #

    def _lookup(self, section: str, key: str) -> tuple[str | None, bool]:
        """Get (raw value or None, section_existed)."""
        if (current := self._document.sections.get(section)) is None:
            return None, False
        return current.get_value(key), True

    def _assign(self, section: str, key: str, text: str) -> None:
        if (current := self._document.sections.get(section)) is None:
            current = Section(section)
            # validate the key before the section becomes visible
            current.set(key, text)
            self._document.sections.add(current)
        else:
            current.set(key, text)

    def _unassign(
        self, section: str, key: str, value_before: str | None, section_existed: bool
    ) -> None:
        """Undo an _assign."""
        if not section_existed:
            self._document.sections.remove(section)
        elif value_before is None:
            self._document.sections[section].remove(key)
        else:
            self._document.sections[section].set(key, value_before)

    def _save(self) -> None:
        with self._watcher.paused():
            self._document.save(self._path, self._encoding)
        logger.debug("Saved %s.", self._path)

    def _read(self) -> IniDocument:
        """Parse the file into a new document. The encoding is only taken over if
        parsing succeeds."""
        raw = self._path.read_bytes()
        encoding = _detect_encoding(raw) if self._detect_encoding else self._encoding
        document = IniDocument(self.file_type)
        document.load(IniReader(raw.decode(encoding), document.read_parameters))
        self._encoding = encoding
        return document

    def _on_file_changed(self) -> None:
        try:
            with self._lock.write():
                self._document = self._read()
        except (OSError, UnicodeError, ParseError):
            logger.exception(
                "Reloading %s after an external change failed.", self._path
            )
        else:
            logger.debug("Reloaded %s after an external change.", self._path)


def _detect_encoding(raw: bytes) -> str:
    """Guess the encoding of raw file content.

    ASCII is widened to UTF-8, so non-ASCII values can be saved later. Falls back to
    the locale's preferred encoding.
    """
    if (match := read_from_bytes(raw).best()) is None:
        return locale.getpreferredencoding(False)
    encoding = match.encoding
    if encoding == "ascii":
        return "utf_8"
    if encoding == "utf_8" and match.bom:
        return "utf_8_sig"
    return encoding
