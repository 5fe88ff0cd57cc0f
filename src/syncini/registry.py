"""Cache of IniFile handles, one per file."""

import logging
import threading
import weakref
from pathlib import Path
from typing import Any
from .dialects import IniFileType
from .interface import IniFile

logger = logging.getLogger(__name__)


class IniFileRegistry:
    """Hands out one shared IniFile per file path.

    Handles are referenced weakly: once the last caller drops a handle, it leaves
    the registry and the next get_or_create() opens the file anew.

    Create one registry per scope that should share handles and pass it around::

        registry = IniFileRegistry()
        ini = registry.get_or_create("server.ini")
        assert registry.get_or_create("./server.ini") is ini
    """

    def __init__(self) -> None:
        self._handles: weakref.WeakValueDictionary[Path, IniFile] = (
            weakref.WeakValueDictionary()
        )
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, (str, Path)) and self.lookup(path) is not None

    def lookup(self, path: str | Path) -> IniFile | None:
        """Get the live handle of a file.

        Returns:
            IniFile | None: The handle or None if there is none.
        """
        return self._handles.get(_key(path))

    def get_or_create(
        self,
        path: str | Path,
        encoding: str | None = None,
        file_type: IniFileType = IniFileType.STANDARD,
        **kwargs: Any,
    ) -> IniFile:
        """Get the live handle of a file or open a new one.

        Args:
            path (str | Path): Path to the ini file. Paths are compared resolved, so
                different spellings of one file share a handle.
            encoding (str | None, optional): Encoding for a new handle. If None, it's
                detected. Defaults to None.
            file_type (IniFileType, optional): Dialect for a new handle.
                Defaults to IniFileType.STANDARD.
            **kwargs: Further keyword arguments for IniFile.

        Returns:
            IniFile: The handle. An existing handle is returned as is, even if it
                was opened with a different encoding or dialect.
        """
        key = _key(path)
        with self._lock:
            if (handle := self._handles.get(key)) is not None:
                if handle.file_type is not IniFileType(file_type):
                    logger.debug(
                        "Returning the %s handle of %s although %s was requested.",
                        handle.file_type.value,
                        key,
                        IniFileType(file_type).value,
                    )
                return handle
            handle = IniFile(key, encoding, file_type, **kwargs)
            self._handles[key] = handle
            logger.debug("Opened %s.", key)
            return handle


def _key(path: str | Path) -> Path:
    return Path(path).resolve()
