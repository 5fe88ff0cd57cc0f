"""File change notification. The default watcher polls the file's stat."""

import logging
import os
import threading
import weakref
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import Callable, Iterator, Protocol, TypeAlias

logger = logging.getLogger(__name__)

ChangeCallback: TypeAlias = Callable[[], None]


class FileWatcher(Protocol):
    """Source of "file changed" notifications for one file."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def paused(self) -> AbstractContextManager[None]:
        """Suppress notifications within the block. Changes made during the block
        are not reported afterwards."""
        ...


WatcherFactory: TypeAlias = Callable[[Path, ChangeCallback], FileWatcher]
"""Creates a watcher for a path that calls the callback on every change."""


class NullWatcher:
    """Watcher that never notifies."""

    def __init__(
        self, path: Path | None = None, callback: ChangeCallback | None = None
    ) -> None:
        self.path = path

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass

    @contextmanager
    def paused(self) -> Iterator[None]:
        yield


class PollingFileWatcher:
    """Polls a file's modification time and size on a daemon thread.

    The callback is referenced weakly (bound methods through WeakMethod), so the
    watcher doesn't keep its owner alive. The thread ends when the owner is garbage
    collected or stop() is called.
    """

    def __init__(
        self, path: str | Path, callback: ChangeCallback, interval: float = 1.0
    ) -> None:
        """
        Args:
            path (str | Path): The file to watch.
            callback (ChangeCallback): Called (on the watcher thread) whenever the
                file changed.
            interval (float, optional): Seconds between two polls. Defaults to 1.0.
        """
        self.path = Path(path)
        self.interval = interval
        if hasattr(callback, "__self__") and hasattr(callback, "__func__"):
            self._callback: Callable[[], ChangeCallback | None] = weakref.WeakMethod(
                callback  # type: ignore[arg-type]
            )
        else:
            self._callback = lambda: callback
        self._lock = threading.Lock()
        self._paused = 0
        self._snapshot = self._stat()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        with self._lock:
            self._snapshot = self._stat()
        self._thread = threading.Thread(
            target=self._run, name=f"syncini-watch:{self.path.name}", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    @contextmanager
    def paused(self) -> Iterator[None]:
        with self._lock:
            self._paused += 1
        try:
            yield
        finally:
            with self._lock:
                self._paused -= 1
                # own changes are not reported
                self._snapshot = self._stat()

    def check(self) -> bool:
        """Compare the file against the last snapshot and notify if it changed.

        Returns:
            bool: Whether a change was reported.
        """
        if (callback := self._callback()) is None:
            # owner is gone
            self._stop.set()
            return False

        with self._lock:
            if self._paused:
                return False
            current = self._stat()
            if current == self._snapshot or current is None:
                # missing files are reported once they exist again
                return False
            self._snapshot = current

        logger.debug("Change detected in %s.", self.path)
        callback()
        return True

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self.check()
            except Exception:
                logger.exception("Handling a change of %s failed.", self.path)

    def _stat(self) -> tuple[int, int] | None:
        try:
            stat = os.stat(self.path)
        except FileNotFoundError:
            return None
        return stat.st_mtime_ns, stat.st_size


def polling_watcher_factory(interval: float = 1.0) -> WatcherFactory:
    """Create a WatcherFactory producing PollingFileWatchers.

    Args:
        interval (float, optional): Seconds between two polls. Defaults to 1.0.
    """

    def create(path: Path, callback: ChangeCallback) -> FileWatcher:
        return PollingFileWatcher(path, callback, interval)

    return create
