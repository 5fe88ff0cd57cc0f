"""Reader/writer lock with an upgradeable read mode."""

import threading
from contextlib import contextmanager
from typing import Iterator


class ReadWriteLock:
    """Multi-reader/single-writer lock.

    Three modes:

    - read: shared with other readers and with one upgradeable reader.
    - upgradeable read: shared with plain readers, exclusive against other
      upgradeable readers and writers. Its holder may escalate to write without
      releasing first.
    - write: exclusive.

    Waiting writers are preferred: new readers queue behind them. The lock is not
    recursive (apart from the escalation of an upgradeable reader) and waits are
    unbounded.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer: int | None = None
        self._upgradeable: int | None = None
        self._writers_waiting = 0

    # ---------- #
    # Read
    # ---------- #

    def acquire_read(self) -> None:
        with self._cond:
            self._cond.wait_for(
                lambda: self._writer is None and not self._writers_waiting
            )
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("Read lock released too many times.")
            self._readers -= 1
            if not self._readers:
                self._cond.notify_all()

    # ---------- #
    # Upgradeable read
    # ---------- #

    def acquire_upgradeable_read(self) -> None:
        with self._cond:
            self._cond.wait_for(
                lambda: self._writer is None
                and self._upgradeable is None
                and not self._writers_waiting
            )
            self._upgradeable = threading.get_ident()

    def release_upgradeable_read(self) -> None:
        with self._cond:
            if self._upgradeable != threading.get_ident():
                raise RuntimeError("Upgradeable read lock is not held by this thread.")
            self._upgradeable = None
            self._cond.notify_all()

    # ---------- #
    # Write
    # ---------- #

    def acquire_write(self) -> None:
        me = threading.get_ident()
        with self._cond:
            if self._writer == me:
                raise RuntimeError("Write lock is not recursive.")
            self._writers_waiting += 1
            try:
                if self._upgradeable == me:
                    # escalation, only plain readers can be in the way
                    self._cond.wait_for(
                        lambda: self._writer is None and not self._readers
                    )
                else:
                    self._cond.wait_for(
                        lambda: self._writer is None
                        and self._upgradeable is None
                        and not self._readers
                    )
            finally:
                self._writers_waiting -= 1
            self._writer = me

    def release_write(self) -> None:
        with self._cond:
            if self._writer != threading.get_ident():
                raise RuntimeError("Write lock is not held by this thread.")
            self._writer = None
            self._cond.notify_all()

    # ---------- #
    # Context managers
    # ---------- #

    @contextmanager
    def read(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def upgradeable_read(self) -> Iterator[None]:
        self.acquire_upgradeable_read()
        try:
            yield
        finally:
            self.release_upgradeable_read()

    @contextmanager
    def write(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
