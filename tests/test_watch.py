from syncini.watch import NullWatcher, PollingFileWatcher
import gc
import os
import threading
import pytest

TIMEOUT = 5


def touch(path, content: str) -> None:
    """Write content and move the mtime forward, so coarse clocks see a change."""
    path.write_text(content)
    stat = os.stat(path)
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 10**9))


class Owner:
    def __init__(self) -> None:
        self.changes = 0
        self.changed = threading.Event()

    def on_change(self) -> None:
        self.changes += 1
        self.changed.set()


class TestPollingFileWatcher:

    def test_check(self, tmp_path):
        path = tmp_path / "a.ini"
        path.write_text("[a]\n")
        owner = Owner()
        watcher = PollingFileWatcher(path, owner.on_change)
        assert not watcher.check()
        touch(path, "[a]\nk = v\n")
        assert watcher.check()
        assert owner.changes == 1
        assert not watcher.check()

    def test_paused(self, tmp_path):
        path = tmp_path / "a.ini"
        path.write_text("[a]\n")
        owner = Owner()
        watcher = PollingFileWatcher(path, owner.on_change)
        with watcher.paused():
            touch(path, "[b]\n")
            assert not watcher.check()
        assert not watcher.check()
        assert owner.changes == 0

    def test_missing_file(self, tmp_path):
        path = tmp_path / "a.ini"
        owner = Owner()
        watcher = PollingFileWatcher(path, owner.on_change)
        assert not watcher.check()
        path.write_text("[a]\n")
        assert watcher.check()
        path.unlink()
        assert not watcher.check()

    def test_thread(self, tmp_path):
        path = tmp_path / "a.ini"
        path.write_text("[a]\n")
        owner = Owner()
        watcher = PollingFileWatcher(path, owner.on_change, interval=0.05)
        watcher.start()
        try:
            assert watcher.running
            touch(path, "[a]\nk = v\n")
            assert owner.changed.wait(TIMEOUT)
        finally:
            watcher.stop()
        assert not watcher.running

    def test_weak_callback(self, tmp_path):
        path = tmp_path / "a.ini"
        path.write_text("[a]\n")
        owner = Owner()
        watcher = PollingFileWatcher(path, owner.on_change)
        del owner
        gc.collect()
        touch(path, "[b]\n")
        assert not watcher.check()

    def test_plain_function_callback(self, tmp_path):
        path = tmp_path / "a.ini"
        path.write_text("[a]\n")
        calls = []
        watcher = PollingFileWatcher(path, lambda: calls.append(1))
        touch(path, "[b]\n")
        assert watcher.check()
        assert calls == [1]


class TestNullWatcher:

    def test_noop(self, tmp_path):
        watcher = NullWatcher(tmp_path / "a.ini", lambda: pytest.fail())
        watcher.start()
        with watcher.paused():
            pass
        watcher.stop()
