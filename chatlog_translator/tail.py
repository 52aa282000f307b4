"""Follow a growing log file and yield lines as they are appended."""

import logging
import os
import threading
from typing import Generator

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from chatlog_translator.errors import TailSourceError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0
READ_CHUNK_SIZE = 64 * 1024


class _GrowthHandler(FileSystemEventHandler):
    """Sets the wake-up event whenever the watched file changes."""

    def __init__(self, path: str, wakeup: threading.Event):
        super().__init__()
        self._path = os.path.abspath(path)
        self._wakeup = wakeup

    def _matches(self, event) -> bool:
        if event.is_directory:
            return False
        paths = [event.src_path, getattr(event, "dest_path", "")]
        return any(p and os.path.abspath(p) == self._path for p in paths)

    def on_modified(self, event):
        if self._matches(event):
            self._wakeup.set()

    def on_created(self, event):
        if self._matches(event):
            self._wakeup.set()

    def on_moved(self, event):
        if self._matches(event):
            self._wakeup.set()


class LogTail:
    """Delivers every line of a file, then keeps following it as it grows.

    Lines already in the file when ``lines()`` starts are delivered too;
    filtering old events is up to the consumer. Between reads the tail
    blocks on an event set by a watchdog observer, with ``poll_interval``
    as the upper bound on each wait.

    Handles:
    - File truncation (seek back to start)
    - File replacement (inode change, reopen from start)
    - File removal or read failure (TailSourceError)
    """

    def __init__(
        self,
        path: str,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        stop_event: threading.Event | None = None,
    ):
        self._path = os.path.abspath(path)
        self._poll_interval = poll_interval
        self._stop = stop_event or threading.Event()
        self._wakeup = threading.Event()
        self._file = None
        self._inode = None
        self._started = False

    @property
    def path(self) -> str:
        return self._path

    def stop(self):
        """Ask ``lines()`` to return at its next wait."""
        self._stop.set()
        self._wakeup.set()

    def lines(self) -> Generator[str, None, None]:
        """Yield lines (without terminators) until stopped.

        The generator can only be consumed once.
        """
        if self._started:
            raise RuntimeError("LogTail.lines() can only be consumed once")
        self._started = True

        self._open_file()
        observer = self._start_observer()
        # Bytes, so a multi-byte character split across writes is not mangled.
        buffer = b""
        try:
            while not self._stop.is_set():
                self._wakeup.clear()
                chunk = self._read_chunk()
                if chunk:
                    # buffer only ever holds the trailing partial line.
                    lines = (buffer + chunk).split(b"\n")
                    buffer = lines.pop()
                    for line in lines:
                        if self._stop.is_set():
                            return
                        yield line.rstrip(b"\r").decode("utf-8", errors="replace")
                    continue

                if self._check_replaced():
                    buffer = b""
                    continue
                if self._check_truncated():
                    buffer = b""
                    continue

                self._wakeup.wait(self._poll_interval)
        finally:
            if observer is not None:
                observer.stop()
                observer.join(timeout=5)
            self._close_file()

    def _open_file(self):
        try:
            self._file = open(self._path, "rb")
            self._inode = os.fstat(self._file.fileno()).st_ino
        except OSError as e:
            raise TailSourceError(f"Cannot open log file {self._path}: {e}") from e
        logger.debug("Opened %s (inode=%d)", self._path, self._inode)

    def _close_file(self):
        if self._file:
            self._file.close()
            self._file = None

    def _start_observer(self):
        handler = _GrowthHandler(self._path, self._wakeup)
        observer = Observer()
        try:
            observer.schedule(handler, os.path.dirname(self._path), recursive=False)
            observer.start()
        except OSError as e:
            # Polling alone still follows the file.
            logger.warning("File watcher unavailable for %s, polling only: %s", self._path, e)
            return None
        return observer

    def _read_chunk(self) -> bytes:
        try:
            return self._file.read(READ_CHUNK_SIZE)
        except OSError as e:
            raise TailSourceError(f"Failed to read log file {self._path}: {e}") from e

    def _stat(self) -> os.stat_result:
        try:
            return os.stat(self._path)
        except FileNotFoundError as e:
            raise TailSourceError(f"Log file disappeared: {self._path}") from e
        except OSError as e:
            raise TailSourceError(f"Cannot stat log file {self._path}: {e}") from e

    def _check_replaced(self) -> bool:
        """Detect a new file at the same path by comparing inodes."""
        if self._stat().st_ino == self._inode:
            return False
        logger.info("Log file replaced, reopening: %s", self._path)
        self._close_file()
        self._open_file()
        return True

    def _check_truncated(self) -> bool:
        """Rewind to the start when the file got shorter than our read position."""
        try:
            position = self._file.tell()
        except OSError as e:
            raise TailSourceError(f"Failed to read log file {self._path}: {e}") from e
        if position > self._stat().st_size:
            logger.warning("Log file truncated, reading from start: %s", self._path)
            self._file.seek(0)
            return True
        return False
