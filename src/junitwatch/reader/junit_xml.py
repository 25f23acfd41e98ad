"""Background reader for a JUnit XML report that is still being written.

The reader tails the report file on its own thread, feeds whatever bytes
are available to JUnitXMLStreamParser and puts the resulting events on a
queue. Running out of data is never an error while the writer may still
be running; only stop() makes the end of the data final.
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from junitwatch.core.logging import get_logger
from junitwatch.core.models import TestSuiteResult
from junitwatch.reader.errors import (
    MalformedResultError,
    ReaderConfigurationError,
    ResultStreamIOError,
)
from junitwatch.reader.events import (
    ReaderEvent,
    StreamClosed,
    StreamFailed,
    StreamFailureKind,
)
from junitwatch.reader.parser import JUnitXMLStreamParser

LOGGER = get_logger(__name__)


@dataclass
class ReaderSettings:
    """Tuning knobs for JUnitXMLReader."""

    poll_interval: float = 0.05  # Seconds to wait before retrying a read
    chunk_size: int = 8192  # Bytes per read
    max_io_retries: int = 3  # I/O retries allowed once stop() was requested


class JUnitXMLReader:
    """Tails a JUnit XML file and emits result events in document order.

    Usage:
        reader = JUnitXMLReader(path)
        reader.start()
        ...                       # consume reader.events
        reader.stop()             # the writer has finished
        reader.join()
    """

    def __init__(
        self,
        path: Path,
        events: "Optional[queue.Queue[ReaderEvent]]" = None,
        settings: Optional[ReaderSettings] = None,
    ) -> None:
        """Initialize JUnitXMLReader.

        Args:
            path: Report file; it does not need to exist yet.
            events: Queue receiving events (a new one is created if omitted).
            settings: Polling and retry settings.
        """
        self._path = Path(path)
        self._events: "queue.Queue[ReaderEvent]" = events if events is not None else queue.Queue()
        self._settings = settings or ReaderSettings()
        self._stop_requested = threading.Event()
        self._stop_lock = threading.Lock()
        self._stop_offset: Optional[int] = None
        self._thread: Optional[threading.Thread] = None
        self._parser: Optional[JUnitXMLStreamParser] = None
        self._handle: Optional[BinaryIO] = None
        self._offset = 0
        self._io_failures = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def events(self) -> "queue.Queue[ReaderEvent]":
        return self._events

    @property
    def result(self) -> Optional[TestSuiteResult]:
        """Root suite parsed so far, or None."""
        if self._parser is None:
            return None
        return self._parser.result

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested.is_set()

    def start(self) -> None:
        """Start reading on a background thread."""
        if self._thread is not None:
            raise RuntimeError("JUnitXMLReader can only be started once")
        self._thread = threading.Thread(
            target=self._run,
            name=f"junit-xml-reader[{self._path.name}]",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal that the writer has finished. Safe to call repeatedly.

        Data written to the file after this call is not read.
        """
        with self._stop_lock:
            if self._stop_requested.is_set():
                return
            try:
                self._stop_offset = self._path.stat().st_size
            except FileNotFoundError:
                self._stop_offset = 0
            except OSError as e:
                LOGGER.warning(f"Could not determine size of {self._path}: {e}")
                self._stop_offset = None
            self._stop_requested.set()
        LOGGER.debug(f"Stop requested for {self._path} at offset {self._stop_offset}")

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the background thread to finish.

        Args:
            timeout: Seconds to wait, or None to wait until it finishes.

        Returns:
            True if the thread has finished (or was never started).
        """
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def read(self) -> None:
        """Read the report until it closes or stop() makes its end final.

        Blocks the calling thread. Events are put on the queue.

        Raises:
            ReaderConfigurationError: If no XML parser is available.
            MalformedResultError: If the report is not well formed once the
                writer has finished, or never appeared at all.
            ResultStreamIOError: If reading keeps failing after stop().
        """
        self._parser = JUnitXMLStreamParser(self._events.put)
        if not self._open_stream():
            raise MalformedResultError(f"No result document was written to {self._path}")
        try:
            while not self._parser.is_complete:
                # Sample the flag before reading so that an empty read can
                # only be final if stop() happened before it.
                stopping = self._stop_requested.is_set()
                chunk = self._read_chunk(stopping)
                if chunk:
                    self._parser.feed(chunk)
                    continue
                if stopping:
                    self._parser.close()
                    return
                self._stop_requested.wait(self._settings.poll_interval)
        finally:
            self._close_stream()

    def _run(self) -> None:
        try:
            self.read()
        except ReaderConfigurationError as e:
            self._fail(StreamFailureKind.CONFIGURATION, str(e))
        except MalformedResultError as e:
            self._fail(StreamFailureKind.MALFORMED, str(e))
        except ResultStreamIOError as e:
            self._fail(StreamFailureKind.IO, str(e))
        except Exception as e:
            LOGGER.exception(f"Unexpected error while reading {self._path}")
            self._fail(StreamFailureKind.UNEXPECTED, str(e))
        finally:
            self._events.put(StreamClosed())

    def _fail(self, kind: StreamFailureKind, message: str) -> None:
        LOGGER.debug(f"Reader for {self._path} failed ({kind.value}): {message}")
        self._events.put(StreamFailed(kind=kind, message=message))

    def _open_stream(self) -> bool:
        """Wait until the report exists and open it.

        Returns:
            False if stop() was requested before the file appeared.
        """
        while True:
            stopping = self._stop_requested.is_set()
            try:
                self._handle = open(self._path, "rb")
                return True
            except FileNotFoundError:
                if stopping:
                    return False
            except OSError as e:
                self._on_io_error(e, stopping)
            self._stop_requested.wait(self._settings.poll_interval)

    def _close_stream(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def _read_chunk(self, stopping: bool) -> bytes:
        try:
            # Holding the stop lock orders every read against the stop()
            # snapshot: bytes past the stop offset are never read.
            with self._stop_lock:
                size = self._settings.chunk_size
                if self._stop_offset is not None:
                    size = min(size, self._stop_offset - self._offset)
                    if size <= 0:
                        return b""
                if self._handle is None:
                    self._reopen()
                assert self._handle is not None
                chunk = self._handle.read(size)
        except OSError as e:
            self._on_io_error(e, stopping)
            self._close_stream()
            if not stopping:
                self._stop_requested.wait(self._settings.poll_interval)
            return self._read_chunk(stopping) if stopping else b""
        self._io_failures = 0
        self._offset += len(chunk)
        return chunk

    def _reopen(self) -> None:
        handle = open(self._path, "rb")
        handle.seek(self._offset)
        self._handle = handle

    def _on_io_error(self, error: OSError, stopping: bool) -> None:
        self._io_failures += 1
        LOGGER.warning(f"Error reading {self._path} (attempt {self._io_failures}): {error}")
        if stopping and self._io_failures > self._settings.max_io_retries:
            raise ResultStreamIOError(
                f"Giving up on {self._path} after {self._io_failures} failed reads: {error}"
            ) from error
