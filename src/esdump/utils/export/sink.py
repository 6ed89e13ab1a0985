"""
Output sinks for exported NDJSON.

A sink accepts bytes, can be flushed, and is closed once the run is over.
Standard output, a truncated file and an in-memory buffer behave the same
way: writes after ``close()`` raise ``SinkError``, ``close()`` can be
called more than once, and I/O errors surface as ``SinkError``.
"""

import io
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Optional

from esdump.errors import SinkError


class Sink(ABC):
    """Write-only destination for encoded records"""

    def __init__(self):
        self.bytes_written = 0
        self.closed = False

    @property
    @abstractmethod
    def description(self) -> str:
        """Human readable name of the destination"""

    @abstractmethod
    def _stream(self) -> BinaryIO:
        pass

    def write(self, data: bytes) -> None:
        if self.closed:
            raise SinkError(f"Cannot write to closed sink: {self.description}")
        try:
            self._stream().write(data)
        except (OSError, ValueError) as e:
            raise SinkError(f"Failed to write to {self.description}: {e}") from e
        self.bytes_written += len(data)

    def flush(self) -> None:
        if self.closed:
            raise SinkError(f"Cannot flush closed sink: {self.description}")
        try:
            self._stream().flush()
        except (OSError, ValueError) as e:
            raise SinkError(f"Failed to flush {self.description}: {e}") from e

    def close(self) -> None:
        if self.closed:
            return
        try:
            try:
                self._stream().flush()
            finally:
                self._release()
        except (OSError, ValueError) as e:
            raise SinkError(f"Failed to close {self.description}: {e}") from e
        finally:
            self.closed = True

    def _release(self) -> None:
        """Give up the underlying stream after the final flush"""

    def __enter__(self) -> "Sink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class StdoutSink(Sink):
    """Writes to the process standard output; never closes the real stdout"""

    def __init__(self, stream: Optional[BinaryIO] = None):
        super().__init__()
        self._out = stream

    @property
    def description(self) -> str:
        return "standard output"

    def _stream(self) -> BinaryIO:
        if self._out is None:
            self._out = sys.stdout.buffer
        return self._out


class FileSink(Sink):
    """Truncates ``path`` on creation and writes the export into it"""

    def __init__(self, path: str):
        super().__init__()
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.path, "wb")
        except OSError as e:
            raise SinkError(f"Cannot open output file {self.path}: {e}") from e

    @property
    def description(self) -> str:
        return str(self.path)

    def _stream(self) -> BinaryIO:
        return self._file

    def _release(self) -> None:
        self._file.close()


class MemorySink(Sink):
    """Collects the export in memory; ``getvalue()`` works after ``close()``"""

    def __init__(self):
        super().__init__()
        self._buffer = io.BytesIO()
        self._value: Optional[bytes] = None

    @property
    def description(self) -> str:
        return "memory buffer"

    def _stream(self) -> BinaryIO:
        return self._buffer

    def _release(self) -> None:
        self._value = self._buffer.getvalue()
        self._buffer.close()

    def getvalue(self) -> bytes:
        if self._value is not None:
            return self._value
        return self._buffer.getvalue()


def open_sink(output: Optional[str]) -> Sink:
    """Standard output for ``None`` or ``-``, otherwise a file sink"""
    if output is None or output == "-":
        return StdoutSink()
    return FileSink(output)
