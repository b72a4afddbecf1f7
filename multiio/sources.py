from __future__ import annotations

import io
import logging
import os
import threading
import typing as T
from pathlib import Path

from . import exceptions, http
from .reader import read_at, SizedReaderAt

LOG = logging.getLogger(__name__)


def _check_offset(offset: int) -> None:
    if offset < 0:
        raise exceptions.MultiIOOutOfRangeError(f"Negative read offset {offset}")


class BytesReaderAt:
    """
    Reads from an in-memory bytes-like object, held by reference.
    """

    __slots__ = ("_data",)

    def __init__(self, data) -> None:
        self._data = data

    def size(self) -> int:
        with memoryview(self._data) as m:
            return m.nbytes

    def readinto_at(self, b, offset: int) -> int:
        _check_offset(offset)
        view = memoryview(b).cast("B")
        with memoryview(self._data) as m, m.cast("B") as src:
            n = max(0, min(len(view), len(src) - offset))
            view[:n] = src[offset : offset + n]
        return n

    def read_at(self, size: int, offset: int) -> bytes:
        return read_at(self, size, offset)


class FileReaderAt:
    """
    Reads from a seekable binary file.

    Uses os.pread when the file has a descriptor, so positional reads never
    move the file position. Otherwise seeks and reads under a lock.
    """

    _fp: T.BinaryIO
    _fd: int | None
    _lock: threading.Lock
    # close the file on close() only if we opened it
    _owns_fp: bool

    def __init__(self, fp: T.BinaryIO, owns_fp: bool = False) -> None:
        assert fp.readable(), "source file must be readable"
        assert fp.seekable(), "source file must be seekable"
        self._fp = fp
        self._owns_fp = owns_fp
        self._lock = threading.Lock()
        self._fd = None
        if hasattr(os, "pread"):
            try:
                self._fd = fp.fileno()
            except (io.UnsupportedOperation, AttributeError, OSError):
                self._fd = None

    @classmethod
    def open(cls, path: str | Path) -> "FileReaderAt":
        try:
            fp = open(path, "rb")
        except FileNotFoundError as ex:
            raise exceptions.MultiIOFileNotFoundError(
                f"Source file not found: {path}"
            ) from ex
        return cls(fp, owns_fp=True)

    @property
    def name(self) -> str | None:
        name = getattr(self._fp, "name", None)
        return name if isinstance(name, str) else None

    def size(self) -> int:
        if self._fd is not None:
            return os.fstat(self._fd).st_size
        with self._lock:
            current = self._fp.tell()
            end = self._fp.seek(0, io.SEEK_END)
            self._fp.seek(current, io.SEEK_SET)
        return end

    def readinto_at(self, b, offset: int) -> int:
        _check_offset(offset)
        view = memoryview(b).cast("B")
        total = 0

        if self._fd is not None:
            while total < len(view):
                data = os.pread(self._fd, len(view) - total, offset + total)
                if not data:
                    break
                view[total : total + len(data)] = data
                total += len(data)
            return total

        with self._lock:
            self._fp.seek(offset, io.SEEK_SET)
            while total < len(view):
                n = self._fp.readinto(view[total:])  # type: ignore[attr-defined]
                if not n:
                    break
                total += n
        return total

    def read_at(self, size: int, offset: int) -> bytes:
        return read_at(self, size, offset)

    def close(self) -> None:
        if self._owns_fp:
            self._fp.close()

    def __enter__(self) -> "FileReaderAt":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class SlicedReaderAt:
    """
    A window of `size` bytes starting at `offset` in another reader,
    clipped to the live size of that reader.
    """

    __slots__ = ("_source", "_begin_offset", "_size")

    _source: SizedReaderAt
    _begin_offset: int
    _size: int

    def __init__(self, source: SizedReaderAt, offset: int, size: int) -> None:
        if offset < 0:
            raise exceptions.MultiIOOutOfRangeError(f"Negative slice offset {offset}")
        if size < 0:
            raise exceptions.MultiIOOutOfRangeError(f"Negative slice size {size}")
        self._source = source
        self._begin_offset = offset
        self._size = size

    def size(self) -> int:
        return max(0, min(self._size, self._source.size() - self._begin_offset))

    def readinto_at(self, b, offset: int) -> int:
        _check_offset(offset)
        remaining = self.size() - offset
        if remaining <= 0:
            return 0
        view = memoryview(b).cast("B")
        max_read = min(len(view), remaining)
        return self._source.readinto_at(view[:max_read], self._begin_offset + offset)

    def read_at(self, size: int, offset: int) -> bytes:
        return read_at(self, size, offset)


def open_source(location: str | Path) -> SizedReaderAt:
    """Open a file path or an http(s) URL as a sized reader."""
    location_str = str(location)
    if location_str.startswith(("http://", "https://")):
        return http.HTTPReaderAt(location_str)
    LOG.debug("Opening file source %s", location_str)
    return FileReaderAt.open(location)


def open_sources(locations: T.Iterable[str | Path]) -> list[SizedReaderAt]:
    sources: list[SizedReaderAt] = []
    try:
        for location in locations:
            sources.append(open_source(location))
    except Exception:
        close_sources(sources)
        raise
    return sources


def close_sources(sources: T.Iterable[SizedReaderAt]) -> None:
    for source in sources:
        close = getattr(source, "close", None)
        if close is not None:
            close()
