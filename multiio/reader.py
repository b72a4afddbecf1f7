from __future__ import annotations

import io
import logging
import typing as T

from . import exceptions

LOG = logging.getLogger(__name__)


@T.runtime_checkable
class SizedReaderAt(T.Protocol):
    """
    Anything that reports an exact byte length and reads an arbitrary range.

    readinto_at fills as much of the buffer as possible starting at offset and
    returns the number of bytes written. A count smaller than the buffer means
    end of data, it is never raised.
    """

    def size(self) -> int: ...

    def readinto_at(self, b, offset: int) -> int: ...


def read_at(reader: SizedReaderAt, size: int, offset: int) -> bytes:
    buf = bytearray(size)
    n = reader.readinto_at(buf, offset)
    del buf[n:]
    return bytes(buf)


class NullReader:
    """
    Zero-size source, pairs with the first reader so that one reader and
    many readers share the same two-child shape
    """

    def size(self) -> int:
        return 0

    def readinto_at(self, b, offset: int) -> int:
        return 0

    def read_at(self, size: int, offset: int) -> bytes:
        return b""


class MultiReader(io.RawIOBase):
    """
    Logical concatenation of two sized readers, either of which may be
    another MultiReader.

    It is undefined what happens if the underlying readers are mutated after
    composition. Appending to the last reader is probably fine, but still
    undefined.
    """

    _left: SizedReaderAt
    _right: SizedReaderAt
    # leaf readers in concatenation order, collected on first use
    _leaves: list[SizedReaderAt] | None
    # the cursor used by read() and seek(), never touched by readinto_at()
    _pos: int

    def __init__(self, left: SizedReaderAt, right: SizedReaderAt):
        super().__init__()
        self._left = left
        self._right = right
        self._leaves = None
        self._pos = 0

    @property
    def left(self) -> SizedReaderAt:
        return self._left

    @property
    def right(self) -> SizedReaderAt:
        return self._right

    def _iter_leaves(self) -> list[SizedReaderAt]:
        """
        Walk the tree without recursion, a left-deep fold of N readers is
        N levels deep
        """
        if self._leaves is None:
            leaves: list[SizedReaderAt] = []
            stack: list[SizedReaderAt] = [self]
            while stack:
                node = stack.pop()
                if isinstance(node, MultiReader):
                    if node._leaves is not None:
                        leaves.extend(node._leaves)
                    else:
                        stack.append(node._right)
                        stack.append(node._left)
                else:
                    leaves.append(node)
            self._leaves = leaves
        return self._leaves

    def size(self) -> int:
        return sum(leaf.size() for leaf in self._iter_leaves())

    def readinto_at(self, b, offset: int) -> int:
        leaves = self._iter_leaves()
        # sizes are live, but read once per call
        sizes = [leaf.size() for leaf in leaves]
        total_size = sum(sizes)

        if offset < 0 or total_size < offset:
            raise exceptions.MultiIOOutOfRangeError(
                f"Offset {offset} out of range [0, {total_size}]"
            )

        begin = 0
        idx = 0
        while idx < len(leaves) and begin + sizes[idx] <= offset:
            begin += sizes[idx]
            idx += 1

        view = memoryview(b).cast("B")
        rel_offset = offset - begin
        n = 0
        while idx < len(leaves):
            n += leaves[idx].readinto_at(view[n:], rel_offset)
            if n == len(view):
                break
            # short read means this leaf ran out of data at its boundary
            rel_offset = 0
            idx += 1

        return n

    def read_at(self, size: int, offset: int) -> bytes:
        return read_at(self, size, offset)

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def writable(self) -> bool:
        return False

    def readinto(self, b) -> int:
        self._checkClosed()
        n = self.readinto_at(b, self._pos)
        self._pos += n
        return n

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._checkClosed()
        total_size = self.size()

        if total_size < offset:
            raise exceptions.MultiIOOutOfRangeError(
                f"Seek offset {offset} exceeds size {total_size}"
            )

        if whence == io.SEEK_SET:
            if offset < 0:
                raise exceptions.MultiIOOutOfRangeError(
                    f"Negative seek position {offset}"
                )
            new_pos = offset
        elif whence == io.SEEK_CUR:
            new_pos = self._pos + offset
            if new_pos < 0 or total_size < new_pos:
                raise exceptions.MultiIOOutOfRangeError(
                    f"Seek position {new_pos} out of range [0, {total_size}]"
                )
        elif whence == io.SEEK_END:
            new_pos = total_size + offset
            if 0 < offset or new_pos < 0:
                raise exceptions.MultiIOOutOfRangeError(
                    f"Seek position {new_pos} out of range [0, {total_size}]"
                )
        else:
            raise exceptions.MultiIOInvalidWhenceError(f"Invalid whence {whence!r}")

        self._pos = new_pos
        return self._pos

    def tell(self) -> int:
        return self._pos


def new_multi_reader(*readers: SizedReaderAt) -> MultiReader | None:
    """
    Create a reader that is the logical concatenation of the given readers.

    Readers are folded from left to right, so the result is a left-deep chain
    where the first reader is the leftmost leaf and the last reader is the
    rightmost one. Returns None when no readers are given.
    """
    if not readers:
        return None

    rdr = MultiReader(readers[0], NullReader())
    for r in readers[1:]:
        rdr = MultiReader(rdr, r)

    LOG.debug("Composed %d readers", len(readers))

    return rdr
