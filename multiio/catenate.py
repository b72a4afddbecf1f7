from __future__ import annotations

import io
import logging
import sys
import typing as T
from pathlib import Path

from tqdm import tqdm

from . import constants
from .reader import MultiReader, new_multi_reader, SizedReaderAt
from .sources import close_sources, open_sources


LOG = logging.getLogger(__name__)


def iter_layout(
    sources: T.Sequence[SizedReaderAt],
) -> T.Generator[tuple[int, int], None, None]:
    """Yield (begin_offset, size) of each source within the concatenation"""
    begin = 0
    for source in sources:
        size = source.size()
        yield begin, size
        begin += size


def show_sizes(
    sources: T.Sequence[str | Path], output: T.TextIO | None = None
) -> int:
    if output is None:
        output = sys.stdout

    readers = open_sources(sources)
    try:
        total = 0
        for location, (begin, size) in zip(sources, iter_layout(readers)):
            output.write(f"{begin}\t{size}\t{location}\n")
            total += size
        output.write(f"{total}\ttotal\n")
    finally:
        close_sources(readers)

    return total


def copy_range(
    reader: MultiReader,
    fp: T.BinaryIO,
    offset: int = 0,
    length: int | None = None,
    chunk_size: int | None = None,
    progress: bool = False,
) -> int:
    """
    Copy `length` bytes (or everything up to the end) starting at `offset`
    from the composed reader to fp. Returns the number of bytes copied.
    """
    if chunk_size is None:
        chunk_size = constants.READ_CHUNK_SIZE

    reader.seek(offset, io.SEEK_SET)
    remaining = reader.size() - offset
    if length is not None:
        remaining = min(remaining, length)

    copied = 0
    with tqdm(
        total=remaining,
        unit="B",
        unit_scale=True,
        unit_divisor=1024,
        disable=not progress or constants.PROGRESS_DISABLED,
    ) as pbar:
        while copied < remaining:
            data = reader.read(min(chunk_size, remaining - copied))
            if not data:
                break
            fp.write(data)
            copied += len(data)
            pbar.update(len(data))

    if copied < remaining:
        LOG.warning(
            "Sources ended early: copied %d of %d bytes", copied, remaining
        )

    return copied


def cat(
    sources: T.Sequence[str | Path],
    output: Path | None = None,
    offset: int = 0,
    length: int | None = None,
) -> int:
    readers = open_sources(sources)
    try:
        reader = new_multi_reader(*readers)
        if reader is None:
            LOG.info("No sources to read")
            return 0

        if output is None or str(output) == "-":
            copied = copy_range(reader, sys.stdout.buffer, offset, length)
            sys.stdout.buffer.flush()
        else:
            with open(output, "wb") as fp:
                copied = copy_range(reader, fp, offset, length, progress=True)
            LOG.info("Wrote %d bytes to %s", copied, output)
    finally:
        close_sources(readers)

    return copied
