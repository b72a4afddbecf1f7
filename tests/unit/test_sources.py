import io
from pathlib import Path
from unittest.mock import patch

import pytest

from multiio import exceptions, sources
from multiio.reader import new_multi_reader
from multiio.sources import BytesReaderAt, FileReaderAt, SlicedReaderAt


def test_bytes_reader_at():
    r = BytesReaderAt(b"helloworld")
    assert r.size() == 10
    assert r.read_at(5, 0) == b"hello"
    assert r.read_at(100, 5) == b"world"
    assert r.read_at(3, 10) == b""
    assert r.read_at(3, 11) == b""
    with pytest.raises(exceptions.MultiIOOutOfRangeError):
        r.read_at(3, -1)


def test_bytes_reader_at_holds_reference():
    data = bytearray(b"hello")
    r = BytesReaderAt(data)
    data[0:1] = b"j"
    data.extend(b"!")
    assert r.size() == 6
    assert r.read_at(6, 0) == b"jello!"


def test_file_reader_at(tmp_path: Path):
    path = tmp_path.joinpath("hello.bin")
    path.write_bytes(b"helloworld")

    with FileReaderAt.open(path) as r:
        assert r.name == str(path)
        assert r.size() == 10
        assert r.read_at(5, 5) == b"world"
        assert r.read_at(10, 7) == b"rld"
        assert r.read_at(10, 10) == b""

        with path.open("ab") as fp:
            fp.write(b"foo")
        assert r.size() == 13
        assert r.read_at(10, 7) == b"rldfoo"


def test_file_reader_at_without_fileno():
    fp = io.BytesIO(b"helloworld")
    fp.seek(3)
    r = FileReaderAt(fp)
    assert r.size() == 10
    assert r.read_at(4, 2) == b"llow"
    assert r.read_at(4, 8) == b"ld"
    r.close()
    assert not fp.closed


def test_file_reader_at_not_found(tmp_path: Path):
    with pytest.raises(exceptions.MultiIOFileNotFoundError):
        FileReaderAt.open(tmp_path.joinpath("missing.bin"))


def test_compose_files(tmp_path: Path):
    chunks = [b"hello", b"", b"world", b"foo"]
    readers = []
    for idx, chunk in enumerate(chunks):
        path = tmp_path.joinpath(f"{idx}.bin")
        path.write_bytes(chunk)
        readers.append(FileReaderAt.open(path))

    rdr = new_multi_reader(*readers)
    assert rdr is not None
    assert rdr.size() == 13
    assert rdr.read_at(6, 3) == b"loworl"
    assert rdr.read() == b"helloworldfoo"

    sources.close_sources(readers)


def test_sliced_reader_at():
    source = BytesReaderAt(b"helloworldfoo")
    s = SlicedReaderAt(source, 5, 5)
    assert s.size() == 5
    assert s.read_at(100, 0) == b"world"
    assert s.read_at(2, 3) == b"ld"
    assert s.read_at(2, 5) == b""

    # clipped to the live size of the source
    clipped = SlicedReaderAt(source, 10, 100)
    assert clipped.size() == 3
    assert clipped.read_at(100, 0) == b"foo"

    beyond = SlicedReaderAt(source, 100, 5)
    assert beyond.size() == 0
    assert beyond.read_at(5, 0) == b""


def test_sliced_reader_at_invalid():
    source = BytesReaderAt(b"hello")
    with pytest.raises(exceptions.MultiIOOutOfRangeError):
        SlicedReaderAt(source, -1, 5)
    with pytest.raises(exceptions.MultiIOOutOfRangeError):
        SlicedReaderAt(source, 0, -1)


def test_compose_slices():
    data = BytesReaderAt(b"0123456789")
    rdr = new_multi_reader(
        SlicedReaderAt(data, 8, 2),
        SlicedReaderAt(data, 0, 3),
        SlicedReaderAt(data, 5, 0),
        SlicedReaderAt(data, 4, 2),
    )
    assert rdr is not None
    assert rdr.read() == b"8901245"


def test_open_source(tmp_path: Path):
    path = tmp_path.joinpath("hello.bin")
    path.write_bytes(b"hello")

    r = sources.open_source(path)
    assert isinstance(r, FileReaderAt)
    assert r.size() == 5
    r.close()

    with patch.object(sources.http, "HTTPReaderAt") as mock_reader:
        r = sources.open_source("https://example.com/hello.bin")
        mock_reader.assert_called_once_with("https://example.com/hello.bin")
        assert r is mock_reader.return_value


def test_open_sources_closes_on_failure(tmp_path: Path):
    path = tmp_path.joinpath("hello.bin")
    path.write_bytes(b"hello")

    with patch.object(sources, "close_sources") as mock_close:
        with pytest.raises(exceptions.MultiIOFileNotFoundError):
            sources.open_sources([path, tmp_path.joinpath("missing.bin")])
        (opened,), _ = mock_close.call_args
        assert len(opened) == 1
        assert isinstance(opened[0], FileReaderAt)
        opened[0].close()
