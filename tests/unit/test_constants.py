import importlib

import pytest

from multiio import constants


def test_parse_filesize():
    assert constants._parse_filesize("0") == 0
    assert constants._parse_filesize("100") == 100
    assert constants._parse_filesize("100B") == 100
    assert constants._parse_filesize("2k") == 2048
    assert constants._parse_filesize("1M") == 1024 * 1024
    assert constants._parse_filesize("inf") is None
    with pytest.raises(ValueError):
        constants._parse_filesize("100t")


def test_yes_or_no():
    assert constants._yes_or_no("yes")
    assert constants._yes_or_no(" TRUE ")
    assert constants._yes_or_no("1")
    assert not constants._yes_or_no("no")
    assert not constants._yes_or_no("")


def test_defaults():
    assert 0 < constants.READ_CHUNK_SIZE
    assert 0 < constants.HTTP_TIMEOUT


def test_env_prefix(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("MULTIIO_DISABLE_HTTP_LOGGING", "YES")
    monkeypatch.setenv("MULTIIO_READ_CHUNK_SIZE", "4K")
    try:
        importlib.reload(constants)
        assert constants.DISABLE_HTTP_LOGGING
        assert constants.READ_CHUNK_SIZE == 4096
    finally:
        monkeypatch.undo()
        importlib.reload(constants)
    assert not hasattr(constants, "MULTIIO_DISABLE_HTTP_LOGGING")
