from __future__ import annotations


class MultiIOError(Exception):
    exit_code: int = 1


class MultiIOOutOfRangeError(MultiIOError, ValueError):
    """
    Raised when a read offset or a seek target falls outside [0, size]
    """

    exit_code = 2


class MultiIOInvalidWhenceError(MultiIOError, ValueError):
    exit_code = 2


class MultiIOFileNotFoundError(MultiIOError):
    exit_code = 3


class MultiIOSourceError(MultiIOError):
    """
    Base exception for sources that can not be sized or read
    """

    exit_code = 4
