from __future__ import annotations

import logging
import sys
import typing as T

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

import requests

from . import constants, exceptions
from .reader import read_at


LOG = logging.getLogger(__name__)


class Session(requests.Session):
    disable_logging_request: bool = constants.DISABLE_HTTP_LOGGING
    disable_logging_response: bool = constants.DISABLE_HTTP_LOGGING

    @override
    def request(self, method: str | bytes, url: str | bytes, *args, **kwargs):
        self._log_debug_request(method, url, **kwargs)
        resp = super().request(method, url, *args, **kwargs)
        self._log_debug_response(resp)
        return resp

    def _log_debug_request(self, method: str | bytes, url: str | bytes, **kwargs):
        if self.disable_logging_request:
            return

        if not LOG.isEnabledFor(logging.DEBUG):
            return

        if isinstance(method, str) and isinstance(url, str):
            msg = f"HTTP {method} {url}"
        else:
            msg = f"HTTP {method!r} {url!r}"

        headers = kwargs.get("headers")
        if headers is not None:
            msg += f" HEADERS={_sanitize(headers)}"

        timeout = kwargs.get("timeout")
        if timeout is not None:
            msg += f" TIMEOUT={timeout}"

        LOG.debug(msg.replace("\n", "\\n"))

    def _log_debug_response(self, resp: requests.Response):
        if self.disable_logging_response:
            return

        if not LOG.isEnabledFor(logging.DEBUG):
            return

        # Range bodies are binary, log their length only
        LOG.debug(
            "HTTP %s %s: %d bytes, Content-Range=%s",
            resp.status_code,
            resp.reason,
            len(resp.content),
            resp.headers.get("Content-Range"),
        )


def readable_http_error(ex: requests.HTTPError) -> str:
    resp = ex.response
    if resp is None:
        return str(ex)
    method = resp.request.method if resp.request is not None else "HTTP"
    return f"{method} {resp.url} => {resp.status_code} {resp.reason}: {_truncate(resp.content)!r}"


def _truncate(s: bytes, limit: int = 256) -> bytes:
    if limit < len(s):
        remaining = len(s) - limit
        return s[:limit] + f"...({remaining} bytes truncated)".encode("utf-8")
    return s


def _sanitize(headers: T.Mapping[T.Any, T.Any]) -> T.Mapping[T.Any, T.Any]:
    new_headers = {}

    for k, v in headers.items():
        if str(k).lower() in ["authorization", "cookie", "x-amz-security-token"]:
            new_headers[k] = "[REDACTED]"
        else:
            new_headers[k] = v

    return new_headers


class HTTPReaderAt:
    """
    Reads byte ranges of a remote object with HTTP Range requests.

    The size is taken once from the Content-Length of a HEAD request, so the
    remote object is expected to stay unchanged while it is being read.
    """

    url: str
    _session: requests.Session
    _owns_session: bool
    _size: int
    _timeout: float

    def __init__(
        self,
        url: str,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.url = url
        self._owns_session = session is None
        self._session = session if session is not None else Session()
        self._timeout = constants.HTTP_TIMEOUT if timeout is None else timeout
        self._size = self._fetch_size()

    def _fetch_size(self) -> int:
        resp = self._session.head(
            self.url, allow_redirects=True, timeout=self._timeout
        )
        resp.raise_for_status()

        content_length = resp.headers.get("Content-Length")
        if content_length is None:
            raise exceptions.MultiIOSourceError(
                f"Unable to determine the size of {self.url}: no Content-Length"
            )
        try:
            size = int(content_length)
        except ValueError as ex:
            raise exceptions.MultiIOSourceError(
                f"Invalid Content-Length {content_length!r} for {self.url}"
            ) from ex
        if size < 0:
            raise exceptions.MultiIOSourceError(
                f"Invalid Content-Length {content_length!r} for {self.url}"
            )
        return size

    def size(self) -> int:
        return self._size

    def _fetch_range(self, start: int, end: int) -> bytes:
        """Fetch the inclusive byte range [start, end]"""
        resp = self._session.get(
            self.url,
            headers={"Range": f"bytes={start}-{end}"},
            timeout=self._timeout,
        )
        resp.raise_for_status()

        if resp.status_code == 206:
            return resp.content

        if resp.status_code == 200:
            # Server ignored the Range header and sent the whole object
            LOG.debug("Range not supported by %s, slicing full response", self.url)
            return resp.content[start : end + 1]

        raise exceptions.MultiIOSourceError(
            f"Unexpected status {resp.status_code} for range {start}-{end} of {self.url}"
        )

    def readinto_at(self, b, offset: int) -> int:
        if offset < 0:
            raise exceptions.MultiIOOutOfRangeError(f"Negative read offset {offset}")

        view = memoryview(b).cast("B")
        wanted = min(len(view), self._size - offset)
        total = 0

        while total < wanted:
            start = offset + total
            data = self._fetch_range(start, offset + wanted - 1)
            if not data:
                break
            data = data[: wanted - total]
            view[total : total + len(data)] = data
            total += len(data)

        return total

    def read_at(self, size: int, offset: int) -> bytes:
        return read_at(self, size, offset)

    def close(self) -> None:
        if self._owns_session:
            self._session.close()
