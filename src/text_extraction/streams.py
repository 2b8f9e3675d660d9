"""Stream sources: turn a file path, a byte buffer or a URI into a readable stream.

Every source works in two phases. prepare() only touches metadata (source
markers, name hints, content-type resolution); open() then produces the stream.
The extractor runs prepare() before open() and closes what open() returned.
"""

import io
import logging
import os
from abc import ABC, abstractmethod
from typing import BinaryIO, Callable, Iterator, Optional, Union
from urllib.parse import ParseResult, unquote, urlparse, urlunsplit
from urllib.request import url2pathname

import httpx

from .content_type import Detector, resolve_content_type
from .exceptions import SourceError
from .metadata import (
    CONTENT_LENGTH,
    CONTENT_TYPE_HINT,
    FILE_PATH,
    OCTET_STREAM,
    RESOURCE_NAME,
    URI,
    Metadata,
)

logger = logging.getLogger(__name__)

UriLike = Union[str, httpx.URL, ParseResult]


def _uri_string(uri: UriLike) -> str:
    """String form of a URI as the caller wrote it."""
    if isinstance(uri, ParseResult):
        return uri.geturl()
    if isinstance(uri, httpx.URL):
        # str(httpx.URL) drops the empty authority of file:/// URIs
        path = uri.raw_path.decode("ascii").split("?", 1)[0]
        return urlunsplit((uri.scheme, uri.netloc.decode("ascii"), path, uri.query.decode("ascii"), uri.fragment))
    return str(uri)


class StreamSource(ABC):
    """Two-phase stream acquisition."""

    def prepare(self, metadata: Metadata, detector: Detector) -> None:
        """Seed metadata before the stream exists. Default: nothing to do."""
        pass

    @abstractmethod
    def open(self, metadata: Metadata) -> BinaryIO:
        """Return a new readable binary stream. The caller closes it."""
        ...

    @abstractmethod
    def describe(self) -> str:
        """Short human-readable name of the source for messages and logs."""
        ...


class FileStreamSource(StreamSource):
    """A local file. Missing or unreadable files fail in open() with OSError."""

    def __init__(self, path: Union[str, os.PathLike]):
        self.path = os.fspath(path)

    def prepare(self, metadata: Metadata, detector: Detector) -> None:
        metadata.set(FILE_PATH, self.path)
        metadata.set(RESOURCE_NAME, os.path.basename(self.path))

    def open(self, metadata: Metadata) -> BinaryIO:
        return open(self.path, "rb")

    def describe(self) -> str:
        return self.path


class BytesStreamSource(StreamSource):
    """An in-memory buffer with optional file-name and content-type hints."""

    def __init__(self, data: bytes, file_name: str = "", content_type: Optional[str] = OCTET_STREAM):
        self.data = bytes(data)
        self.file_name = file_name
        self.content_type = content_type

    def prepare(self, metadata: Metadata, detector: Detector) -> None:
        resolve_content_type(self.data, self.file_name, self.content_type, metadata, detector)

    def open(self, metadata: Metadata) -> BinaryIO:
        return io.BytesIO(self.data)

    def describe(self) -> str:
        return self.file_name or f"<{len(self.data)} bytes>"


class CallableStreamSource(StreamSource):
    """Adapts a plain (metadata) -> stream callable."""

    def __init__(self, factory: Callable[[Metadata], BinaryIO], name: Optional[str] = None):
        self.factory = factory
        self.name = name or getattr(factory, "__name__", "<stream>")

    def open(self, metadata: Metadata) -> BinaryIO:
        return self.factory(metadata)

    def describe(self) -> str:
        return self.name


class _ResponseStream(io.RawIOBase):
    """Raw stream over a streaming httpx response; closing releases the connection."""

    def __init__(self, response: httpx.Response, client: Optional[httpx.Client] = None):
        self._response = response
        self._client = client
        self._chunks: Iterator[bytes] = response.iter_bytes()
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def close(self) -> None:
        if not self.closed:
            try:
                self._response.close()
            finally:
                if self._client is not None:
                    self._client.close()
        super().close()


class UriStreamSource(StreamSource):
    """
    A document behind a URI: file: URIs are read locally, http(s) URIs are
    fetched with a streaming GET.

    The response Content-Type header is recorded as Content-Type-Hint for
    detection; it never overrides sniffing. HTTP error statuses raise
    httpx.HTTPStatusError from open().
    """

    def __init__(
        self,
        uri: UriLike,
        timeout: float = 30.0,
        follow_redirects: bool = True,
        client: Optional[httpx.Client] = None,
    ):
        self.uri = _uri_string(uri)
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self._client = client

    def prepare(self, metadata: Metadata, detector: Detector) -> None:
        metadata.set(URI, self.uri)
        name = os.path.basename(unquote(urlparse(self.uri).path))
        if name:
            metadata.set(RESOURCE_NAME, name)

    def open(self, metadata: Metadata) -> BinaryIO:
        parsed = urlparse(self.uri)
        scheme = parsed.scheme.lower()
        if scheme == "file":
            if parsed.netloc not in ("", "localhost"):
                raise SourceError(self.uri, f"Remote host '{parsed.netloc}' in file URI '{self.uri}' is not supported")
            return open(url2pathname(parsed.path), "rb")
        if scheme in ("http", "https"):
            return self._open_http(metadata)
        raise SourceError(self.uri, f"Unsupported URI scheme '{parsed.scheme}' in '{self.uri}'")

    def _open_http(self, metadata: Metadata) -> BinaryIO:
        owned = self._client is None
        client = self._client or httpx.Client(timeout=self.timeout, follow_redirects=self.follow_redirects)
        try:
            request = client.build_request("GET", self.uri, timeout=self.timeout)
            response = client.send(request, stream=True, follow_redirects=self.follow_redirects)
        except Exception:
            if owned:
                client.close()
            raise
        try:
            response.raise_for_status()
        except Exception:
            response.close()
            if owned:
                client.close()
            raise
        metadata.set(CONTENT_TYPE_HINT, response.headers.get("content-type"))
        metadata.set(CONTENT_LENGTH, response.headers.get("content-length"))
        logger.debug("GET %s -> %s", self.uri, response.status_code)
        return io.BufferedReader(_ResponseStream(response, client if owned else None))

    def describe(self) -> str:
        return self.uri
