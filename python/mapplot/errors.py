"""Exceptions raised by mapplot."""

from typing import Optional
from urllib.parse import urlsplit, urlunsplit


def redact_url(url: str) -> str:
    """``url`` without query string and fragment (these may carry access tokens)."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def _redact_text(text: str, url: str) -> str:
    query = urlsplit(url).query
    return text.replace(query, "<redacted>") if query else text


class MapplotError(Exception):
    """Base class for all mapplot errors."""


class TilesetLoaderError(MapplotError):
    """A map tile could not be loaded."""


class TileTransportError(TilesetLoaderError):
    """The tile request failed before a response was received.

    The message never contains the query string of the URL; ``url`` keeps the
    full request URL.
    """

    def __init__(self, url: str, cause: Exception):
        super().__init__(f"request for {redact_url(url)} failed: {_redact_text(str(cause), url)}")
        self.url = url
        self.cause = cause


class TileRequestError(TilesetLoaderError):
    """The tile server answered with a non-success status."""

    def __init__(self, status_code: int, text: str, url: Optional[str] = None):
        message = f"tile request error: {text!r} (status code: {status_code})"
        if url is not None:
            message += f" for {redact_url(url)}"
        super().__init__(message)
        self.status_code = status_code
        self.text = text
        self.url = url


class UnexpectedMimeTypeError(TilesetLoaderError):
    """The tile payload is neither PNG nor JPEG.

    Attributes:
        mime_type: The detected MIME type, or None if it could not be detected.
    """

    def __init__(self, mime_type: Optional[str]):
        super().__init__(f"unexpected MIME type: {mime_type!r}")
        self.mime_type = mime_type


class RenderError(MapplotError):
    """The composed document could not be rasterized."""
