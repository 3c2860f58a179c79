"""Opening byte streams for URL locators."""

from __future__ import annotations

import urllib.request
from collections.abc import Mapping
from typing import BinaryIO
from urllib.parse import unquote, urlsplit

import requests

DEFAULT_HEADERS: Mapping[str, str] = {
    "User-Agent": "docdigest/0.1",
    "Accept": "*/*",
}

URL_SCHEMES = frozenset({"file", "http", "https", "ftp", "data"})


def is_url(value: str) -> bool:
    """Return True when `value` carries one of the supported URL schemes."""
    return urlsplit(value).scheme.lower() in URL_SCHEMES


def name_from_url(url: str) -> str:
    """Return the file part of `url` (path plus query) used to name inputs."""
    parts = urlsplit(url)
    if parts.scheme.lower() == "data":
        return url
    if parts.query:
        return f"{unquote(parts.path)}?{parts.query}"
    return unquote(parts.path)


def open_url(
    url: str,
    *,
    timeout_seconds: float | None = None,
    headers: Mapping[str, str] | None = None,
) -> BinaryIO:
    """Open `url` for binary reading.

    ``file`` URLs are opened directly from disk, ``http``/``https`` go through
    requests with a streamed body, anything else is handed to urllib. Failures
    surface as `OSError` (including `requests.RequestException`, which derives
    from it).
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()

    if scheme == "file":
        if parts.netloc not in ("", "localhost"):
            raise FileNotFoundError(f"Remote file URLs are not supported: {url}")
        return open(urllib.request.url2pathname(parts.path), "rb")

    if scheme in ("http", "https"):
        merged_headers = dict(DEFAULT_HEADERS)
        if headers:
            merged_headers.update(headers)

        response = requests.get(url, stream=True, timeout=timeout_seconds, headers=merged_headers)
        if response.status_code == 404:
            response.close()
            raise FileNotFoundError(f"Source not found at {url}")
        try:
            response.raise_for_status()
        except requests.HTTPError:
            response.close()
            raise
        response.raw.decode_content = True
        return response.raw

    return urllib.request.urlopen(url, timeout=timeout_seconds)


def check_url(
    url: str,
    *,
    timeout_seconds: float | None = None,
    headers: Mapping[str, str] | None = None,
) -> None:
    """Check that `url` can currently be opened; the stream is closed immediately."""
    with open_url(url, timeout_seconds=timeout_seconds, headers=headers):
        pass


__all__ = ["DEFAULT_HEADERS", "URL_SCHEMES", "is_url", "name_from_url", "open_url", "check_url"]
