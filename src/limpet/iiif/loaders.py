"""
Fetching IIIF documents.

``request_manifest``, ``request_resource`` and ``request_info`` build a
``PendingRequest``: one GET with content-negotiation headers whose JSON
body is fed to the matching decoder. The outcome (a decoded
``(Version, entity)`` pair, or the exception that stopped it) goes to the
caller's handler. Transport errors are handed over untouched.

``fetch_json`` / ``load_json`` are plain helpers for files and URLs.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
from typing import Any, Callable, Generic, Sequence, TypeVar, Union

import httpx

from .dispatch import decode_info, decode_manifest, decode_resource
from .errors import IIIFError
from .models import InfoJson, Manifest, Resource
from .version import (
    IMAGE_2_CONTEXT,
    IMAGE_3_CONTEXT,
    PRESENTATION_2_CONTEXT,
    PRESENTATION_3_CONTEXT,
    Version,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ACCEPT = (
    f'application/ld+json;profile="{PRESENTATION_3_CONTEXT}"',
    f'application/ld+json;profile="{PRESENTATION_2_CONTEXT}"',
    "application/json",
)
IMAGE_ACCEPT = (
    f'application/ld+json;profile="{IMAGE_3_CONTEXT}"',
    f'application/ld+json;profile="{IMAGE_2_CONTEXT}"',
    "application/json",
)

# What a handler receives: the decoded pair, or the error that prevented it.
Outcome = Union[tuple[Version, Any], Exception]


@dataclass(frozen=True)
class PendingRequest(Generic[T]):
    """
    A GET request that has not been sent yet.

    Attributes:
        url: Target URL
        accept: One ``Accept`` header is sent per entry, in order
        decoder: Turns the JSON body into a ``(Version, entity)`` pair
        handler: Receives the outcome; its return value is what ``send`` returns
    """

    url: str
    accept: tuple[str, ...]
    decoder: Callable[[Any], tuple[Version, Any]]
    handler: Callable[[Outcome], T]

    def headers(self) -> list[tuple[str, str]]:
        return [("Accept", value) for value in self.accept]

    def _finish(self, response: httpx.Response) -> T:
        try:
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            return self.handler(e)
        try:
            outcome: Outcome = self.decoder(data)
        except IIIFError as e:
            outcome = e
        return self.handler(outcome)

    def send(self, client: httpx.Client | None = None) -> T:
        """
        Issue the request synchronously and return what the handler returns.

        Parameters:
            client: Optional shared client; a short-lived one is used otherwise
        """
        logger.debug("GET %s", self.url, extra={"accept": list(self.accept)})
        try:
            if client is None:
                with httpx.Client(timeout=None, follow_redirects=True) as own:
                    response = own.get(self.url, headers=self.headers())
            else:
                response = client.get(self.url, headers=self.headers(), timeout=None)
        except httpx.HTTPError as e:
            return self.handler(e)
        return self._finish(response)

    async def send_async(self, client: httpx.AsyncClient | None = None) -> T:
        """Like ``send``, on an ``httpx.AsyncClient``."""
        logger.debug("GET %s", self.url, extra={"accept": list(self.accept)})
        try:
            if client is None:
                async with httpx.AsyncClient(timeout=None, follow_redirects=True) as own:
                    response = await own.get(self.url, headers=self.headers())
            else:
                response = await client.get(self.url, headers=self.headers(), timeout=None)
        except httpx.HTTPError as e:
            return self.handler(e)
        return self._finish(response)


def request_manifest(
    handler: Callable[[Outcome], T], accept: Sequence[str], url: str
) -> PendingRequest[T]:
    """
    Prepare a request for a document known to be a manifest.

    Example:
        >>> pending = request_manifest(print, DEFAULT_ACCEPT, url)
        >>> pending.send()
    """
    return PendingRequest(url, tuple(accept), decode_manifest, handler)


def request_resource(
    handler: Callable[[Outcome], T], accept: Sequence[str], url: str
) -> PendingRequest[T]:
    """Prepare a request for a manifest, collection, canvas or range."""
    return PendingRequest(url, tuple(accept), decode_resource, handler)


def request_info(
    handler: Callable[[Outcome], T], accept: Sequence[str], url: str
) -> PendingRequest[T]:
    """Prepare a request for an Image API ``info.json``."""
    return PendingRequest(url, tuple(accept), decode_info, handler)


def _raise_or_return(outcome: Outcome) -> tuple[Version, Any]:
    if isinstance(outcome, Exception):
        raise outcome
    return outcome


def fetch_json(url: str, *, timeout: float = 10.0) -> dict[str, Any]:
    """
    Fetch JSON from URL.

    Parameters:
        url: HTTP(S) URL to fetch
        timeout: Request timeout in seconds

    Returns:
        Parsed JSON as dictionary

    Raises:
        httpx.HTTPError: If request fails
        json.JSONDecodeError: If response is not valid JSON
    """
    with httpx.Client(timeout=timeout, follow_redirects=True) as client:
        resp = client.get(url, headers=[("Accept", value) for value in DEFAULT_ACCEPT])
        resp.raise_for_status()
        return resp.json()


def load_json(path_or_url: str) -> dict[str, Any]:
    """
    Load JSON from file path or URL.

    Example:
        >>> data = load_json("https://example.org/manifest.json")
        >>> data = load_json("/path/to/manifest.json")
    """
    if path_or_url.startswith("http://") or path_or_url.startswith("https://"):
        return fetch_json(path_or_url)

    p = Path(path_or_url).expanduser()
    return json.loads(p.read_text(encoding="utf-8"))


def load_manifest(path_or_url: str) -> tuple[Version, Manifest]:
    """
    Load and decode a manifest from path or URL.

    Raises:
        FileNotFoundError: If file path doesn't exist
        httpx.HTTPError: If URL fetch fails
        json.JSONDecodeError: If JSON is invalid
        IIIFError: If the document cannot be decoded
    """
    return decode_manifest(load_json(path_or_url))


def load_resource(path_or_url: str) -> tuple[Version, Resource]:
    """Load and decode any presentation resource from path or URL."""
    return decode_resource(load_json(path_or_url))


def load_info(path_or_url: str) -> tuple[Version, InfoJson]:
    """Load and decode an ``info.json`` from path or URL."""
    if path_or_url.startswith("http://") or path_or_url.startswith("https://"):
        return request_info(_raise_or_return, IMAGE_ACCEPT, path_or_url).send()
    return decode_info(load_json(path_or_url))
