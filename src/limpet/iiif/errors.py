"""
Errors raised while decoding IIIF documents or parsing Image API addresses.

All of them derive from ``IIIFError`` (itself a ``ValueError``), so callers
that only care about "this document is unusable" can catch one type.
"""

from __future__ import annotations

from typing import Any


class IIIFError(ValueError):
    """Base class for every failure produced by ``limpet.iiif``."""


class UnknownVersionError(IIIFError):
    """The ``@context`` matched none of the known IIIF context URIs."""

    def __init__(self, context: Any):
        self.context = context
        super().__init__(f"Unknown IIIF version for @context: {context!r}")


class UnknownResourceTypeError(IIIFError):
    """The type discriminator is not a resource kind this dialect knows."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Unknown resource type: {value!r}")


class FieldDecodeError(IIIFError):
    """
    A required field is missing or has a shape no decoder accepts.

    Attributes:
        path: Dotted JSON path to the field (e.g. "items.0.items.0.body")
        cause: Human-readable description of the underlying problem
    """

    def __init__(self, path: str, cause: str):
        self.path = path
        self.cause = cause
        super().__init__(f"{path or '<root>'}: {cause}")


class DecodeDepthError(FieldDecodeError):
    """Nested collections or ranges exceed the configured recursion cap."""

    def __init__(self, path: str, limit: int):
        self.limit = limit
        super().__init__(path, f"nesting deeper than {limit} levels")


class NoValidServiceIdError(IIIFError):
    """An image body lists no image service to address it through."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path or '<root>'}: no valid image service id")


class UriParseError(IIIFError):
    """An Image API address matches none of the grammar alternatives."""

    def __init__(self, uri: str, reason: str):
        self.uri = uri
        self.reason = reason
        super().__init__(f"Cannot parse IIIF Image API address {uri!r}: {reason}")
