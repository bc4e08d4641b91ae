"""
Pick the decoder for a document by looking at its ``@context``.

``decode_manifest`` is for callers that know they fetched a manifest;
``decode_resource`` also reads the type discriminator and handles
manifests, collections, canvases and ranges. ``decode_info`` handles Image
API ``info.json`` documents.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from . import v2, v3
from .decoding import DEFAULT_MAX_DEPTH
from .errors import FieldDecodeError, UnknownResourceTypeError, UnknownVersionError
from .models import InfoJson, Manifest, Resource
from .version import (
    IMAGE_2_CONTEXT,
    IMAGE_3_CONTEXT,
    PRESENTATION_2_CONTEXT,
    PRESENTATION_3_CONTEXT,
    Version,
    detect_version,
)


logger = logging.getLogger(__name__)

TYPE_FIELD = {Version.V2: "@type", Version.V3: "type"}

RESOURCE_DECODERS: dict[Version, dict[str, Callable[..., Resource]]] = {
    Version.V2: {
        v2.decode.MANIFEST_TYPE: v2.decode_manifest,
        v2.decode.COLLECTION_TYPE: v2.decode_collection,
        v2.decode.CANVAS_TYPE: v2.decode_canvas,
        v2.decode.RANGE_TYPE: v2.decode_range,
    },
    Version.V3: {
        v3.decode.MANIFEST_TYPE: v3.decode_manifest,
        v3.decode.COLLECTION_TYPE: v3.decode_collection,
        v3.decode.CANVAS_TYPE: v3.decode_canvas,
        v3.decode.RANGE_TYPE: v3.decode_range,
    },
}

# Decoders that accept the recursion cap.
_NESTING = {
    v2.decode_manifest,
    v2.decode_collection,
    v2.decode_range,
    v3.decode_manifest,
    v3.decode_collection,
    v3.decode_range,
}


def _require_object(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise FieldDecodeError("", "expected a JSON object")
    return data


def presentation_version(data: Any) -> Version:
    """
    Dialect of a Presentation API document.

    Raises:
        UnknownVersionError: If neither presentation context is present
    """
    context = _require_object(data).get("@context")
    version = detect_version(context, v3=PRESENTATION_3_CONTEXT, v2=PRESENTATION_2_CONTEXT)
    if version is None:
        raise UnknownVersionError(context)
    logger.debug("Detected presentation version %s", version.value)
    return version


def image_version(data: Any) -> Version:
    """
    Dialect of an Image API ``info.json``.

    Non-string entries in a context array are ignored.
    """
    context = _require_object(data).get("@context")
    version = detect_version(context, v3=IMAGE_3_CONTEXT, v2=IMAGE_2_CONTEXT, lenient=True)
    if version is None:
        raise UnknownVersionError(context)
    logger.debug("Detected image API version %s", version.value)
    return version


def resource_type(data: Any, version: Version) -> Any:
    """Raw type discriminator (``@type`` for v2, ``type`` for v3)."""
    return _require_object(data).get(TYPE_FIELD[version])


def decode_manifest(data: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> tuple[Version, Manifest]:
    """
    Decode a document known to be a manifest.

    Decoder failures propagate; the other dialect is never tried.

    Raises:
        UnknownVersionError: If the context is not a presentation context
        FieldDecodeError: If a required field is missing or malformed
    """
    version = presentation_version(data)
    decoder = v3.decode_manifest if version is Version.V3 else v2.decode_manifest
    return version, decoder(data, max_depth=max_depth)


def decode_resource(data: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> tuple[Version, Resource]:
    """
    Decode a Presentation API document of any kind.

    Raises:
        UnknownVersionError: If the context is not a presentation context
        UnknownResourceTypeError: If the type is not a manifest, collection,
            canvas or range of that dialect
        FieldDecodeError: If a required field is missing or malformed
    """
    version = presentation_version(data)
    kind = resource_type(data, version)
    decoder = RESOURCE_DECODERS[version].get(kind) if isinstance(kind, str) else None
    if decoder is None:
        raise UnknownResourceTypeError(kind)
    logger.debug("Decoding %s as version %s", kind, version.value)
    if decoder in _NESTING:
        return version, decoder(data, max_depth=max_depth)
    return version, decoder(data)


def decode_info(data: Any) -> tuple[Version, InfoJson]:
    """
    Decode an Image API ``info.json``.

    Raises:
        UnknownVersionError: If no image context is present
        FieldDecodeError: If a required field is missing or malformed
    """
    version = image_version(data)
    decoder = v3.decode_info if version is Version.V3 else v2.decode_info
    return version, decoder(data)
