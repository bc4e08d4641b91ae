"""
IIIF Presentation 2.1 and Image API 2.1 decoders.

Basic usage:
    >>> from limpet.iiif.v2 import decode_manifest
    >>> manifest = decode_manifest(data)
    >>> for canvas in manifest.canvases:
    ...     print(canvas.image_url())
"""

from .decode import (
    decode_canvas,
    decode_collection,
    decode_info,
    decode_manifest,
    decode_manifest_reference,
    decode_range,
    decode_required_statement,
    decode_structures,
)

__all__ = [
    "decode_canvas",
    "decode_collection",
    "decode_info",
    "decode_manifest",
    "decode_manifest_reference",
    "decode_range",
    "decode_required_statement",
    "decode_structures",
]
