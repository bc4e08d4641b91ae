"""IIIF Presentation 3.0 and Image API 3.0 decoders."""

from .decode import (
    decode_canvas,
    decode_collection,
    decode_info,
    decode_manifest,
    decode_manifest_reference,
    decode_range,
)

__all__ = [
    "decode_canvas",
    "decode_collection",
    "decode_info",
    "decode_manifest",
    "decode_manifest_reference",
    "decode_range",
]
