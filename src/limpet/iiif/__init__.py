"""
IIIF Presentation and Image API support.

Decodes Presentation 2.1 and 3.0 documents into one normalized object
model, tagged with the ``Version`` they came from, and handles the Image
API address grammar and tile addressing.

Basic usage:
    >>> from limpet.iiif import load_json, decode_manifest, extract_label
    >>>
    >>> version, manifest = decode_manifest(load_json(url))
    >>> print(version, extract_label("en", manifest.label))
    >>> for canvas in manifest.canvases:
    ...     print(canvas.image_url())

Tiles for a deep-zoom viewer:
    >>> from limpet.iiif import load_info, derive_tiles
    >>>
    >>> _, info = load_info("https://example.org/iiif/2/abc/info.json")
    >>> for tile in derive_tiles(0, 4, info):
    ...     print(tile.url)
"""

from .dispatch import decode_info, decode_manifest, decode_resource
from .errors import (
    DecodeDepthError,
    FieldDecodeError,
    IIIFError,
    NoValidServiceIdError,
    UnknownResourceTypeError,
    UnknownVersionError,
    UriParseError,
)
from .image_uri import (
    ImageRequestUri,
    InfoUri,
    parse as parse_image_uri,
    thumbnail_url_from_info,
    to_url,
)
from .language import Lang, LanguageMap, extract_label
from .loaders import (
    DEFAULT_ACCEPT,
    IMAGE_ACCEPT,
    PendingRequest,
    fetch_json,
    load_info,
    load_json,
    load_manifest,
    load_resource,
    request_info,
    request_manifest,
    request_resource,
)
from .models import (
    Canvas,
    Collection,
    Image,
    InfoJson,
    Manifest,
    Range,
    is_continuous,
    is_individuals,
    is_paged,
)
from .tiles import TileAddress, derive_tiles
from .traversal import is_collection, is_manifest, iter_manifests
from .validation import ValidationIssue, validate_manifest, validate_resource
from .version import (
    IMAGE_2_CONTEXT,
    IMAGE_3_CONTEXT,
    PRESENTATION_2_CONTEXT,
    PRESENTATION_3_CONTEXT,
    Version,
)

__all__ = [
    # Dispatch
    "decode_info",
    "decode_manifest",
    "decode_resource",
    # Errors
    "DecodeDepthError",
    "FieldDecodeError",
    "IIIFError",
    "NoValidServiceIdError",
    "UnknownResourceTypeError",
    "UnknownVersionError",
    "UriParseError",
    # Image API addresses
    "ImageRequestUri",
    "InfoUri",
    "parse_image_uri",
    "thumbnail_url_from_info",
    "to_url",
    # Language maps
    "Lang",
    "LanguageMap",
    "extract_label",
    # Loaders
    "DEFAULT_ACCEPT",
    "IMAGE_ACCEPT",
    "PendingRequest",
    "fetch_json",
    "load_info",
    "load_json",
    "load_manifest",
    "load_resource",
    "request_info",
    "request_manifest",
    "request_resource",
    # Models
    "Canvas",
    "Collection",
    "Image",
    "InfoJson",
    "Manifest",
    "Range",
    "is_continuous",
    "is_individuals",
    "is_paged",
    # Tiles
    "TileAddress",
    "derive_tiles",
    # Traversal
    "is_collection",
    "is_manifest",
    "iter_manifests",
    # Validation
    "ValidationIssue",
    "validate_manifest",
    "validate_resource",
    # Versions
    "IMAGE_2_CONTEXT",
    "IMAGE_3_CONTEXT",
    "PRESENTATION_2_CONTEXT",
    "PRESENTATION_3_CONTEXT",
    "Version",
]
