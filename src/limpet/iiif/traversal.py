"""
High-level traversal for IIIF collections.

Provides convenience functions for iterating through manifests in collections
and handling both manifests and collections uniformly, in either dialect.
"""

from __future__ import annotations

from typing import Any, Iterable

from .decoding import DEFAULT_MAX_DEPTH, check_depth
from .dispatch import decode_manifest, decode_resource, presentation_version, resource_type
from .errors import IIIFError, UnknownResourceTypeError
from .loaders import load_json
from .models import Collection, Manifest
from .version import Version


def _kind(data: Any) -> Any:
    return resource_type(data, presentation_version(data))


def _walk(
    collection: Collection, depth: int, max_depth: int
) -> Iterable[tuple[str, tuple[Version, Manifest]]]:
    check_depth(depth, max_depth, collection.id)
    for item in collection.items:
        if isinstance(item, Manifest):
            yield item.id, decode_manifest(load_json(item.id))
        elif item.items:
            yield from _walk(item, depth + 1, max_depth)
        else:
            _, nested = decode_resource(load_json(item.id))
            if not isinstance(nested, Collection):
                raise UnknownResourceTypeError(type(nested).__name__)
            yield from _walk(nested, depth + 1, max_depth)


def iter_manifests(
    path_or_url: str, *, max_depth: int = DEFAULT_MAX_DEPTH
) -> Iterable[tuple[str, tuple[Version, Manifest]]]:
    """
    Yield ``(manifest_id, (version, manifest))`` pairs.

    Handles both single manifests and collections uniformly:
    - If root is a Manifest: yields that one manifest
    - If root is a Collection: fetches and yields each referenced manifest,
      descending into nested collections

    Raises:
        UnknownResourceTypeError: If the root is neither a manifest nor a collection
        httpx.HTTPError: If URL fetch fails
        IIIFError: If a document cannot be decoded

    Example:
        >>> for manifest_id, (version, manifest) in iter_manifests(collection_url):
        ...     print(f"{manifest_id}: {len(manifest.canvases)} pages")
    """
    data = load_json(path_or_url)
    version, resource = decode_resource(data, max_depth=max_depth)

    if isinstance(resource, Manifest):
        yield resource.id, (version, resource)
        return

    if isinstance(resource, Collection):
        yield from _walk(resource, 1, max_depth)
        return

    raise UnknownResourceTypeError(_kind(data))


def _root_kind(path_or_url: str) -> Any:
    """Type discriminator of the root, or None when it is not an IIIF presentation document."""
    try:
        return _kind(load_json(path_or_url))
    except IIIFError:
        return None


def is_collection(path_or_url: str) -> bool:
    """
    Check if resource is a Collection (``sc:Collection`` or ``Collection``).

    Loads only the root JSON to check the type, without decoding it. JSON
    that is not an IIIF presentation document is not a collection.
    """
    return _root_kind(path_or_url) in ("sc:Collection", "Collection")


def is_manifest(path_or_url: str) -> bool:
    """Check if resource is a Manifest (``sc:Manifest`` or ``Manifest``)."""
    return _root_kind(path_or_url) in ("sc:Manifest", "Manifest")
