"""
Decode IIIF Presentation 3.0 / Image API 3.0 documents.

Mirrors ``limpet.iiif.v2.decode``: same entity shapes out, v3 JSON in.
"""

from __future__ import annotations

from typing import Any

from ..decoding import (
    DEFAULT_MAX_DEPTH,
    LabelValueEntry,
    check_depth,
    join_path,
    link_service,
    lookup,
    lookup_or,
    parse_service_id,
    validate,
)
from ..errors import FieldDecodeError, NoValidServiceIdError, UnknownResourceTypeError
from ..language import EMPTY
from ..models import (
    Behavior,
    Canvas,
    Collection,
    CollectionItem,
    Homepage,
    Image,
    ImageRole,
    InfoJson,
    LabelValue,
    LayoutV3,
    Logo,
    Manifest,
    MediaFormat,
    Provider,
    Range,
    RangeCanvas,
    RangeItem,
    ResourceType,
    ServiceType,
    SizeOption,
    Thumbnail,
    TileSpec,
    ViewingDirection,
)
from . import models as wire


MANIFEST_TYPE = "Manifest"
COLLECTION_TYPE = "Collection"
CANVAS_TYPE = "Canvas"
RANGE_TYPE = "Range"
CHOICE_TYPE = "Choice"
SPECIFIC_RESOURCE_TYPE = "SpecificResource"

PREFERRED_SERVICE = ServiceType.IMAGE_SERVICE_3.value


def _metadata(entries: list[LabelValueEntry]) -> tuple[LabelValue, ...]:
    return tuple(LabelValue(e.label, e.value) for e in entries)


def _homepages(links: list[wire.Link]) -> tuple[Homepage, ...]:
    return tuple(
        Homepage(
            id=link.id,
            label=link.label,
            format=lookup(MediaFormat, link.format) if link.format else None,
            type=lookup(ResourceType, link.type) if link.type else None,
        )
        for link in links
    )


def _logos(links: list[wire.Link], path: str) -> tuple[Logo, ...]:
    return tuple(
        Logo(id=link.id, service=link_service(link.service, join_path(path, i, "service")))
        for i, link in enumerate(links)
    )


def _thumbnails(links: list[wire.Link], path: str) -> tuple[Thumbnail, ...]:
    return tuple(
        Thumbnail(
            id=link.id,
            format=lookup(MediaFormat, link.format) if link.format else None,
            service=link_service(link.service, join_path(path, i, "service")),
        )
        for i, link in enumerate(links)
    )


def _providers(providers: list[wire.Provider]) -> tuple[Provider, ...]:
    return tuple(
        Provider(
            id=p.id,
            label=p.label,
            homepage=_homepages(p.homepage),
            logo=_logos(p.logo, join_path("provider", i, "logo")),
        )
        for i, p in enumerate(providers)
    )


# --- Images and canvases -------------------------------------------------------------


def _image(body: wire.Body, role: ImageRole, path: str) -> Image:
    """
    Image addressed through its service.

    The ``ImageService3`` entry is preferred; otherwise the first entry is
    used.
    """
    if body.service is None:
        raise FieldDecodeError(join_path(path, "service"), "Field required")
    if not body.service:
        raise NoValidServiceIdError(join_path(path, "service"))

    chosen_index = next(
        (i for i, s in enumerate(body.service) if s.type == PREFERRED_SERVICE), 0
    )
    chosen = body.service[chosen_index]
    if chosen.id is None:
        raise NoValidServiceIdError(join_path(path, "service", chosen_index))

    return Image(
        id=parse_service_id(chosen.id, join_path(path, "service", chosen_index, "id")),
        label=body.label,
        role=role,
        service_types=tuple(lookup(ServiceType, s.type) for s in body.service if s.type),
    )


def _images(body: wire.Body, path: str) -> list[Image]:
    """A ``Choice`` body flattens into its first item (``PRIMARY``) and the rest (``CHOICE``)."""
    if body.type != CHOICE_TYPE:
        return [_image(body, ImageRole.PRIMARY, path)]
    return [
        _image(item, ImageRole.PRIMARY if i == 0 else ImageRole.CHOICE, join_path(path, "items", i))
        for i, item in enumerate(body.items)
    ]


def _canvas(canvas: wire.Canvas, path: str) -> Canvas:
    images: list[Image] = []
    for p, page in enumerate(canvas.items):
        for a, annotation in enumerate(page.items):
            for b, body in enumerate(annotation.body):
                images.extend(_images(body, join_path(path, "items", p, "items", a, "body", b)))
    return Canvas(
        id=canvas.id,
        label=canvas.label,
        width=canvas.width,
        height=canvas.height,
        images=tuple(images),
    )


def decode_canvas(data: Any, *, _path: str = "") -> Canvas:
    """Decode a standalone ``Canvas``."""
    return _canvas(validate(wire.Canvas, data, _path), _path)


# --- Ranges ----------------------------------------------------------------------------------


def _range_item(raw: Any, path: str, depth: int, max_depth: int) -> RangeItem:
    ref = validate(wire.Reference, raw, path)
    if ref.type == RANGE_TYPE:
        return _range(raw, path, depth + 1, max_depth)
    if ref.type == CANVAS_TYPE and ref.id is not None:
        return RangeCanvas(ref.id)
    if ref.type == SPECIFIC_RESOURCE_TYPE:
        source = ref.source
        if isinstance(source, dict):
            source = source.get("id")
        if isinstance(source, str):
            return RangeCanvas(source)
        raise FieldDecodeError(join_path(path, "source"), "expected a canvas id")
    if ref.type == CANVAS_TYPE:
        raise FieldDecodeError(join_path(path, "id"), "Field required")
    raise UnknownResourceTypeError(ref.type)


def _range(data: Any, path: str, depth: int, max_depth: int) -> Range:
    check_depth(depth, max_depth, path)
    rng = validate(wire.Range, data, path)
    return Range(
        id=rng.id,
        label=rng.label if rng.label is not None else EMPTY,
        items=tuple(
            _range_item(raw, join_path(path, "items", i), depth, max_depth)
            for i, raw in enumerate(rng.items)
        ),
        metadata=_metadata(rng.metadata),
    )


def decode_range(data: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Range:
    """Decode a ``Range`` and everything nested in it."""
    return _range(data, "", 1, max_depth)


# --- Manifests --------------------------------------------------------------------------------


def decode_manifest(data: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Manifest:
    """Decode a ``Manifest``."""
    manifest = validate(wire.Manifest, data)
    providers = _providers(manifest.provider)
    logos = _logos(manifest.logo, "logo") + tuple(logo for p in providers for logo in p.logo)

    return Manifest(
        id=manifest.id,
        label=manifest.label,
        metadata=_metadata(manifest.metadata),
        viewing_direction=lookup_or(
            ViewingDirection, manifest.viewing_direction, ViewingDirection.LEFT_TO_RIGHT
        ),
        summary=manifest.summary,
        layout=LayoutV3(tuple(lookup_or(Behavior, b, Behavior.PAGED) for b in manifest.behavior)),
        canvases=tuple(
            _canvas(canvas, join_path("items", i)) for i, canvas in enumerate(manifest.items)
        ),
        ranges=(
            tuple(
                _range(raw, join_path("structures", i), 1, max_depth)
                for i, raw in enumerate(manifest.structures)
            )
            if manifest.structures is not None
            else None
        ),
        homepage=_homepages(manifest.homepage),
        logo=logos,
        provider=providers,
        thumbnail=_thumbnails(manifest.thumbnail, "thumbnail"),
        required_statement=(
            LabelValue(manifest.required_statement.label, manifest.required_statement.value)
            if manifest.required_statement is not None
            else None
        ),
    )


def decode_manifest_reference(data: Any, *, _path: str = "") -> Manifest:
    """Decode a manifest as embedded in a collection (no canvases)."""
    ref = validate(wire.ManifestReference, data, _path)
    return Manifest(
        id=ref.id,
        label=ref.label,
        summary=ref.summary,
        layout=LayoutV3(),
        homepage=_homepages(ref.homepage),
        thumbnail=_thumbnails(ref.thumbnail, join_path(_path, "thumbnail")),
    )


# --- Collections --------------------------------------------------------------------------------


def _collection_item(raw: Any, kind: str | None, path: str, depth: int, max_depth: int) -> CollectionItem:
    if kind is None:
        if not isinstance(raw, dict):
            raise FieldDecodeError(path, "expected an object")
        kind = raw.get("type")
    if kind == COLLECTION_TYPE:
        return _collection(raw, path, depth + 1, max_depth)
    if kind == MANIFEST_TYPE:
        return decode_manifest_reference(raw, _path=path)
    raise UnknownResourceTypeError(kind)


def _collection(data: Any, path: str, depth: int, max_depth: int) -> Collection:
    check_depth(depth, max_depth, path)
    collection = validate(wire.Collection, data, path)

    children = [(raw, None, join_path(path, "items", i)) for i, raw in enumerate(collection.items)]
    if not children:
        children = [
            (raw, COLLECTION_TYPE, join_path(path, "collections", i))
            for i, raw in enumerate(collection.collections)
        ] + [
            (raw, MANIFEST_TYPE, join_path(path, "manifests", i))
            for i, raw in enumerate(collection.manifests)
        ]

    return Collection(
        id=collection.id,
        label=collection.label,
        summary=collection.summary,
        items=tuple(
            _collection_item(raw, kind, child_path, depth, max_depth)
            for raw, kind, child_path in children
        ),
    )


def decode_collection(data: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Collection:
    """
    Decode a ``Collection``.

    When ``items`` is empty the legacy ``collections`` and ``manifests``
    arrays are read instead.
    """
    return _collection(data, "", 1, max_depth)


# --- Image API ------------------------------------------------------------------------------------


def decode_info(data: Any) -> InfoJson:
    """Decode an Image API 3.0 ``info.json``."""
    info = validate(wire.ImageInfo, data)
    return InfoJson(
        id=parse_service_id(info.id, "id"),
        width=info.width,
        height=info.height,
        sizes=tuple(SizeOption(s.width, s.height) for s in info.sizes) if info.sizes is not None else None,
        tiles=(
            tuple(TileSpec(t.width, t.height, tuple(t.scale_factors)) for t in info.tiles)
            if info.tiles is not None
            else None
        ),
    )
