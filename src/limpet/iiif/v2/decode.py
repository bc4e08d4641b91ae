"""
Decode IIIF Presentation 2.1 / Image API 2.1 documents.

Each ``decode_*`` function takes parsed JSON and returns a normalized
entity from ``limpet.iiif.models``, or raises an ``IIIFError``. Nothing is
returned half-decoded.
"""

from __future__ import annotations

from typing import Any

from ..decoding import (
    DEFAULT_MAX_DEPTH,
    LabelValueEntry,
    check_depth,
    first_of,
    join_path,
    link_service,
    lookup,
    lookup_or,
    parse_service_id,
    validate,
)
from ..errors import FieldDecodeError, UnknownResourceTypeError
from ..language import LanguageMap, decode_language_map, decode_value
from ..models import (
    Canvas,
    Collection,
    CollectionItem,
    Homepage,
    Image,
    ImageRole,
    InfoJson,
    LabelValue,
    LayoutV2,
    Logo,
    Manifest,
    MediaFormat,
    Range,
    RangeCanvas,
    RangeItem,
    ResourceType,
    ServiceType,
    SizeOption,
    Thumbnail,
    TileSpec,
    ViewingDirection,
    ViewingHint,
)
from . import models as wire


MANIFEST_TYPE = "sc:Manifest"
COLLECTION_TYPE = "sc:Collection"
CANVAS_TYPE = "sc:Canvas"
RANGE_TYPE = "sc:Range"
CHOICE_TYPE = "oa:Choice"

ATTRIBUTION_LABEL = "Attribution"

SERVICE_CONTEXTS = {
    "http://iiif.io/api/image/3/context.json": ServiceType.IMAGE_SERVICE_3,
    "http://iiif.io/api/image/2/context.json": ServiceType.IMAGE_SERVICE_2,
    "http://iiif.io/api/image/1/context.json": ServiceType.IMAGE_SERVICE_1,
    "http://library.stanford.edu/iiif/image-api/1.1/context.json": ServiceType.IMAGE_SERVICE_1,
}

RESOURCE_TYPES = {
    "dctypes:Image": ResourceType.IMAGE,
    "dctypes:Text": ResourceType.TEXT,
    "dctypes:Sound": ResourceType.SOUND,
    "dctypes:MovingImage": ResourceType.VIDEO,
    "dctypes:Dataset": ResourceType.DATASET,
    "foaf:Document": ResourceType.TEXT,
}


# --- Small records -----------------------------------------------------------------


def _metadata(entries: list[LabelValueEntry]) -> tuple[LabelValue, ...]:
    return tuple(LabelValue(e.label, e.value) for e in entries)


def _homepages(links: list[wire.Link]) -> tuple[Homepage, ...]:
    return tuple(
        Homepage(
            id=link.id,
            label=link.label,
            format=lookup(MediaFormat, link.format) if link.format else None,
            type=lookup(ResourceType, link.type, RESOURCE_TYPES) if link.type else None,
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


def _attribution_string(raw: Any) -> LabelValue:
    if not isinstance(raw, str):
        raise ValueError("attribution is not a string")
    return LabelValue(LanguageMap.single(ATTRIBUTION_LABEL), LanguageMap.single(raw))


def _label_value_v3(raw: Any) -> LabelValue:
    if not isinstance(raw, dict):
        raise ValueError("requiredStatement is not an object")
    return LabelValue(decode_language_map(raw.get("label")), decode_language_map(raw.get("value")))


def _label_value_v2(raw: Any) -> LabelValue:
    if not isinstance(raw, dict):
        raise ValueError("requiredStatement is not an object")
    return LabelValue(decode_value(raw.get("label")), decode_value(raw.get("value")))


def _attribution_values(raw: Any) -> LabelValue:
    return LabelValue(LanguageMap.single(ATTRIBUTION_LABEL), decode_value(raw))


# Order matters: the first shape that decodes wins.
REQUIRED_STATEMENT_SHAPES = (
    _attribution_string,
    _label_value_v3,
    _label_value_v2,
    _attribution_values,
)


def decode_required_statement(raw: Any, path: str = "attribution") -> LabelValue:
    """
    Decode ``attribution`` / ``requiredStatement``.

    Accepted shapes, in order: plain string; ``{label, value}`` with v3
    language maps; ``{label, value}`` with v2 values; v2 value object(s).
    """
    return first_of(raw, REQUIRED_STATEMENT_SHAPES, path)


# --- Images and canvases -----------------------------------------------------------


def _image(resource: wire.ImageResource, role: ImageRole, path: str) -> Image:
    if not resource.service:
        raise FieldDecodeError(join_path(path, "service"), "Field required")
    service = resource.service[0]
    return Image(
        id=parse_service_id(service.id, join_path(path, "service", "@id")),
        label=resource.label,
        role=role,
        service_types=(lookup(ServiceType, service.context, SERVICE_CONTEXTS),),
    )


def _images(resource: wire.ImageResource, path: str) -> list[Image]:
    """
    Images of one annotation.

    An ``oa:Choice`` flattens into its default (``PRIMARY``) followed by
    each alternative (``CHOICE``).
    """
    if resource.type != CHOICE_TYPE:
        return [_image(resource, ImageRole.PRIMARY, path)]
    if resource.default is None:
        raise FieldDecodeError(join_path(path, "default"), "Field required")
    images = [_image(resource.default, ImageRole.PRIMARY, join_path(path, "default"))]
    for i, item in enumerate(resource.item):
        images.append(_image(item, ImageRole.CHOICE, join_path(path, "item", i)))
    return images


def _canvas(canvas: wire.Canvas, path: str) -> Canvas:
    images: list[Image] = []
    for i, annotation in enumerate(canvas.images):
        images.extend(_images(annotation.resource, join_path(path, "images", i, "resource")))
    return Canvas(
        id=canvas.id,
        label=canvas.label,
        width=canvas.width,
        height=canvas.height,
        images=tuple(images),
    )


def decode_canvas(data: Any, *, _path: str = "") -> Canvas:
    """Decode a standalone ``sc:Canvas``."""
    return _canvas(validate(wire.Canvas, data, _path), _path)


# --- Ranges ---------------------------------------------------------------------------


class _RangeIndex:
    """``structures`` keyed by ``@id``, so ranges can point at each other."""

    def __init__(self, structures: list[dict[str, Any]], path: str):
        self.by_id: dict[str, tuple[str, dict[str, Any]]] = {}
        for i, raw in enumerate(structures):
            raw_id = raw.get("@id")
            if isinstance(raw_id, str):
                self.by_id.setdefault(raw_id, (join_path(path, i), raw))

    def resolve(self, range_id: str, path: str) -> tuple[str, dict[str, Any]]:
        try:
            return self.by_id[range_id]
        except KeyError:
            raise FieldDecodeError(path, f"unresolved range reference {range_id!r}") from None


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _referenced_ids(raw: dict[str, Any]) -> set[str]:
    """Range ids a structures entry points at. Malformed shapes are left for validation."""
    ids: set[str] = set()
    for ref in _as_list(raw.get("ranges")):
        if isinstance(ref, str):
            ids.add(ref)
        elif isinstance(ref, dict) and isinstance(ref.get("@id"), str):
            ids.add(ref["@id"])
    for member in _as_list(raw.get("members")):
        if isinstance(member, dict) and member.get("@type") == RANGE_TYPE and isinstance(member.get("@id"), str):
            ids.add(member["@id"])
    return ids


def _range(raw: Any, index: _RangeIndex, path: str, depth: int, max_depth: int) -> Range:
    check_depth(depth, max_depth, path)
    rng = validate(wire.Range, raw, path)

    def sub_range(ref: str | dict[str, Any], ref_path: str) -> Range:
        if isinstance(ref, str):
            target_path, target = index.resolve(ref, ref_path)
            return _range(target, index, target_path, depth + 1, max_depth)
        ref_id = ref.get("@id")
        if isinstance(ref_id, str) and ref_id in index.by_id and "label" not in ref:
            target_path, target = index.resolve(ref_id, ref_path)
            return _range(target, index, target_path, depth + 1, max_depth)
        return _range(ref, index, ref_path, depth + 1, max_depth)

    items: list[RangeItem] = []
    if rng.members is not None:
        for i, member in enumerate(rng.members):
            member_path = join_path(path, "members", i)
            ref = validate(wire.Reference, member, member_path)
            if ref.type == CANVAS_TYPE:
                items.append(RangeCanvas(ref.id))
            elif ref.type == RANGE_TYPE:
                items.append(sub_range(member, member_path))
            else:
                raise UnknownResourceTypeError(ref.type)
    else:
        for i, sub in enumerate(rng.ranges):
            items.append(sub_range(sub, join_path(path, "ranges", i)))
        items.extend(RangeCanvas(canvas_id) for canvas_id in rng.canvases)

    return Range(id=rng.id, label=rng.label, items=tuple(items), metadata=_metadata(rng.metadata))


def decode_structures(
    structures: list[dict[str, Any]],
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    _path: str = "structures",
) -> tuple[Range, ...]:
    """
    Rebuild the range tree from the flat v2 ``structures`` list.

    Ranges that no other range references are the roots; references are
    resolved by ``@id``.
    """
    index = _RangeIndex(structures, _path)
    referenced: set[str] = set()
    for raw in structures:
        referenced |= _referenced_ids(raw)

    def is_root(raw: dict[str, Any]) -> bool:
        raw_id = raw.get("@id")
        return not (isinstance(raw_id, str) and raw_id in referenced)

    roots = [(i, raw) for i, raw in enumerate(structures) if is_root(raw)]
    if structures and not roots:
        raise FieldDecodeError(_path, "every range is referenced by another range (cycle)")
    return tuple(_range(raw, index, join_path(_path, i), 1, max_depth) for i, raw in roots)


def decode_range(data: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Range:
    """Decode a standalone ``sc:Range``; string references cannot be resolved."""
    return _range(data, _RangeIndex([], ""), "", 1, max_depth)


# --- Manifests ----------------------------------------------------------------------------


def decode_manifest(data: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Manifest:
    """
    Decode an ``sc:Manifest``.

    Canvases come from ``sequences[0]`` only; later sequences are ignored.
    """
    manifest = validate(wire.Manifest, data)
    sequence = manifest.sequences[0]
    canvases = tuple(
        _canvas(canvas, join_path("sequences", 0, "canvases", i))
        for i, canvas in enumerate(sequence.canvases)
    )

    statement_raw = manifest.required_statement
    statement_path = "requiredStatement"
    if statement_raw is None:
        statement_raw, statement_path = manifest.attribution, "attribution"

    return Manifest(
        id=manifest.id,
        label=manifest.label,
        metadata=_metadata(manifest.metadata),
        viewing_direction=lookup_or(
            ViewingDirection, manifest.viewing_direction, ViewingDirection.LEFT_TO_RIGHT
        ),
        summary=manifest.description,
        layout=LayoutV2(lookup_or(ViewingHint, manifest.viewing_hint, ViewingHint.PAGED)),
        canvases=canvases,
        ranges=(
            decode_structures(manifest.structures, max_depth=max_depth)
            if manifest.structures is not None
            else None
        ),
        homepage=_homepages(manifest.related),
        logo=_logos(manifest.logo, "logo"),
        thumbnail=_thumbnails(manifest.thumbnail, "thumbnail"),
        required_statement=(
            decode_required_statement(statement_raw, statement_path)
            if statement_raw is not None
            else None
        ),
    )


def decode_manifest_reference(data: Any, *, _path: str = "") -> Manifest:
    """
    Decode a manifest as embedded in a collection.

    Only id, label, description, thumbnail and related are read; canvases,
    ranges and provider stay empty.
    """
    ref = validate(wire.ManifestReference, data, _path)
    return Manifest(
        id=ref.id,
        label=ref.label,
        summary=ref.description,
        layout=LayoutV2(),
        homepage=_homepages(ref.related),
        thumbnail=_thumbnails(ref.thumbnail, join_path(_path, "thumbnail")),
    )


# --- Collections ----------------------------------------------------------------------------


def _collection_item(raw: Any, kind: str | None, path: str, depth: int, max_depth: int) -> CollectionItem:
    if kind is None:
        if not isinstance(raw, dict):
            raise FieldDecodeError(path, "expected an object")
        kind = raw.get("@type")
    if kind == COLLECTION_TYPE:
        return _collection(raw, path, depth + 1, max_depth)
    if kind == MANIFEST_TYPE:
        return decode_manifest_reference(raw, _path=path)
    raise UnknownResourceTypeError(kind)


def _collection(data: Any, path: str, depth: int, max_depth: int) -> Collection:
    check_depth(depth, max_depth, path)
    collection = validate(wire.Collection, data, path)

    if collection.members is not None:
        children = [
            (raw, None, join_path(path, "members", i)) for i, raw in enumerate(collection.members)
        ]
    else:
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
        summary=collection.description,
        items=tuple(
            _collection_item(raw, kind, child_path, depth, max_depth)
            for raw, kind, child_path in children
        ),
    )


def decode_collection(data: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Collection:
    """
    Decode an ``sc:Collection``.

    ``members`` wins when present; otherwise ``collections`` followed by
    ``manifests``.
    """
    return _collection(data, "", 1, max_depth)


# --- Image API ---------------------------------------------------------------------------------


def decode_info(data: Any) -> InfoJson:
    """Decode an Image API 2.1 ``info.json``."""
    info = validate(wire.ImageInfo, data)
    return InfoJson(
        id=parse_service_id(info.id, "@id"),
        width=info.width,
        height=info.height,
        sizes=tuple(SizeOption(s.width, s.height) for s in info.sizes) if info.sizes is not None else None,
        tiles=(
            tuple(TileSpec(t.width, t.height, tuple(t.scale_factors)) for t in info.tiles)
            if info.tiles is not None
            else None
        ),
    )
