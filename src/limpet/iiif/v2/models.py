"""
Pydantic wire schemas for IIIF Presentation API 2.1 and Image API 2.1.

These mirror the JSON as published, keyed by JSON-LD names (``@id``,
``@type``). They only check shape; ``limpet.iiif.v2.decode`` turns them into
the normalized entities of ``limpet.iiif.models``. Children that may nest
without bound (collection members, ranges) stay raw ``dict`` lists so the
decoder can walk them one level at a time.
"""

from __future__ import annotations

from typing import Annotated, Any, Optional

from pydantic import BeforeValidator, Field

from ..decoding import (
    LabelValueEntry,
    ServiceList,
    SizeEntry,
    TileEntry,
    WireModel,
    one_or_many,
)
from ..language import LanguageField


def _link_list(value: Any) -> Any:
    """A link is a bare URL string, an object, or an array of either."""
    if value is None:
        return []
    items = value if isinstance(value, list) else [value]
    return [{"@id": item} if isinstance(item, str) else item for item in items]


class ImageService(WireModel):
    """
    IIIF Image API service descriptor.

    Both ``@id`` (where to address the image) and ``@context`` (what kind
    of service it is) are required.
    """

    id: str = Field(alias="@id")
    context: str = Field(alias="@context")
    profile: str | list[Any] | None = None


class ImageResource(WireModel):
    """
    Image resource in an annotation.

    An ``oa:Choice`` resource holds a ``default`` image and alternative
    ``item`` images instead of a service of its own.
    """

    id: Optional[str] = Field(default=None, alias="@id")
    type: Optional[str] = Field(default=None, alias="@type")
    label: Optional[LanguageField] = None
    format: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    service: Annotated[list[ImageService], BeforeValidator(one_or_many)] = Field(default_factory=list)
    default: Optional[ImageResource] = None
    item: list[ImageResource] = Field(default_factory=list)


class Annotation(WireModel):
    """Annotation linking a canvas to its image resource."""

    id: Optional[str] = Field(default=None, alias="@id")
    type: Optional[str] = Field(default=None, alias="@type")
    motivation: Optional[str] = None
    resource: ImageResource
    on: Optional[str] = None


class Canvas(WireModel):
    id: str = Field(alias="@id")
    type: Optional[str] = Field(default=None, alias="@type")
    label: Optional[LanguageField] = None
    width: Optional[int] = None
    height: Optional[int] = None
    images: list[Annotation] = Field(default_factory=list)


class Sequence(WireModel):
    id: Optional[str] = Field(default=None, alias="@id")
    type: Optional[str] = Field(default=None, alias="@type")
    canvases: list[Canvas] = Field(default_factory=list)


class Link(WireModel):
    """``related``, ``logo`` or ``thumbnail`` target."""

    id: str = Field(alias="@id")
    type: Optional[str] = Field(default=None, alias="@type")
    format: Optional[str] = None
    label: Optional[LanguageField] = None
    service: ServiceList = Field(default_factory=list)


LinkList = Annotated[list[Link], BeforeValidator(_link_list)]


class Manifest(WireModel):
    """
    IIIF Presentation 2.1 Manifest.

    Only the first sequence is read by the decoder, but at least one must
    be present.
    """

    id: str = Field(alias="@id")
    type: Optional[str] = Field(default=None, alias="@type")
    label: LanguageField
    metadata: list[LabelValueEntry] = Field(default_factory=list)
    description: Optional[LanguageField] = None
    viewing_direction: Optional[str] = Field(default=None, alias="viewingDirection")
    viewing_hint: Optional[str] = Field(default=None, alias="viewingHint")
    sequences: list[Sequence] = Field(min_length=1)
    structures: Optional[list[dict[str, Any]]] = None
    related: LinkList = Field(default_factory=list)
    logo: LinkList = Field(default_factory=list)
    thumbnail: LinkList = Field(default_factory=list)
    attribution: Any = None
    required_statement: Any = Field(default=None, alias="requiredStatement")


class ManifestReference(WireModel):
    """Manifest as listed inside a collection: no sequences."""

    id: str = Field(alias="@id")
    type: Optional[str] = Field(default=None, alias="@type")
    label: LanguageField
    description: Optional[LanguageField] = None
    related: LinkList = Field(default_factory=list)
    thumbnail: LinkList = Field(default_factory=list)


class Collection(WireModel):
    """
    IIIF Presentation 2.1 Collection.

    Children come either from a single mixed ``members`` array or from
    separate ``collections`` and ``manifests`` arrays.
    """

    id: str = Field(alias="@id")
    type: Optional[str] = Field(default=None, alias="@type")
    label: LanguageField
    description: Optional[LanguageField] = None
    members: Optional[list[dict[str, Any]]] = None
    collections: list[dict[str, Any]] = Field(default_factory=list)
    manifests: list[dict[str, Any]] = Field(default_factory=list)


class Range(WireModel):
    id: str = Field(alias="@id")
    type: Optional[str] = Field(default=None, alias="@type")
    label: LanguageField
    viewing_hint: Optional[str] = Field(default=None, alias="viewingHint")
    metadata: list[LabelValueEntry] = Field(default_factory=list)
    members: Optional[list[dict[str, Any]]] = None
    ranges: list[str | dict[str, Any]] = Field(default_factory=list)
    canvases: list[str] = Field(default_factory=list)


class Reference(WireModel):
    """Typed pointer (``{"@id", "@type"}``) used by ``members`` arrays."""

    id: str = Field(alias="@id")
    type: Optional[str] = Field(default=None, alias="@type")


class ImageInfo(WireModel):
    """Image API 2.1 ``info.json``."""

    id: str = Field(alias="@id")
    protocol: Optional[str] = None
    profile: Any = None
    width: int
    height: int
    sizes: Optional[list[SizeEntry]] = None
    tiles: Optional[list[TileEntry]] = None
