"""
Pydantic wire schemas for IIIF Presentation API 3.0 and Image API 3.0.

Keys are the plain JSON-LD names (``id``, ``type``). Services embedded in
v3 documents often still use the v2 spelling (``@id``, ``@type``), so both
are accepted there.
"""

from __future__ import annotations

from typing import Annotated, Any, Optional

from pydantic import AliasChoices, BeforeValidator, Field

from ..decoding import (
    LabelValueEntry,
    ServiceList,
    SizeEntry,
    TileEntry,
    WireModel,
    one_or_many,
)
from ..language import LanguageField


class Service(WireModel):
    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("id", "@id"))
    type: Optional[str] = Field(default=None, validation_alias=AliasChoices("type", "@type"))
    profile: Any = None


class Body(WireModel):
    """
    Annotation body.

    A ``Choice`` body lists alternative images in ``items``; any other body
    is an image addressed through its ``service``.
    """

    id: Optional[str] = None
    type: Optional[str] = None
    label: Optional[LanguageField] = None
    format: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    service: Optional[Annotated[list[Service], BeforeValidator(one_or_many)]] = None
    items: list[Body] = Field(default_factory=list)


class Annotation(WireModel):
    id: Optional[str] = None
    type: Optional[str] = None
    motivation: Optional[str] = None
    body: Annotated[list[Body], BeforeValidator(one_or_many)]
    target: Any = None


class AnnotationPage(WireModel):
    id: Optional[str] = None
    type: Optional[str] = None
    items: list[Annotation] = Field(default_factory=list)


class Canvas(WireModel):
    id: str
    type: Optional[str] = None
    label: Optional[LanguageField] = None
    width: Optional[int] = None
    height: Optional[int] = None
    items: list[AnnotationPage] = Field(default_factory=list)


class Link(WireModel):
    """``homepage``, ``logo`` or ``thumbnail`` target."""

    id: str
    type: Optional[str] = None
    format: Optional[str] = None
    label: Optional[LanguageField] = None
    service: ServiceList = Field(default_factory=list)


LinkList = Annotated[list[Link], BeforeValidator(one_or_many)]


class Provider(WireModel):
    id: str
    type: Optional[str] = None
    label: Optional[LanguageField] = None
    homepage: LinkList = Field(default_factory=list)
    logo: LinkList = Field(default_factory=list)


class Manifest(WireModel):
    id: str
    type: Optional[str] = None
    label: LanguageField
    metadata: list[LabelValueEntry] = Field(default_factory=list)
    summary: Optional[LanguageField] = None
    viewing_direction: Optional[str] = Field(default=None, alias="viewingDirection")
    behavior: Annotated[list[str], BeforeValidator(one_or_many)] = Field(default_factory=list)
    items: list[Canvas]
    structures: Optional[list[dict[str, Any]]] = None
    homepage: LinkList = Field(default_factory=list)
    logo: LinkList = Field(default_factory=list)
    provider: Annotated[list[Provider], BeforeValidator(one_or_many)] = Field(default_factory=list)
    thumbnail: LinkList = Field(default_factory=list)
    required_statement: Optional[LabelValueEntry] = Field(default=None, alias="requiredStatement")


class ManifestReference(WireModel):
    """Manifest as listed inside a collection: no canvases."""

    id: str
    type: Optional[str] = None
    label: LanguageField
    summary: Optional[LanguageField] = None
    homepage: LinkList = Field(default_factory=list)
    thumbnail: LinkList = Field(default_factory=list)


class Collection(WireModel):
    id: str
    type: Optional[str] = None
    label: LanguageField
    summary: Optional[LanguageField] = None
    items: list[dict[str, Any]] = Field(default_factory=list)
    collections: list[dict[str, Any]] = Field(default_factory=list)
    manifests: list[dict[str, Any]] = Field(default_factory=list)


class Range(WireModel):
    id: str
    type: Optional[str] = None
    label: Optional[LanguageField] = None
    metadata: list[LabelValueEntry] = Field(default_factory=list)
    items: list[dict[str, Any]] = Field(default_factory=list)


class Reference(WireModel):
    """Typed pointer (``{"id", "type"}``) inside a range."""

    id: Optional[str] = None
    type: Optional[str] = None
    source: Any = None


class ImageInfo(WireModel):
    """Image API 3.0 ``info.json``."""

    id: str = Field(validation_alias=AliasChoices("id", "@id"))
    type: Optional[str] = None
    protocol: Optional[str] = None
    profile: Any = None
    width: int
    height: int
    sizes: Optional[list[SizeEntry]] = None
    tiles: Optional[list[TileEntry]] = None
