"""
Normalized IIIF entities.

These are what the v2 and v3 decoders produce. Both dialects map onto the
same shapes, so a caller cannot tell where an entity came from except by
the ``Version`` it is paired with. All entities are frozen: a "changed"
entity is a new value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .image_uri import (
    FullRegion,
    ImageFormat,
    ImageRegion,
    ImageSize,
    ImageUri,
    InfoUri,
    MaxSize,
    Quality,
    Rotation,
    ImageRequestUri,
    to_url,
)
from .language import LanguageMap


@dataclass(frozen=True)
class Other:
    """An enum-like string this library does not recognize, kept verbatim."""

    value: str


class ViewingDirection(str, Enum):
    LEFT_TO_RIGHT = "left-to-right"
    RIGHT_TO_LEFT = "right-to-left"
    TOP_TO_BOTTOM = "top-to-bottom"
    BOTTOM_TO_TOP = "bottom-to-top"


class ViewingHint(str, Enum):
    """Presentation 2 ``viewingHint`` (one per resource)."""

    INDIVIDUALS = "individuals"
    PAGED = "paged"
    CONTINUOUS = "continuous"
    MULTI_PART = "multi-part"
    NON_PAGED = "non-paged"
    TOP = "top"
    FACING_PAGES = "facing-pages"


class Behavior(str, Enum):
    """Presentation 3 ``behavior`` (several may apply at once)."""

    AUTO_ADVANCE = "auto-advance"
    NO_AUTO_ADVANCE = "no-auto-advance"
    REPEAT = "repeat"
    NO_REPEAT = "no-repeat"
    UNORDERED = "unordered"
    INDIVIDUALS = "individuals"
    CONTINUOUS = "continuous"
    PAGED = "paged"
    FACING_PAGES = "facing-pages"
    NON_PAGED = "non-paged"
    MULTI_PART = "multi-part"
    TOGETHER = "together"
    SEQUENCE = "sequence"
    THUMBNAIL_NAV = "thumbnail-nav"
    NO_NAV = "no-nav"
    HIDDEN = "hidden"


class ServiceType(str, Enum):
    IMAGE_SERVICE_1 = "ImageService1"
    IMAGE_SERVICE_2 = "ImageService2"
    IMAGE_SERVICE_3 = "ImageService3"


class MediaFormat(str, Enum):
    JPEG = "image/jpeg"
    PNG = "image/png"
    GIF = "image/gif"
    TIFF = "image/tiff"
    JP2 = "image/jp2"
    WEBP = "image/webp"
    HTML = "text/html"
    PDF = "application/pdf"
    JSON = "application/json"
    JSON_LD = "application/ld+json"


class ResourceType(str, Enum):
    DATASET = "Dataset"
    IMAGE = "Image"
    MODEL = "Model"
    SOUND = "Sound"
    TEXT = "Text"
    VIDEO = "Video"


class ImageRole(str, Enum):
    PRIMARY = "primary"
    CHOICE = "choice"


ServiceTypeValue = Union[ServiceType, Other]
MediaFormatValue = Union[MediaFormat, Other]
ResourceTypeValue = Union[ResourceType, Other]


@dataclass(frozen=True)
class LabelValue:
    """A ``metadata`` row or a ``requiredStatement``."""

    label: LanguageMap
    value: LanguageMap


# --- Viewing layout -------------------------------------------------------------


@dataclass(frozen=True)
class LayoutV2:
    hint: ViewingHint = ViewingHint.PAGED


@dataclass(frozen=True)
class LayoutV3:
    behaviors: tuple[Behavior, ...] = ()


ViewingLayout = Union[LayoutV2, LayoutV3]


def _layout_has(layout: ViewingLayout, hint: ViewingHint, behavior: Behavior) -> bool:
    if isinstance(layout, LayoutV2):
        return layout.hint == hint
    return behavior in layout.behaviors


def is_paged(layout: ViewingLayout) -> bool:
    """True when pages should be shown as facing openings."""
    return _layout_has(layout, ViewingHint.PAGED, Behavior.PAGED)


def is_continuous(layout: ViewingLayout) -> bool:
    return _layout_has(layout, ViewingHint.CONTINUOUS, Behavior.CONTINUOUS)


def is_individuals(layout: ViewingLayout) -> bool:
    return _layout_has(layout, ViewingHint.INDIVIDUALS, Behavior.INDIVIDUALS)


# --- Images and canvases --------------------------------------------------------


@dataclass(frozen=True)
class Image:
    """
    An image painted onto a canvas.

    ``id`` is the image service address, already normalized so it can be
    turned into request URLs directly.
    """

    id: ImageUri
    label: Optional[LanguageMap]
    role: ImageRole
    service_types: tuple[ServiceTypeValue, ...]

    def image_url(
        self,
        *,
        region: ImageRegion = FullRegion(),
        size: ImageSize = MaxSize(),
        rotation: Rotation = Rotation(),
        quality: Quality = Quality.DEFAULT,
        fmt: ImageFormat = ImageFormat.JPG,
    ) -> str:
        """
        Generate an Image API request URL for this image.

        Example:
            >>> image.image_url(size=WidthSize(200), fmt=ImageFormat.PNG)
            'https://iiif.example.org/image1/full/200,/0/default.png'
        """
        request = ImageRequestUri(
            host=self.id.host,
            prefix=self.id.prefix,
            region=region,
            size=size,
            rotation=rotation,
            quality=quality,
            format=fmt,
        )
        return to_url(request)


@dataclass(frozen=True)
class Canvas:
    """One page or view. ``width`` and ``height`` are independently optional."""

    id: str
    label: Optional[LanguageMap]
    width: Optional[int]
    height: Optional[int]
    images: tuple[Image, ...]

    @property
    def aspect_ratio(self) -> float:
        """Height over width; 1.0 when either is unknown or the width is 0."""
        if not self.width or self.height is None:
            return 1.0
        return self.height / self.width

    @property
    def primary_image(self) -> Optional[Image]:
        for image in self.images:
            if image.role is ImageRole.PRIMARY:
                return image
        return self.images[0] if self.images else None

    def image_url(self, **params) -> Optional[str]:
        """Request URL for the primary image, or None for an image-less canvas."""
        image = self.primary_image
        if image is None:
            return None
        return image.image_url(**params)


# --- Ranges ---------------------------------------------------------------------


@dataclass(frozen=True)
class RangeCanvas:
    """Leaf of a range: a reference to a canvas by id."""

    id: str


@dataclass(frozen=True)
class Range:
    id: str
    label: LanguageMap
    items: tuple["RangeItem", ...]
    metadata: tuple[LabelValue, ...] = ()

    def canvas_ids(self) -> list[str]:
        """Every canvas id under this range, depth first."""
        result: list[str] = []
        for item in self.items:
            if isinstance(item, RangeCanvas):
                result.append(item.id)
            else:
                result.extend(item.canvas_ids())
        return result


RangeItem = Union[RangeCanvas, Range]


# --- Linked resources -------------------------------------------------------------


@dataclass(frozen=True)
class Homepage:
    id: str
    label: Optional[LanguageMap] = None
    format: Optional[MediaFormatValue] = None
    type: Optional[ResourceTypeValue] = None


@dataclass(frozen=True)
class Logo:
    id: str
    service: Optional[InfoUri] = None


@dataclass(frozen=True)
class Thumbnail:
    id: str
    format: Optional[MediaFormatValue] = None
    service: Optional[InfoUri] = None


@dataclass(frozen=True)
class Provider:
    id: str
    label: Optional[LanguageMap] = None
    homepage: tuple[Homepage, ...] = ()
    logo: tuple[Logo, ...] = ()


# --- Manifests and collections -------------------------------------------------------


@dataclass(frozen=True)
class Manifest:
    """
    A digitized object.

    Manifests embedded in a collection carry only id, label, summary,
    thumbnail and homepage; their canvases are empty.
    """

    id: str
    label: LanguageMap
    metadata: tuple[LabelValue, ...] = ()
    viewing_direction: ViewingDirection = ViewingDirection.LEFT_TO_RIGHT
    summary: Optional[LanguageMap] = None
    layout: ViewingLayout = LayoutV2()
    canvases: tuple[Canvas, ...] = ()
    ranges: Optional[tuple[Range, ...]] = None
    homepage: tuple[Homepage, ...] = ()
    logo: tuple[Logo, ...] = ()
    provider: tuple[Provider, ...] = ()
    thumbnail: tuple[Thumbnail, ...] = ()
    required_statement: Optional[LabelValue] = None

    def image_urls(self, **params) -> list[str]:
        """Primary image request URL of every canvas that has one, in order."""
        urls = (canvas.image_url(**params) for canvas in self.canvases)
        return [url for url in urls if url is not None]


@dataclass(frozen=True)
class Collection:
    id: str
    label: LanguageMap
    summary: Optional[LanguageMap] = None
    items: tuple["CollectionItem", ...] = ()

    def manifests(self) -> list[Manifest]:
        return [item for item in self.items if isinstance(item, Manifest)]

    def collections(self) -> list["Collection"]:
        return [item for item in self.items if isinstance(item, Collection)]

    def manifest_ids(self) -> list[str]:
        """Ids of the manifests directly in this collection."""
        return [m.id for m in self.manifests()]


CollectionItem = Union[Collection, Manifest]
Resource = Union[Manifest, Collection, Canvas, Range]


# --- Image API info.json ----------------------------------------------------------------


@dataclass(frozen=True)
class SizeOption:
    width: int
    height: int


@dataclass(frozen=True)
class TileSpec:
    """One ``tiles`` entry. A missing height means square tiles."""

    width: int
    height: Optional[int]
    scale_factors: tuple[int, ...]


@dataclass(frozen=True)
class InfoJson:
    id: InfoUri
    width: int
    height: int
    sizes: Optional[tuple[SizeOption, ...]] = None
    tiles: Optional[tuple[TileSpec, ...]] = None
