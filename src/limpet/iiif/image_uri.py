"""
IIIF Image API address grammar.

Parses and builds the two kinds of Image API address:

    {scheme}://{server}/{prefix}/info.json
    {scheme}://{server}/{prefix}/{region}/{size}/{rotation}/{quality}.{format}

Every value here is immutable; "changing" an address returns a new one.

Basic usage:
    >>> uri = parse("https://example.org/iiif/2/abc/full/100,200/0/default.jpg")
    >>> uri.size
    WidthHeightSize(width=100, height=200, upscale=False)
    >>> to_url(with_size(uri, WidthSize(180)))
    'https://example.org/iiif/2/abc/full/180,/0/default.jpg'
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
import re
from typing import Callable, Optional, Union
from urllib.parse import urlsplit

from .errors import UriParseError


INFO_JSON = "info.json"
THUMBNAIL_WIDTH = 180


# --- Region -----------------------------------------------------------------


@dataclass(frozen=True)
class FullRegion:
    pass


@dataclass(frozen=True)
class SquareRegion:
    pass


@dataclass(frozen=True)
class PixelRegion:
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class PercentRegion:
    x: float
    y: float
    width: float
    height: float


ImageRegion = Union[FullRegion, SquareRegion, PixelRegion, PercentRegion]


# --- Size -------------------------------------------------------------------
# ``upscale`` is the v3 "^" prefix: the server may return more pixels than
# the region holds.


@dataclass(frozen=True)
class MaxSize:
    upscale: bool = False


@dataclass(frozen=True)
class WidthSize:
    width: int
    upscale: bool = False


@dataclass(frozen=True)
class HeightSize:
    height: int
    upscale: bool = False


@dataclass(frozen=True)
class PercentSize:
    percent: float
    upscale: bool = False


@dataclass(frozen=True)
class WidthHeightSize:
    width: int
    height: int
    upscale: bool = False


@dataclass(frozen=True)
class ScaledSize:
    """``!w,h``: fit inside the box, keeping the aspect ratio."""

    width: int
    height: int
    upscale: bool = False


ImageSize = Union[MaxSize, WidthSize, HeightSize, PercentSize, WidthHeightSize, ScaledSize]


# --- Rotation, quality, format ---------------------------------------------


@dataclass(frozen=True)
class Rotation:
    degrees: float = 0
    mirrored: bool = False


class Quality(str, Enum):
    DEFAULT = "default"
    COLOR = "color"
    GRAY = "gray"
    BITONAL = "bitonal"
    NATIVE = "native"


class ImageFormat(str, Enum):
    JPG = "jpg"
    TIF = "tif"
    PNG = "png"
    GIF = "gif"
    JP2 = "jp2"
    PDF = "pdf"
    WEBP = "webp"


# --- Addresses ----------------------------------------------------------------


@dataclass(frozen=True)
class InfoUri:
    """Address of an image service (its ``info.json``)."""

    host: str
    prefix: str


@dataclass(frozen=True)
class ImageRequestUri:
    """Address of one rendered image."""

    host: str
    prefix: str
    region: ImageRegion = FullRegion()
    size: ImageSize = MaxSize()
    rotation: Rotation = Rotation()
    quality: Quality = Quality.DEFAULT
    format: ImageFormat = ImageFormat.JPG


ImageUri = Union[InfoUri, ImageRequestUri]


# --- Serialization ------------------------------------------------------------


def format_number(value: float) -> str:
    """
    Plain positional decimal text: ``50.0`` -> ``"50"``, ``1e-05`` -> ``"0.00001"``.

    Exponent notation is never produced; the Image API grammar has no
    place for it.
    """
    if float(value).is_integer():
        return str(int(value))
    text = format(Decimal(repr(float(value))), "f")
    return text.rstrip("0").rstrip(".")


def region_to_str(region: ImageRegion) -> str:
    if isinstance(region, FullRegion):
        return "full"
    if isinstance(region, SquareRegion):
        return "square"
    if isinstance(region, PixelRegion):
        return f"{region.x},{region.y},{region.width},{region.height}"
    numbers = (region.x, region.y, region.width, region.height)
    return "pct:" + ",".join(format_number(n) for n in numbers)


def size_to_str(size: ImageSize) -> str:
    caret = "^" if size.upscale else ""
    if isinstance(size, MaxSize):
        body = "max"
    elif isinstance(size, WidthSize):
        body = f"{size.width},"
    elif isinstance(size, HeightSize):
        body = f",{size.height}"
    elif isinstance(size, PercentSize):
        body = f"pct:{format_number(size.percent)}"
    elif isinstance(size, WidthHeightSize):
        body = f"{size.width},{size.height}"
    else:
        body = f"!{size.width},{size.height}"
    return caret + body


def rotation_to_str(rotation: Rotation) -> str:
    return ("!" if rotation.mirrored else "") + format_number(rotation.degrees)


def base_url(uri: ImageUri) -> str:
    """Service base address: ``{host}/{prefix}`` with no request or info.json suffix."""
    return "/".join(part for part in (uri.host, uri.prefix) if part)


def to_url(uri: ImageUri) -> str:
    """Serialize an address. Never fails."""
    if isinstance(uri, InfoUri):
        return f"{base_url(uri)}/{INFO_JSON}"
    return "/".join(
        (
            base_url(uri),
            region_to_str(uri.region),
            size_to_str(uri.size),
            rotation_to_str(uri.rotation),
            f"{uri.quality.value}.{uri.format.value}",
        )
    )


# --- Parsing ------------------------------------------------------------------

_INT = r"(\d+)"
_FLOAT = r"(\d+(?:\.\d*)?|\.\d+)"

_REGION_PATTERNS: list[tuple[re.Pattern[str], Callable[[re.Match[str]], ImageRegion]]] = [
    (re.compile(r"full"), lambda m: FullRegion()),
    (re.compile(r"square"), lambda m: SquareRegion()),
    (
        re.compile(rf"{_INT},{_INT},{_INT},{_INT}"),
        lambda m: PixelRegion(*(int(g) for g in m.groups())),
    ),
    (
        re.compile(rf"pct:{_FLOAT},{_FLOAT},{_FLOAT},{_FLOAT}"),
        lambda m: PercentRegion(*(float(g) for g in m.groups())),
    ),
]

# Priority matters: the first pattern that matches the whole segment wins.
# "full" is the v2 spelling of "max"; it is read but never written.
_SIZE_PATTERNS: list[tuple[re.Pattern[str], Callable[[re.Match[str]], ImageSize]]] = [
    (re.compile(r"max|full"), lambda m: MaxSize()),
    (re.compile(r"\^max"), lambda m: MaxSize(upscale=True)),
    (re.compile(rf"{_INT},"), lambda m: WidthSize(int(m[1]))),
    (re.compile(rf"\^{_INT},"), lambda m: WidthSize(int(m[1]), upscale=True)),
    (re.compile(rf",{_INT}"), lambda m: HeightSize(int(m[1]))),
    (re.compile(rf"\^,{_INT}"), lambda m: HeightSize(int(m[1]), upscale=True)),
    (re.compile(rf"pct:{_FLOAT}"), lambda m: PercentSize(float(m[1]))),
    (re.compile(rf"\^pct:{_FLOAT}"), lambda m: PercentSize(float(m[1]), upscale=True)),
    (re.compile(rf"{_INT},{_INT}"), lambda m: WidthHeightSize(int(m[1]), int(m[2]))),
    (re.compile(rf"\^{_INT},{_INT}"), lambda m: WidthHeightSize(int(m[1]), int(m[2]), upscale=True)),
    (re.compile(rf"!{_INT},{_INT}"), lambda m: ScaledSize(int(m[1]), int(m[2]))),
    (re.compile(rf"\^!{_INT},{_INT}"), lambda m: ScaledSize(int(m[1]), int(m[2]), upscale=True)),
]

_ROTATION_PATTERN = re.compile(rf"(!?){_FLOAT}")

_SUFFIXES: dict[str, tuple[Quality, ImageFormat]] = {
    f"{q.value}.{f.value}": (q, f) for q in Quality for f in ImageFormat
}


def _first_match(text: str, patterns: list) -> Optional[object]:
    for pattern, build in patterns:
        match = pattern.fullmatch(text)
        if match:
            return build(match)
    return None


def parse_region(text: str) -> ImageRegion:
    """Raises ValueError if ``text`` is not a region segment."""
    region = _first_match(text, _REGION_PATTERNS)
    if region is None:
        raise ValueError(f"invalid region {text!r}")
    return region  # type: ignore[return-value]


def parse_size(text: str) -> ImageSize:
    """Raises ValueError if ``text`` is not a size segment."""
    size = _first_match(text, _SIZE_PATTERNS)
    if size is None:
        raise ValueError(f"invalid size {text!r}")
    return size  # type: ignore[return-value]


def parse_rotation(text: str) -> Rotation:
    """Raises ValueError if ``text`` is not a rotation segment."""
    match = _ROTATION_PATTERN.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid rotation {text!r}")
    return Rotation(float(match[2]), mirrored=bool(match[1]))


def parse_quality_format(text: str) -> tuple[Quality, ImageFormat]:
    """Raises ValueError if ``text`` is not a ``{quality}.{format}`` segment."""
    try:
        return _SUFFIXES[text]
    except KeyError:
        raise ValueError(f"invalid quality/format {text!r}") from None


def parse(url: str) -> ImageUri:
    """
    Parse an Image API address.

    An address whose last path segment is a known ``{quality}.{format}``
    is a request; its last four segments are read right to left as
    quality/format, rotation, size and region and the rest of the path is
    the identifier prefix. Anything else is a service address; a trailing
    ``info.json`` segment is dropped.

    Raises:
        UriParseError: If the address is not absolute or a request segment
            matches no grammar alternative
    """
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise UriParseError(url, "not an absolute URL")
    host = f"{parts.scheme}://{parts.netloc}"
    segments = [s for s in parts.path.split("/") if s]

    if len(segments) >= 4 and segments[-1] in _SUFFIXES:
        try:
            quality, fmt = parse_quality_format(segments[-1])
            rotation = parse_rotation(segments[-2])
            size = parse_size(segments[-3])
            region = parse_region(segments[-4])
        except ValueError as e:
            raise UriParseError(url, str(e)) from e
        return ImageRequestUri(
            host=host,
            prefix="/".join(segments[:-4]),
            region=region,
            size=size,
            rotation=rotation,
            quality=quality,
            format=fmt,
        )

    if segments and segments[-1] == INFO_JSON:
        segments = segments[:-1]
    return InfoUri(host=host, prefix="/".join(segments))


# --- Conversions --------------------------------------------------------------


def to_request(uri: ImageUri) -> ImageRequestUri:
    """Service address -> request with IIIF defaults (full/max/0/default.jpg)."""
    if isinstance(uri, ImageRequestUri):
        return uri
    return ImageRequestUri(host=uri.host, prefix=uri.prefix)


def to_info(uri: ImageUri) -> InfoUri:
    """Drop every request parameter, keeping server and identifier."""
    return InfoUri(host=uri.host, prefix=uri.prefix)


def with_size(uri: ImageUri, size: ImageSize) -> ImageRequestUri:
    return replace(to_request(uri), size=size)


def with_region(uri: ImageUri, region: ImageRegion) -> ImageRequestUri:
    return replace(to_request(uri), region=region)


def with_rotation(uri: ImageUri, rotation: Rotation) -> ImageRequestUri:
    return replace(to_request(uri), rotation=rotation)


def with_quality(uri: ImageUri, quality: Quality) -> ImageRequestUri:
    return replace(to_request(uri), quality=quality)


def with_format(uri: ImageUri, fmt: ImageFormat) -> ImageRequestUri:
    return replace(to_request(uri), format=fmt)


def thumbnail_url_from_info(info_url: str) -> str:
    """
    Request URL for a 180px-wide rendering of the image at ``info_url``.

    Returns ``info_url`` unchanged if it cannot be parsed.

    Example:
        >>> thumbnail_url_from_info("https://example.org/iiif/2/abc/info.json")
        'https://example.org/iiif/2/abc/full/180,/0/default.jpg'
    """
    try:
        uri = parse(info_url)
    except UriParseError:
        return info_url
    return to_url(with_size(uri, WidthSize(THUMBNAIL_WIDTH)))
