"""
Deep-zoom tile addressing.

Given an image's ``info.json`` and a downscale factor, produce the grid of
Image API request URLs a tiled viewer needs to draw the whole image.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

from .image_uri import (
    FullRegion,
    ImageRequestUri,
    PixelRegion,
    WidthHeightSize,
    to_request,
    to_url,
)
from .models import InfoJson, TileSpec


DEFAULT_TILE = TileSpec(width=256, height=None, scale_factors=(1, 2, 4, 8, 16, 32))


@dataclass(frozen=True)
class TileAddress:
    """
    One tile of the grid.

    Attributes:
        row: Zero-based row, top to bottom
        col: Zero-based column, left to right
        width: Output width in pixels
        height: Output height in pixels
        url: Fully serialized request URL
        page: Caller-supplied page number, carried through untouched
    """

    row: int
    col: int
    width: int
    height: int
    url: str
    page: int


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def tile_spec(info: InfoJson) -> TileSpec:
    """First advertised tile size, or 256x256 when the server lists none."""
    if info.tiles:
        return info.tiles[0]
    return DEFAULT_TILE


def derive_tiles(page_number: int, scale: int, info: InfoJson) -> list[TileAddress]:
    """
    Compute the request URL of every tile at ``scale``.

    A grid that collapses to a single tile is requested as the full region
    at the scaled size. Otherwise tiles are emitted in row-major order and
    edge tiles are clipped to the pixels the image actually has.

    Example:
        >>> tiles = derive_tiles(0, 1, info)  # 6676x8560, 256px tiles
        >>> len(tiles)
        918
    """
    if scale < 1:
        raise ValueError(f"scale must be a positive integer, got {scale}")

    spec = tile_spec(info)
    tile_w = spec.width
    tile_h = spec.height if spec.height is not None else spec.width

    scaled_w = _round_half_up(info.width / scale)
    scaled_h = _round_half_up(info.height / scale)
    num_rows = math.ceil(scaled_h / tile_h)
    num_cols = math.ceil(scaled_w / tile_w)

    base = to_request(info.id)

    if num_rows == 1 and num_cols == 1:
        request = ImageRequestUri(
            host=base.host,
            prefix=base.prefix,
            region=FullRegion(),
            size=WidthHeightSize(scaled_w, scaled_h),
        )
        return [TileAddress(0, 0, scaled_w, scaled_h, to_url(request), page_number)]

    region_w = tile_w * scale
    region_h = tile_h * scale
    tiles: list[TileAddress] = []
    for row in range(num_rows):
        for col in range(num_cols):
            x = col * region_w
            y = row * region_h

            if x + region_w > info.width:
                w = info.width - x
                out_w = math.ceil(w / scale)
            else:
                w = region_w
                out_w = tile_w

            if y + region_h > info.height:
                h = info.height - y
                out_h = math.ceil(h / scale)
            else:
                h = region_h
                out_h = tile_h

            request = ImageRequestUri(
                host=base.host,
                prefix=base.prefix,
                region=PixelRegion(x, y, w, h),
                size=WidthHeightSize(out_w, out_h),
            )
            tiles.append(TileAddress(row, col, out_w, out_h, to_url(request), page_number))
    return tiles
