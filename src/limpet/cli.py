"""
Limpet CLI

Commands:
- validate: Check that a manifest decodes
- inspect: Summarize any IIIF presentation resource
- parse-uri: Show the components of an Image API address
- thumbnail: Thumbnail URL for an info.json address
- tiles: Tile request URLs for an info.json
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from typing import Any

import httpx
import typer

from limpet.iiif import (
    Canvas,
    Collection,
    IIIFError,
    ImageRequestUri,
    Manifest,
    Range,
    derive_tiles,
    extract_label,
    load_info,
    load_json,
    parse_image_uri,
    thumbnail_url_from_info,
    to_url,
    validate_manifest,
)
from limpet.iiif.decoding import DEFAULT_MAX_DEPTH
from limpet.iiif.dispatch import decode_resource
from limpet.iiif.image_uri import region_to_str, rotation_to_str, size_to_str

app = typer.Typer(add_completion=False, help="IIIF document and Image API tooling")

DEFAULT_LANGUAGE = "en"


class JsonFormatter(logging.Formatter):
    """Simple JSON formatter for structured logs."""
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        # Include any custom attributes passed via `extra=`.
        reserved = {
            "name","msg","args","levelname","levelno","pathname","filename","module",
            "exc_info","exc_text","stack_info","lineno","funcName","created","msecs",
            "relativeCreated","thread","threadName","processName","process","taskName",
        }
        for k, v in record.__dict__.items():
            if k in reserved or k.startswith("_"):
                continue
            try:
                json.dumps(v)
                payload[k] = v
            except TypeError:
                payload[k] = repr(v)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str) -> logging.Logger:
    logger = logging.getLogger("limpet")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


LOGGER = logging.getLogger("limpet")


def _load_or_exit(source: str) -> Any:
    try:
        return load_json(source)
    except (OSError, ValueError, httpx.HTTPError) as e:
        typer.echo(f"Error: could not load {source}: {e}", err=True)
        raise typer.Exit(code=1)


@app.command("validate")
def validate_cmd(
    manifest: str = typer.Argument(..., help="Manifest JSON path or URL"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level"),
) -> None:
    """Check that a IIIF Presentation 2.1 or 3.0 manifest decodes."""
    global LOGGER
    LOGGER = setup_logging(log_level)

    data = _load_or_exit(manifest)
    ok, errors = validate_manifest(data)
    if not ok:
        typer.echo(f"❌ Validation failed: {manifest}")
        for i, message in enumerate(errors, start=1):
            typer.echo(f"  {i:>3}. {message}")
        raise typer.Exit(code=2)

    typer.echo("✅ Validation passed.")


@app.command("inspect")
def inspect_cmd(
    source: str = typer.Argument(..., help="Manifest, collection, canvas or range JSON path or URL"),
    lang: str = typer.Option(DEFAULT_LANGUAGE, "--lang", help="Preferred label language"),
    max_depth: int = typer.Option(
        DEFAULT_MAX_DEPTH, "--max-depth", help="Deepest collection/range nesting to accept"
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level"),
) -> None:
    """Print version, kind, label and size of a IIIF presentation resource."""
    global LOGGER
    LOGGER = setup_logging(log_level)

    data = _load_or_exit(source)
    try:
        version, resource = decode_resource(data, max_depth=max_depth)
    except IIIFError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    LOGGER.info("Decoded resource", extra={"source": source, "version": version.value})
    typer.echo(f"Version: {version.value}")
    typer.echo(f"Kind: {type(resource).__name__}")
    typer.echo(f"Id: {resource.id}")
    if resource.label is not None:
        typer.echo(f"Label: {extract_label(lang, resource.label)}")

    if isinstance(resource, Manifest):
        typer.echo(f"Canvases: {len(resource.canvases)}")
        typer.echo(f"Ranges: {len(resource.ranges or ())}")
        for row in resource.metadata:
            typer.echo(f"  {extract_label(lang, row.label)}: {extract_label(lang, row.value)}")
    elif isinstance(resource, Collection):
        typer.echo(f"Manifests: {len(resource.manifests())}")
        typer.echo(f"Collections: {len(resource.collections())}")
    elif isinstance(resource, Canvas):
        typer.echo(f"Images: {len(resource.images)}")
    elif isinstance(resource, Range):
        typer.echo(f"Canvases: {len(resource.canvas_ids())}")


@app.command("parse-uri")
def parse_uri_cmd(
    uri: str = typer.Argument(..., help="Image API info.json or image request URL"),
) -> None:
    """Print the components of a IIIF Image API address."""
    try:
        parsed = parse_image_uri(uri)
    except IIIFError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    typer.echo(f"Host: {parsed.host}")
    typer.echo(f"Identifier: {parsed.prefix}")
    if isinstance(parsed, ImageRequestUri):
        typer.echo(f"Region: {region_to_str(parsed.region)}")
        typer.echo(f"Size: {size_to_str(parsed.size)}")
        typer.echo(f"Rotation: {rotation_to_str(parsed.rotation)}")
        typer.echo(f"Quality: {parsed.quality.value}")
        typer.echo(f"Format: {parsed.format.value}")
    typer.echo(f"Canonical: {to_url(parsed)}")


@app.command("thumbnail")
def thumbnail_cmd(
    info_url: str = typer.Argument(..., help="Image API info.json URL"),
) -> None:
    """Print the 180px-wide thumbnail URL for an image service."""
    typer.echo(thumbnail_url_from_info(info_url))


@app.command("tiles")
def tiles_cmd(
    info: str = typer.Argument(..., help="info.json path or URL"),
    scale: int = typer.Option(1, "--scale", min=1, help="Downscale factor"),
    page: int = typer.Option(0, "--page", help="Page number to tag tiles with"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level"),
) -> None:
    """Print one tile request URL per line for a deep-zoom rendering."""
    global LOGGER
    LOGGER = setup_logging(log_level)

    try:
        _, image_info = load_info(info)
    except (OSError, ValueError, httpx.HTTPError) as e:
        typer.echo(f"Error: could not load {info}: {e}", err=True)
        raise typer.Exit(code=1)

    tiles = derive_tiles(page, scale, image_info)
    LOGGER.info("Derived tiles", extra={"count": len(tiles), "scale": scale})
    for tile in tiles:
        typer.echo(tile.url)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
