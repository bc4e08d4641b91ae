"""
Plumbing shared by the v2 and v3 decoders.

Wire schemas are pydantic models; this module turns their validation errors
into ``FieldDecodeError``, looks up enum-like strings permissively, and
enforces the nesting cap for collections and ranges.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Callable, Optional, Sequence, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from .errors import DecodeDepthError, FieldDecodeError, UriParseError
from .image_uri import InfoUri, parse, to_info
from .language import LanguageField
from .models import Other


DEFAULT_MAX_DEPTH = 32

M = TypeVar("M", bound=BaseModel)
E = TypeVar("E", bound=Enum)
T = TypeVar("T")


class WireModel(BaseModel):
    """Base for raw JSON-LD shapes. Unknown keys are kept, never rejected."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


def one_or_many(value: Any) -> Any:
    """Accept a bare object wherever an array is expected."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


class LabelValueEntry(WireModel):
    """``metadata`` row / ``requiredStatement`` in either dialect."""

    label: LanguageField
    value: LanguageField


class SizeEntry(WireModel):
    width: int
    height: int


class TileEntry(WireModel):
    width: int
    height: Optional[int] = None
    scale_factors: list[int] = Field(alias="scaleFactors")


def join_path(*parts: Any) -> str:
    return ".".join(str(p) for p in parts if p != "")


def validate(model: type[M], data: Any, path: str = "") -> M:
    """
    Validate ``data`` against a wire schema.

    Raises:
        FieldDecodeError: For the first field pydantic rejects, with its
            dotted path below ``path``
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        error = e.errors()[0]
        raise FieldDecodeError(join_path(path, *error["loc"]), error["msg"]) from e


def first_of(raw: Any, parsers: Sequence[Callable[[Any], T]], path: str) -> T:
    """
    Run ``parsers`` in order and return the first result that does not fail.

    Raises:
        FieldDecodeError: If every parser raises ``ValueError``
    """
    causes: list[str] = []
    for parser in parsers:
        try:
            return parser(raw)
        except ValueError as e:
            causes.append(str(e))
    raise FieldDecodeError(path, "; ".join(causes) or "no decoder accepted the value")


def check_depth(depth: int, max_depth: int, path: str) -> None:
    if depth > max_depth:
        raise DecodeDepthError(path, max_depth)


def lookup(enum: type[E], raw: str, aliases: Optional[dict[str, E]] = None) -> E | Other:
    """Enum member for ``raw``; unknown strings come back as ``Other(raw)``."""
    if aliases and raw in aliases:
        return aliases[raw]
    try:
        return enum(raw)
    except ValueError:
        return Other(raw)


def lookup_or(enum: type[E], raw: Optional[str], default: E) -> E:
    """Enum member for ``raw``; missing or unknown strings map to ``default``."""
    if raw is None:
        return default
    try:
        return enum(raw)
    except ValueError:
        return default


def parse_service_id(raw_id: str, path: str) -> InfoUri:
    """Image service id -> service address."""
    try:
        return to_info(parse(raw_id))
    except UriParseError as e:
        raise FieldDecodeError(path, e.reason) from e


def service_id(entry: dict[str, Any]) -> Optional[str]:
    """``@id`` (v2) or ``id`` (v3) of a service entry, whichever is a string."""
    for key in ("@id", "id"):
        value = entry.get(key)
        if isinstance(value, str):
            return value
    return None


def link_service(services: list[dict[str, Any]], path: str) -> Optional[InfoUri]:
    """Service address of a logo or thumbnail, if it carries one."""
    for i, entry in enumerate(services):
        raw_id = service_id(entry)
        if raw_id is not None:
            return parse_service_id(raw_id, join_path(path, i, "id"))
    return None


ServiceList = Annotated[list[dict[str, Any]], BeforeValidator(one_or_many)]
