"""
Multilingual text values.

IIIF v3 writes text as a language map (``{"en": ["Title"]}``); v2 uses bare
strings, ``{"@value": ..., "@language": ...}`` objects, or arrays of either.
All of them normalize into ``LanguageMap``, an ordered sequence of
``(key, values)`` pairs with unique keys.

Basic usage:
    >>> label = decode({"en": ["Book of Hours"], "none": ["MS 12"]})
    >>> extract_label("de", label)
    'MS 12'
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Iterator, Union

from pydantic import PlainValidator


NO_VALUE_FOUND = "[No language value found]"
VALUE_SEPARATOR = "; "


class Lang(Enum):
    """Language keys that are not concrete language tags."""

    NONE = "none"  # explicitly not localizable
    DEFAULT = "default"  # no language information at all (v2 plain strings)


LanguageKey = Union[str, Lang]


def _key_from_tag(tag: str) -> LanguageKey:
    return Lang.NONE if tag == Lang.NONE.value else tag


@dataclass(frozen=True)
class LanguageMap:
    """
    Ordered mapping of language keys to lists of strings.

    Order is the order keys were first seen while decoding; it decides the
    "first entry" fallback of ``extract_label``.
    """

    entries: tuple[tuple[LanguageKey, tuple[str, ...]], ...] = ()

    @classmethod
    def from_pairs(cls, pairs: list[tuple[LanguageKey, str]]) -> "LanguageMap":
        """Group ``(key, value)`` pairs by key, keeping first-seen key order."""
        grouped: dict[LanguageKey, list[str]] = {}
        for key, value in pairs:
            grouped.setdefault(key, []).append(value)
        return cls(tuple((k, tuple(v)) for k, v in grouped.items()))

    @classmethod
    def single(cls, value: str, key: LanguageKey = Lang.DEFAULT) -> "LanguageMap":
        return cls(((key, (value,)),))

    def get(self, key: LanguageKey) -> tuple[str, ...] | None:
        for k, values in self.entries:
            if k == key:
                return values
        return None

    def keys(self) -> list[LanguageKey]:
        return [k for k, _ in self.entries]

    def __iter__(self) -> Iterator[tuple[LanguageKey, tuple[str, ...]]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)


EMPTY = LanguageMap()


def _decode_value_object(raw: Any) -> LanguageMap | None:
    """v2 ``{"@value", "@language"?}`` object, or an array of them (bare strings allowed)."""
    items = raw if isinstance(raw, list) else [raw]
    if not items:
        return None
    pairs: list[tuple[LanguageKey, str]] = []
    for item in items:
        if isinstance(item, str) and isinstance(raw, list):
            pairs.append((Lang.DEFAULT, item))
            continue
        if not isinstance(item, dict) or not isinstance(item.get("@value"), str):
            return None
        language = item.get("@language")
        if language is None:
            language = Lang.NONE.value
        if not isinstance(language, str):
            return None
        pairs.append((_key_from_tag(language), item["@value"]))
    return LanguageMap.from_pairs(pairs)


def _decode_bare_string(raw: Any) -> LanguageMap | None:
    if isinstance(raw, str):
        return LanguageMap.single(raw)
    return None


def _decode_native_map(raw: Any) -> LanguageMap | None:
    """v3 ``{"en": ["..."], "none": ["..."]}``."""
    if not isinstance(raw, dict):
        return None
    entries: list[tuple[LanguageKey, tuple[str, ...]]] = []
    for tag, values in raw.items():
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            return None
        entries.append((_key_from_tag(tag), tuple(values)))
    return LanguageMap(tuple(entries))


# Tried in order; the first shape that matches wins.
_SHAPES = (_decode_value_object, _decode_bare_string, _decode_native_map)


def decode(raw: Any) -> LanguageMap:
    """
    Decode any IIIF text encoding into a ``LanguageMap``.

    Shapes are tried in order: v2 value object(s), bare string, v3
    language map.

    Raises:
        ValueError: If ``raw`` matches none of the shapes
    """
    for shape in _SHAPES:
        result = shape(raw)
        if result is not None:
            return result
    raise ValueError(f"not a language value: {raw!r}")


def decode_value(raw: Any) -> LanguageMap:
    """Decode only the v2 shapes: value object(s) or a bare string."""
    result = _decode_value_object(raw) or _decode_bare_string(raw)
    if result is None:
        raise ValueError(f"not a v2 language value: {raw!r}")
    return result


def decode_language_map(raw: Any) -> LanguageMap:
    """Decode only the v3 language map shape."""
    result = _decode_native_map(raw)
    if result is None:
        raise ValueError(f"not a language map: {raw!r}")
    return result


def extract_label(preferred_language: str, language_map: LanguageMap) -> str:
    """
    Pick the best display string from a language map.

    Precedence: the requested language, then the ``none`` entry, then the
    ``default`` entry, then whichever entry comes first. Multiple values
    are joined with ``"; "``.

    Example:
        >>> extract_label("en", decode("Untitled"))
        'Untitled'
        >>> extract_label("en", EMPTY)
        '[No language value found]'
    """
    for key in (preferred_language, Lang.NONE, Lang.DEFAULT):
        values = language_map.get(key)
        if values is not None:
            return VALUE_SEPARATOR.join(values)
    for _, values in language_map:
        return VALUE_SEPARATOR.join(values)
    return NO_VALUE_FOUND


# Field type for pydantic wire schemas.
LanguageField = Annotated[LanguageMap, PlainValidator(decode)]
