"""
IIIF dialect tag and JSON-LD context constants.

Every decoded top-level entity is paired with a ``Version`` so callers can
round-trip to the dialect the document came from.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


PRESENTATION_3_CONTEXT = "http://iiif.io/api/presentation/3/context.json"
PRESENTATION_2_CONTEXT = "http://iiif.io/api/presentation/2/context.json"
IMAGE_3_CONTEXT = "http://iiif.io/api/image/3/context.json"
IMAGE_2_CONTEXT = "http://iiif.io/api/image/2/context.json"


class Version(str, Enum):
    """IIIF dialect a document was decoded from."""

    V2 = "2"
    V3 = "3"


def context_values(raw: Any, *, lenient: bool = False) -> list[str] | None:
    """
    Normalize an ``@context`` value into a list of strings.

    ``@context`` may be a single string or an array. With ``lenient=True``
    array entries that are not strings (some image servers emit nulls) are
    dropped; otherwise a single non-string entry makes the whole value
    unreadable and ``None`` is returned.
    """
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, list):
        strings = [v for v in raw if isinstance(v, str)]
        if len(strings) != len(raw) and not lenient:
            return None
        return strings
    return None


def detect_version(raw_context: Any, *, v3: str, v2: str, lenient: bool = False) -> Version | None:
    """Return the dialect whose context constant appears in ``raw_context``, v3 first."""
    values = context_values(raw_context, lenient=lenient)
    if values is None:
        return None
    if v3 in values:
        return Version.V3
    if v2 in values:
        return Version.V2
    return None
