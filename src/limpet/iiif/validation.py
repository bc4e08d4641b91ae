"""
Validation for IIIF documents.

Validation here means "the decoders accept it", not full IIIF compliance:
the document is decoded and any failure is reported as a message.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .dispatch import decode_manifest, decode_resource
from .errors import FieldDecodeError, IIIFError, NoValidServiceIdError


@dataclass(frozen=True)
class ValidationIssue:
    """
    Represents a validation problem.

    Attributes:
        path: JSON path to the problematic field (e.g., "items.0.items.0")
        message: Human-readable description of the issue
    """

    path: str
    message: str


def issue_from_error(error: IIIFError) -> ValidationIssue:
    if isinstance(error, FieldDecodeError):
        return ValidationIssue(error.path, error.cause)
    if isinstance(error, NoValidServiceIdError):
        return ValidationIssue(error.path, "no valid image service id")
    return ValidationIssue("", str(error))


def validate_manifest(data: Any) -> tuple[bool, list[str]]:
    """
    Check that ``data`` decodes as a manifest.

    Returns:
        ``(True, [])`` on success, ``(False, [message])`` otherwise

    Example:
        >>> ok, errors = validate_manifest(load_json(url))
        >>> if not ok:
        ...     print(errors[0])
    """
    try:
        decode_manifest(data)
    except IIIFError as e:
        return False, [str(e)]
    return True, []


def validate_resource(data: Any) -> list[ValidationIssue]:
    """
    Check that ``data`` decodes as any presentation resource.

    Returns:
        List of validation issues (empty if valid)
    """
    try:
        decode_resource(data)
    except IIIFError as e:
        return [issue_from_error(e)]
    return []
