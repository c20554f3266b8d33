from __future__ import annotations

from typing import Iterable, List

from ..core.exceptions import ValidationError
from .ids import is_object_id


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_object_id(value: str, field_name: str) -> str:
    value = (value or "").strip()
    if not is_object_id(value):
        raise ValidationError(f"{field_name} is not a valid identifier")
    return value


def require_object_ids(values: Iterable[str], field_name: str, *, allow_empty: bool = False) -> List[str]:
    """Validate a list of identifiers, dropping duplicates but keeping order."""

    if values is None or isinstance(values, (str, bytes)):
        raise ValidationError(f"{field_name} must be a list")

    out: list[str] = []
    for v in values:
        if not isinstance(v, str):
            raise ValidationError(f"{field_name} must contain identifiers")
        v = require_object_id(v, field_name)
        if v not in out:
            out.append(v)

    if not out and not allow_empty:
        raise ValidationError(f"{field_name} must not be empty")
    return out


def normalize_phone(value: str) -> str:
    """Login phones are compared without whitespace."""
    return "".join(require_non_empty(value, "Phone").split())
