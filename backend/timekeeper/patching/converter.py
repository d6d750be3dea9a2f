# backend/timekeeper/patching/converter.py

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from timekeeper.core.exceptions import BadRequestError
from timekeeper.models.base import DATE_FORMAT, DATETIME_FORMAT, parse_formatted
from timekeeper.patching.fields import FieldKind, FieldSpec


def _parse(spec: FieldSpec, raw: str, fmt: str) -> datetime:
    try:
        return parse_formatted(raw, fmt)
    except ValueError:
        raise BadRequestError(
            f"Invalid value '{raw}' for field '{spec.path}': expected format {fmt}"
        )


def convert_value(spec: FieldSpec, raw: Optional[str]) -> Any:
    """
    Raw patch value (string) -> typed value stored for `spec`.
    None stays None; whether that is allowed is the validator's call.
    """
    if raw is None:
        return None

    if spec.kind is FieldKind.DATETIME:
        return _parse(spec, raw, DATETIME_FORMAT)

    if spec.kind is FieldKind.DATE:
        return _parse(spec, raw, DATE_FORMAT).date()

    if spec.kind is FieldKind.ENUM:
        try:
            return spec.enum[raw]
        except KeyError:
            allowed = ", ".join(member.name for member in spec.enum)
            raise BadRequestError(
                f"Invalid value '{raw}' for field '{spec.path}': expected one of {allowed}"
            )

    return raw


def format_value(spec: FieldSpec, value: Any) -> Optional[str]:
    """Inverse of convert_value."""
    if value is None:
        return None
    if spec.kind is FieldKind.DATETIME:
        return value.strftime(DATETIME_FORMAT)
    if spec.kind is FieldKind.DATE:
        if isinstance(value, datetime):
            value = value.date()
        return date.strftime(value, DATE_FORMAT)
    if isinstance(value, Enum):
        return value.name
    return str(value)
