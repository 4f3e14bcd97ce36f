from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def parse_decimal(value, field_name: str, *, places: int = 2, minimum: Optional[Decimal] = None, strict: bool = False) -> Decimal:
    """Parse a form value into a Decimal rounded to ``places``.

    ``strict`` makes ``minimum`` exclusive.
    """
    raw = str(value).strip() if value is not None else ""
    if not raw:
        raise ValidationError(f"{field_name} is required")
    try:
        number = Decimal(raw.replace(",", "."))
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{field_name} must be a number")

    try:
        # quantize overflows past 28 significant digits, e.g. "1e30"
        number = number.quantize(Decimal(1).scaleb(-places))
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number")
    if minimum is not None:
        if strict and number <= minimum:
            raise ValidationError(f"{field_name} must be greater than {minimum}")
        if not strict and number < minimum:
            raise ValidationError(f"{field_name} must be at least {minimum}")
    return number
