from __future__ import annotations

import math
from datetime import datetime

from stockflow.domain.errors import ValidationError


def now() -> datetime:
    """Default clock for the write services: local time, whole seconds."""
    return datetime.now().replace(microsecond=0)


def parse_int(value: object, field: str, min_value: int = 1) -> int:
    # whole numbers only; 2.0 and "3" are fine, 2.9 and "abc" are not
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer.")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be an integer.")
        v = int(value)
    else:
        try:
            v = int(str(value).strip())
        except (TypeError, ValueError):
            raise ValidationError(f"{field} must be an integer.") from None
    if v < min_value:
        raise ValidationError(f"{field} must be >= {min_value}.")
    return v


def parse_price(value: object, field: str = "Unit price") -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number.") from None
    if math.isnan(v) or math.isinf(v):
        raise ValidationError(f"{field} must be a number.")
    if v < 0:
        raise ValidationError(f"{field} must be >= 0.")
    return v
