from __future__ import annotations

from ..core.exceptions import ValidationError


def require_month(value: int) -> int:
    month = int(value)
    if not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12 (got {month})")
    return month


def require_year(value: int) -> int:
    year = int(value)
    if year < 1:
        raise ValidationError(f"Invalid year: {year}")
    return year
