from datetime import date
from typing import Optional

from foodtracker.errors import ValidationError
from foodtracker.utils.http import arg_str, parse_iso_date


def require_date(value, name: str = "date") -> date:
    parsed = parse_iso_date(value)
    if parsed is None:
        raise ValidationError(f"{name} must be a YYYY-MM-DD date", code="INVALID_DATE")
    return parsed


def date_arg(name: str, default: Optional[date] = None) -> Optional[date]:
    """Optional ``YYYY-MM-DD`` query argument; malformed values are rejected."""
    value = arg_str(name)
    if value is None or value == "":
        return default
    return require_date(value, name)
