from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError


def require_not_future(d: date, today: date, field_name: str = "Date") -> date:
    if d > today:
        raise ValidationError(f"{field_name} cannot be in the future")
    return d


def require_coordinate(lat, lng) -> tuple[float, float]:
    try:
        lat_f = float(lat)
        lng_f = float(lng)
    except (TypeError, ValueError):
        raise ValidationError("Coordinate must be numeric") from None
    if not -90.0 <= lat_f <= 90.0 or not -180.0 <= lng_f <= 180.0:
        raise ValidationError("Coordinate out of bounds")
    return lat_f, lng_f


def normalize_note(text: Optional[str]) -> str:
    return (text or "").strip()
