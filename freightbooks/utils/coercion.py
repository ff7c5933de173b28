"""Mini README: Value coercion helpers for loosely typed payloads.

Keeping these isolated means record modules stay focused on accounting
semantics while JSON or form payloads (strings for numbers, ISO strings for
dates, blanks for missing values) are normalised in one place.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Optional

from ..errors import InvalidRecord


def parse_date(value: object) -> date:
    """Parse ISO formatted strings or date objects safely."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError as error:
            raise InvalidRecord(f"Invalid ISO date: {value!r}") from error
    raise InvalidRecord("Dates must be provided as ISO strings or date/datetime instances.")


def coerce_amount(value: object, *, field_name: str = "amount") -> float:
    """Return a finite float, treating ``None`` and blank strings as zero."""

    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    if isinstance(value, bool):
        raise InvalidRecord(f"{field_name} must be numeric, got a boolean")
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as error:
        raise InvalidRecord(f"{field_name} must be numeric, got {value!r}") from error
    if not math.isfinite(amount):
        raise InvalidRecord(f"{field_name} must be finite, got {value!r}")
    return amount


def optional_amount(value: object, *, field_name: str = "amount") -> Optional[float]:
    """Like ``coerce_amount`` but keeps missing values as ``None``."""

    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return coerce_amount(value, field_name=field_name)


def optional_str(value: object) -> Optional[str]:
    """Normalise blank strings to ``None`` and everything else to ``str``."""

    if value is None:
        return None
    text = str(value).strip()
    return text or None
