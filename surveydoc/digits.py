"""
Persian digit localization and date helpers.

Phone numbers, dates and numeric identifiers are written with Persian
digits; free text is left alone. ``localize_value`` applies that rule
recursively to composite values.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Optional, Tuple, Union

_PERSIAN_DIGITS = str.maketrans("0123456789", "۰۱۲۳۴۵۶۷۸۹")

# digits, whitespace and the punctuation used in phones, dates and times
_NUMERICAL_RE = re.compile(r"^[0-9\s\-/:.()+]+$")


def to_persian_digits(text: Any) -> Any:
    """Map ASCII digits to Persian digits. Non-strings are returned unchanged."""
    if not isinstance(text, str):
        return text
    return text.translate(_PERSIAN_DIGITS)


def is_purely_numerical(text: Any) -> bool:
    """True for strings made only of digits, whitespace and ``-/:.()+``."""
    if not isinstance(text, str) or not text.strip():
        return False
    return bool(_NUMERICAL_RE.match(text.strip()))


def localize_value(value: Any) -> Any:
    """
    Localize digits in a value:
    - strings: only when purely numerical
    - numbers: stringified, then localized
    - lists and dicts: recursively
    - None, booleans and anything else: unchanged
    """
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        return to_persian_digits(value) if is_purely_numerical(value) else value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, (int, float)):
        return to_persian_digits(str(value))
    if isinstance(value, (list, tuple)):
        return [localize_value(item) for item in value]
    if isinstance(value, dict):
        return {k: localize_value(v) for k, v in value.items()}
    return value

# ------------------------- Dates -------------------------

DateLike = Union[date, datetime, str, None]


def _parse_date(value: DateLike) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None


def format_date(value: DateLike) -> str:
    """Format a date as ``YYYY-MM-DD``; invalid input gives ``''``."""
    parsed = _parse_date(value)
    return parsed.isoformat() if parsed else ""


def gregorian_to_jalali(gy: int, gm: int, gd: int) -> Tuple[int, int, int]:
    """Convert a Gregorian date to a Solar Hijri (Jalali) ``(year, month, day)``."""
    g_days_before_month = (0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)
    gy2 = gy + 1 if gm > 2 else gy
    days = (
        355666
        + 365 * gy
        + (gy2 + 3) // 4
        - (gy2 + 99) // 100
        + (gy2 + 399) // 400
        + gd
        + g_days_before_month[gm - 1]
    )
    jy = -1595 + 33 * (days // 12053)
    days %= 12053
    jy += 4 * (days // 1461)
    days %= 1461
    if days > 365:
        jy += (days - 1) // 365
        days = (days - 1) % 365
    if days < 186:
        jm = 1 + days // 31
        jd = 1 + days % 31
    else:
        jm = 7 + (days - 186) // 30
        jd = 1 + (days - 186) % 30
    return jy, jm, jd


def to_solar_hijri(value: DateLike) -> str:
    """
    Convert a date to ``YYYY/MM/DD`` in the Solar Hijri calendar,
    written with Persian digits. Invalid input gives ``''``.
    """
    parsed = _parse_date(value)
    if parsed is None:
        return ""
    jy, jm, jd = gregorian_to_jalali(parsed.year, parsed.month, parsed.day)
    return to_persian_digits(f"{jy:04d}/{jm:02d}/{jd:02d}")


__all__ = [
    "format_date",
    "gregorian_to_jalali",
    "is_purely_numerical",
    "localize_value",
    "to_persian_digits",
    "to_solar_hijri",
]
