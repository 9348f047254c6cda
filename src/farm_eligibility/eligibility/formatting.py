from __future__ import annotations

import math
import re
from typing import Any

DEFAULT_LOCALE = "en-US"

# (thousands separator, decimal separator) per language.
_SEPARATORS: dict[str, tuple[str, str]] = {
    "en": (",", "."),
    "es": (".", ","),
}

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def language_for(locale: str | None) -> str:
    """Return the language part of a locale tag, falling back to English."""

    lang = (locale or DEFAULT_LOCALE).replace("_", "-").split("-")[0].strip().lower()
    return lang if lang in _SEPARATORS else "en"


def _localize(formatted: str, locale: str | None) -> str:
    thousands, decimal = _SEPARATORS[language_for(locale)]
    if (thousands, decimal) == (",", "."):
        return formatted
    return formatted.replace(",", "\x00").replace(".", decimal).replace("\x00", thousands)


def format_decimal(value: float, locale: str | None = None, *, digits: int = 2) -> str:
    """Format with exactly `digits` fraction digits and locale grouping."""

    return _localize(f"{value:,.{digits}f}", locale)


def format_number(value: float, locale: str | None = None) -> str:
    """Format like a default locale number: grouping, up to 3 fraction digits."""

    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return _localize(text, locale)


def _is_missing(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return True
    if not isinstance(value, (int, float)):
        return True
    return math.isnan(value)


def format_area_ha(value: Any, locale: str | None = None) -> str:
    """Area for messages and reports: missing values render as "N/A"."""

    if _is_missing(value):
        return "N/A"
    return f"{format_decimal(float(value), locale)} ha"


def format_area_display(value: Any, locale: str | None = None) -> str:
    """Area for inline summaries: missing values render as "0.00 ha"."""

    if _is_missing(value):
        return f"{format_decimal(0.0, locale)} ha"
    return f"{format_decimal(float(value), locale)} ha"


def parse_leading_int(value: str) -> int | None:
    """Parse the leading integer of a string ("2015", " 19 ", "2020a").

    Returns None when the string does not start with digits.
    """

    match = _LEADING_INT_RE.match(value)
    if match is None:
        return None
    return int(match.group(1))


def format_year(year: Any) -> str:
    """Format a deforestation year for reports.

    Two-digit years use a 50-year pivot: 50-99 -> 19xx, 0-49 -> 20xx.
    """

    if year is None or isinstance(year, bool):
        return "N/A"
    if isinstance(year, str):
        parsed = parse_leading_int(year)
    elif isinstance(year, (int, float)):
        parsed = None if not math.isfinite(year) else int(year)
    else:
        parsed = None
    if parsed is None:
        return "N/A"
    if 0 <= parsed < 100:
        parsed = 1900 + parsed if parsed >= 50 else 2000 + parsed
    return str(parsed)
