"""Cell value normalization shared by the importer, lookups and the map popups."""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from ..config import settings

PLACEHOLDER = "—"

_NON_NUMERIC = re.compile(r"[^\d.,-]")


def to_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def to_num(value: Any) -> Optional[float]:
    """Parse spreadsheet numbers written with either separator convention.

    ``"1.234.567,89"`` (both separators) reads the comma as the decimal point;
    ``"12,565"`` (commas only) reads the commas as thousands separators.
    Returns ``None`` instead of raising for anything that is not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None

    cleaned = _NON_NUMERIC.sub("", str(value).strip())
    if not cleaned:
        return None
    if "," in cleaned and "." in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    else:
        cleaned = cleaned.replace(",", "")

    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def is_blank(value: Any) -> bool:
    return to_str(value) == ""


def display_value(value: Any) -> str:
    text = to_str(value)
    return text or PLACEHOLDER


def format_money(value: Any) -> str:
    """Whole-peso currency text, e.g. ``$ 1.234.567``; halves round away from zero."""
    number = to_num(value)
    if number is None:
        return PLACEHOLDER
    pesos = Decimal(str(number)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    grouped = f"{abs(pesos):,.0f}".replace(",", ".")
    sign = "-" if pesos < 0 else ""
    return f"{sign}{settings.currency_symbol} {grouped}"
