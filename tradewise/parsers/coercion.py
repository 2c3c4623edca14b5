"""Value coercion shared by the tabular and free-text importers."""

from __future__ import annotations

import math
import re
from typing import Any, Optional

import pandas as pd

# Characters stripped before numeric parsing: "$1,234.50" -> 1234.50, "85%" -> 85
_NUMBER_NOISE_RE = re.compile(r"[$,%]")
# "USD 158.50" -> "158.50"
_CURRENCY_PREFIX_RE = re.compile(r"^[A-Z]{2,4}\s+", re.IGNORECASE)
# Only the leading number counts: "1500 USD" -> 1500, "12abc" -> 12
_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_CALL_KEYWORDS = ("call", "buy", "long")
_PUT_KEYWORDS = ("put", "sell", "short")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def parse_number_or_none(value: Any) -> Optional[float]:
    """Parse a currency/percent string; None when it isn't a number.

    A leading currency code and any trailing text are ignored, so
    "USD 1,500" and "1500 USD" both read as 1500.0.
    """
    if _is_missing(value):
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    else:
        cleaned = _NUMBER_NOISE_RE.sub("", str(value)).strip()
        cleaned = _CURRENCY_PREFIX_RE.sub("", cleaned)
        m = _LEADING_NUMBER_RE.match(cleaned)
        if not m:
            return None
        result = float(m.group(0))
    # NaN and +/-inf are not valid JSON numbers
    if not math.isfinite(result):
        return None
    return result


def parse_number(value: Any) -> float:
    """Tabular flavour of parse_number_or_none: anything unparseable is 0.0."""
    result = parse_number_or_none(value)
    return 0.0 if result is None else result


def parse_direction(value: Any) -> str:
    """Map a free-form side label to "call" or "put" (default "call")."""
    if _is_missing(value):
        return "call"
    normalized = str(value).strip().lower()
    if any(k in normalized for k in _CALL_KEYWORDS):
        return "call"
    if any(k in normalized for k in _PUT_KEYWORDS):
        return "put"
    return "call"


def normalize_code(value: Any) -> str:
    """Asset symbols and currency codes are stored trimmed and upper-cased."""
    if _is_missing(value):
        return ""
    return str(value).strip().upper()
