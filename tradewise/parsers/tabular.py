"""
Row extraction for tabular sources (CSV lines and spreadsheet rows).

Both paths share the same coercion and defaults, and differ only in how a
cell is looked up: CSV rows by column index, spreadsheet rows by trying the
candidate keys returned from resolve_row_keys().

Any exception raised while extracting a single row is logged and turned
into "no record" so one bad row never sinks the file.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from .columns import resolve_row_keys
from .coercion import normalize_code, parse_direction, parse_number
from .records import DEFAULT_CURRENCY, PartialTrade, TradeRecord, finalize

logger = logging.getLogger(__name__)

_NUMERIC_FIELDS = {"open_price", "close_price", "trade_amount", "profit_amount"}


# ---------------------------------------------------------------------------
# CSV line splitting
# ---------------------------------------------------------------------------

def split_csv_line(line: str) -> list[str]:
    """Split one CSV line on commas, honouring double-quoted fields.

    Every literal '"' toggles the quoted state and is dropped. Doubled
    quotes ("") are not treated as an escaped quote.
    """
    result: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            result.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    result.append("".join(current).strip())
    return result


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------

def _coerce(field: str, raw: Any) -> Any:
    if field == "direction":
        return parse_direction(raw)
    if field == "asset":
        return normalize_code(raw)
    if field == "currency":
        return normalize_code(raw) or DEFAULT_CURRENCY
    if field in _NUMERIC_FIELDS:
        return parse_number(raw)
    return "" if raw is None else str(raw)


def _guarded(extract: Callable[[], Optional[TradeRecord]], where: str) -> Optional[TradeRecord]:
    try:
        return extract()
    except Exception as e:
        logger.debug("[Tabular] Row extraction failed (%s): %s", where, e)
        return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_indexed_row(
    values: list[str],
    mapping: Mapping[str, int],
) -> Optional[TradeRecord]:
    """Build a TradeRecord from a split CSV row and a resolved header."""

    def extract() -> Optional[TradeRecord]:
        partial = PartialTrade()
        for field, idx in mapping.items():
            setattr(partial, field, _coerce(field, values[idx]))
        return finalize(partial)

    return _guarded(extract, "csv")


def _present(value: Any) -> bool:
    if value is None or value == "":
        return False
    return not (isinstance(value, float) and value != value)


def extract_keyed_row(
    row: Mapping[str, Any],
    candidates: Optional[Mapping[str, list[str]]] = None,
) -> Optional[TradeRecord]:
    """Build a TradeRecord from a spreadsheet row dict.

    For each field the candidate keys are tried in order and the first
    non-empty cell wins. Without candidates the row's own keys are
    resolved inside the per-row guard.
    """

    def extract() -> Optional[TradeRecord]:
        keyed = candidates if candidates is not None else resolve_row_keys(row)
        partial = PartialTrade()
        for field, keys in keyed.items():
            for key in keys:
                value = row.get(key)
                if _present(value):
                    setattr(partial, field, _coerce(field, value))
                    break
        return finalize(partial)

    return _guarded(extract, "sheet")
