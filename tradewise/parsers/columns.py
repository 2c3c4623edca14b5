"""
Column alias table and header resolution for tabular trade exports.

Brokers label the same column many ways ("Symbol", "Ticker", "Pair"...).
COLUMN_ALIASES lists the accepted header names per canonical field, most
specific first. Matching is exact after trimming and lower-casing.

CSV files declare one header row, so they are resolved once per file.
Spreadsheet rows arrive as dicts, and rows in the same sheet can carry
different key spellings, so they are resolved row by row.
"""

from __future__ import annotations

from typing import Any, Mapping

COLUMN_ALIASES: Mapping[str, tuple[str, ...]] = {
    "direction": ("call/put", "direction", "type", "trade type", "option type", "side"),
    "order_number": ("order #", "order number", "order id", "order", "id", "ticket"),
    "expiry_time": ("expiry", "expiry time", "expiration", "exp", "expiration time"),
    "asset": ("asset", "symbol", "stock", "ticker", "instrument", "pair"),
    "open_time": ("open time", "entry time", "start time", "open date", "entry date"),
    "close_time": ("close time", "exit time", "end time", "close date", "exit date"),
    "open_price": ("open price", "entry price", "strike price", "open"),
    "close_price": ("close price", "exit price", "close"),
    "trade_amount": ("amount", "trade amount", "investment", "stake", "trade size"),
    "profit_amount": ("profit", "p/l", "payout", "profit/loss", "return"),
    "currency": ("currency", "ccy", "pair currency"),
}


def _normalize_header(name: Any) -> str:
    return str(name).strip().lower()


def resolve_header(header: list[str]) -> dict[str, int]:
    """Map canonical fields to column indices for a CSV header row.

    The first alias (in declared order) that appears in the header wins.
    Fields with no matching column are left out of the result.
    """
    normalized = [_normalize_header(h) for h in header]
    mapping: dict[str, int] = {}
    for field, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in normalized:
                mapping[field] = normalized.index(alias)
                break
    return mapping


def resolve_row_keys(row: Mapping[str, Any]) -> dict[str, list[str]]:
    """Collect the original-cased row keys matching each field's aliases.

    Keys are returned in alias order, so the extractor tries the most
    specific spelling first.
    """
    keys = list(row.keys())
    mapping: dict[str, list[str]] = {field: [] for field in COLUMN_ALIASES}
    for field, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            for key in keys:
                if _normalize_header(key) == alias and key not in mapping[field]:
                    mapping[field].append(key)
    return mapping
