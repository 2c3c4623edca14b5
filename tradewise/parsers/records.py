"""
Canonical trade record shared by every importer.

All three sources (CSV, spreadsheet, PDF text) converge on TradeRecord.
Importers build a PartialTrade while they scan a row or line, run it
through apply_defaults(), and only emit it when is_complete() holds:

- direction is set
- asset is non-empty
- trade_amount is nonzero
- profit_amount is defined (zero is fine, None is not)

A zero trade amount therefore never produces a record, even when every
other field is populated.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Iterable, Optional

import pandas as pd

DEFAULT_DIRECTION = "call"
DEFAULT_CURRENCY = "USD"

# Python attribute -> JSON key, in output order
JSON_FIELDS: dict[str, str] = {
    "direction": "direction",
    "order_number": "orderNumber",
    "expiry_time": "expiryTime",
    "asset": "asset",
    "open_time": "openTime",
    "close_time": "closeTime",
    "open_price": "openPrice",
    "close_price": "closePrice",
    "trade_amount": "tradeAmount",
    "profit_amount": "profitAmount",
    "currency": "currency",
}

CANONICAL_COLUMNS = list(JSON_FIELDS.values())

_TEXT_FIELDS = ("order_number", "expiry_time", "open_time", "close_time")
_PRICE_FIELDS = ("open_price", "close_price")


@dataclass(frozen=True)
class TradeRecord:
    """A single normalized trade, immutable once emitted."""

    direction: str  # "call" | "put"
    order_number: str
    expiry_time: str
    asset: str
    open_time: str
    close_time: str
    open_price: float
    close_price: float
    trade_amount: float
    profit_amount: float
    currency: str

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict using the camelCase field names."""
        return {key: getattr(self, attr) for attr, key in JSON_FIELDS.items()}


@dataclass
class PartialTrade:
    """Work-in-progress trade; any field may still be missing."""

    direction: Optional[str] = None
    order_number: Optional[str] = None
    expiry_time: Optional[str] = None
    asset: Optional[str] = None
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    open_price: Optional[float] = None
    close_price: Optional[float] = None
    trade_amount: Optional[float] = None
    profit_amount: Optional[float] = None
    currency: Optional[str] = None

    def is_unset(self, name: str) -> bool:
        return getattr(self, name) is None


# ---------------------------------------------------------------------------
# Shared defaults + completeness
# ---------------------------------------------------------------------------

def _is_blank_number(value: Optional[float]) -> bool:
    return value is None or value == 0 or (isinstance(value, float) and math.isnan(value))


def apply_defaults(partial: PartialTrade) -> PartialTrade:
    """Fill the optional fields every importer defaults the same way.

    direction -> "call", currency -> "USD", text fields -> "", prices -> 0.
    Returns a new PartialTrade; the input is left untouched.
    """
    updates: dict[str, Any] = {}
    if not partial.direction:
        updates["direction"] = DEFAULT_DIRECTION
    if not partial.currency:
        updates["currency"] = DEFAULT_CURRENCY
    for name in _TEXT_FIELDS:
        if not getattr(partial, name):
            updates[name] = ""
    for name in _PRICE_FIELDS:
        if _is_blank_number(getattr(partial, name)):
            updates[name] = 0.0
    return replace(partial, **updates)


def is_complete(partial: PartialTrade) -> bool:
    amount = partial.trade_amount
    return bool(
        partial.direction
        and partial.asset
        and amount
        and not (isinstance(amount, float) and math.isnan(amount))
        and partial.profit_amount is not None
    )


def finalize(partial: PartialTrade) -> Optional[TradeRecord]:
    """Apply defaults and return a TradeRecord, or None if incomplete."""
    filled = apply_defaults(partial)
    if not is_complete(filled):
        return None
    return TradeRecord(**{f.name: getattr(filled, f.name) for f in fields(TradeRecord)})


# ---------------------------------------------------------------------------
# Export helpers
# ---------------------------------------------------------------------------

def records_to_dicts(records: Iterable[TradeRecord]) -> list[dict[str, Any]]:
    return [r.to_dict() for r in records]


def records_to_frame(records: Iterable[TradeRecord]) -> pd.DataFrame:
    """Build a DataFrame with the canonical JSON columns, in source order."""
    rows = records_to_dicts(records)
    if not rows:
        return pd.DataFrame(columns=CANONICAL_COLUMNS)
    return pd.DataFrame(rows)[CANONICAL_COLUMNS].reset_index(drop=True)
