"""
Token classifier for delimited free-text lines (pipe or comma shaped).

A PDF trade table usually loses its headers during text extraction, so the
tokens of a line are untyped. Each token is tested against the rules below,
in order, and the first rule that accepts it wins:

1. "call" / "put"                      -> direction
2. order number (#1001, 1001)          -> order_number
3. upper-case symbol (AAPL, EUR/USD)   -> asset
4. known currency code                 -> currency (always overwrites)
5. number ($, % allowed)               -> profit / amount / open / close price
6. date or time                        -> open_time, close_time, expiry_time

Every slot except currency is filled at most once. Numbers are told apart
by shape and magnitude: a percentage is the profit, anything above 1000 is
the trade amount, and the first two values in (0, 1000) are the open and
close prices.
"""

from __future__ import annotations

import re
from typing import Optional

from .coercion import parse_number_or_none
from .records import PartialTrade, TradeRecord, finalize

CURRENCY_CODES = frozenset({"USD", "EUR", "GBP", "JPY", "AUD", "CAD", "CHF"})

_ORDER_RE = re.compile(r"^#?\d+$")
_ASSET_RE = re.compile(r"^[A-Z]+/?[A-Z]*$")
_NUMBER_RE = re.compile(r"^\$?\d+\.?\d*%?$")
_DATETIME_PATTERNS = [
    re.compile(r"\d{1,2}[:/]\d{2}"),
    re.compile(r"\d{4}-\d{2}-\d{2}"),
]

_TIME_SLOTS = ("open_time", "close_time", "expiry_time")
_AMOUNT_THRESHOLD = 1000


def _assign_number(trade: PartialTrade, token: str) -> None:
    num = parse_number_or_none(token)
    if num is None:
        return

    if "%" in token and trade.is_unset("profit_amount"):
        trade.profit_amount = num
    elif num > _AMOUNT_THRESHOLD and trade.is_unset("trade_amount"):
        trade.trade_amount = num
    elif 0 < num < _AMOUNT_THRESHOLD and trade.is_unset("open_price"):
        trade.open_price = num
    elif 0 < num < _AMOUNT_THRESHOLD and trade.is_unset("close_price"):
        trade.close_price = num


def _assign_time(trade: PartialTrade, token: str) -> None:
    for slot in _TIME_SLOTS:
        if trade.is_unset(slot):
            setattr(trade, slot, token)
            return


def classify_token(trade: PartialTrade, token: str) -> None:
    """Route one token into the first slot whose rule accepts it."""
    lowered = token.lower()

    if lowered in ("call", "put"):
        # a repeated side label is consumed here so "PUT" never lands in asset
        if trade.is_unset("direction"):
            trade.direction = lowered
    elif _ORDER_RE.match(token) and trade.is_unset("order_number"):
        trade.order_number = token
    elif _ASSET_RE.match(token) and trade.is_unset("asset"):
        trade.asset = token
    elif token.upper() in CURRENCY_CODES:
        trade.currency = token.upper()
    elif _NUMBER_RE.match(token):
        _assign_number(trade, token)
    elif any(p.search(token) for p in _DATETIME_PATTERNS):
        _assign_time(trade, token)


def classify_tokens(tokens: list[str]) -> Optional[TradeRecord]:
    """Classify a whole token sequence; None if the result is incomplete."""
    trade = PartialTrade()
    for token in tokens:
        classify_token(trade, token)
    return finalize(trade)
