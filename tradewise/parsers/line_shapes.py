"""
Line-shape matchers for free text pulled out of trade-history PDFs.

Three shapes are recognised, tried in this priority order:

1. PipeShape      "call | #1001 | AAPL | USD | ..."   (>= 10 tokens)
2. KeyValueShape  "Asset: TSLA"                       (one field per line)
3. CommaShape     "put, 1002, EURUSD, ..."            (>= 8 tokens)

Pipe and comma lines are self-contained and go through the token
classifier. Key-value lines only carry one field each, so they feed a
TradeAccumulator that carries the partial trade across lines until it is
complete.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional

from .coercion import normalize_code, parse_direction, parse_number_or_none
from .records import PartialTrade, TradeRecord, apply_defaults, finalize, is_complete
from .tokens import classify_tokens

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Key-value rules
# ---------------------------------------------------------------------------

def _price(value: str) -> Optional[float]:
    return parse_number_or_none(re.sub(r"[^0-9.]", "", value))


# Keys are matched by substring containment, so order matters:
# "Order #" must hit the order rule, "Trade Amount" the amount rule, and
# "Profit Amount" lands on amount as well because amount is checked first.
KEY_RULES: list[tuple[tuple[str, ...], str, Callable[[str], object]]] = [
    (("order",), "order_number", str),
    (("asset", "symbol"), "asset", normalize_code),
    (("call", "put"), "direction", parse_direction),
    (("amount", "investment"), "trade_amount", parse_number_or_none),
    (("profit", "payout", "p/l"), "profit_amount", parse_number_or_none),
    (("open price",), "open_price", _price),
    (("close price",), "close_price", _price),
    (("open time",), "open_time", str),
    (("close time",), "close_time", str),
    (("expir",), "expiry_time", str),
    (("currency",), "currency", normalize_code),
]

_KEY_VALUE_RE = re.compile(r"^([^:]+):\s*(.+)$")


def match_key(key: str) -> Optional[tuple[str, Callable[[str], object]]]:
    """Return (field, coercer) for the first rule whose synonym is in key."""
    normalized = key.strip().lower()
    for synonyms, field, coerce in KEY_RULES:
        if any(s in normalized for s in synonyms):
            return field, coerce
    return None


# ---------------------------------------------------------------------------
# Accumulator
# ---------------------------------------------------------------------------

STATE_EMPTY = "empty"
STATE_PARTIAL = "partial"
STATE_COMPLETE = "complete"


class TradeAccumulator:
    """Partial trade spanning consecutive key-value lines.

    empty -> partial on the first write, partial -> complete once the
    completeness predicate holds; flush() hands the record out and resets
    to empty. finish() drops whatever is still incomplete.
    """

    def __init__(self) -> None:
        self.state = STATE_EMPTY
        self._partial: Optional[PartialTrade] = None
        self.discarded = 0

    def write(self, field: str, value: object) -> None:
        if self._partial is None:
            self._partial = PartialTrade()
        setattr(self._partial, field, value)
        self.state = STATE_COMPLETE if is_complete(apply_defaults(self._partial)) else STATE_PARTIAL

    def flush(self) -> Optional[TradeRecord]:
        if self.state != STATE_COMPLETE or self._partial is None:
            return None
        record = finalize(self._partial)
        self._reset()
        return record

    def finish(self) -> None:
        if self.state == STATE_PARTIAL:
            logger.debug("[Text Parser] Discarding incomplete key-value trade: %s", self._partial)
            self.discarded += 1
        self._reset()

    def _reset(self) -> None:
        self._partial = None
        self.state = STATE_EMPTY


# ---------------------------------------------------------------------------
# Shape matchers
# ---------------------------------------------------------------------------

class DelimitedShape:
    """A line split on one delimiter into enough untyped tokens."""

    def __init__(self, name: str, delimiter: str, min_tokens: int) -> None:
        self.name = name
        self.delimiter = delimiter
        self.min_tokens = min_tokens

    def match(self, line: str) -> list[TradeRecord]:
        tokens = [t.strip() for t in line.split(self.delimiter)]
        tokens = [t for t in tokens if t]
        if len(tokens) < self.min_tokens:
            return []
        record = classify_tokens(tokens)
        return [record] if record else []


class KeyValueShape:
    """A "key: value" line feeding the shared accumulator."""

    name = "key_value"

    def __init__(self, accumulator: TradeAccumulator) -> None:
        self.accumulator = accumulator

    def match(self, line: str) -> list[TradeRecord]:
        m = _KEY_VALUE_RE.match(line)
        if not m:
            return []
        key, value = m.group(1), m.group(2).strip()
        rule = match_key(key)
        if rule is None:
            return []

        field, coerce = rule
        coerced = coerce(value)
        if coerced is None:
            return []
        self.accumulator.write(field, coerced)

        record = self.accumulator.flush()
        return [record] if record else []


def build_shapes(
    accumulator: TradeAccumulator,
    min_pipe_tokens: int = 10,
    min_comma_tokens: int = 8,
) -> list:
    """Matchers in priority order: pipe, key-value, comma."""
    return [
        DelimitedShape("pipe", "|", min_pipe_tokens),
        KeyValueShape(accumulator),
        DelimitedShape("comma", ",", min_comma_tokens),
    ]
