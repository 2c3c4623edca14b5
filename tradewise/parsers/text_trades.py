"""
Free-text trade-history importer (text extracted from PDF statements).

Each non-blank line is offered to the pipe, key-value and comma matchers
in that order. With line_shapes="all" every matcher runs and every record
is kept, so a line that fits two shapes can yield the same trade twice.
With line_shapes="first" the first matcher that emits a record ends the
line.

Neither mode ends a line only after a pipe match while still trying the
comma matcher after a key-value record. "all" keeps going after a pipe
record, and "first" stops after a key-value record.

Lines are split on "\\n" only (a trailing "\\r" is dropped), so form feeds
and other Unicode line separators stay inside a line.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..settings import LINE_SHAPES_FIRST, ParserSettings
from .errors import TradeImportError
from .line_shapes import TradeAccumulator, build_shapes
from .records import TradeRecord

logger = logging.getLogger(__name__)


class TextTradeParser:
    """
    Parse decoded statement text into TradeRecords.

    Usage:
        parser = TextTradeParser()
        trades = parser.parse_text(text)
    """

    def __init__(self, settings: Optional[ParserSettings] = None) -> None:
        self.settings = settings or ParserSettings.from_env()
        self.total_lines: int = 0
        self.skipped_lines: int = 0
        self.shape_hits: dict[str, int] = {}

    def parse_text(self, text: str) -> list[TradeRecord]:
        self.total_lines = 0
        self.skipped_lines = 0
        self.shape_hits = {}

        try:
            trades = self._parse_lines([line.rstrip("\r") for line in text.split("\n")])
        except Exception as e:
            logger.error("[Text Parser] Failed to parse text: %s", e, exc_info=True)
            raise TradeImportError(f"Failed to parse text: {e}") from e

        logger.info(
            "[Text Parser] Parsed %d trades from %d lines (shapes: %s, mode: %s)",
            len(trades), self.total_lines, self.shape_hits, self.settings.line_shapes,
        )
        return trades

    def _parse_lines(self, lines: list[str]) -> list[TradeRecord]:
        accumulator = TradeAccumulator()
        shapes = build_shapes(
            accumulator,
            min_pipe_tokens=self.settings.min_pipe_tokens,
            min_comma_tokens=self.settings.min_comma_tokens,
        )
        first_only = self.settings.line_shapes == LINE_SHAPES_FIRST

        trades: list[TradeRecord] = []
        for line_no, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            self.total_lines += 1

            matched: list[str] = []
            for shape in shapes:
                try:
                    found = shape.match(line)
                except Exception as e:
                    logger.debug(
                        "[Text Parser] %s shape failed on line %d: %s", shape.name, line_no, e,
                    )
                    continue
                if not found:
                    continue
                trades.extend(found)
                matched.append(shape.name)
                self.shape_hits[shape.name] = self.shape_hits.get(shape.name, 0) + len(found)
                if first_only:
                    break

            if not matched:
                self.skipped_lines += 1
            elif len(matched) > 1:
                logger.debug(
                    "[Text Parser] Line %d matched several shapes %s; trade may be duplicated",
                    line_no, matched,
                )

        accumulator.finish()
        return trades


def parse_text_trades(
    text: str, settings: Optional[ParserSettings] = None,
) -> list[TradeRecord]:
    """Parse statement text with a fresh TextTradeParser."""
    return TextTradeParser(settings).parse_text(text)
