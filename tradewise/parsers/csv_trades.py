"""
CSV trade-history importer.

The first non-blank line is the header; it is resolved against
COLUMN_ALIASES once for the whole file. Every following line is split
(quote-aware), and rows shorter than the header are skipped outright so a
missing cell can never shift values into the wrong field.
"""

from __future__ import annotations

import logging

from .columns import resolve_header
from .errors import TradeImportError
from .records import TradeRecord
from .tabular import extract_indexed_row, split_csv_line

logger = logging.getLogger(__name__)


class CsvTradeParser:
    """
    Parse CSV trade exports into TradeRecords.

    Usage:
        parser = CsvTradeParser()
        trades = parser.parse_string(text)
    """

    def __init__(self) -> None:
        self.total_rows: int = 0
        self.skipped_rows: int = 0
        self.parsed_rows: int = 0

    def parse_string(self, content: str) -> list[TradeRecord]:
        self.total_rows = 0
        self.skipped_rows = 0
        self.parsed_rows = 0

        try:
            trades = self._parse_content(content)
        except Exception as e:
            logger.error("[CSV Parser] Failed to parse CSV: %s", e, exc_info=True)
            raise TradeImportError(f"Failed to parse CSV: {e}") from e

        logger.info(
            "[CSV Parser] Parsed %d trades from %d rows (%d skipped)",
            self.parsed_rows, self.total_rows, self.skipped_rows,
        )
        return trades

    def _parse_content(self, content: str) -> list[TradeRecord]:
        content = content.lstrip("\ufeff")
        # "\n" only; form feeds and other separators stay inside the line
        lines = [line.rstrip("\r") for line in content.split("\n") if line.strip()]
        if not lines:
            return []

        header = split_csv_line(lines[0])
        mapping = resolve_header(header)
        logger.debug("[CSV Parser] Header %s resolved to %s", header, mapping)

        trades: list[TradeRecord] = []
        for line_no, line in enumerate(lines[1:], start=2):
            self.total_rows += 1
            values = split_csv_line(line)
            if len(values) < len(header):
                logger.debug(
                    "[CSV Parser] Line %d has %d fields, header has %d; skipping",
                    line_no, len(values), len(header),
                )
                self.skipped_rows += 1
                continue

            trade = extract_indexed_row(values, mapping)
            if trade is None:
                self.skipped_rows += 1
                continue
            trades.append(trade)
            self.parsed_rows += 1

        return trades


def parse_csv_trades(content: str) -> list[TradeRecord]:
    """Parse CSV text with a fresh CsvTradeParser."""
    return CsvTradeParser().parse_string(content)
