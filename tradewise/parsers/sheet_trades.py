"""
Spreadsheet trade-history importer.

A workbook arrives as {sheet name: rows}, each row a dict keyed by the
sheet's header cells. Headers are resolved per row rather than per sheet:
rows can disagree on key casing or spelling, and a missing cell simply
leaves that key out (or None) instead of shifting columns.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Union

import pandas as pd

from .errors import TradeImportError
from .records import TradeRecord
from .tabular import extract_keyed_row

logger = logging.getLogger(__name__)

SheetRows = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


def frame_to_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    """DataFrame -> list of row dicts with NaN cells turned into None."""
    cleaned = df.astype(object).where(pd.notna(df), None)
    return cleaned.to_dict("records")


class SheetTradeParser:
    """
    Parse every sheet of a workbook into TradeRecords.

    Usage:
        parser = SheetTradeParser()
        trades = parser.parse_workbook({"Sheet1": rows})
    """

    def __init__(self) -> None:
        self.total_rows: int = 0
        self.skipped_rows: int = 0
        self.parsed_rows: int = 0
        self.sheets: list[str] = []

    def parse_workbook(self, sheets: Mapping[str, SheetRows]) -> list[TradeRecord]:
        self.total_rows = 0
        self.skipped_rows = 0
        self.parsed_rows = 0
        self.sheets = []

        try:
            trades: list[TradeRecord] = []
            for sheet_name, rows in sheets.items():
                self.sheets.append(sheet_name)
                trades.extend(self._parse_sheet(sheet_name, rows))
        except Exception as e:
            logger.error("[Sheet Parser] Failed to parse Excel file: %s", e, exc_info=True)
            raise TradeImportError(f"Failed to parse Excel file: {e}") from e

        logger.info(
            "[Sheet Parser] Parsed %d trades from %d rows across %d sheets (%d skipped)",
            self.parsed_rows, self.total_rows, len(self.sheets), self.skipped_rows,
        )
        return trades

    def _parse_sheet(self, sheet_name: str, rows: SheetRows) -> list[TradeRecord]:
        if isinstance(rows, pd.DataFrame):
            rows = frame_to_rows(rows)

        trades: list[TradeRecord] = []
        for row in rows:
            self.total_rows += 1
            trade = extract_keyed_row(row)
            if trade is None:
                self.skipped_rows += 1
                continue
            trades.append(trade)
            self.parsed_rows += 1

        logger.debug("[Sheet Parser] Sheet '%s': %d trades", sheet_name, len(trades))
        return trades


def parse_sheet_trades(sheets: Mapping[str, SheetRows]) -> list[TradeRecord]:
    """Parse a workbook mapping with a fresh SheetTradeParser."""
    return SheetTradeParser().parse_workbook(sheets)
