"""Pick the loader and importer for a trade-history file by its extension."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from ..settings import ParserSettings
from .csv_trades import parse_csv_trades
from .errors import TradeImportError, UnsupportedFormatError
from .loaders import read_csv_text, read_pdf_text, read_workbook
from .records import TradeRecord
from .sheet_trades import parse_sheet_trades
from .text_trades import parse_text_trades

logger = logging.getLogger(__name__)

SOURCE_KINDS: dict[str, str] = {
    ".csv": "csv",
    ".txt": "csv",
    ".xlsx": "excel",
    ".xls": "excel",
    ".pdf": "pdf",
}


def detect_source_kind(filename: Union[str, Path]) -> str:
    """Return "csv", "excel" or "pdf"; raise UnsupportedFormatError otherwise."""
    suffix = Path(filename).suffix.lower()
    kind = SOURCE_KINDS.get(suffix)
    if kind is None:
        raise UnsupportedFormatError(
            f"Unsupported file type {suffix or '(none)'!r}; "
            f"expected one of {sorted(SOURCE_KINDS)}"
        )
    return kind


def import_trades(
    path: Union[str, Path],
    settings: Optional[ParserSettings] = None,
) -> list[TradeRecord]:
    """Decode and parse a trade-history file into TradeRecords."""
    path = Path(path)
    kind = detect_source_kind(path)
    if not path.is_file():
        raise TradeImportError(f"No such file: {path}")

    logger.info("[Importer] Importing %s as %s", path.name, kind)
    if kind == "csv":
        return parse_csv_trades(read_csv_text(path))
    if kind == "excel":
        return parse_sheet_trades(read_workbook(path))
    return parse_text_trades(read_pdf_text(path), settings)
