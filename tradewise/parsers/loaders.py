"""
Decode uploaded files into what the importers consume.

- CSV:   text (BOM stripped)
- PDF:   page text joined by newlines, via pdfplumber
- Excel: {sheet name: row dicts}, via pandas.read_excel

Any failure here is a whole-file failure and is raised as TradeImportError.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, Union

import pandas as pd
import pdfplumber

from .errors import TradeImportError
from .sheet_trades import frame_to_rows

logger = logging.getLogger(__name__)

Source = Union[str, Path, bytes]


def _open_source(source: Source) -> Any:
    if isinstance(source, bytes):
        return io.BytesIO(source)
    return Path(source)


def read_csv_text(path: Union[str, Path]) -> str:
    """Read a CSV/text export, tolerating a UTF-8 BOM."""
    try:
        return Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("[Loader] Failed to read CSV %s: %s", path, e)
        raise TradeImportError(f"Failed to read CSV: {e}") from e


def read_pdf_text(source: Source) -> str:
    """Extract the text of every page of a PDF."""
    try:
        pages: list[str] = []
        with pdfplumber.open(_open_source(source)) as pdf:
            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    pages.append(page_text)
    except Exception as e:
        logger.error("[Loader] PDF text extraction failed: %s", e, exc_info=True)
        raise TradeImportError(f"Failed to read PDF: {e}") from e

    logger.info("[Loader] Extracted text from %d PDF pages", len(pages))
    return "\n".join(pages)


def read_workbook(source: Source) -> dict[str, list[dict[str, Any]]]:
    """Read every sheet of a workbook as a list of row dicts (blank cells -> None)."""
    try:
        frames = pd.read_excel(_open_source(source), sheet_name=None, dtype=str)
    except Exception as e:
        logger.error("[Loader] Workbook read failed: %s", e, exc_info=True)
        raise TradeImportError(f"Failed to parse Excel file: {e}") from e

    sheets = {str(name): frame_to_rows(df) for name, df in frames.items()}
    logger.info(
        "[Loader] Read %d sheets (%d rows)",
        len(sheets), sum(len(rows) for rows in sheets.values()),
    )
    return sheets
