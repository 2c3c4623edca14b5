"""Whole-file import failures. Per-row problems never raise."""

from __future__ import annotations


class TradeImportError(ValueError):
    """A source file could not be decoded or parsed at all."""


class UnsupportedFormatError(TradeImportError):
    """The file extension is not one of the accepted trade sources."""
