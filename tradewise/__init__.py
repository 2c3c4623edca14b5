"""tradewise: normalize trade histories from CSV, Excel and PDF exports."""

__version__ = "0.1.0"
