"""Import a trade-history file and print the normalized trades as JSON.

Usage:
    tradewise-import statement.pdf
    tradewise-import trades.csv --line-shapes first --log-level DEBUG
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from tradewise.parsers import import_trades, records_to_dicts
from tradewise.parsers.errors import TradeImportError, UnsupportedFormatError
from tradewise.settings import LINE_SHAPES_ALL, LINE_SHAPES_FIRST, ParserSettings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_IMPORT_FAILED = 1
EXIT_BAD_INPUT = 2


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tradewise-import",
        description="Extract trades from a CSV, Excel or PDF trade history.",
    )
    parser.add_argument("path", type=Path, help="trade-history file (.csv, .txt, .xlsx, .xls, .pdf)")
    parser.add_argument(
        "--line-shapes",
        choices=(LINE_SHAPES_ALL, LINE_SHAPES_FIRST),
        default=None,
        help="PDF text only: keep every matching line shape, or only the first",
    )
    parser.add_argument("--log-level", default=None, help="logging level (default: INFO)")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_arg_parser().parse_args(argv)

    settings = ParserSettings.from_env()
    if args.line_shapes:
        settings = replace(settings, line_shapes=args.line_shapes)

    level_name = (args.log_level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.path.is_file():
        print(f"error: file not found: {args.path}", file=sys.stderr)
        return EXIT_BAD_INPUT

    try:
        trades = import_trades(args.path, settings)
    except UnsupportedFormatError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT
    except TradeImportError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_IMPORT_FAILED

    json.dump({"trades": records_to_dicts(trades)}, sys.stdout, indent=args.indent)
    sys.stdout.write("\n")
    logger.info("Imported %d trades from %s", len(trades), args.path.name)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
