from .records import TradeRecord, PartialTrade, apply_defaults, is_complete, records_to_dicts, records_to_frame
from .csv_trades import CsvTradeParser, parse_csv_trades
from .sheet_trades import SheetTradeParser, parse_sheet_trades
from .text_trades import TextTradeParser, parse_text_trades
from .importer import detect_source_kind, import_trades
from .errors import TradeImportError, UnsupportedFormatError
