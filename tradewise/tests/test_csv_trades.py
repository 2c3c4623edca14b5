"""Tests for the CSV trade importer."""

import json

import pytest

from tradewise.parsers.csv_trades import CsvTradeParser, parse_csv_trades
from tradewise.parsers.errors import TradeImportError
from tradewise.parsers.records import records_to_dicts

SAMPLE_CSV = "\n".join([
    "Call/Put,Order #,Asset,Open Time,Close Time,Open Price,Close Price,Amount,Profit,Currency",
    'Put,1001,aapl,10:00,10:05,"$1,234.50",120.00,"$1,500.00",85%,usd',
    "Call,1002,EUR/USD,11:00,11:05,1.0850,1.0860,$200,-200,",
    "",
    "Call,1003,TSLA",
    "Call,1004,MSFT,12:00,12:05,300,301,0,50,USD",
])


class TestCsvTradeParser:
    def test_parses_complete_rows(self):
        trades = parse_csv_trades(SAMPLE_CSV)
        assert len(trades) == 2

        first = trades[0]
        assert first.direction == "put"
        assert first.order_number == "1001"
        assert first.asset == "AAPL"
        assert first.open_time == "10:00"
        assert first.close_time == "10:05"
        assert first.open_price == pytest.approx(1234.50)
        assert first.close_price == pytest.approx(120.0)
        assert first.trade_amount == pytest.approx(1500.0)
        assert first.profit_amount == pytest.approx(85.0)
        assert first.currency == "USD"
        assert first.expiry_time == ""

    def test_empty_currency_defaults(self):
        second = parse_csv_trades(SAMPLE_CSV)[1]
        assert second.asset == "EUR/USD"
        assert second.currency == "USD"
        assert second.profit_amount == -200.0

    def test_counters(self):
        parser = CsvTradeParser()
        parser.parse_string(SAMPLE_CSV)
        assert parser.total_rows == 4
        assert parser.parsed_rows == 2
        assert parser.skipped_rows == 2

    def test_short_rows_never_partially_emitted(self):
        text = "Asset,Amount,Profit\nAAPL,100\nMSFT,200,5"
        trades = parse_csv_trades(text)
        assert [t.asset for t in trades] == ["MSFT"]

    def test_zero_amount_never_emitted(self):
        text = "Direction,Asset,Amount,Profit,Open Price,Close Price\nCall,MSFT,0,50,300,301"
        assert parse_csv_trades(text) == []

    def test_unit_suffixes_ignored(self):
        trades = parse_csv_trades("Asset,Amount,Profit\nAAPL,1500 USD,5 USD")
        assert len(trades) == 1
        assert trades[0].trade_amount == 1500.0
        assert trades[0].profit_amount == 5.0

    def test_infinite_values_treated_as_zero(self):
        trades = parse_csv_trades("Asset,Amount,Profit\nAAPL,inf,5\nMSFT,100,Infinity")
        assert [t.asset for t in trades] == ["MSFT"]
        assert trades[0].profit_amount == 0.0
        json.dumps(records_to_dicts(trades), allow_nan=False)

    def test_bom_and_crlf(self):
        text = "\ufeffAsset,Amount,Profit\r\nAAPL,100,5\r\n"
        trades = parse_csv_trades(text)
        assert len(trades) == 1
        assert trades[0].asset == "AAPL"

    def test_splits_on_newline_only(self):
        trades = parse_csv_trades("Asset,Amount,Profit\nAAPL,100\x0c,5\u2028")
        assert len(trades) == 1
        assert (trades[0].trade_amount, trades[0].profit_amount) == (100.0, 5.0)

    def test_empty_input(self):
        assert parse_csv_trades("") == []
        assert parse_csv_trades("\n  \n") == []

    def test_header_only(self):
        assert parse_csv_trades("Asset,Amount,Profit") == []

    def test_unknown_headers_yield_nothing(self):
        assert parse_csv_trades("Foo,Bar\n1,2") == []

    def test_idempotent(self):
        parser = CsvTradeParser()
        assert parser.parse_string(SAMPLE_CSV) == parser.parse_string(SAMPLE_CSV)
        assert parser.total_rows == 4

    def test_unexpected_failure_is_wrapped(self):
        with pytest.raises(TradeImportError, match="Failed to parse CSV"):
            parse_csv_trades(None)
