"""Tests for the free-text (PDF statement) trade importer."""

import pytest

from tradewise.parsers.errors import TradeImportError
from tradewise.parsers.text_trades import TextTradeParser, parse_text_trades
from tradewise.settings import ParserSettings

PIPE_LINE = "call | #1001 | AAPL | USD | 85% | 1500 | 120.50 | 119.00 | 2024-01-01 | 2024-01-02"
COMMA_LINE = "put, 1002, EURUSD, 12.5%, 2000, 1.0850, 1.0860, 2024-02-01"

STATEMENT = "\n".join([
    "Trade History Statement",
    "",
    PIPE_LINE,
    "Asset: TSLA",
    "Amount: $200",
    "Profit: 15%",
    COMMA_LINE,
    "Asset: NFLX",
    "Amount: 300",
])

ALL = ParserSettings(line_shapes="all")
FIRST = ParserSettings(line_shapes="first")


class TestTextTradeParser:
    def test_mixed_shapes_in_source_order(self):
        trades = parse_text_trades(STATEMENT, ALL)
        assert [t.asset for t in trades] == ["AAPL", "TSLA", "EURUSD"]

    def test_key_value_run(self):
        text = "Asset: TSLA\nAmount: $200\nProfit: 15%"
        trades = parse_text_trades(text, ALL)
        assert len(trades) == 1
        trade = trades[0]
        assert trade.asset == "TSLA"
        assert trade.trade_amount == 200.0
        assert trade.profit_amount == 15.0
        assert trade.direction == "call"
        assert trade.currency == "USD"

    def test_key_value_flushes_on_completing_line(self):
        text = "Asset: TSLA\nAmount: $200\nProfit: 15%\nCurrency: EUR"
        trades = parse_text_trades(text, ALL)
        assert len(trades) == 1
        assert trades[0].currency == "USD"

    def test_key_value_amount_with_unit(self):
        trades = parse_text_trades("Asset: TSLA\nAmount: 200 USD\nProfit: 15%", ALL)
        assert [(t.asset, t.trade_amount) for t in trades] == [("TSLA", 200.0)]

    def test_two_runs(self):
        text = "Asset: TSLA\nAmount: 200\nProfit: 15\nSymbol: aapl\nInvestment: 50\nPayout: 0"
        trades = parse_text_trades(text, ALL)
        assert [(t.asset, t.profit_amount) for t in trades] == [("TSLA", 15.0), ("AAPL", 0.0)]

    def test_incomplete_run_discarded_at_end(self):
        assert parse_text_trades("Asset: NFLX\nAmount: 300", ALL) == []

    def test_pipe_reference_row(self):
        trade = parse_text_trades(PIPE_LINE, ALL)[0]
        assert trade.direction == "call"
        assert trade.order_number == "#1001"
        assert trade.open_price == pytest.approx(120.50)
        assert trade.close_price == pytest.approx(119.00)
        assert trade.open_time == "2024-01-01"
        assert trade.close_time == "2024-01-02"

    def test_zero_amount_never_emitted(self):
        line = "call | #1 | AAPL | USD | 85% | 0 | 120.50 | 119.00 | 2024-01-01 | 2024-01-02"
        assert parse_text_trades(line, ALL) == []

    def test_splits_on_newline_only(self):
        text = PIPE_LINE + "\x0c\r\n" + "Asset: TSLA\u2028Amount: 200\nProfit: 15"
        parser = TextTradeParser(ALL)
        trades = parser.parse_text(text)
        assert [t.asset for t in trades] == ["AAPL"]
        assert parser.total_lines == 3

    def test_counters(self):
        parser = TextTradeParser(ALL)
        parser.parse_text(STATEMENT)
        assert parser.total_lines == 8
        assert parser.shape_hits == {"pipe": 1, "key_value": 1, "comma": 1}

    def test_idempotent(self):
        parser = TextTradeParser(ALL)
        assert parser.parse_text(STATEMENT) == parser.parse_text(STATEMENT)

    def test_unexpected_failure_is_wrapped(self):
        with pytest.raises(TradeImportError, match="Failed to parse text"):
            parse_text_trades(None, ALL)


class TestLineShapePolicy:
    # fits the pipe shape (AAPL) and the comma shape (MSFT) at the same time
    DOUBLE_LINE = PIPE_LINE + ", put, 7, MSFT, 5%, 2500, 1.5, 2.5"

    def test_all_keeps_every_shape(self):
        trades = parse_text_trades(self.DOUBLE_LINE, ALL)
        assert [t.asset for t in trades] == ["AAPL", "MSFT"]

    def test_first_stops_after_first_emitting_shape(self):
        trades = parse_text_trades(self.DOUBLE_LINE, FIRST)
        assert [t.asset for t in trades] == ["AAPL"]

    def test_first_still_feeds_accumulator(self):
        text = "Asset: TSLA\nAmount: $200\nProfit: 15%"
        assert len(parse_text_trades(text, FIRST)) == 1

    def test_custom_token_thresholds(self):
        settings = ParserSettings(min_pipe_tokens=11)
        assert parse_text_trades(PIPE_LINE, settings) == []

    def test_default_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("TRADEWISE_LINE_SHAPES", "first")
        assert TextTradeParser().settings.line_shapes == "first"
