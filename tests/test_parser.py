"""Tests for statement grid parsing."""

from datetime import date
from decimal import Decimal

import pytest

from statement_pos.exceptions import HeaderNotFound
from statement_pos.statement.parser import (
    ColumnLayout,
    HeaderMatcher,
    MerchantMatcher,
    StatementParser,
    parse_amount,
    parse_statement,
    parse_statement_date,
)

from conftest import HEADER


class TestHeaderLocation:
    def test_locates_header_after_metadata(self, statement_grid):
        assert HeaderMatcher().locate(statement_grid) == 4

    def test_marker_in_second_cell(self):
        grid = [["", "Txn Date", "Narration", "Credit"], ["x", "01/10/2026", "SHOP", "5"]]
        assert HeaderMatcher().locate(grid) == 0

    def test_marker_beyond_second_cell_is_ignored(self):
        grid = [["Sl", "No", "Transaction Date"]]
        with pytest.raises(HeaderNotFound):
            HeaderMatcher().locate(grid)

    def test_missing_header_is_fatal(self):
        grid = [["foo", "bar"], ["01-Oct-2026", "UPI/CR/LITTICIOUS", "", "", "100", ""]]
        with pytest.raises(HeaderNotFound):
            parse_statement(grid, "LITTICIOUS")

    def test_custom_markers(self):
        grid = [["Buchungstag", "Text", "Haben"]]
        assert HeaderMatcher(["buchungstag"]).locate(grid) == 0


class TestColumnLayout:
    def test_detects_layout_with_cheque_column(self):
        layout = ColumnLayout.detect(HEADER)
        assert layout == ColumnLayout(date=0, value_date=1, particulars=2, debit=4, credit=5, balance=6)
        assert layout.min_columns == 6

    def test_detects_withdrawal_deposit_headers(self):
        header = ["Date", "Narration", "Chq./Ref.No.", "Value Dt", "Withdrawal Amt.", "Deposit Amt.", "Closing Balance"]
        layout = ColumnLayout.detect(header)
        assert layout.date == 0
        assert layout.particulars == 1
        assert layout.value_date == 3
        assert layout.debit == 4
        assert layout.credit == 5
        assert layout.balance == 6

    def test_falls_back_to_default_layout(self):
        assert ColumnLayout.detect(["Transaction Date", "?", "?"]) == ColumnLayout.default()


class TestParse:
    def test_filters_merchant_credits_in_row_order(self, statement_grid):
        transactions = parse_statement(statement_grid, "LITTICIOUS")
        assert [t.details for t in transactions] == [
            "UPI/CR/1234/RAVI/LITTICIOUS",
            "UPI/CR/9012/ANU/LITTICIOUS",
            "UPI/CR/3456/SAM/Litticious",
        ]
        assert [t.row_number for t in transactions] == [6, 8, 10]

    def test_transactions_carry_decomposition(self, statement_grid):
        first, second, third = parse_statement(statement_grid, "LITTICIOUS")
        assert (first.paid_amount, first.full_plate, first.adjustment) == (Decimal("180.00"), 2, Decimal("2.00"))
        assert (second.full_plate, second.water, second.adjustment) == (1, 2, Decimal("0.00"))
        assert (third.full_plate, third.half_plate, third.water) == (2, 1, 2)
        assert third.expected_cost == Decimal("247")
        assert all(t.status == "success" for t in (first, second, third))
        assert first.value_date == "01-Oct-2026"

    def test_ids_unique_within_run(self, statement_grid):
        ids = [t.id for t in parse_statement(statement_grid, "LITTICIOUS")]
        assert len(ids) == len(set(ids))

    def test_case_sensitive_match(self, statement_grid):
        transactions = parse_statement(statement_grid, "LITTICIOUS", case_sensitive=True)
        assert len(transactions) == 2

    def test_substring_match(self, statement_grid):
        transactions = parse_statement(statement_grid, "RAVI", match_mode="substring")
        assert len(transactions) == 1
        assert parse_statement(statement_grid, "RAVI") == []

    def test_header_without_matches_returns_empty(self, statement_grid):
        assert parse_statement(statement_grid, "NO SUCH SHOP") == []

    def test_empty_keyword_keeps_all_credits(self, statement_grid):
        assert len(parse_statement(statement_grid, "")) == 4

    def test_debits_and_zero_credits_are_ignored(self):
        grid = [
            HEADER,
            ["01-Oct-2026", "", "SHOP", "", "50", "0", "10"],
            ["01-Oct-2026", "", "SHOP", "", "50", "", "10"],
        ]
        assert parse_statement(grid, "SHOP") == []

    def test_repeated_header_rows_are_skipped(self):
        grid = [
            HEADER,
            ["01-Oct-2026", "", "A SHOP", "", "", "89", ""],
            HEADER,
            ["02-Oct-2026", "", "A SHOP", "", "", "49", ""],
        ]
        assert [t.date for t in parse_statement(grid, "SHOP")] == ["01-Oct-2026", "02-Oct-2026"]

    def test_short_and_blank_rows_are_skipped(self):
        grid = [
            HEADER,
            ["01-Oct-2026", "", "A SHOP"],
            ["", "", "A SHOP", "", "", "89", ""],
            ["01-Oct-2026", "", "", "", "", "89", ""],
            [],
            ["02-Oct-2026", "", "A SHOP", "", "", "49", ""],
        ]
        transactions = parse_statement(grid, "SHOP")
        assert len(transactions) == 1
        assert transactions[0].half_plate == 1


class TestDateRange:
    def test_inclusive_range(self, statement_grid):
        transactions = parse_statement(
            statement_grid, "LITTICIOUS", (date(2026, 10, 2), date(2026, 10, 4))
        )
        assert [t.date for t in transactions] == ["02-Oct-2026", "04-Oct-2026"]

    def test_open_ended_range(self, statement_grid):
        transactions = parse_statement(statement_grid, "LITTICIOUS", (None, date(2026, 10, 1)))
        assert [t.date for t in transactions] == ["01-Oct-2026"]

    def test_unparseable_date_is_kept(self):
        grid = [HEADER, ["sometime", "", "A SHOP", "", "", "89", ""]]
        transactions = parse_statement(grid, "SHOP", (date(2026, 1, 1), date(2026, 1, 31)))
        assert len(transactions) == 1


class TestFieldParsing:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("1,250.50", Decimal("1250.50")),
            ("₹ 89", Decimal("89")),
            ("INR 49.00", Decimal("49.00")),
            ("-12.5", Decimal("-12.5")),
            ("", Decimal("0")),
            (None, Decimal("0")),
            ("n/a", Decimal("0")),
        ],
    )
    def test_parse_amount(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        ["18-Oct-2026", "18/10/2026", "2026-10-18", "18 Oct 2026", "18-Oct-2026 10:42:11", "18-10-2026"],
    )
    def test_parse_statement_date(self, raw):
        assert parse_statement_date(raw) == date(2026, 10, 18)

    def test_parse_statement_date_unknown(self):
        assert parse_statement_date("yesterday") is None


class TestMerchantMatcher:
    def test_trailing_whitespace_ignored(self):
        assert MerchantMatcher("shop").matches("UPI/CR/SHOP  ")

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            MerchantMatcher("shop", mode="regex")

    def test_parser_accepts_plain_keyword(self, statement_grid):
        assert len(StatementParser().parse(statement_grid, "LITTICIOUS")) == 3
