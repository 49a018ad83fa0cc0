"""Tests for amount decomposition."""

from decimal import Decimal

import pytest

from statement_pos.menu.decomposer import AmountDecomposer, OrderComposition, absorb_overpayment, decompose_amount
from statement_pos.menu.pricing import ITEM_KINDS, PriceTable


class TestDecomposeExamples:
    """Worked examples with the 89/49/10/5 menu."""

    def test_180_leaves_small_adjustment(self, price_table):
        result = AmountDecomposer(price_table).decompose(180)
        assert result.composition == OrderComposition(full_plate=2)
        assert result.remainder == Decimal("2")
        assert result.extra_water == 0
        assert result.expected_cost == Decimal("178")
        assert result.adjustment == Decimal("2")

    def test_109_is_exact(self, price_table):
        result = AmountDecomposer(price_table).decompose(109)
        assert result.composition == OrderComposition(full_plate=1, water=2)
        assert result.expected_cost == Decimal("109")
        assert result.adjustment == Decimal("0")

    def test_250_mixed_order(self, price_table):
        result = AmountDecomposer(price_table).decompose(250)
        assert result.composition == OrderComposition(full_plate=2, half_plate=1, water=2)
        assert result.expected_cost == Decimal("247")
        assert result.adjustment == Decimal("3")

    def test_zero(self, price_table):
        result = AmountDecomposer(price_table).decompose(0)
        assert result.composition.total_items() == 0
        assert result.adjustment == 0

    def test_below_cheapest_item_is_pure_adjustment(self, price_table):
        result = AmountDecomposer(price_table).decompose("3.50")
        assert result.composition.total_items() == 0
        assert result.expected_cost == 0
        assert result.adjustment == Decimal("3.50")

    def test_decimal_amount(self, price_table):
        result = AmountDecomposer(price_table).decompose("99.75")
        assert result.composition == OrderComposition(full_plate=1, water=1)
        assert result.adjustment == Decimal("0.75")

    def test_negative_amount_rejected(self, price_table):
        with pytest.raises(ValueError):
            AmountDecomposer(price_table).decompose(-1)

    def test_module_level_helper_uses_default_menu(self):
        assert decompose_amount(250).composition == OrderComposition(full_plate=2, half_plate=1, water=2)


class TestAbsorptionRule:
    def test_overpay_beyond_water_becomes_extra_water(self, price_table):
        # one full plate recorded against a 115 payment: 26 over
        final, adjustment, extra = absorb_overpayment(OrderComposition(full_plate=1), Decimal("115"), price_table)
        assert extra == 2
        assert final == OrderComposition(full_plate=1, water=2)
        assert adjustment == Decimal("6")
        assert final.expected_cost(price_table) + adjustment == Decimal("115")

    def test_overpay_of_exactly_one_water_is_kept(self, price_table):
        final, adjustment, extra = absorb_overpayment(OrderComposition(full_plate=1), Decimal("99"), price_table)
        assert extra == 0
        assert final == OrderComposition(full_plate=1)
        assert adjustment == Decimal("10")

    def test_underpayment_is_negative_adjustment(self, price_table):
        final, adjustment, extra = absorb_overpayment(OrderComposition(half_plate=1), Decimal("47"), price_table)
        assert extra == 0
        assert adjustment == Decimal("-2")

    def test_greedy_pass_leaves_nothing_to_absorb(self, price_table):
        # the water step already consumes whole water units
        for amount in ("19.99", "138", "267", "1000"):
            assert AmountDecomposer(price_table).decompose(amount).extra_water == 0

    def test_unordered_table_still_conserves(self):
        table = PriceTable(full_plate=10, half_plate=49, water=89, packing=5)
        assert not table.is_descending
        result = AmountDecomposer(table).decompose(250)
        assert result.expected_cost + result.adjustment == Decimal("250")


class TestDecomposeProperties:
    @pytest.mark.parametrize("amount", ["0", "1", "4.99", "5", "10", "48", "89", "138", "177.5", "500", "1234.56"])
    def test_conservation(self, price_table, amount):
        result = AmountDecomposer(price_table).decompose(amount)
        assert result.expected_cost + result.adjustment == Decimal(amount)

    @pytest.mark.parametrize("amount", ["0", "7", "63", "250", "999.99"])
    def test_quantities_non_negative_and_remainder_below_packing(self, price_table, amount):
        result = AmountDecomposer(price_table).decompose(amount)
        assert all(result.composition.quantity(kind) >= 0 for kind in ITEM_KINDS)
        assert result.remainder < price_table["packing"]
        assert -price_table["packing"] < result.adjustment <= price_table["water"]

    def test_deterministic(self, price_table):
        decomposer = AmountDecomposer(price_table)
        assert decomposer.decompose("437.25") == decomposer.decompose("437.25")


class TestPriceTable:
    def test_rejects_non_positive_price(self):
        with pytest.raises(ValueError):
            PriceTable(packing=0)

    def test_is_mapping_in_menu_order(self, price_table):
        assert list(price_table) == list(ITEM_KINDS)
        assert price_table["half_plate"] == Decimal("49")

    def test_from_config(self):
        table = PriceTable.from_config({"price_full_plate": "95.5", "price_water": "12"})
        assert table["full_plate"] == Decimal("95.5")
        assert table["water"] == Decimal("12")
        assert table["packing"] == Decimal("5")
