"""Greedy decomposition of a paid amount into menu item quantities."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from ..utils.logging import get_logger
from .pricing import FULL_PLATE, HALF_PLATE, ITEM_KINDS, PACKING, WATER, PriceTable, to_decimal

logger = get_logger(__name__)


@dataclass(frozen=True)
class OrderComposition:
    """Quantities of each menu item inferred for one payment."""

    full_plate: int = 0
    half_plate: int = 0
    water: int = 0
    packing: int = 0

    def __post_init__(self) -> None:
        for kind in ITEM_KINDS:
            if getattr(self, kind) < 0:
                raise ValueError(f"Quantity for {kind} cannot be negative")

    def quantity(self, kind: str) -> int:
        return getattr(self, kind)

    def expected_cost(self, price_table: PriceTable) -> Decimal:
        return sum(
            (price_table[kind] * self.quantity(kind) for kind in ITEM_KINDS),
            Decimal("0"),
        )

    def total_items(self) -> int:
        return sum(self.quantity(kind) for kind in ITEM_KINDS)


@dataclass(frozen=True)
class Decomposition:
    """Result of decomposing one paid amount.

    ``remainder`` is what the greedy pass could not place (always below the
    packing price for a well-ordered table); ``extra_water`` counts the units
    added by the overpayment absorption rule.
    """

    paid_amount: Decimal
    composition: OrderComposition
    expected_cost: Decimal
    adjustment: Decimal
    remainder: Decimal
    extra_water: int


def absorb_overpayment(
    composition: OrderComposition, paid: Decimal, price_table: PriceTable
) -> Tuple[OrderComposition, Decimal, int]:
    """Turn overpayment beyond one water unit into extra water bottles.

    Returns the final composition, the leftover adjustment and the number of
    water units added. Overpayment up to one water price is left as is.
    """
    water_price = price_table[WATER]
    overpay = paid - composition.expected_cost(price_table)
    if overpay <= water_price:
        return composition, overpay, 0

    extra_water = int(overpay // water_price)
    logger.debug("Absorbed overpayment %s on %s into %d extra water", overpay, paid, extra_water)
    final = OrderComposition(
        full_plate=composition.full_plate,
        half_plate=composition.half_plate,
        water=composition.water + extra_water,
        packing=composition.packing,
    )
    return final, overpay % water_price, extra_water


class AmountDecomposer:
    """Map a paid amount onto the price table, largest denomination first.

    After the greedy pass, any overpayment larger than one water unit is
    converted into bonus water bottles; only the sub-water remainder is left
    as adjustment. For every non-negative amount
    ``expected_cost + adjustment == paid_amount``.
    """

    def __init__(self, price_table: Optional[PriceTable] = None) -> None:
        self.price_table = price_table or PriceTable()

    def decompose(self, paid_amount: Any) -> Decomposition:
        paid = to_decimal(paid_amount)
        if paid < 0:
            raise ValueError(f"Paid amount cannot be negative: {paid}")

        remaining = paid
        counts: Dict[str, int] = {}
        for kind in ITEM_KINDS:
            price = self.price_table[kind]
            count = int(remaining // price)
            remaining -= price * count
            counts[kind] = count

        base = OrderComposition(**counts)
        final, adjustment, extra_water = absorb_overpayment(base, paid, self.price_table)

        return Decomposition(
            paid_amount=paid,
            composition=final,
            expected_cost=final.expected_cost(self.price_table),
            adjustment=adjustment,
            remainder=remaining,
            extra_water=extra_water,
        )


def decompose_amount(paid_amount: Any, price_table: Optional[PriceTable] = None) -> Decomposition:
    """Decompose ``paid_amount`` with ``price_table`` (default menu prices)."""
    return AmountDecomposer(price_table).decompose(paid_amount)


__all__ = [
    "AmountDecomposer",
    "absorb_overpayment",
    "Decomposition",
    "OrderComposition",
    "decompose_amount",
    "FULL_PLATE",
    "HALF_PLATE",
    "WATER",
    "PACKING",
]
