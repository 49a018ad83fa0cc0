"""Menu price table and POS catalogue metadata."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Tuple

from ..utils.logging import get_logger

logger = get_logger(__name__)

FULL_PLATE = "full_plate"
HALF_PLATE = "half_plate"
WATER = "water"
PACKING = "packing"

# Denomination order used everywhere: decomposition, order lines, reports.
ITEM_KINDS: Tuple[str, ...] = (FULL_PLATE, HALF_PLATE, WATER, PACKING)


def to_decimal(value: Any) -> Decimal:
    """Convert a config/user value to Decimal without going through float."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Invalid price: {value!r}") from exc


class PriceTable(Mapping):
    """Immutable mapping of item kind to unit price.

    Prices are expected to descend strictly in ``ITEM_KINDS`` order. A table
    that does not is still accepted; decomposition will then produce a
    consistent but unintended item mix, so a warning is logged.
    """

    def __init__(
        self,
        full_plate: Any = "89",
        half_plate: Any = "49",
        water: Any = "10",
        packing: Any = "5",
    ) -> None:
        prices = {
            FULL_PLATE: to_decimal(full_plate),
            HALF_PLATE: to_decimal(half_plate),
            WATER: to_decimal(water),
            PACKING: to_decimal(packing),
        }
        for kind, price in prices.items():
            if price <= 0:
                raise ValueError(f"Price for {kind} must be positive, got {price}")
        self._prices = MappingProxyType(prices)
        if not self.is_descending:
            logger.warning(
                "Price table is not in descending order (%s); decomposition "
                "will favour cheaper items unexpectedly",
                ", ".join(f"{k}={v}" for k, v in prices.items()),
            )

    @classmethod
    def from_config(cls, config) -> "PriceTable":
        return cls(
            full_plate=config.get("price_full_plate", "89"),
            half_plate=config.get("price_half_plate", "49"),
            water=config.get("price_water", "10"),
            packing=config.get("price_packing", "5"),
        )

    @property
    def is_descending(self) -> bool:
        p = self._prices
        return p[FULL_PLATE] > p[HALF_PLATE] > p[WATER] >= p[PACKING]

    def __getitem__(self, kind: str) -> Decimal:
        return self._prices[kind]

    def __iter__(self) -> Iterator[str]:
        return iter(ITEM_KINDS)

    def __len__(self) -> int:
        return len(ITEM_KINDS)

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v}" for k, v in self._prices.items())
        return f"PriceTable({inner})"


@dataclass(frozen=True)
class CatalogItem:
    """Vendor-side product metadata for one item kind.

    ``unit_price`` overrides the price table on order lines when the POS
    catalogue stores a pre-tax price (e.g. 84.7619 for an 89.00 plate).
    """

    kind: str
    name: str
    variant_id: int
    product_id: int
    category_id: int
    code: str
    sku: str
    modifier_id: Optional[int] = None
    modifier_name: Optional[str] = None
    modifier_group_id: Optional[int] = None
    unit_price: Optional[Decimal] = None
    food_type: str = "veg"


DEFAULT_CATALOG: Mapping[str, CatalogItem] = MappingProxyType({
    FULL_PLATE: CatalogItem(
        kind=FULL_PLATE,
        name="Stall Litti Chokha",
        variant_id=1336765,
        product_id=1339679,
        category_id=194536,
        code="1040",
        sku="1040",
        modifier_id=680845,
        modifier_name="Full",
        modifier_group_id=249016,
    ),
    HALF_PLATE: CatalogItem(
        kind=HALF_PLATE,
        name="Stall Litti Chokha Half",
        variant_id=1336766,
        product_id=1339680,
        category_id=194536,
        code="1041",
        sku="1041",
        modifier_id=680846,
        modifier_name="Half",
        modifier_group_id=249016,
    ),
    WATER: CatalogItem(
        kind=WATER,
        name="Water Bottle",
        variant_id=1336767,
        product_id=1339681,
        category_id=194537,
        code="1042",
        sku="1042",
    ),
    PACKING: CatalogItem(
        kind=PACKING,
        name="Packing Charges",
        variant_id=1336768,
        product_id=1339682,
        category_id=194538,
        code="1043",
        sku="1043",
    ),
})


def catalog_unit_price(
    kind: str, price_table: PriceTable, catalog: Mapping[str, CatalogItem]
) -> Decimal:
    item = catalog.get(kind)
    if item is not None and item.unit_price is not None:
        return item.unit_price
    return price_table[kind]
