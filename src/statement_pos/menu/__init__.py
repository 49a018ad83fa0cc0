"""Menu pricing and amount decomposition."""

from .decomposer import AmountDecomposer, Decomposition, OrderComposition, decompose_amount
from .pricing import DEFAULT_CATALOG, ITEM_KINDS, CatalogItem, PriceTable

__all__ = [
    "AmountDecomposer",
    "CatalogItem",
    "DEFAULT_CATALOG",
    "Decomposition",
    "ITEM_KINDS",
    "OrderComposition",
    "PriceTable",
    "decompose_amount",
]
