"""Aggregate figures over a list of parsed transactions."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable

from ..menu.pricing import ITEM_KINDS
from ..models import STATUS_FAILED, STATUS_SUCCESS, Transaction


@dataclass
class StatementSummary:
    total: int = 0
    processed: int = 0
    failed: int = 0
    adjustments: int = 0
    total_paid: Decimal = Decimal("0")
    total_expected: Decimal = Decimal("0")
    total_adjustment: Decimal = Decimal("0")
    item_totals: Dict[str, int] = field(default_factory=lambda: {kind: 0 for kind in ITEM_KINDS})

    @property
    def total_items(self) -> int:
        return sum(self.item_totals.values())

    @property
    def average_ticket(self) -> Decimal:
        if not self.total:
            return Decimal("0")
        return (self.total_paid / self.total).quantize(Decimal("0.01"))


def summarize(transactions: Iterable[Transaction]) -> StatementSummary:
    summary = StatementSummary()
    for txn in transactions:
        summary.total += 1
        if txn.status == STATUS_SUCCESS:
            summary.processed += 1
        elif txn.status == STATUS_FAILED:
            summary.failed += 1
        if txn.adjustment != 0:
            summary.adjustments += 1
        summary.total_paid += txn.paid_amount
        summary.total_expected += txn.expected_cost
        summary.total_adjustment += txn.adjustment
        for kind in ITEM_KINDS:
            summary.item_totals[kind] += getattr(txn, kind)
    return summary
