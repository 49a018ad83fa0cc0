"""Normalized transaction model shared by the parser and the order workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from .menu.decomposer import Decomposition

STATUS_PENDING = "pending"
STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"


@dataclass
class Transaction:
    """One credit row from the statement with its inferred order.

    Only ``status``, ``error_message`` and ``order_id`` change after the
    parser creates the record; they track the outcome of realizing the order.
    """

    id: str
    date: str
    value_date: str
    details: str
    paid_amount: Decimal
    full_plate: int
    half_plate: int
    water: int
    packing: int
    expected_cost: Decimal
    adjustment: Decimal
    status: str = STATUS_PENDING
    error_message: Optional[str] = None
    order_id: Optional[str] = None
    row_number: Optional[int] = field(default=None, compare=False)

    @classmethod
    def from_decomposition(
        cls,
        txn_id: str,
        date: str,
        value_date: str,
        details: str,
        decomposition: Decomposition,
        status: str = STATUS_SUCCESS,
        row_number: Optional[int] = None,
    ) -> "Transaction":
        comp = decomposition.composition
        return cls(
            id=txn_id,
            date=date,
            value_date=value_date,
            details=details,
            paid_amount=decomposition.paid_amount,
            full_plate=comp.full_plate,
            half_plate=comp.half_plate,
            water=comp.water,
            packing=comp.packing,
            expected_cost=decomposition.expected_cost,
            adjustment=decomposition.adjustment,
            status=status,
            row_number=row_number,
        )

    def mark_success(self, order_id: Optional[str] = None) -> None:
        self.status = STATUS_SUCCESS
        self.error_message = None
        if order_id is not None:
            self.order_id = order_id

    def mark_failed(self, message: str) -> None:
        self.status = STATUS_FAILED
        self.error_message = message
