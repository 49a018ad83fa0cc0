"""Typed POS order document and its vendor wire representation.

Every value that takes part in later arithmetic (prices, taxes, totals,
payment state) is a named field. Pure passthrough data for the vendor, such
as table layout and floor coordinates, lives in the ``metadata`` blob.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from ..menu.pricing import CatalogItem
from .pos_config import PosConfig

STATUS_PENDING = "pending"
STATUS_SETTLED = "settled"


def as_number(value: Decimal) -> Any:
    """JSON-friendly rendering of a Decimal (int when integral)."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


@dataclass(frozen=True)
class TaxComponent:
    id: int
    name: str
    code: str
    rate: Decimal

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "rate": float(self.rate),
            "config": {
                "amount": float(self.rate * 100),
                "amount_field": "item_price",
                "amount_type": "percent",
                "applicable_modes": ["in-store", "online"],
            },
        }


@dataclass(frozen=True)
class TaxConfig:
    """Co-equal tax components applied to each line's sales price."""

    components: Tuple[TaxComponent, ...]

    def __post_init__(self) -> None:
        if not self.components:
            raise ValueError("TaxConfig needs at least one component")

    @classmethod
    def gst(cls) -> "TaxConfig":
        """5% GST split into SGST and CGST halves."""
        return cls(components=(
            TaxComponent(id=10315, name="SGST", code="SGST", rate=Decimal("0.025")),
            TaxComponent(id=10316, name="CGST", code="CGST", rate=Decimal("0.025")),
        ))

    @property
    def total_rate(self) -> Decimal:
        return sum((c.rate for c in self.components), Decimal("0"))


@dataclass(frozen=True)
class AppliedTax:
    component: TaxComponent
    on_amount: Decimal
    amount: Decimal

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.component.id,
            "name": self.component.name,
            "code": self.component.code,
            "note": None,
            "on_amount": as_number(self.on_amount),
            "amount": float(self.amount),
            "charge_id": None,
        }


@dataclass(frozen=True)
class OrderLine:
    """One menu item's contribution to an order."""

    id: str
    item_kind: str
    quantity: int
    unit_price: Decimal
    sales_price: Decimal
    taxes: Tuple[AppliedTax, ...]
    tax_amount: Decimal
    total_sales_price: Decimal
    order_sequence: int
    kot_id: str
    catalog: CatalogItem
    client_created_at: int

    def to_payload(self, tax_config: TaxConfig) -> Dict[str, Any]:
        item = self.catalog
        modifiers: List[Dict[str, Any]] = []
        if item.modifier_id is not None:
            modifiers.append({
                "id": item.modifier_id,
                "name": item.modifier_name,
                "short_name": item.modifier_name,
                "modifier_group": item.name,
                "modifier_group_title": item.name,
                "modifier_group_id": item.modifier_group_id,
                "modifier_group_sort_order": 1,
                "sales_price": as_number(self.sales_price),
                "sort_order": 1,
                "parent_id": item.product_id,
                "hsn": None,
                "unit_quantity": 1,
            })
        return {
            "id": self.id,
            "text": None,
            "variant": {
                "id": item.variant_id,
                "type": "catalogue-item",
                "product_id": item.product_id,
                "full_name": item.name,
                "short_name": item.name,
                "product_name": item.name,
                "attr_values": [],
                "kot_type_id": "kot/kot",
                "kot_subtype": "kot",
                "kot_subtype_text": "KOT",
                "is_inventory_tracked": False,
                "code": item.code,
                "sku": item.sku,
                "barcode": None,
                "sell_by_weight": False,
                "hsn": None,
                "category_id": item.category_id,
            },
            "stock_quantity": 99999999,
            "meta": {},
            "units": {
                "default": "pcs",
                "purchase": "pcs",
                "transfer": "pcs",
                "base": "pcs",
                "scales": {"pcs": 1},
            },
            "unit": "pcs",
            "unit_scale": 1,
            "unit_quantity": 1,
            "taxes": [c.to_payload() for c in tax_config.components],
            "fees": [],
            "applied_taxes": [t.to_payload() for t in self.taxes],
            "applied_fees": [],
            "quantity": self.quantity,
            "pricing": {"markup_price": None, "base": {"price": 0}, "units": []},
            "cost_price": None,
            "orderSequence": self.order_sequence,
            "sales_price": as_number(self.sales_price),
            "modifiers": modifiers,
            "discount_type": "no",
            "discount_type_value": 0,
            "discount_amount": 0,
            "note": "",
            "note_internal": "",
            "client_created_at": self.client_created_at,
            "type": "normal",
            # Vendor convention: line total_sales_price is pre-tax, total is tax-inclusive.
            "total_sales_price": as_number(self.sales_price),
            "total": float(self.total_sales_price),
            "sell_by_weight": False,
            "food_type": item.food_type,
            "hsn": None,
            "discount_subtotal_last": as_number(self.sales_price),
            "bill_discount": 0,
            "bill_cashback": 0,
            "total_tax": float(self.tax_amount),
            "total_fee": 0,
            "kot_id": self.kot_id,
            "sort_order": self.order_sequence,
        }


@dataclass(frozen=True)
class PaymentRecord:
    method: str
    amount: Decimal
    created_at: datetime
    uid: int = 1
    payment_mode: str = "offline"
    status: str = "success"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "amount": float(self.amount),
            "online_payment_id": None,
            "payment_mode": self.payment_mode,
            "status": self.status,
            "uid": self.uid,
            # unpadded day, two-digit hour: "5 Oct 2026 - 09:05 am"
            "created_at": self.created_at.strftime("%d %b %Y - %I:%M %p").lstrip("0").replace("AM", "am").replace("PM", "pm"),
            "received_amount": float(self.amount),
        }


@dataclass(frozen=True)
class AuditLogEntry:
    event: str
    event_type: str
    description: str
    timestamp: int
    actor_id: int
    actor_name: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "event": self.event,
            "event_type": self.event_type,
            "description": self.description,
            "timestamp": self.timestamp,
            "user": {"username": self.actor_name, "id": self.actor_id},
        }


@dataclass(frozen=True)
class OrderDocument:
    """Vendor order built from one Transaction.

    Never mutated: settlement derives a new document with a bumped version,
    so the pending and settled versions can be kept side by side.
    """

    id: str
    kot_id: str
    transaction_id: str
    lines: Tuple[OrderLine, ...]
    total_sales_price: Decimal
    total_tax: Decimal
    total: Decimal
    client_created_at: int
    business_date: str
    pos: PosConfig = field(repr=False)
    tax_config: TaxConfig = field(repr=False)
    status: str = STATUS_PENDING
    frozen: bool = False
    payment_outstanding: Decimal = Decimal("0")
    version: int = 1
    payment_uid: int = 0
    payments: Tuple[PaymentRecord, ...] = ()
    logs: Tuple[AuditLogEntry, ...] = ()
    settled_at: Optional[int] = None
    register_session_id: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_settled(self) -> bool:
        return self.status == STATUS_SETTLED

    def bill_payload(self) -> Dict[str, Any]:
        """The inner bill object as the POS stores it."""
        pos = self.pos
        settled = self.is_settled
        payload: Dict[str, Any] = {
            "clientBill": True,
            "version": self.version,
            "id": self.id,
            "owner": pos.owner,
            "location": {"id": pos.location_id},
            "customer": None,
            "frozen": self.frozen,
            "payment_extra": {},
            "total_payment_amount": float(self.total),
            "payments": [p.to_payload() for p in self.payments],
            "payment_outstanding": float(self.payment_outstanding),
            "type": "sale",
            "status": self.status,
            "discount_percent": None,
            "discount_amount": 0,
            "taxes": {},
            "total_sales_price": as_number(self.total_sales_price),
            "total_tax": float(self.total_tax),
            "sub_total": as_number(self.total_sales_price),
            "total": float(self.total),
            "payment_uid": self.payment_uid,
            "mode": "restaurant",
            "client_created_at": self.client_created_at,
            "client_created_by": pos.cashier_id,
            "client_created_by_name": pos.cashier_name,
            "bill_lines": [line.to_payload(self.tax_config) for line in self.lines],
            "kots": [],
            "currencies": [],
            "meta": {},
            "business_date": self.business_date,
            "schema_version": 1,
            "company_id": pos.company_id,
            "cashier": {"id": pos.cashier_id, "name": pos.cashier_name},
            "itemTotals": {},
            "bxgyDiscounts": [],
            "discount_amount_last": "0",
            "cashback": 0,
            "applied_fees": [],
            "applied_taxes": [],
            "total_line_fee": 0,
            "total_line_tax": float(self.total_tax),
            "total_line_discount": 0,
            "total_line_cashback": 0,
            "total_bill_fee": 0,
            "total_bill_tax": 0,
            "total_fee": 0,
            "total_discount": 0,
            "total_cashback": 0,
            "round_off_amount": 0,
            "transaction_pending": 0 if settled else float(self.total),
            "cash_received": 0 if settled else float(self.total),
            "cash_balance": -float(self.total) if settled else 0,
            "current_order": [],
            "syncInProgressVersion": self.version - 1,
            "discount_subtotal_last": as_number(self.total_sales_price),
            "last_added_line": self.lines[-1].id if self.lines else "",
            "lastOrderSequence": len(self.lines),
            "logs": [entry.to_payload() for entry in self.logs],
            "version_check": True,
        }
        # Passthrough vendor fields (table, sub type, numbering).
        payload.update(self.metadata)
        return payload

    def to_payload(self) -> Dict[str, Any]:
        """Create-order request body."""
        return {
            "client_bill_id": self.id,
            "version": self.version,
            "payload": self.bill_payload(),
            "owner": self.pos.owner,
            "is_external": False,
            "company_id": self.pos.company_id,
        }

    def settlement_payload(self) -> Dict[str, Any]:
        """Settle-order request body; only valid for a settled document."""
        payload = self.bill_payload()
        payload["settled_at"] = self.settled_at
        payload["register_session"] = {"id": self.register_session_id}
        payload["register_name"] = self.pos.register_name
        return payload
