"""Build POS order documents from transactions and derive settled versions."""

from __future__ import annotations

import random
import uuid
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import List, Mapping, Optional
from zoneinfo import ZoneInfo

from ..exceptions import OrderStateError
from ..menu.pricing import DEFAULT_CATALOG, ITEM_KINDS, CatalogItem, PriceTable, catalog_unit_price
from ..models import Transaction
from ..utils.logging import get_logger
from .document import (
    STATUS_PENDING,
    STATUS_SETTLED,
    AppliedTax,
    AuditLogEntry,
    OrderDocument,
    OrderLine,
    PaymentRecord,
    TaxConfig,
)
from .pos_config import PosConfig

logger = get_logger(__name__)


def _generate_id(now: datetime, rng: random.Random) -> str:
    return f"{int(now.timestamp() * 1000)}-{rng.getrandbits(40):010x}"


def _rupees(amount: Decimal) -> str:
    return f"₹{amount.quantize(Decimal('0.01'))}"


class OrderDocumentBuilder:
    """Translate a Transaction into the POS order document.

    One line is emitted per non-zero item quantity, in menu order. Each line
    carries ``quantity × unit_price`` as sales price plus its tax, split
    evenly across the configured tax components.
    """

    def __init__(
        self,
        pos_config: PosConfig,
        price_table: Optional[PriceTable] = None,
        catalog: Optional[Mapping[str, CatalogItem]] = None,
        tax_config: Optional[TaxConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.pos = pos_config
        self.price_table = price_table or PriceTable()
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self.tax_config = tax_config or TaxConfig.gst()
        self._rng = rng or random.Random()
        self._tz = ZoneInfo(pos_config.timezone)

    def _now(self, now: Optional[datetime]) -> datetime:
        if now is None:
            return datetime.now(self._tz)
        if now.tzinfo is None:
            return now.replace(tzinfo=self._tz)
        return now.astimezone(self._tz)

    def _build_line(
        self, kind: str, quantity: int, sequence: int, kot_id: str, created_at: int, now: datetime
    ) -> OrderLine:
        item = self.catalog.get(kind)
        if item is None:
            raise KeyError(f"No catalogue entry for item kind {kind!r}")
        unit_price = catalog_unit_price(kind, self.price_table, self.catalog)
        sales_price = unit_price * quantity
        tax_amount = sales_price * self.tax_config.total_rate
        share = tax_amount / len(self.tax_config.components)
        taxes = tuple(
            AppliedTax(component=component, on_amount=sales_price, amount=share)
            for component in self.tax_config.components
        )
        return OrderLine(
            id=_generate_id(now, self._rng),
            item_kind=kind,
            quantity=quantity,
            unit_price=unit_price,
            sales_price=sales_price,
            taxes=taxes,
            tax_amount=tax_amount,
            total_sales_price=sales_price + tax_amount,
            order_sequence=sequence,
            kot_id=kot_id,
            catalog=item,
            client_created_at=created_at,
        )

    def build(self, transaction: Transaction, now: Optional[datetime] = None) -> OrderDocument:
        now = self._now(now)
        created_at = int(now.timestamp())
        kot_id = str(uuid.UUID(int=self._rng.getrandbits(128), version=4))

        lines: List[OrderLine] = []
        for kind in ITEM_KINDS:
            quantity = getattr(transaction, kind)
            if quantity > 0:
                lines.append(self._build_line(kind, quantity, len(lines) + 1, kot_id, created_at, now))

        total_sales_price = sum((line.sales_price for line in lines), Decimal("0"))
        total_tax = sum((line.tax_amount for line in lines), Decimal("0"))
        total = total_sales_price + total_tax

        created_log = AuditLogEntry(
            event="New Order Created",
            event_type="finish-order",
            description=(
                f"New bill created\nNew Items : {len(lines)} , "
                f"Total Quantity: {sum(line.quantity for line in lines)} , "
                f"Draft Total : {_rupees(total)}"
            ),
            timestamp=created_at,
            actor_id=self.pos.cashier_id,
            actor_name=self.pos.cashier_name,
        )

        document = OrderDocument(
            id=_generate_id(now, self._rng),
            kot_id=kot_id,
            transaction_id=transaction.id,
            lines=tuple(lines),
            total_sales_price=total_sales_price,
            total_tax=total_tax,
            total=total,
            client_created_at=created_at,
            business_date=now.replace(hour=0, minute=0, second=0, microsecond=0).isoformat(),
            pos=self.pos,
            tax_config=self.tax_config,
            status=STATUS_PENDING,
            frozen=False,
            payment_outstanding=total,
            version=1,
            logs=(created_log,),
            metadata=self._passthrough_metadata(),
        )
        logger.debug(
            "Built order %s for %s: %d lines, total %s",
            document.id, transaction.id, len(lines), total,
        )
        return document

    def _passthrough_metadata(self) -> dict:
        sequence = self._rng.randint(1, 999)
        return {
            "table": {
                "id": self.pos.table_id,
                "name": "Takeaway",
                "floor_name": "Take away",
                "name_text": "Take away / Takeaway",
                "x": 5,
                "y": 5,
                "details": {"size": 1, "type": "ellipse", "orientation": "default"},
                "floor_id": 11570,
                "cover": 1,
            },
            "temp_number": f"T/2/{sequence}",
            "sub_type_text": "Takeaway",
            "delivery": False,
            "sub_type": "takeaway",
            "sub_type_object": {
                "id": "takeaway",
                "typeId": 12747,
                "key": "takeaway",
                "text": "Takeaway",
                "name": "Takeaway",
                "extra": {"layout_type": "list"},
            },
            "number": f"2/{sequence:06d}",
            "number_sequence": sequence,
        }

    def settle(self, document: OrderDocument, now: Optional[datetime] = None) -> OrderDocument:
        """Derive the settled version of a pending document (full cash payment)."""
        return settle_document(
            document,
            actor_id=self.pos.cashier_id,
            actor_name=self.pos.cashier_name,
            now=self._now(now),
            register_session_id=self._rng.randint(1, 9_999_999),
        )


def settle_document(
    document: OrderDocument,
    actor_id: int,
    actor_name: str,
    now: datetime,
    register_session_id: int,
) -> OrderDocument:
    """Return a new, frozen, fully paid copy of ``document``.

    The input is left unmodified so that the pending and settled versions
    form an auditable pair. Only pending documents can be settled.
    """
    if document.status != STATUS_PENDING:
        raise OrderStateError(
            f"Order {document.id} is {document.status!r}; only pending orders can be settled"
        )

    timestamp = int(now.timestamp())
    payment = PaymentRecord(method="cash", amount=document.total, created_at=now, uid=1)
    settle_log = AuditLogEntry(
        event="Bill settled",
        event_type="settle",
        description=f"Payment Mode : offline , Value : {_rupees(document.total)}",
        timestamp=timestamp,
        actor_id=actor_id,
        actor_name=actor_name,
    )
    return replace(
        document,
        version=document.version + 1,
        frozen=True,
        status=STATUS_SETTLED,
        payment_outstanding=Decimal("0"),
        payment_uid=1,
        payments=(payment,),
        logs=(settle_log,) + document.logs,
        settled_at=timestamp,
        register_session_id=register_session_id,
        metadata=dict(document.metadata),
    )
