"""Sequential realization of transactions as POS orders.

Each transaction is one unit of work: build, create and settle through the
API, or a single run of the automation executor. Units run one after another
with a pacing delay in between, and a batch can only be stopped between
units, never halfway through one.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..exceptions import AutomationError, RemoteError
from ..models import Transaction
from ..utils.logging import get_logger
from .automation import AutomationCredentials, AutomationExecutor, AutomationRequest
from .builder import OrderDocumentBuilder
from .client import PosOrderClient
from .document import OrderDocument
from .pacing import FixedDelayPacer

logger = get_logger(__name__)


@dataclass
class OrderOutcome:
    transaction_id: str
    success: bool
    order_id: Optional[str] = None
    error: Optional[str] = None
    skipped: bool = False
    screenshot: Optional[str] = field(default=None, repr=False)
    pending_document: Optional[OrderDocument] = field(default=None, repr=False)
    settled_document: Optional[OrderDocument] = field(default=None, repr=False)


@dataclass
class BatchReport:
    outcomes: List[OrderOutcome] = field(default_factory=list)
    cancelled: bool = False

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.success and not o.skipped)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.success and not o.skipped)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.skipped)


class OrderChannel:
    """One way of turning a transaction into a POS order."""

    def realize(self, transaction: Transaction) -> OrderOutcome:
        raise NotImplementedError


class ApiOrderChannel(OrderChannel):
    """Build the document, create it remotely, then settle it.

    Settlement is only attempted after a successful create; a failed or
    timed-out create propagates immediately.
    """

    def __init__(self, builder: OrderDocumentBuilder, client: PosOrderClient) -> None:
        self.builder = builder
        self.client = client

    def realize(self, transaction: Transaction) -> OrderOutcome:
        document = self.builder.build(transaction)
        created = self.client.create_order(document)
        settled = self.builder.settle(document)
        try:
            self.client.settle_order(created.server_id, settled)
        except RemoteError as exc:
            logger.error("Order %s was created but not settled", created.server_id)
            exc.order_id = created.server_id
            raise
        return OrderOutcome(
            transaction_id=transaction.id,
            success=True,
            order_id=created.server_id,
            pending_document=document,
            settled_document=settled,
        )


class AutomationOrderChannel(OrderChannel):
    def __init__(
        self,
        executor: AutomationExecutor,
        credentials: AutomationCredentials,
        headless: bool = True,
        timeout_ms: int = 30000,
    ) -> None:
        self.executor = executor
        self.credentials = credentials
        self.headless = headless
        self.timeout_ms = timeout_ms

    def realize(self, transaction: Transaction) -> OrderOutcome:
        result = self.executor.create_order(
            AutomationRequest(
                transaction=transaction,
                credentials=self.credentials,
                headless=self.headless,
                timeout_ms=self.timeout_ms,
            )
        )
        if not result.success:
            raise AutomationError(result.error or "Unknown error", screenshot=result.screenshot)
        return OrderOutcome(
            transaction_id=transaction.id,
            success=True,
            order_id=result.order_id,
            screenshot=result.screenshot,
        )


class OrderWorkflow:
    """Run transactions through a channel at most once each."""

    def __init__(self, channel: OrderChannel, pacer: Optional[FixedDelayPacer] = None) -> None:
        self.channel = channel
        self.pacer = pacer or FixedDelayPacer()
        self._attempted: Dict[str, OrderOutcome] = {}

    def has_attempted(self, transaction_id: str) -> bool:
        return transaction_id in self._attempted

    def process(self, transaction: Transaction) -> OrderOutcome:
        """Realize one transaction and record the outcome on it.

        Remote and automation failures mark the transaction failed instead
        of raising. A transaction that was already attempted is not sent
        again.
        """
        previous = self._attempted.get(transaction.id)
        if previous is not None:
            logger.warning("Transaction %s already attempted, not sending again", transaction.id)
            return OrderOutcome(
                transaction_id=transaction.id,
                success=previous.success,
                order_id=previous.order_id,
                error=previous.error,
                skipped=True,
            )

        try:
            outcome = self.channel.realize(transaction)
        except (RemoteError, AutomationError) as exc:
            logger.error("Order for %s failed: %s", transaction.id, exc)
            transaction.mark_failed(str(exc))
            order_id = getattr(exc, "order_id", None)
            if order_id is not None:
                transaction.order_id = order_id
            outcome = OrderOutcome(
                transaction_id=transaction.id,
                success=False,
                order_id=order_id,
                error=str(exc),
                screenshot=getattr(exc, "screenshot", None),
            )
        else:
            transaction.mark_success(outcome.order_id)
            logger.info("Order for %s realized as %s", transaction.id, outcome.order_id)

        self._attempted[transaction.id] = outcome
        return outcome

    def process_batch(
        self,
        transactions: Iterable[Transaction],
        stop_event: Optional[threading.Event] = None,
    ) -> BatchReport:
        """Process transactions in order, pacing between them.

        ``stop_event`` is checked before each transaction; once set, the
        remaining transactions are left untouched and the report is marked
        cancelled.
        """
        report = BatchReport()
        for transaction in transactions:
            if stop_event is not None and stop_event.is_set():
                logger.info("Batch stopped before %s", transaction.id)
                report.cancelled = True
                break
            if not self.has_attempted(transaction.id):
                self.pacer.wait()
            report.outcomes.append(self.process(transaction))

        logger.info(
            "Batch finished: %d succeeded, %d failed, %d skipped%s",
            report.succeeded, report.failed, report.skipped,
            " (cancelled)" if report.cancelled else "",
        )
        return report


__all__ = [
    "ApiOrderChannel",
    "AutomationOrderChannel",
    "BatchReport",
    "OrderChannel",
    "OrderOutcome",
    "OrderWorkflow",
]
