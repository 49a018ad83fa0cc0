"""POS order synthesis, remote realization and batch workflow.

The Playwright executor lives in ``orders.browser`` and is imported on
demand, since it needs the optional ``automation`` extra.
"""

from .automation import AutomationCredentials, AutomationExecutor, AutomationRequest, AutomationResult
from .builder import OrderDocumentBuilder, settle_document
from .client import CreateOrderResult, PosOrderClient
from .document import OrderDocument, OrderLine, TaxComponent, TaxConfig
from .pacing import FixedDelayPacer
from .pos_config import PosConfig
from .workflow import ApiOrderChannel, AutomationOrderChannel, BatchReport, OrderOutcome, OrderWorkflow

__all__ = [
    "ApiOrderChannel",
    "AutomationCredentials",
    "AutomationExecutor",
    "AutomationOrderChannel",
    "AutomationRequest",
    "AutomationResult",
    "BatchReport",
    "CreateOrderResult",
    "FixedDelayPacer",
    "OrderDocument",
    "OrderDocumentBuilder",
    "OrderLine",
    "OrderOutcome",
    "OrderWorkflow",
    "PosConfig",
    "PosOrderClient",
    "TaxComponent",
    "TaxConfig",
    "settle_document",
]
