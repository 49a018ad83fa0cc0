"""HTTP client for the POS create-order and settle-order endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set

import requests

from ..exceptions import OrderSequenceError, RemoteError, RemoteTimeoutError
from ..utils.logging import get_logger
from .document import OrderDocument
from .pos_config import PosConfig

logger = get_logger(__name__)


@dataclass(frozen=True)
class CreateOrderResult:
    server_id: str
    version: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


class PosOrderClient:
    """Thin, non-retrying client for the POS bills API.

    No idempotency key is sent, so a repeated call may create a duplicate
    order; callers decide whether and when to call again.
    """

    def __init__(self, pos_config: PosConfig, session: Optional[requests.Session] = None) -> None:
        self.config = pos_config
        self._session = session
        self._owns_session = session is None
        self._created: Set[str] = set()

    def __enter__(self) -> "PosOrderClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def connect(self) -> None:
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True

    def close(self) -> None:
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None

    def _headers(self, content_type: str) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.auth_token}",
            "Content-Type": content_type,
            "Accept": "application/json",
            "X-Prime-Language": "en",
            "X-Client": self.config.client_header,
        }
        headers.update(self.config.extra_headers)
        return headers

    def _post(self, url: str, body: Dict[str, Any], content_type: str, action: str) -> Dict[str, Any]:
        if self._session is None:
            self.connect()
        try:
            response = self._session.post(
                url,
                json=body,
                headers=self._headers(content_type),
                timeout=self.config.request_timeout,
            )
        except requests.exceptions.Timeout as exc:
            raise RemoteTimeoutError(
                f"Timed out after {self.config.request_timeout}s while trying to {action}"
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise RemoteError(None, f"Failed to {action}: {exc}") from exc

        if not response.ok:
            raise RemoteError(response.status_code, f"Failed to {action}: {response.reason or ''}".rstrip(": "))

        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(response.status_code, f"Failed to {action}: response is not JSON") from exc

    def create_order(self, document: OrderDocument) -> CreateOrderResult:
        """POST a pending order; returns the server-assigned identifier."""
        if document.is_settled:
            raise OrderSequenceError(f"Order {document.id} is already settled; create it from the pending version")
        logger.info("Creating POS order %s (total %s)", document.id, document.total)
        data = self._post(
            self.config.bills_url,
            document.to_payload(),
            "application/json",
            "create order",
        )
        server_id = data.get("_id")
        if not server_id:
            raise RemoteError(None, "Failed to create order: response has no _id")
        self._created.add(server_id)
        logger.info("POS order created: %s", server_id)
        return CreateOrderResult(
            server_id=server_id,
            version=data.get("version"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
            raw=data,
        )

    def settle_order(self, server_id: str, settled_document: OrderDocument) -> Dict[str, Any]:
        """POST the settled version of an order created by this client."""
        if server_id not in self._created:
            raise OrderSequenceError(f"settle_order called for {server_id!r} before a successful create_order")
        if not settled_document.is_settled:
            raise OrderSequenceError(f"Order {settled_document.id} has not been settled locally")
        logger.info("Settling POS order %s", server_id)
        data = self._post(
            self.config.settlement_url,
            settled_document.settlement_payload(),
            "application/json; charset=utf-8",
            "settle order",
        )
        logger.info("POS order settled: %s", server_id)
        return data
