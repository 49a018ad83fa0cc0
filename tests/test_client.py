"""Tests for the POS order client."""

import random
from datetime import datetime
from unittest.mock import MagicMock

import pytest
import requests

from statement_pos.exceptions import OrderSequenceError, RemoteError, RemoteTimeoutError
from statement_pos.menu.decomposer import decompose_amount
from statement_pos.models import Transaction
from statement_pos.orders.builder import OrderDocumentBuilder
from statement_pos.orders.client import PosOrderClient


def make_response(status_code=200, payload=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.reason = reason
    response.json.return_value = payload if payload is not None else {}
    return response


@pytest.fixture
def documents(pos_config, price_table):
    builder = OrderDocumentBuilder(pos_config, price_table, rng=random.Random(1))
    txn = Transaction.from_decomposition(
        txn_id="txn-client-1",
        date="18-Oct-2026",
        value_date="18-Oct-2026",
        details="UPI/CR/LITTICIOUS",
        decomposition=decompose_amount(250),
    )
    pending = builder.build(txn, now=datetime(2026, 10, 18, 9, 0))
    return pending, builder.settle(pending)


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


class TestCreateOrder:
    def test_posts_payload_and_returns_server_id(self, pos_config, documents, session):
        pending, _ = documents
        session.post.return_value = make_response(201, {
            "_id": "srv-1", "version": 1, "createdAt": "2026-10-18T03:30:00Z", "updatedAt": "2026-10-18T03:30:00Z",
        })
        result = PosOrderClient(pos_config, session=session).create_order(pending)

        assert result.server_id == "srv-1"
        assert result.version == 1
        assert result.created_at == "2026-10-18T03:30:00Z"
        url = session.post.call_args.args[0]
        kwargs = session.post.call_args.kwargs
        assert url == "https://pos.example.test/api/v1/dr3/bills"
        assert kwargs["json"]["client_bill_id"] == pending.id
        assert kwargs["headers"]["Authorization"] == "Bearer test-token"
        assert kwargs["timeout"] == pos_config.request_timeout

    def test_http_error_raises_remote_error(self, pos_config, documents, session):
        pending, _ = documents
        session.post.return_value = make_response(502, reason="Bad Gateway")
        with pytest.raises(RemoteError) as exc_info:
            PosOrderClient(pos_config, session=session).create_order(pending)
        assert exc_info.value.status_code == 502
        assert "Bad Gateway" in exc_info.value.message

    def test_timeout_raises_remote_timeout(self, pos_config, documents, session):
        pending, _ = documents
        session.post.side_effect = requests.exceptions.Timeout("slow")
        with pytest.raises(RemoteTimeoutError) as exc_info:
            PosOrderClient(pos_config, session=session).create_order(pending)
        assert exc_info.value.status_code is None

    def test_connection_error_raises_remote_error(self, pos_config, documents, session):
        pending, _ = documents
        session.post.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(RemoteError):
            PosOrderClient(pos_config, session=session).create_order(pending)

    def test_missing_id_is_remote_error(self, pos_config, documents, session):
        pending, _ = documents
        session.post.return_value = make_response(200, {"version": 1})
        with pytest.raises(RemoteError):
            PosOrderClient(pos_config, session=session).create_order(pending)

    def test_settled_document_cannot_be_created(self, pos_config, documents, session):
        _, settled = documents
        with pytest.raises(OrderSequenceError):
            PosOrderClient(pos_config, session=session).create_order(settled)
        session.post.assert_not_called()

    def test_no_automatic_retry(self, pos_config, documents, session):
        pending, _ = documents
        session.post.return_value = make_response(500, reason="Server Error")
        with pytest.raises(RemoteError):
            PosOrderClient(pos_config, session=session).create_order(pending)
        assert session.post.call_count == 1


class TestSettleOrder:
    def test_settle_after_create(self, pos_config, documents, session):
        pending, settled = documents
        session.post.side_effect = [
            make_response(201, {"_id": "srv-9"}),
            make_response(200, {"_id": "srv-9", "version": 2}),
        ]
        client = PosOrderClient(pos_config, session=session)
        created = client.create_order(pending)
        data = client.settle_order(created.server_id, settled)

        assert data["version"] == 2
        url = session.post.call_args.args[0]
        kwargs = session.post.call_args.kwargs
        assert url == pos_config.settlement_url
        assert kwargs["json"]["status"] == "settled"
        assert kwargs["headers"]["Content-Type"] == "application/json; charset=utf-8"

    def test_settle_before_create_is_programming_error(self, pos_config, documents, session):
        _, settled = documents
        with pytest.raises(OrderSequenceError):
            PosOrderClient(pos_config, session=session).settle_order("srv-unknown", settled)
        session.post.assert_not_called()

    def test_settle_requires_settled_document(self, pos_config, documents, session):
        pending, _ = documents
        session.post.return_value = make_response(201, {"_id": "srv-2"})
        client = PosOrderClient(pos_config, session=session)
        client.create_order(pending)
        with pytest.raises(OrderSequenceError):
            client.settle_order("srv-2", pending)

    def test_settle_http_error(self, pos_config, documents, session):
        pending, settled = documents
        session.post.side_effect = [make_response(201, {"_id": "srv-3"}), make_response(409, reason="Conflict")]
        client = PosOrderClient(pos_config, session=session)
        client.create_order(pending)
        with pytest.raises(RemoteError) as exc_info:
            client.settle_order("srv-3", settled)
        assert exc_info.value.status_code == 409


class TestSessionLifecycle:
    def test_context_manager_closes_own_session(self, pos_config, monkeypatch):
        created = MagicMock(spec=requests.Session)
        monkeypatch.setattr("statement_pos.orders.client.requests.Session", lambda: created)
        with PosOrderClient(pos_config):
            pass
        created.close.assert_called_once()

    def test_injected_session_is_not_closed(self, pos_config, session):
        with PosOrderClient(pos_config, session=session):
            pass
        session.close.assert_not_called()

    def test_repr_hides_token(self, pos_config):
        assert "test-token" not in repr(pos_config)
