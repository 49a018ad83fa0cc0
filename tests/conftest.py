"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Add src to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from statement_pos.menu.pricing import PriceTable  # noqa: E402
from statement_pos.orders.pos_config import PosConfig  # noqa: E402

HEADER = ["Transaction Date", "Value Date", "Particulars", "Cheque No.", "Debit", "Credit", "Balance"]


@pytest.fixture
def price_table():
    return PriceTable(full_plate=89, half_plate=49, water=10, packing=5)


@pytest.fixture
def pos_config():
    return PosConfig(
        base_url="https://pos.example.test/api/v1/dr3",
        auth_token="test-token",
        location_id=101,
        location_name="Test Stall - POS",
        register_id=202,
        register_name="Test Stall - POS - Counter",
        company_id=303,
        cashier_id=404,
        cashier_name="Test Cashier",
        table_id=505,
        settle_url="https://pos.example.test/api/v1/sales/bills",
        request_timeout=5.0,
    )


@pytest.fixture
def statement_grid():
    """IDFC-style export: metadata rows, header, credits/debits, footer."""
    return [
        ["ACCOUNT STATEMENT", None, None, None, None, None, None],
        ["Account Name", "TEST STALL", None, None, None, None, None],
        ["Account Number", "10012345678", None, None, None, None, None],
        [None, None, None, None, None, None, None],
        HEADER,
        ["01-Oct-2026", "01-Oct-2026", "UPI/CR/1234/RAVI/LITTICIOUS", None, None, "180.00", "1,180.00"],
        ["01-Oct-2026", "01-Oct-2026", "UPI/DR/5678/VENDOR/SUPPLIES", None, "500.00", None, "680.00"],
        ["02-Oct-2026", "02-Oct-2026", "UPI/CR/9012/ANU/LITTICIOUS", None, None, "₹109.00", "789.00"],
        ["03-Oct-2026", "03-Oct-2026", "NEFT/CR/OTHER MERCHANT", None, None, "1,000.00", "1,789.00"],
        ["04-Oct-2026", "04-Oct-2026", "UPI/CR/3456/SAM/Litticious", None, None, "250", "2,039.00"],
        ["Total", None, None],
        [None, None, None, None, None, None, None],
    ]
