"""
Statement POS - Bank statement to point-of-sale order reconstruction

Reads a bank statement export, keeps the credit transactions that belong to
one merchant, infers the menu items behind each paid amount and replays the
resulting orders against a POS backend (direct API or scripted browser).
"""

__version__ = "0.1.0"

from . import menu
from . import orders
from . import statement
from . import utils

__all__ = ["menu", "orders", "statement", "utils"]
