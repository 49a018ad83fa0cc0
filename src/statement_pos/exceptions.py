"""Error taxonomy for statement parsing and order realization."""

from __future__ import annotations

from typing import Optional


class StatementPosError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(StatementPosError, ValueError):
    """A required setting is missing or malformed."""


class HeaderNotFound(StatementPosError, ValueError):
    """No header row could be located in the statement grid.

    Fatal for a parse run: the column layout depends on the header, so no
    partial results are returned.
    """

    def __init__(self, markers) -> None:
        self.markers = tuple(markers)
        super().__init__(
            "Could not locate the statement header row "
            f"(looked for: {', '.join(self.markers)})"
        )


class RemoteError(StatementPosError):
    """The POS backend answered with a non-success status.

    ``order_id`` is set when the order was already created remotely before
    the failing call, so it can be settled by hand instead of re-created.
    """

    def __init__(self, status_code: Optional[int], message: str, order_id: Optional[str] = None) -> None:
        self.status_code = status_code
        self.message = message
        self.order_id = order_id
        if status_code is None:
            super().__init__(message)
        else:
            super().__init__(f"{status_code} {message}")


class RemoteTimeoutError(RemoteError):
    """A single POS call exceeded its timeout."""

    def __init__(self, message: str) -> None:
        super().__init__(None, message)


class AutomationError(StatementPosError):
    """Opaque failure reported by the automation executor."""

    def __init__(self, message: str, screenshot: Optional[str] = None) -> None:
        super().__init__(message)
        self.screenshot = screenshot


class OrderStateError(StatementPosError):
    """An order document transition was requested from the wrong state."""


class OrderSequenceError(StatementPosError):
    """Remote calls were made out of order (settle before create)."""
