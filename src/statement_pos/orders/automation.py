"""Boundary types for realizing orders by driving the POS web portal."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..exceptions import ConfigurationError
from ..models import Transaction


@dataclass(frozen=True)
class AutomationCredentials:
    portal_url: str
    username: str
    password: str

    def __repr__(self) -> str:
        return f"AutomationCredentials(portal_url={self.portal_url!r}, username={self.username!r})"

    @classmethod
    def from_config(cls, config) -> "AutomationCredentials":
        missing = [
            env
            for key, env in (
                ("portal_url", "PORTAL_URL"),
                ("portal_username", "PORTAL_USERNAME"),
                ("portal_password", "PORTAL_PASSWORD"),
            )
            if not config.get(key)
        ]
        if missing:
            raise ConfigurationError(f"Missing portal configuration: {', '.join(missing)}")
        return cls(
            portal_url=config.get("portal_url"),
            username=config.get("portal_username"),
            password=config.get("portal_password"),
        )


@dataclass(frozen=True)
class AutomationRequest:
    transaction: Transaction
    credentials: AutomationCredentials
    headless: bool = True
    timeout_ms: int = 30000


@dataclass(frozen=True)
class AutomationResult:
    success: bool
    order_id: Optional[str] = None
    error: Optional[str] = None
    screenshot: Optional[str] = None  # base64 PNG


class AutomationExecutor:
    """Drives the POS UI end to end for one transaction.

    Implementations report failures through ``AutomationResult.error``
    rather than raising.
    """

    def create_order(self, request: AutomationRequest) -> AutomationResult:
        raise NotImplementedError
