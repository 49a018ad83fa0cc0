"""Explicit POS backend settings passed to the builder and the client."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from ..exceptions import ConfigurationError

DEFAULT_CLIENT_HEADER = "Web-1.100.24"


@dataclass(frozen=True)
class PosConfig:
    """Register, location and credential settings for one POS account."""

    base_url: str
    auth_token: str
    location_id: int
    location_name: str
    register_id: int
    register_name: str
    company_id: int
    cashier_id: int
    cashier_name: str
    table_id: int
    settle_url: str = ""
    request_timeout: float = 30.0
    timezone: str = "Asia/Kolkata"
    client_header: str = DEFAULT_CLIENT_HEADER
    extra_headers: Dict[str, str] = field(default_factory=dict, compare=False)

    def __repr__(self) -> str:
        # The token must never end up in logs.
        return (
            f"PosConfig(base_url={self.base_url!r}, location_id={self.location_id}, "
            f"register_id={self.register_id}, company_id={self.company_id})"
        )

    @property
    def bills_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/bills"

    @property
    def settlement_url(self) -> str:
        return self.settle_url or f"{self.base_url.rstrip('/')}/sales/bills"

    @property
    def owner(self) -> Dict[str, Any]:
        return {
            "register_id": self.register_id,
            "register_name": self.register_name,
            "location_name": self.location_name,
            "location_id": self.location_id,
            "name": self.register_name,
            "location": self.location_name,
        }

    @classmethod
    def from_config(cls, config) -> "PosConfig":
        """Build from a :class:`~statement_pos.utils.config.Config`.

        Raises ConfigurationError listing every missing required key.
        """
        required = {
            "pos_base_url": "POS_BASE_URL",
            "pos_auth_token": "POS_AUTH_TOKEN",
            "pos_location_id": "POS_LOCATION_ID",
            "pos_register_id": "POS_REGISTER_ID",
            "pos_company_id": "POS_COMPANY_ID",
            "pos_cashier_id": "POS_CASHIER_ID",
        }
        missing = [env for key, env in required.items() if not config.get(key)]
        if missing:
            raise ConfigurationError(f"Missing POS configuration: {', '.join(missing)}")

        return cls(
            base_url=config.get("pos_base_url"),
            auth_token=config.get("pos_auth_token"),
            location_id=int(config.get("pos_location_id")),
            location_name=config.get("pos_location_name", ""),
            register_id=int(config.get("pos_register_id")),
            register_name=config.get("pos_register_name", ""),
            company_id=int(config.get("pos_company_id")),
            cashier_id=int(config.get("pos_cashier_id")),
            cashier_name=config.get("pos_cashier_name", ""),
            table_id=int(config.get("pos_table_id", 0) or 0),
            settle_url=config.get("pos_settle_url", ""),
            request_timeout=float(config.get("pos_request_timeout", 30.0)),
        )
