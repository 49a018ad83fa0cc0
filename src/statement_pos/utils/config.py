"""
Configuration utilities for the Statement POS CLI tool.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv


class Config:
    """Configuration manager for the Statement POS project."""

    def __init__(self, env_file: Optional[str] = None) -> None:
        """Initialize configuration.

        If an env_file path is provided, load environment variables from it.
        Otherwise, do not auto-load a .env file to keep defaults predictable.
        """
        self.env_file = env_file
        self._load_environment()
        self._config = self._load_config()

    def _load_environment(self) -> None:
        """Load environment variables from explicit .env file if provided."""
        if not self.env_file:
            return
        env_path = Path(self.env_file)
        if env_path.exists():
            load_dotenv(env_path)

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        return {
            # Core settings
            "log_level": self._get_str("LOG_LEVEL", default="INFO"),
            # Statement filtering
            "merchant_keyword": self._get_str("MERCHANT_KEYWORD", default=""),
            "merchant_match": self._get_str("MERCHANT_MATCH", default="suffix"),
            "merchant_case_sensitive": self._get_bool("MERCHANT_CASE_SENSITIVE", default=False),
            # Menu prices (INR)
            "price_full_plate": self._get_str("PRICE_FULL_PLATE", default="89"),
            "price_half_plate": self._get_str("PRICE_HALF_PLATE", default="49"),
            "price_water": self._get_str("PRICE_WATER", default="10"),
            "price_packing": self._get_str("PRICE_PACKING", default="5"),
            # POS backend; no credentials or identifiers are defaulted
            "pos_base_url": self._get_str("POS_BASE_URL", default=""),
            "pos_settle_url": self._get_str("POS_SETTLE_URL", default=""),
            "pos_auth_token": self._get_str("POS_AUTH_TOKEN", default=""),
            "pos_location_id": self._get_int("POS_LOCATION_ID", default=0),
            "pos_location_name": self._get_str("POS_LOCATION_NAME", default=""),
            "pos_register_id": self._get_int("POS_REGISTER_ID", default=0),
            "pos_register_name": self._get_str("POS_REGISTER_NAME", default=""),
            "pos_company_id": self._get_int("POS_COMPANY_ID", default=0),
            "pos_cashier_id": self._get_int("POS_CASHIER_ID", default=0),
            "pos_cashier_name": self._get_str("POS_CASHIER_NAME", default=""),
            "pos_table_id": self._get_int("POS_TABLE_ID", default=0),
            "pos_request_timeout": self._get_float("POS_REQUEST_TIMEOUT", default=30.0),
            # Batch pacing
            "order_delay_seconds": self._get_float("ORDER_DELAY_SECONDS", default=1.0),
            # Browser automation
            "portal_url": self._get_str("PORTAL_URL", default=""),
            "portal_username": self._get_str("PORTAL_USERNAME", default=""),
            "portal_password": self._get_str("PORTAL_PASSWORD", default=""),
            "automation_headless": self._get_bool("AUTOMATION_HEADLESS", default=True),
            "automation_timeout_ms": self._get_int("AUTOMATION_TIMEOUT_MS", default=30000),
        }

    def _get_str(self, key: str, default: str = "") -> str:
        """Get string configuration value."""
        if self.env_file is None:
            return default
        return os.getenv(key, default)

    def _get_int(self, key: str, default: int = 0) -> int:
        """Get integer configuration value."""
        if self.env_file is None:
            return default
        try:
            return int(os.getenv(key, str(default)))
        except ValueError:
            return default

    def _get_float(self, key: str, default: float = 0.0) -> float:
        """Get float configuration value."""
        if self.env_file is None:
            return default
        try:
            return float(os.getenv(key, str(default)))
        except ValueError:
            return default

    def _get_bool(self, key: str, default: bool = False) -> bool:
        """Get boolean configuration value."""
        if self.env_file is None:
            return default
        value = os.getenv(key, str(default)).lower()
        return value in ("true", "1", "yes", "on")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Get configuration value using bracket notation."""
        return self._config[key]

    def __contains__(self, key: str) -> bool:
        """Check if configuration key exists."""
        return key in self._config
