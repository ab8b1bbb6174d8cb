"""
Application configuration read from environment variables.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Process configuration. Built once at startup and passed around."""

    db_path: Path = Path("data/catalog.db")
    log_level: str = "INFO"

    braintree_environment: str = "sandbox"
    braintree_merchant_id: Optional[str] = None
    braintree_public_key: Optional[str] = None
    braintree_private_key: Optional[str] = None

    @property
    def has_braintree_credentials(self) -> bool:
        return all(
            (self.braintree_merchant_id, self.braintree_public_key, self.braintree_private_key)
        )

    @staticmethod
    def from_env() -> "Settings":
        """Read settings from the environment, falling back to defaults."""
        return Settings(
            db_path=Path(os.getenv("DB_PATH", "data/catalog.db")),
            log_level=_log_level(os.getenv("LOG_LEVEL", "INFO")),
            braintree_environment=os.getenv("BRAINTREE_ENVIRONMENT", "sandbox"),
            braintree_merchant_id=os.getenv("BRAINTREE_MERCHANT_ID"),
            braintree_public_key=os.getenv("BRAINTREE_PUBLIC_KEY"),
            braintree_private_key=os.getenv("BRAINTREE_PRIVATE_KEY"),
        )


def _log_level(value: str) -> str:
    """Standard logging level name, or INFO when the name is unknown."""
    name = value.strip().upper()
    if name not in logging.getLevelNamesMapping():
        logger.warning(f"Unknown LOG_LEVEL '{value}', using INFO")
        return "INFO"
    return name
