"""Delivery destination persisted in a small YAML file.

This is the only state that survives across sessions. Everything else is
rebuilt in memory at startup.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)


class DeliverySettings(BaseModel):
    """User-supplied delivery destination."""

    chat_id: str = ""

    @field_validator("chat_id", mode="before")
    @classmethod
    def _normalize(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    @property
    def is_configured(self) -> bool:
        return bool(self.chat_id)


class DeliverySettingsStore:
    """Load and save DeliverySettings as YAML."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> DeliverySettings:
        """Load settings, returning defaults if the file is missing or invalid."""
        if not self.path.exists():
            logger.info("No delivery settings at %s, using defaults", self.path)
            return DeliverySettings()

        try:
            with open(self.path) as f:
                raw = yaml.safe_load(f) or {}
            return DeliverySettings(**raw)
        except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
            logger.warning(f"Invalid delivery settings at {self.path}, using defaults: {e}")
            return DeliverySettings()

    def save(self, settings: DeliverySettings) -> None:
        """Write settings to disk, creating the parent directory if needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            yaml.safe_dump(settings.model_dump(), f, default_flow_style=False)
        logger.info("Delivery settings saved to %s", self.path)
