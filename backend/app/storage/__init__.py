"""Persistent storage."""

from app.storage.delivery_settings import DeliverySettings, DeliverySettingsStore

__all__ = [
    "DeliverySettings",
    "DeliverySettingsStore",
]
