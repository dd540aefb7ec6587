"""External service clients."""

from app.clients.exchange_rate import ExchangeRateClient, RateSourceError
from app.clients.gemini import GeminiClient
from app.clients.telegram import TelegramClient, TelegramError

__all__ = [
    "ExchangeRateClient",
    "RateSourceError",
    "GeminiClient",
    "TelegramClient",
    "TelegramError",
]
