"""Forward a signal snapshot to a chat destination.

Delivery is optional: the simulation never depends on it. Misconfiguration
(no destination, no bot token) is rejected before any network call, and
every outcome is reported as a DeliveryResult rather than an exception.
No retries.
"""

import html
import logging
from dataclasses import dataclass

from app.clients import TelegramClient
from core.models import InstrumentState, Timeframe, format_price

logger = logging.getLogger(__name__)

MISSING_DESTINATION_TEXT = (
    "No Telegram chat ID configured. Set one in the delivery settings first."
)
MISSING_TOKEN_TEXT = "Telegram bot token is not configured on the server."


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of a delivery attempt."""

    success: bool
    message: str


def format_signal_message(
    state: InstrumentState,
    timeframe: Timeframe,
    analysis: str | None = None,
) -> str:
    """Render the chat message (Telegram HTML) for a signal snapshot."""
    direction = state.direction or "WAIT"
    lines = [
        f"<b>{html.escape(state.symbol)}</b> | <b>{direction}</b>",
        f"Signal: {state.signal.value.replace('_', ' ')}",
        f"Expiry: {timeframe.value}",
        f"Price: {format_price(state.symbol, state.current_price)}",
        f"RSI: {state.rsi:.2f} | Stoch: {state.stochastic:.2f}",
        f"Change: {state.change_percent:+.2f}%",
    ]
    if analysis:
        lines.append("")
        lines.append(f"<i>{html.escape(analysis)}</i>")
    return "\n".join(lines)


class SignalDispatcher:
    """Send signal snapshots through the Telegram bot."""

    def __init__(self, client: TelegramClient | None):
        self.client = client

    @property
    def is_configured(self) -> bool:
        return self.client is not None and bool(self.client.bot_token)

    async def deliver(
        self,
        destination: str | None,
        state: InstrumentState,
        timeframe: Timeframe,
        analysis: str | None = None,
    ) -> DeliveryResult:
        """Deliver one signal. Never raises."""
        if not destination or not destination.strip():
            return DeliveryResult(False, MISSING_DESTINATION_TEXT)
        if not self.is_configured:
            logger.warning("Delivery requested but Telegram bot token is missing")
            return DeliveryResult(False, MISSING_TOKEN_TEXT)

        text = format_signal_message(state, timeframe, analysis)
        try:
            await self.client.send_message(destination.strip(), text)
        except Exception as e:
            logger.error(f"Telegram delivery failed for {state.symbol}: {e}")
            return DeliveryResult(False, f"Delivery failed: {e}")

        logger.info("Signal %s %s delivered", state.symbol, state.signal.value)
        return DeliveryResult(True, "Signal sent.")

    async def close(self) -> None:
        if self.client:
            await self.client.close()
