"""Natural-language market commentary for one instrument.

Best-effort: every failure path returns a fixed placeholder text instead of
raising, so the signal pipeline never depends on the analysis.
"""

import logging
from dataclasses import dataclass

from app.clients import GeminiClient
from core.models import InstrumentState, Timeframe

logger = logging.getLogger(__name__)

MISSING_KEY_TEXT = "API key missing. Unable to analyze."
UNAVAILABLE_TEXT = "Analysis unavailable."
FAILED_TEXT = "Analysis failed. Check your API key."

PROMPT_TEMPLATE = """\
Act as a binary options trader specialised in OTC (over-the-counter) markets.
Quick technical analysis for the pair {symbol}.
Timeframe: {timeframe}.
Current price: {price}.
RSI (14): {rsi:.2f}.
Stochastic: {stochastic:.2f}.
Recent change: {change:.4f}%.
Detected technical signal: {signal}.

Give a CLEAR recommendation (UP or DOWN) followed by an ultra-short
explanation (1 sentence) based on OTC volatility and the indicators.
Example: "UP - Oversold RSI pointing to an imminent rebound."
"""


@dataclass(frozen=True)
class AnalysisResult:
    """Analysis text and whether it came from the model."""

    text: str
    available: bool


def build_prompt(state: InstrumentState, timeframe: Timeframe) -> str:
    """Render the analysis prompt for an instrument snapshot."""
    return PROMPT_TEMPLATE.format(
        symbol=state.symbol,
        timeframe=timeframe.value,
        price=state.current_price,
        rsi=state.rsi,
        stochastic=state.stochastic,
        change=state.change_percent,
        signal=state.signal.value,
    )


class MarketAnalyst:
    """Ask the text model for a one-line recommendation."""

    def __init__(
        self,
        client: GeminiClient | None,
        temperature: float = 0.7,
        max_output_tokens: int = 100,
    ):
        self.client = client
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    @property
    def is_configured(self) -> bool:
        return self.client is not None and bool(self.client.api_key)

    async def analyze(self, state: InstrumentState, timeframe: Timeframe) -> AnalysisResult:
        """Analyze an instrument snapshot. Never raises."""
        if not self.is_configured:
            logger.warning("Gemini API key missing, skipping analysis")
            return AnalysisResult(MISSING_KEY_TEXT, available=False)

        try:
            text = await self.client.generate(
                build_prompt(state, timeframe),
                temperature=self.temperature,
                max_output_tokens=self.max_output_tokens,
            )
        except Exception as e:
            logger.error(f"Gemini analysis error for {state.symbol}: {e}")
            return AnalysisResult(FAILED_TEXT, available=False)

        if not text:
            return AnalysisResult(UNAVAILABLE_TEXT, available=False)
        return AnalysisResult(text, available=True)

    async def close(self) -> None:
        if self.client:
            await self.client.close()
