"""Application configuration."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models import SimulationConfig, Timeframe

VERSION = "0.1.0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Simulation
    tick_interval_ms: int = 500
    history_capacity: int = 40
    random_seed: int | None = None  # None = nondeterministic

    # Bootstrap rate source (base USD)
    rate_source_url: str = "https://open.er-api.com/v6/latest/USD"
    rate_source_timeout: float = 10.0

    # Text analysis (Gemini)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_timeout: float = 20.0

    # Signal delivery (Telegram bot)
    telegram_bot_token: str = ""
    telegram_timeout: float = 10.0
    delivery_settings_path: str = "delivery.yaml"

    # Display
    default_timeframe: Timeframe = Timeframe.S30

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    @property
    def tick_interval(self) -> float:
        """Tick period in seconds."""
        return self.tick_interval_ms / 1000.0

    def simulation_config(self) -> SimulationConfig:
        return SimulationConfig(history_capacity=self.history_capacity)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
