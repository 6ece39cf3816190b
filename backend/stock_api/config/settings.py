from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional

class Settings(BaseSettings):
    """
    Global application settings loaded from environment variables.
    Automatically loads values from a .env file if present.
    """

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # allow extra env vars without crashing
    )

    # App
    ENV: str = Field("development", description="Environment: development, production")
    DEBUG: bool = Field(True, description="Debug mode enabled/disabled")
    PORT: int = Field(5000, description="HTTP port used when run directly")
    FRONTEND_API_URL: str = Field("http://localhost:3000", description="Allowed CORS origin")

    # Logging
    LOG_LEVEL: str = Field("INFO", description="Console log level")
    LOG_FILE: Optional[str] = Field(None, description="Rotating log file path (optional)")

    # Database
    DATABASE_URL: str = Field(
        "sqlite+aiosqlite:///./stocks.db",
        description="postgres:// and sqlite:// URLs are switched to their async drivers",
    )
    DB_ECHO: bool = Field(False, description="Echo SQL statements")

    # Redis (price update topic)
    REDIS_URL: str = Field("redis://localhost:6379/0", description="Redis used for price update pub/sub")
    PRICE_CHANNEL_PREFIX: str = Field("stockprices", description="Pub/sub channel prefix, one channel per symbol")

    # Price synthesis
    SCHEDULER_ENABLED: bool = Field(True, description="Run the synthesis loop inside the API process")
    SYNTHESIS_INTERVAL: float = Field(15, description="Seconds between synthesis rounds")
    SEED_PRICE: float = Field(100.00, description="First price of a symbol without history")
    MAX_DAILY_CHANGE: float = Field(0.05, description="Largest relative move per synthesized day")


# Global instance
settings = Settings()
