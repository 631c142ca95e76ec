"""Application settings and configuration."""

from decimal import Decimal
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_data_dir() -> Path:
    """Return the default data directory."""
    return Path.home() / ".papertrade"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PAPERTRADE_",
    )

    app_name: str = "Classroom Paper Trading"
    app_version: str = "0.1.0"

    # Data directory (SQLite file lives here unless database_url is set)
    data_dir: Optional[Path] = None
    database_url: Optional[str] = None

    log_level: str = "INFO"

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 8001

    # Account defaults
    default_student_cash: Decimal = Decimal("100000")
    default_teacher_cash: Decimal = Decimal("0")

    # Achievement thresholds
    market_master_threshold: Decimal = Decimal("125000")
    patient_investor_days: int = 30
    diversification_min_symbols: int = 3
    diversification_min_industries: int = 3

    # Optimistic concurrency: attempts before a trade conflict is surfaced
    trade_max_attempts: int = 3

    # Market data settings
    market_data_provider: Literal["stub", "yahoo"] = "stub"
    market_data_cache_ttl_seconds: int = 60
    market_data_fetch_timeout_seconds: float = 10.0

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "papertrade.db"
        return f"sqlite:///{db_path}"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Replace the settings instance (used by embedding code and tests)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
