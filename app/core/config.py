from typing import List, Optional
from pydantic_settings import BaseSettings
import logging


class Settings(BaseSettings):
    """Application settings with validation."""

    # App
    app_name: str = "Cozy Garden"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Storage
    database_path: str = "garden.db"
    test_database_path: str = "garden_test.db"
    save_key: str = "gardenGame"

    # Simulation
    tick_interval_seconds: float = 10.0
    tick_enabled: bool = True
    random_seed: Optional[int] = None  # None = unseeded

    # HTTP
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    class Config:
        env_file = ".env"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._validate_tick_interval()

    def _validate_tick_interval(self):
        """Validate and enforce tick_interval_seconds."""
        if self.tick_interval_seconds <= 0:
            error_msg = (
                f"TICK_INTERVAL_SECONDS must be positive, "
                f"got {self.tick_interval_seconds}"
            )

            # Fail fast in dev/test
            if self.environment in ["development", "testing"]:
                raise ValueError(error_msg)

            # Log warning and fallback in production
            logger = logging.getLogger(__name__)
            logger.warning(f"{error_msg}. Falling back to default (10.0).")
            self.tick_interval_seconds = 10.0


# Global settings instance
settings = Settings()
