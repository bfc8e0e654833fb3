"""
Relief routing engine configuration settings.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_prefix="RELIEF_", env_file=".env", extra="ignore")

    app_name: str = "Relief Routing Engine"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Scenario seeding
    scenario_path: Path = Field(
        default=BASE_DIR / "database" / "scenario.json",
        description="JSON snapshot used to build the initial engine state",
    )
    seed_on_startup: bool = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
