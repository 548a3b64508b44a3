from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PrepMod site
    base_url: str = "https://www.maimmunizations.org"
    search_path: str = "/clinic/search"

    # Scraper
    request_timeout: int = 30

    # Waiting room
    waiting_room_wait_seconds: int = 10
    waiting_room_title: str = "Waiting Room"
    waiting_room_heading_selector: str = "h1"

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="COBWEB_", env_file=".env", case_sensitive=False, extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
