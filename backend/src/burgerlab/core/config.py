from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


BACKEND_ROOT = Path(__file__).resolve().parents[3]
ENV_PATH = BACKEND_ROOT / ".env"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Load environment variables as early as possible so Settings picks them up.
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "BurgerLab API"
    app_version: str = "0.1.0"
    docs_url: str = "/docs"
    database_url: str = f"sqlite:///{(BACKEND_ROOT / 'burgerlab.db').as_posix()}"
    database_echo: bool = False
    log_level: str = "INFO"

    # Bearer token for /admin routes; admin routes are open when unset.
    admin_token: Optional[str] = None

    scraper_user_agent: str = DEFAULT_USER_AGENT
    scraper_accept_language: str = "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7"
    scraper_request_timeout: float = 15.0
    scraper_request_delay: float = 0.5
    scraper_request_retries: int = 1
    scraper_navigation_timeout_ms: int = 30000
    scraper_headless: bool = True

    # Directory with <slug>.json nutrition tables overriding the packaged ones.
    nutrition_data_dir: Optional[Path] = None


@lru_cache
def get_settings() -> Settings:
    return Settings()
