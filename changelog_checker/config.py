import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Settings(BaseSettings):
    github_token: Optional[str] = Field(None, alias="GITHUB_TOKEN")
    github_api_url: str = Field("https://api.github.com", alias="GITHUB_API_URL")
    github_webhook_secret: Optional[str] = Field(None, alias="GITHUB_WEBHOOK_SECRET")
    changelog_path: str = Field("CHANGELOG.md", alias="CHANGELOG_PATH")
    unreleased_categories: list[str] = Field(
        default_factory=lambda: ["Unversioned", "Unreleased"],
        alias="UNRELEASED_CATEGORIES",
    )
    strict: bool = Field(False, alias="CHANGELOG_STRICT")
    log_level: str = Field("warning", alias="LOG_LEVEL")
    http_timeout: float = Field(20.0, alias="HTTP_TIMEOUT")
    user_agent: str = Field("changelog-checker", alias="USER_AGENT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def setup_logging(level_name: str, verbosity: int = 0) -> None:
    """
    Configure root logging from a level name.

    Every step of verbosity lowers the level by one (WARNING -> INFO -> DEBUG).
    """
    level = getattr(logging, level_name.upper(), logging.WARNING)
    level = max(logging.DEBUG, level - 10 * verbosity)

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
