"""
Settings for scriptstream, read from the environment (and `.env`).

Resource fetching (timeout, size cap, encoding, URL schemes) and the HTTP
service (project name, API prefix, Sentry) are configured here.
"""

from typing import Literal

from pydantic import HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "scriptstream"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    SENTRY_DSN: HttpUrl | None = None

    LOG_LEVEL: str = "INFO"

    # Remote resource fetch
    RESOURCE_HTTP_TIMEOUT: float = 30.0
    RESOURCE_MAX_BYTES: int = 0  # 0 = no limit
    RESOURCE_ENCODING: str = "utf-8"
    RESOURCE_URL_SCHEMES: str = "http,https"

    # Logger that receives console.log / console.error output from scripts
    JS_PRINT_LOGGER: str = "scriptstream.js"

    @property
    def resource_url_schemes(self) -> frozenset[str]:
        raw = (self.RESOURCE_URL_SCHEMES or "").strip()
        return frozenset(s.strip().lower() for s in raw.split(",") if s.strip())


settings = Settings()  # type: ignore
