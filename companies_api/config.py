from __future__ import annotations

import json
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    OPEN_CNPJ_BASE_URL: str = "https://api.opencnpj.org"
    OPEN_CNPJ_TIMEOUT_SECONDS: float = 10.0
    OPEN_CNPJ_PROBE_TIMEOUT_SECONDS: float = 5.0
    OPEN_CNPJ_USER_AGENT: str = "cnpj-companies-api/1.0"
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    APP_NAME: str = "CNPJ Companies API"
    ENVIRONMENT: str = "production"
    TRUST_PROXY: bool = False
    RATE_LIMIT_ENABLED: bool = True
    CORS_ORIGINS: Annotated[list[str], NoDecode] = ["*"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_csv_or_json_list(cls, value: object) -> list[str]:
        if value is None:
            return []

        if isinstance(value, str):
            raw = value.strip()
            if not raw:
                return []

            if raw.startswith("["):
                try:
                    parsed = json.loads(raw)
                    if isinstance(parsed, list):
                        return [str(item).strip() for item in parsed if str(item).strip()]
                except json.JSONDecodeError:
                    pass

            return [item.strip() for item in raw.split(",") if item.strip()]

        if isinstance(value, (list, tuple, set)):
            return [str(item).strip() for item in value if str(item).strip()]

        return [str(value).strip()] if str(value).strip() else []

    @field_validator("LOG_FORMAT", mode="before")
    @classmethod
    def lowercase_log_format(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("OPEN_CNPJ_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
