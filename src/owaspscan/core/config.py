# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Application configuration via environment variables and .env files."""

from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="OWASPSCAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
    )

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    # Rule catalog
    custom_rules_dir: str = ""
    disabled_rules: Annotated[list[str], NoDecode] = []

    @field_validator("disabled_rules", mode="before")
    @classmethod
    def _parse_disabled_rules(cls, v: object) -> list[str]:
        if isinstance(v, str):
            return [r.strip() for r in v.split(",") if r.strip()]
        return v if isinstance(v, list) else []

    # Scanner
    snippet_max_chars: int = Field(default=200, ge=20)
    max_line_length: int = Field(default=4096, ge=80)
    max_input_chars: int = Field(default=200_000, ge=1)

    # Comparison view
    context_lines: int = Field(default=3, ge=0)

    # Watch mode
    watch_poll_interval: float = 2.0
    watch_debounce: float = 1.0

    # API server
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    cors_origins: Annotated[list[str], NoDecode] = ["*"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v: object) -> list[str]:
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v if isinstance(v, list) else []


def get_settings() -> Settings:
    return Settings()
