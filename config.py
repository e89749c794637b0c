"""
Central settings for the Trivia Gate service.

ASSUMPTIONS / CHECK:
- Values come from environment variables or a local `.env` file.
- Variable names match the historical deployment (PORT, NODE_ENV, AWS_*), so
  existing `.env` files keep working.
- The AWS fields are accepted but nothing in the service reads them.
"""
from __future__ import annotations
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DATASET_DIR = Path(__file__).resolve().parent / "data" / "trivia"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    service_name: str = "trivia-gate"
    version: str = "1.0.0"

    # Server
    host: str = "0.0.0.0"
    port: int = 3005
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"),
    )
    log_level: str = "info"
    log_format: str = "text"                      # text | json
    allow_cors_origins: List[str] = ["*"]

    # Admission
    token_window_ms: int = 60_000

    # Question bank (one .csv/.xlsx file per title)
    dataset_dir: Path = DEFAULT_DATASET_DIR

    # Existing clients read correctIndex from the payload; turn off to hide answers.
    expose_correct_index: bool = True

    # Storage credentials (accepted, unused)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-1"
    aws_s3_bucket_name: Optional[str] = None

    @field_validator("token_window_ms")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("TOKEN_WINDOW_MS must be a positive number of milliseconds")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = v.strip().lower()
        if fmt not in ("text", "json"):
            raise ValueError("LOG_FORMAT must be 'text' or 'json'")
        return fmt


@lru_cache
def get_settings() -> Settings:
    return Settings()
