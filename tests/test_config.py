"""
Tests for environment-driven settings.

Run with: pytest tests/test_config.py -v
"""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from config import DEFAULT_DATASET_DIR, Settings


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    # Keep a developer's .env out of these tests.
    monkeypatch.chdir(tmp_path)
    for var in ("PORT", "NODE_ENV", "ENVIRONMENT", "TOKEN_WINDOW_MS", "LOG_FORMAT",
                "EXPOSE_CORRECT_INDEX", "AWS_REGION", "AWS_S3_BUCKET_NAME", "DATASET_DIR"):
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    s = Settings()
    assert s.port == 3005
    assert s.environment == "development"
    assert s.token_window_ms == 60_000
    assert s.dataset_dir == DEFAULT_DATASET_DIR
    assert s.expose_correct_index is True
    assert s.aws_region == "us-east-1"
    assert s.allow_cors_origins == ["*"]


def test_reads_historical_variable_names(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("NODE_ENV", "production")
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    monkeypatch.setenv("AWS_S3_BUCKET_NAME", "quiz-assets")
    s = Settings()
    assert s.port == 8080
    assert s.environment == "production"
    assert s.aws_region == "eu-west-1"
    assert s.aws_s3_bucket_name == "quiz-assets"


def test_reads_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("TOKEN_WINDOW_MS=5000\nEXPOSE_CORRECT_INDEX=false\n")
    s = Settings()
    assert s.token_window_ms == 5000
    assert s.expose_correct_index is False


def test_window_must_be_positive(monkeypatch):
    monkeypatch.setenv("TOKEN_WINDOW_MS", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_log_format_is_validated(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "xml")
    with pytest.raises(ValidationError):
        Settings()
    monkeypatch.setenv("LOG_FORMAT", "JSON")
    assert Settings().log_format == "json"
