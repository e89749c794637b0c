"""
pytest configuration – app built from explicit test settings with a pinned clock.
"""
import pytest
from fastapi.testclient import TestClient

import routers
from config import DEFAULT_DATASET_DIR, Settings
from main import create_app


class FakeClock:
    def __init__(self, now_ms: int = 0) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(dataset_dir=DEFAULT_DATASET_DIR, token_window_ms=60_000, log_level="warning")


@pytest.fixture
def app(settings, clock):
    app = create_app(settings)
    app.dependency_overrides[routers.get_now] = clock
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
