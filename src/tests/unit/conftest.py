"""Pytest configuration for unit tests.

Provides FastAPI applications wired to the test metrics registry.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.core.metrics import ErrorMetrics
from src.shared.errors import ErrorDispatcher


@pytest.fixture
def http_app(dispatcher: ErrorDispatcher) -> FastAPI:
    """Bare FastAPI app with only the global exception filter installed."""
    app = FastAPI()
    dispatcher.install(app)
    return app


@pytest.fixture
def full_app(error_metrics: ErrorMetrics) -> FastAPI:
    """The real application recording into the test registry."""
    from src.main import create_app

    return create_app(error_metrics)


@pytest.fixture
def full_client(full_app: FastAPI) -> TestClient:
    """Client for the real application, lifespan not started."""
    return TestClient(full_app)
