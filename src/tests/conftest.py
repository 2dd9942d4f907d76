"""Pytest configuration and fixtures for Faultline tests."""

from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from loguru import logger
from prometheus_client import CollectorRegistry
from redis.asyncio import Redis

from src.core.metrics import ErrorMetrics
from src.shared.errors import ErrorDispatcher

# ==================== Metrics Fixtures ====================


@pytest.fixture
def registry() -> CollectorRegistry:
    """Fresh Prometheus registry, isolated per test."""
    return CollectorRegistry()


@pytest.fixture
def error_metrics(registry: CollectorRegistry) -> ErrorMetrics:
    """Error counters bound to the test registry."""
    return ErrorMetrics(registry, namespace="faultline")


@pytest.fixture
def sample_value(registry: CollectorRegistry) -> Callable[..., float | None]:
    """Read one counter sample from the test registry.

    Usage:
        sample_value("faultline_sse_error_total", status="500")
    """

    def _sample(name: str, **labels: Any) -> float | None:
        return registry.get_sample_value(name, {k: str(v) for k, v in labels.items()})

    return _sample


@pytest.fixture
def dispatcher(error_metrics: ErrorMetrics) -> ErrorDispatcher:
    """Error dispatcher recording into the test registry."""
    return ErrorDispatcher(error_metrics)


# ==================== Logging Fixtures ====================


@pytest.fixture
def log_records() -> Generator[list[dict[str, Any]], None, None]:
    """Capture Loguru records emitted during the test."""
    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


# ==================== Redis Fixtures ====================


@pytest.fixture
def mock_redis() -> MagicMock:
    """Mock Redis client with a pipeline returning an empty window."""
    redis = MagicMock(spec=Redis)
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[0, 0, 1, True])
    redis.pipeline.return_value = pipe
    redis.zrange = AsyncMock(return_value=[])
    return redis
