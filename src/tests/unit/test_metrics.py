"""Unit tests for error metrics."""

import pytest
from fastapi.testclient import TestClient

from src.core.config import settings
from src.core.metrics import ErrorMetrics


class TestErrorMetrics:
    """Tests for metric scopes and tagged counters."""

    def test_add_with_tags(self, error_metrics: ErrorMetrics, sample_value):
        error_metrics.socketio.counter("error").add(1, {"event": "ping", "status": 429})
        error_metrics.socketio.counter("error").add(2, {"event": "ping", "status": "429"})

        assert sample_value("faultline_socketio_error_total", event="ping", status=429) == 3

    def test_missing_tags_are_empty(self, error_metrics: ErrorMetrics, sample_value):
        error_metrics.controllers.counter("error").add()

        assert sample_value("faultline_controllers_error_total", status="") == 1

    def test_unknown_tag(self, error_metrics: ErrorMetrics):
        with pytest.raises(ValueError):
            error_metrics.sse.counter("error").add(1, {"status": 500, "event": "x"})

    def test_undeclared_counter(self, error_metrics: ErrorMetrics):
        with pytest.raises(KeyError):
            error_metrics.sse.counter("latency")

    def test_scopes_are_independent(self, error_metrics: ErrorMetrics, sample_value):
        error_metrics.sse.counter("error").add(1, {"status": 500})

        assert sample_value("faultline_sse_error_total", status=500) == 1
        assert sample_value("faultline_controllers_error_total", status=500) is None

    def test_export(self, error_metrics: ErrorMetrics):
        error_metrics.graphql.counter("error").add(1, {"operation": "doc", "status": 404})

        content, content_type = error_metrics.export()

        assert content_type.startswith("text/plain")
        assert b'faultline_graphql_error_total{operation="doc",status="404"} 1.0' in content


class TestMetricsEndpoint:
    """Tests for /observability/metrics."""

    def test_exposes_error_counters(self, full_client: TestClient):
        full_client.app.state.error_dispatcher.metrics.sse.counter("error").add(1, {"status": 500})

        response = full_client.get("/observability/metrics")

        assert response.status_code == 200
        assert 'faultline_sse_error_total{status="500"} 1.0' in response.text

    def test_disabled(self, full_client: TestClient, monkeypatch, sample_value):
        """Test disabled metrics answer with the error envelope."""
        monkeypatch.setattr(settings.metrics, "enabled", False)

        response = full_client.get("/observability/metrics")

        assert response.status_code == 404
        assert response.json()["message"] == "Metrics are disabled"
        assert sample_value("faultline_controllers_error_total", status=404) == 1

    def test_health(self, full_client: TestClient):
        assert full_client.get("/observability/ready").json() == {"ready": True}
        assert full_client.get("/observability/live").json() == {"alive": True}
