"""
Prometheus error metrics.

One scope per transport channel, each exposing named counters that accept
taggable increments::

    metrics.controllers.counter("error").add(1, {"status": 500})
"""

from collections.abc import Mapping, Sequence

from fastapi.responses import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    generate_latest,
    multiprocess,
)

from .config import settings

TagValue = str | int

# ==================== Registry ====================


def create_registry() -> CollectorRegistry:
    """Create the metrics registry."""
    registry = CollectorRegistry(auto_describe=True)

    # gunicorn with several workers
    try:
        multiprocess.MultiProcessCollector(registry)
    except ValueError:
        # not in multiprocess mode
        pass

    return registry


# ==================== Counters ====================


class TaggedCounter:
    """Counter incremented with a mapping of tags."""

    def __init__(self, name: str, counter: Counter, labelnames: Sequence[str]) -> None:
        self.name = name
        self._counter = counter
        self.labelnames = tuple(labelnames)

    def add(self, amount: int = 1, tags: Mapping[str, TagValue] | None = None) -> None:
        """Increment the counter.

        Args:
            amount: Non-negative increment.
            tags: Label values, must match the declared label names.
        """
        if not self.labelnames:
            self._counter.inc(amount)
            return

        tags = tags or {}
        unknown = set(tags) - set(self.labelnames)
        if unknown:
            raise ValueError(f"Unknown tags for {self.name}: {sorted(unknown)}")

        labels = {name: str(tags.get(name, "")) for name in self.labelnames}
        self._counter.labels(**labels).inc(amount)


class MetricScope:
    """Named counters of one transport channel."""

    def __init__(
        self,
        scope: str,
        registry: CollectorRegistry,
        counters: Mapping[str, Sequence[str]],
        namespace: str,
    ) -> None:
        self.scope = scope
        self._counters = {
            name: TaggedCounter(
                f"{namespace}_{scope}_{name}",
                Counter(
                    f"{namespace}_{scope}_{name}",
                    f"Total {name} events on the {scope} channel",
                    list(labelnames),
                    registry=registry,
                ),
                labelnames,
            )
            for name, labelnames in counters.items()
        }

    def counter(self, name: str) -> TaggedCounter:
        """Get a declared counter by name."""
        try:
            return self._counters[name]
        except KeyError:
            raise KeyError(f"Counter {name!r} is not declared on scope {self.scope!r}") from None


class ErrorMetrics:
    """Error counters for every transport.

    Passed explicitly to the error adapters. Tests build their own instance
    on a fresh ``CollectorRegistry``.
    """

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        namespace: str | None = None,
    ) -> None:
        self.registry = registry if registry is not None else create_registry()
        namespace = namespace or settings.metrics.namespace

        self.controllers = MetricScope(
            "controllers", self.registry, {"error": ("status",)}, namespace
        )
        self.socketio = MetricScope(
            "socketio", self.registry, {"error": ("event", "status")}, namespace
        )
        self.sse = MetricScope("sse", self.registry, {"error": ("status",)}, namespace)
        self.graphql = MetricScope(
            "graphql", self.registry, {"error": ("operation", "status")}, namespace
        )

    def export(self) -> tuple[bytes, str]:
        """
        Metrics in Prometheus exposition format.

        Returns:
            Tuple of (content, content-type).
        """
        return generate_latest(self.registry), CONTENT_TYPE_LATEST


# Process-wide handle
REGISTRY = create_registry()
metrics = ErrorMetrics(REGISTRY)


async def metrics_endpoint(error_metrics: ErrorMetrics) -> Response:
    """Prometheus exposition response for ``error_metrics``."""
    content, content_type = error_metrics.export()
    return Response(content=content, media_type=content_type)
