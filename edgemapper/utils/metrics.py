"""
EdgeMapper Metrics Module

Provides Prometheus-compatible metrics for the translation engine.

Usage:
    from edgemapper.utils.metrics import metrics

    with metrics.time_assembly():
        instance = assembler.assemble(device, model)
    metrics.record_assembly("modbus")
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)


class EdgeMapperMetrics:
    """Centralized metrics collection for EdgeMapper."""

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()
        self._setup_metrics()

    def _setup_metrics(self):
        """Initialize all Prometheus metrics."""

        self.devices_assembled_total = Counter(
            "edgemapper_devices_assembled_total",
            "Total number of device instances assembled",
            ["protocol"],
            registry=self.registry,
        )

        self.devices_failed_total = Counter(
            "edgemapper_devices_failed_total",
            "Total number of devices that failed assembly",
            ["error_type"],
            registry=self.registry,
        )

        self.models_translated_total = Counter(
            "edgemapper_models_translated_total",
            "Total number of device models translated",
            registry=self.registry,
        )

        self.assembly_seconds = Histogram(
            "edgemapper_assembly_seconds",
            "Time spent assembling a device instance",
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5),
            registry=self.registry,
        )

    def record_assembly(self, protocol: str) -> None:
        self.devices_assembled_total.labels(protocol=protocol).inc()

    def record_failure(self, error_type: str) -> None:
        self.devices_failed_total.labels(error_type=error_type).inc()

    def record_model_translated(self) -> None:
        self.models_translated_total.inc()

    @contextmanager
    def time_assembly(self) -> Iterator[None]:
        """Time a device assembly."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.assembly_seconds.observe(time.perf_counter() - start)

    def export(self) -> bytes:
        """Render the registry in Prometheus text format."""
        return generate_latest(self.registry)


metrics = EdgeMapperMetrics()


def get_metrics() -> EdgeMapperMetrics:
    """Get the global metrics instance."""
    return metrics
