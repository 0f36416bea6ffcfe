"""Process-wide request counter behind /admin/metrics."""
from __future__ import annotations

from prometheus_client import CollectorRegistry, Gauge

HITS_METRIC = "chirpy_fileserver_hits"


class RequestCounter:
    """
    Fileserver hit count, kept as a prometheus Gauge in its own registry.

    A Gauge rather than a Counter because /admin/reset stores 0.
    """

    def __init__(self, name: str = HITS_METRIC):
        self.registry = CollectorRegistry()
        self._name = name
        self._gauge = Gauge(name, "Requests served by the /app fileserver", registry=self.registry)

    def increment(self, delta: int = 1) -> None:
        self._gauge.inc(delta)

    def load(self) -> int:
        return int(self.registry.get_sample_value(self._name) or 0)

    def store(self, value: int) -> None:
        self._gauge.set(value)


hits = RequestCounter()
