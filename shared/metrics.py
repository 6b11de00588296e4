"""
Shared metrics configuration for the access guard services.
"""

import threading
import weakref
from typing import Any, Dict, Optional

from prometheus_client import CollectorRegistry, Counter, REGISTRY

_registry_lock = threading.Lock()
# Counters are registered once per registry and shared by every collector on it.
_registered: "weakref.WeakKeyDictionary[CollectorRegistry, Dict[str, Any]]" = weakref.WeakKeyDictionary()


def _build_metrics(registry: CollectorRegistry) -> Dict[str, Any]:
    return {
        "cache_hits_total": Counter(
            "cache_hits_total",
            "Total cache hits",
            ["service", "cache_type"],
            registry=registry
        ),
        "cache_misses_total": Counter(
            "cache_misses_total",
            "Total cache misses",
            ["service", "cache_type"],
            registry=registry
        ),
        "remote_requests_total": Counter(
            "remote_requests_total",
            "Total calls to remote authorities",
            ["service", "authority", "outcome"],
            registry=registry
        ),
        "signature_verifications_total": Counter(
            "signature_verifications_total",
            "Total signature verifications",
            ["service", "status"],
            registry=registry
        ),
    }


class MetricsCollector:
    """Centralized metrics collector for the read-through caches."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else REGISTRY
        with _registry_lock:
            metrics = _registered.get(self.registry)
            if metrics is None:
                metrics = _registered[self.registry] = _build_metrics(self.registry)
            self._metrics = metrics

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def increment_counter(self, metric_name: str, **labels):
        """Increment a counter metric."""
        if metric_name in self._metrics:
            self._metrics[metric_name].labels(service=self.service_name, **labels).inc()

    def record_cache_lookup(self, cache_type: str, hit: bool):
        """Record a cache hit or miss."""
        metric_name = "cache_hits_total" if hit else "cache_misses_total"
        self.increment_counter(metric_name, cache_type=cache_type)

    def record_remote_request(self, authority: str, outcome: str):
        """Record the outcome of a remote authority call."""
        self.increment_counter("remote_requests_total", authority=authority, outcome=outcome)

    def record_signature_verification(self, status: str):
        """Record a signature verification result."""
        self.increment_counter("signature_verifications_total", status=status)
