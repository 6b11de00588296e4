"""
Unit tests for the shared metrics collector.
"""

import gc

from prometheus_client import CollectorRegistry

from shared.metrics import MetricsCollector


class TestMetricsCollector:
    """Test cases for MetricsCollector."""

    def test_collectors_share_registry_counters(self):
        """Test two services on one registry do not register twice."""
        registry = CollectorRegistry()
        flags = MetricsCollector("feature_flags", registry)
        signature = MetricsCollector("signature", registry)

        flags.record_cache_lookup("feature_flag", hit=True)
        signature.record_cache_lookup("signature", hit=True)

        assert flags.get_metric("cache_hits_total") is signature.get_metric("cache_hits_total")
        assert registry.get_sample_value(
            "cache_hits_total", {"service": "signature", "cache_type": "signature"}
        ) == 1.0

    def test_fresh_registry_gets_own_counters(self):
        """Test counters never leak from a discarded registry into a new one."""
        for _ in range(50):
            old = CollectorRegistry()
            MetricsCollector("feature_flags", old).record_cache_lookup("feature_flag", hit=True)
            del old
            gc.collect()

            new = CollectorRegistry()
            MetricsCollector("feature_flags", new).record_cache_lookup("feature_flag", hit=True)

            assert new.get_sample_value(
                "cache_hits_total", {"service": "feature_flags", "cache_type": "feature_flag"}
            ) == 1.0

    def test_unknown_metric_is_ignored(self):
        """Test incrementing an unregistered metric is a no-op."""
        collector = MetricsCollector("feature_flags", CollectorRegistry())

        collector.increment_counter("does_not_exist", outcome="x")

        assert collector.get_metric("does_not_exist") is None
