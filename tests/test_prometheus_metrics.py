"""Tests for the Prometheus metrics module."""

import pytest
from prometheus_client import REGISTRY
from pytopic.config import Config
from pytopic.index import SubscriptionIndex
from pytopic.prometheus_metrics import PrometheusMetrics


def sample(name, labels=None):
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestPrometheusMetrics:
    """Tests for PrometheusMetrics."""

    def test_metrics_registered_once(self):
        """Test that creating two collectors shares the same metrics."""
        first = PrometheusMetrics()
        second = PrometheusMetrics()
        assert first.subscriptions_added is second.subscriptions_added

    def test_record_route(self):
        metrics = PrometheusMetrics()
        routed = sample("pytopic_publishes_routed_total")
        matched = sample("pytopic_deliveries_matched_total")
        metrics.record_route(3)
        assert sample("pytopic_publishes_routed_total") == routed + 1
        assert sample("pytopic_deliveries_matched_total") == matched + 3

    def test_record_rejected_by_usage(self):
        metrics = PrometheusMetrics()
        before = sample("pytopic_topics_rejected_total", {"usage": "publish"})
        metrics.record_rejected("publish")
        assert sample("pytopic_topics_rejected_total", {"usage": "publish"}) == before + 1

    @pytest.mark.asyncio
    async def test_index_updates_gauges(self, tmp_path):
        """Test the index reports its size."""
        index = SubscriptionIndex(Config(str(tmp_path / "missing.yaml")), metrics=PrometheusMetrics())
        await index.subscribe("a/b", "q1")
        assert sample("pytopic_filters_stored") == 1
        assert sample("pytopic_trie_nodes") == 2
        await index.unsubscribe("a/b", "q1")
        assert sample("pytopic_trie_nodes") == 0
