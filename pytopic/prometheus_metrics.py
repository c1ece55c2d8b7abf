"""Prometheus metrics export for the subscription index."""

from prometheus_client import Counter, Gauge, start_http_server


# Module-level metrics (singleton pattern to avoid duplicate registration)
_metrics_initialized = False
_subscriptions_added = None
_subscriptions_removed = None
_topics_rejected = None
_publishes_routed = None
_deliveries_matched = None
_filters_stored = None
_trie_nodes = None


def _init_metrics():
    """Initialize metrics only once."""
    global _metrics_initialized, _subscriptions_added, _subscriptions_removed
    global _topics_rejected, _publishes_routed, _deliveries_matched
    global _filters_stored, _trie_nodes

    if _metrics_initialized:
        return

    _subscriptions_added = Counter('pytopic_subscriptions_added_total', 'Total subscriptions added')
    _subscriptions_removed = Counter('pytopic_subscriptions_removed_total', 'Total subscriptions removed')
    _topics_rejected = Counter('pytopic_topics_rejected_total', 'Topics or filters failing validation', ['usage'])
    _publishes_routed = Counter('pytopic_publishes_routed_total', 'Total published topics routed')
    _deliveries_matched = Counter('pytopic_deliveries_matched_total', 'Total subscribers matched by routed topics')

    _filters_stored = Gauge('pytopic_filters_stored', 'Distinct filters in the index')
    _trie_nodes = Gauge('pytopic_trie_nodes', 'Nodes in the subscription trie')

    _metrics_initialized = True


class PrometheusMetrics:
    """Prometheus metrics collector."""

    _server_started = False

    def __init__(self, port: int = 9090):
        self.port = port
        _init_metrics()

        self.subscriptions_added = _subscriptions_added
        self.subscriptions_removed = _subscriptions_removed
        self.topics_rejected = _topics_rejected
        self.publishes_routed = _publishes_routed
        self.deliveries_matched = _deliveries_matched
        self.filters_stored = _filters_stored
        self.trie_nodes = _trie_nodes

    def start(self):
        """Start Prometheus metrics server."""
        if not PrometheusMetrics._server_started:
            start_http_server(self.port)
            PrometheusMetrics._server_started = True

    def record_subscribe(self):
        self.subscriptions_added.inc()

    def record_unsubscribe(self):
        self.subscriptions_removed.inc()

    def record_rejected(self, usage: str):
        """Record a topic or filter that failed validation."""
        self.topics_rejected.labels(usage=usage).inc()

    def record_route(self, matched: int):
        """Record a routed publish and the number of subscribers it reached."""
        self.publishes_routed.inc()
        self.deliveries_matched.inc(matched)

    def update_index_size(self, filters: int, nodes: int):
        """Update index size gauges."""
        self.filters_stored.set(filters)
        self.trie_nodes.set(nodes)
