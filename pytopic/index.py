"""In-memory subscription index keyed by topic triples.

Each trie edge is stored under the (parent, remainder) pair of a Triple, so
inserting a filter is one dictionary write per level and routing a topic walks
level by level from ROOT.
"""

import asyncio
from typing import Dict, List, Optional, Set, Tuple, Union

from .config import Config
from .logger import Logger
from .prometheus_metrics import PrometheusMetrics
from .topic import MULTI_LEVEL, SINGLE_LEVEL, Topic, TopicUsage, words
from .triples import ROOT, Root, triples
from .wildcard import validate


EdgeKey = Tuple[Union[Root, str], str]


class TrieNode:
    """A filter level and the subscribers whose filter ends here."""

    __slots__ = ("full", "children", "subscribers")

    def __init__(self, full: str):
        self.full = full
        self.children: Set[str] = set()
        self.subscribers: Set[str] = set()

    def is_empty(self) -> bool:
        return not self.children and not self.subscribers


class SubscriptionIndex:
    """Stores subscribe filters and routes published topics to subscribers."""

    def __init__(self, config: Optional[Config] = None, metrics: Optional[PrometheusMetrics] = None):
        self.config = config or Config()
        self.validate_filters = self.config.get("index", "validate_filters", True)
        self.logger = Logger(self.config.get("logging", "component", "pytopic"),
                             self.config.get("logging", "level", "WARN"))
        self.metrics = metrics
        if self.metrics is None and self.config.get("monitoring", "prometheus_enabled"):
            self.metrics = PrometheusMetrics(self.config.get("monitoring", "prometheus_port", 9090))
            self.metrics.start()

        self.edges: Dict[EdgeKey, TrieNode] = {}
        self.subscriptions: Dict[str, Set[str]] = {}  # filter -> subscribers
        self.lock = None

    async def _ensure_lock(self):
        """Ensure lock is initialized (must be called from async context)."""
        if self.lock is None:
            self.lock = asyncio.Lock()

    async def subscribe(self, topic_filter: str, subscriber: str) -> tuple[bool, Optional[str]]:
        """Add a subscription. Returns (added, reason)."""
        if self.validate_filters and not validate(Topic(topic_filter, TopicUsage.SUBSCRIBE)):
            self._reject(topic_filter, TopicUsage.SUBSCRIBE)
            return False, f"Invalid topic filter: {topic_filter}"

        await self._ensure_lock()
        async with self.lock:
            parent_node = None
            for triple in triples(topic_filter):
                key = (triple.parent, triple.remainder)
                node = self.edges.get(key)
                if node is None:
                    node = TrieNode(triple.full)
                    self.edges[key] = node
                if parent_node is not None:
                    parent_node.children.add(triple.remainder)
                parent_node = node

            parent_node.subscribers.add(subscriber)
            self.subscriptions.setdefault(topic_filter, set()).add(subscriber)
            self._update_size()

        self.logger.info("Subscription added", filter=topic_filter, subscriber=subscriber)
        if self.metrics:
            self.metrics.record_subscribe()
        return True, None

    async def unsubscribe(self, topic_filter: str, subscriber: str) -> bool:
        """Remove a subscription, pruning levels nothing else uses."""
        await self._ensure_lock()
        async with self.lock:
            subscribers = self.subscriptions.get(topic_filter)
            if not subscribers or subscriber not in subscribers:
                self.logger.debug("Unsubscribe for unknown subscription", filter=topic_filter, subscriber=subscriber)
                return False

            subscribers.discard(subscriber)
            if not subscribers:
                del self.subscriptions[topic_filter]

            path = triples(topic_filter)
            self.edges[(path[-1].parent, path[-1].remainder)].subscribers.discard(subscriber)
            for depth in range(len(path) - 1, -1, -1):
                triple = path[depth]
                key = (triple.parent, triple.remainder)
                if not self.edges[key].is_empty():
                    break
                del self.edges[key]
                if depth > 0:
                    above = path[depth - 1]
                    self.edges[(above.parent, above.remainder)].children.discard(triple.remainder)
            self._update_size()

        self.logger.info("Subscription removed", filter=topic_filter, subscriber=subscriber)
        if self.metrics:
            self.metrics.record_unsubscribe()
        return True

    async def route(self, topic: str) -> Set[str]:
        """Return the subscribers of every filter matching a published topic."""
        if not validate(Topic(topic, TopicUsage.PUBLISH)):
            self._reject(topic, TopicUsage.PUBLISH)
            return set()

        matched: Set[str] = set()
        await self._ensure_lock()
        async with self.lock:
            self._collect(words(topic), matched)

        self.logger.debug("Topic routed", topic=topic, matched=len(matched))
        if self.metrics:
            self.metrics.record_route(len(matched))
        return matched

    def _collect(self, levels: List[str], matched: Set[str]):
        """Walk the trie from ROOT along levels, adding matching subscribers."""
        last = len(levels) - 1
        stack: List[Tuple[Union[Root, str], int]] = [(ROOT, 0)]
        while stack:
            parent, depth = stack.pop()

            # "#" below parent matches the rest of the topic, including nothing
            node = self.edges.get((parent, MULTI_LEVEL))
            if node is not None:
                matched.update(node.subscribers)

            if depth > last:
                continue

            for remainder in {levels[depth], SINGLE_LEVEL}:
                node = self.edges.get((parent, remainder))
                if node is None:
                    continue
                if depth == last:
                    matched.update(node.subscribers)
                stack.append((node.full, depth + 1))

    async def filters(self) -> List[str]:
        """Stored filters, sorted."""
        await self._ensure_lock()
        async with self.lock:
            return sorted(self.subscriptions)

    async def stats(self) -> Dict:
        await self._ensure_lock()
        async with self.lock:
            return {
                "filters": len(self.subscriptions),
                "nodes": len(self.edges),
                "subscriptions": sum(len(s) for s in self.subscriptions.values())
            }

    def _reject(self, topic: str, usage: TopicUsage):
        self.logger.warn("Topic rejected", topic=topic[:100], usage=usage.value)
        if self.metrics:
            self.metrics.record_rejected(usage.value)

    def _update_size(self):
        if self.metrics:
            self.metrics.update_index_size(len(self.subscriptions), len(self.edges))
