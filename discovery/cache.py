"""
discovery/cache.py - Discovery node cache

Holds the last node list and when it was fetched, and decides whether the
next cycle may reuse it.

Refresh interval semantics:
    0        never cache, every cycle lists the inventory
    < 0      cache forever once a list exists
    > 0      reuse the list while it is younger than the interval

The refresh timestamp is stamped when a refresh *starts*, so a failing
inventory call is retried at most once per interval.
"""

from __future__ import annotations

from datetime import timedelta
from threading import RLock

from .types import DiscoveryNode, DiscoveryReport


class DiscoveryCache:
    """Last refresh timestamp plus the node list it produced

    The lock is reentrant so the provider can hold it across a whole
    decide-fetch-replace cycle while calling the methods below.
    """

    def __init__(self):
        self._lock = RLock()
        self._last_refresh: float = 0.0
        self._nodes: list[DiscoveryNode] | None = None
        self._report: DiscoveryReport | None = None
        self._hits = 0
        self._misses = 0

    @property
    def lock(self) -> RLock:
        return self._lock

    @property
    def last_refresh(self) -> float:
        with self._lock:
            return self._last_refresh

    @property
    def nodes(self) -> list[DiscoveryNode] | None:
        with self._lock:
            return self._nodes

    @property
    def report(self) -> DiscoveryReport | None:
        with self._lock:
            return self._report

    def should_use_cache(self, refresh_interval: timedelta, now: float) -> bool:
        """Decide between the cached list and a refresh

        On the refresh path (with caching enabled) the refresh timestamp is
        stamped to ``now`` before returning.
        """
        interval = refresh_interval.total_seconds()
        with self._lock:
            if interval == 0:
                self._misses += 1
                return False

            if self._nodes is not None and (interval < 0 or (now - self._last_refresh) < interval):
                self._hits += 1
                return True

            self._last_refresh = now
            self._misses += 1
            return False

    def store(self, report: DiscoveryReport) -> list[DiscoveryNode]:
        """Replace the cached list with the nodes of a finished refresh"""
        nodes = list(report.nodes)
        with self._lock:
            self._nodes = nodes
            self._report = report
        return nodes

    def invalidate(self) -> None:
        """Drop the cached list so the next cycle refreshes"""
        with self._lock:
            self._nodes = None
            self._report = None
            self._last_refresh = 0.0

    @property
    def stats(self) -> dict[str, float]:
        with self._lock:
            total_requests = self._hits + self._misses
            return {
                "entries": len(self._nodes) if self._nodes is not None else 0,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / total_requests if total_requests > 0 else 0.0,
                "last_refresh": self._last_refresh,
            }

    def __repr__(self) -> str:
        stats = self.stats
        return (
            f"DiscoveryCache(entries={stats['entries']}, "
            f"hit_rate={stats['hit_rate']:.1%})"
        )
