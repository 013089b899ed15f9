"""
In-memory cache of successful workflow analyses.

Entries are keyed by a hash of the description and the status
catalog the analysis was reconciled against, and expire after a
TTL; the oldest entries are evicted once the cache is full.

Note: This is a per-process cache. Multiple instances do not share it.
"""

from __future__ import annotations

import hashlib
import logging
import time
from collections import OrderedDict
from collections.abc import Iterable
from threading import Lock

from config.settings import Settings
from models import WorkflowAnalysisResult, WorkflowStatus

logger = logging.getLogger(__name__)


def cache_key(description: str, catalog: Iterable[WorkflowStatus] = ()) -> str:
    """Stable key for a description (whitespace-trimmed) and status catalog.

    The catalog decides which statuses come back as existing, so two
    calls only share an entry when their catalogs hold the same
    (name, id) pairs, in any order.
    """
    catalog_part = sorted(
        (status.name.strip().casefold(), status.existing_id or 0) for status in catalog
    )
    digest = hashlib.sha256(description.strip().encode("utf-8"))
    digest.update(repr(catalog_part).encode("utf-8"))
    return digest.hexdigest()


class AnalysisCache:
    """Thread-safe TTL + LRU cache of ``WorkflowAnalysisResult`` values.

    Args:
        ttl_seconds: Entry lifetime. ``0`` disables caching.
        max_entries: Upper bound before LRU eviction.
    """

    def __init__(self, ttl_seconds: int = 3600, max_entries: int = 100) -> None:
        self._ttl_seconds = ttl_seconds
        self._max_entries = max_entries
        self._entries: OrderedDict[str, tuple[WorkflowAnalysisResult, float]] = OrderedDict()
        self._lock = Lock()

    @property
    def enabled(self) -> bool:
        return self._ttl_seconds > 0 and self._max_entries > 0

    def get(
        self, description: str, catalog: Iterable[WorkflowStatus] = ()
    ) -> WorkflowAnalysisResult | None:
        """Return the cached analysis for a description and catalog, if fresh."""
        if not self.enabled:
            return None

        key = cache_key(description, catalog)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            result, stored_at = entry
            age = time.monotonic() - stored_at
            if age > self._ttl_seconds:
                del self._entries[key]
                logger.info("Cached analysis expired (age: %.0fs)", age)
                return None

            self._entries.move_to_end(key)
            return result

    def put(
        self,
        description: str,
        result: WorkflowAnalysisResult,
        catalog: Iterable[WorkflowStatus] = (),
    ) -> None:
        """Store a successful analysis. Failed analyses are never cached."""
        if not self.enabled or not result.success:
            return

        key = cache_key(description, catalog)
        with self._lock:
            self._entries[key] = (result, time.monotonic())
            self._entries.move_to_end(key)

            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
                logger.info("Evicted LRU analysis (cache size: %d)", len(self._entries))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def get_analysis_cache(settings: Settings) -> AnalysisCache:
    """Return the process-wide analysis cache.

    Created from ``settings`` on first use; later calls return the same
    instance regardless of the settings passed.
    """
    global _cache
    if _cache is None:
        _cache = AnalysisCache(
            ttl_seconds=settings.analysis_cache_ttl_seconds,
            max_entries=settings.analysis_max_cache_entries,
        )
    return _cache


_cache: AnalysisCache | None = None
