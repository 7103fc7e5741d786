"""Memo for wallet analyses.

Keys are wallet addresses only. The declared intent is applied to a
cached analysis by the caller, so it never multiplies cache entries.
The cache is best-effort: callers treat any cache error as a miss.
"""

import asyncio
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Protocol

import structlog

from pumpmatch.models.wallet import WalletAnalysis

logger = structlog.get_logger(__name__)


class AnalysisCache(Protocol):
    async def get(self, address: str) -> WalletAnalysis | None: ...

    async def set(self, address: str, analysis: WalletAnalysis) -> None: ...


class NullAnalysisCache:
    """Cache that never stores anything."""

    async def get(self, address: str) -> WalletAnalysis | None:
        return None

    async def set(self, address: str, analysis: WalletAnalysis) -> None:
        return None


class InMemoryAnalysisCache:
    """In-process LRU cache with a fixed TTL per entry."""

    def __init__(
        self,
        max_size: int = 5000,
        ttl_seconds: int = 900,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize analysis cache.

        Args:
            max_size: Maximum cache entries
            ttl_seconds: Entry lifetime from the moment it was stored
            clock: Monotonic time source (seconds)
        """
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: OrderedDict[str, tuple[float, WalletAnalysis]] = OrderedDict()
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0

    async def get(self, address: str) -> WalletAnalysis | None:
        async with self._lock:
            entry = self._cache.get(address)
            if entry is None:
                self._misses += 1
                return None

            stored_at, analysis = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._cache[address]
                self._misses += 1
                return None

            self._cache.move_to_end(address)
            self._hits += 1
            return analysis.model_copy(deep=True)

    async def set(self, address: str, analysis: WalletAnalysis) -> None:
        async with self._lock:
            self._cache.pop(address, None)
            while len(self._cache) >= self.max_size:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug("analysis_cache_evicted", wallet_address=evicted[:8] + "...")
            self._cache[address] = (self._clock(), analysis.model_copy(deep=True))

    async def invalidate(self, address: str) -> None:
        async with self._lock:
            self._cache.pop(address, None)

    async def clear(self) -> None:
        async with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            dict with cache stats
        """
        total = self._hits + self._misses
        hit_rate = self._hits / total if total > 0 else 0.0

        return {
            "size": len(self._cache),
            "max_size": self.max_size,
            "ttl_seconds": self.ttl_seconds,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(hit_rate, 4),
        }
