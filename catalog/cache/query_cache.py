"""
Read-through cache over a "fetch all records" query.

One instance fronts one entity type. Reads within the TTL are served from
the snapshot; stale reads trigger a refetch, and concurrent stale reads share
a single in-flight fetch. Write paths keep the snapshot coherent with
force_add / force_remove / refetch_one instead of forcing a full refetch.
"""
import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Sequence, TypeVar

logger = logging.getLogger("cache.query")

T = TypeVar("T")


class QueryCache(Generic[T]):
    """
    Process-local, time-bounded cache of an ordered record list.

    Pattern:
    - First stale read installs a shared future for the fetch
    - Later stale reads await that same future instead of fetching again
    - The future is cleared when the fetch settles, success or failure
    - A failed fetch leaves the previous snapshot in place

    Usage:
        apps_cache = QueryCache(60000, fetch_all_apps, name="apps")
        apps = await apps_cache.get_data()
        apps_cache.force_add(new_app)
    """

    def __init__(
        self,
        ttl_ms: int,
        fetch_all: Callable[[], Awaitable[Sequence[T]]],
        name: str = "query",
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            ttl_ms: Snapshot lifetime in milliseconds (non-negative)
            fetch_all: Async callable producing every record, in a stable order
            name: Label used in logs and stats
            clock: Monotonic time source in seconds

        Raises:
            ValueError: If ttl_ms is negative
        """
        if ttl_ms < 0:
            raise ValueError(f"ttl_ms must be non-negative, got {ttl_ms}")

        self.name = name
        self._ttl_ms = ttl_ms
        self._fetch_all = fetch_all
        self._clock = clock

        self._snapshot: Optional[List[T]] = None
        self._fetched_at: Optional[float] = None
        self._pending: Optional[asyncio.Future] = None

        self._stats = {
            "hits": 0,
            "misses": 0,
            "coalesced": 0,
            "fetches": 0,
            "failures": 0,
        }

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    @property
    def has_snapshot(self) -> bool:
        return self._snapshot is not None

    @property
    def age_ms(self) -> Optional[float]:
        """Milliseconds since the snapshot was fetched, None without one."""
        if self._fetched_at is None:
            return None
        return (self._clock() - self._fetched_at) * 1000

    @property
    def is_stale(self) -> bool:
        """True when there is no snapshot or it has outlived the TTL."""
        if self._snapshot is None:
            return True
        return self.age_ms >= self._ttl_ms

    async def get_data(self) -> List[T]:
        """
        Return the cached records, refetching first when stale.

        Returns:
            The snapshot list (shared among all concurrent callers of one fetch)

        Raises:
            Exception: Any error from fetch_all is propagated to every waiter
        """
        if not self.is_stale:
            self._stats["hits"] += 1
            logger.debug(f"CACHE HIT: {self.name} [age={self.age_ms:.0f}ms]")
            return self._snapshot

        self._stats["misses"] += 1
        if self._pending is None:
            logger.info(f"CACHE MISS: {self.name}, fetching")
            self._pending = asyncio.ensure_future(self._refresh())
        else:
            self._stats["coalesced"] += 1
            logger.debug(f"Coalescing read for {self.name}")

        # A cancelled reader must not cancel the fetch other readers share
        return await asyncio.shield(self._pending)

    async def _refresh(self) -> List[T]:
        self._stats["fetches"] += 1
        try:
            records = list(await self._fetch_all())
        except Exception as e:
            self._stats["failures"] += 1
            logger.warning(f"Fetch failed for {self.name}: {e}")
            raise
        finally:
            self._pending = None

        self._snapshot = records
        self._fetched_at = self._clock()
        logger.debug(f"Fetched {len(records)} records for {self.name}")
        return records

    def force_add(self, record: T) -> None:
        """
        Append a freshly persisted record to the snapshot.

        Without a snapshot this does nothing: the next read fetches everything,
        the new record included. The fetch timer is not reset.
        """
        if self._snapshot is None:
            return
        self._snapshot = self._snapshot + [record]

    def force_remove(self, predicate: Callable[[T], bool]) -> None:
        """Drop every snapshot element matching predicate, keeping order."""
        if self._snapshot is None:
            return
        remaining = [record for record in self._snapshot if not predicate(record)]
        if len(remaining) != len(self._snapshot):
            logger.debug(
                f"Removed {len(self._snapshot) - len(remaining)} records from {self.name}"
            )
        self._snapshot = remaining

    async def refetch_one(
        self,
        predicate: Callable[[T], bool],
        lookup: Callable[[T], Awaitable[Optional[T]]],
    ) -> None:
        """
        Replace matching snapshot elements with their canonical values.

        Each match is passed to lookup, and the element is swapped in place for
        the record it returns. If any lookup raises, nothing is replaced and the
        error propagates. A lookup returning None leaves that element as it is.
        No snapshot or no match is a no-op.

        Args:
            predicate: Selects the element(s) to refresh
            lookup: Async callable returning the fresh version of an element
        """
        if self._snapshot is None:
            return
        matches = [record for record in self._snapshot if predicate(record)]
        if not matches:
            return

        fresh = await asyncio.gather(*(lookup(record) for record in matches))

        # The snapshot may have been refetched or mutated while we awaited,
        # so replace by identity against the current list.
        if self._snapshot is None:
            return
        replacements = {
            id(old): new for old, new in zip(matches, fresh) if new is not None
        }
        if not replacements:
            logger.warning(f"refetch_one on {self.name}: lookup returned nothing")
            return
        self._snapshot = [replacements.get(id(record), record) for record in self._snapshot]

    def invalidate(self) -> None:
        """Forget the snapshot; the next read refetches."""
        self._snapshot = None
        self._fetched_at = None
        logger.info(f"Invalidated cache: {self.name}")

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        total = self._stats["hits"] + self._stats["misses"]
        hit_rate = (self._stats["hits"] / total * 100) if total > 0 else 0
        age = self.age_ms
        return {
            "name": self.name,
            "ttl_ms": self._ttl_ms,
            "size": len(self._snapshot) if self._snapshot is not None else None,
            "age_ms": round(age) if age is not None else None,
            "in_flight": self._pending is not None,
            "hit_rate_percent": round(hit_rate, 1),
            **self._stats,
        }
