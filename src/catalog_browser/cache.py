"""Single-entry fetch cache with latest-request-wins semantics.

A FetchCacheController owns one logical resource. ``fetch`` serves the cached
value while it is fresh and otherwise runs the supplied producer. Every
producer run is tagged with a request token; only the run holding the latest
token may write state, so results are committed in the order fetches were
issued no matter when they resolve. Older runs are left to finish and their
results are dropped.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, Hashable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FetchStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """A committed fetch result."""

    data: T
    fetched_at: float
    ttl: float
    key: Hashable = None

    def is_fresh(self, now: float) -> bool:
        return now - self.fetched_at < self.ttl


class FetchCacheController(Generic[T]):
    """Loading/error/data state for one cached resource."""

    def __init__(
        self,
        initial: T,
        ttl: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._initial = initial
        self.ttl = ttl
        self._clock = clock
        self._entry: CacheEntry[T] | None = None
        self._latest_token = 0

        self.data: T = initial
        self.status = FetchStatus.IDLE
        self.error: BaseException | None = None

    @property
    def is_loading(self) -> bool:
        return self.status is FetchStatus.LOADING

    @property
    def has_error(self) -> bool:
        return self.status is FetchStatus.ERROR

    @property
    def entry(self) -> CacheEntry[T] | None:
        return self._entry

    def is_fresh(self, key: Hashable = None) -> bool:
        entry = self._entry
        return entry is not None and entry.key == key and entry.is_fresh(self._clock())

    async def fetch(self, producer: Callable[[], Awaitable[T]], key: Hashable = None) -> T:
        """Return fresh cached data for ``key`` or run ``producer``.

        Producer failures are recorded as the error state, never raised.
        Cancellation is re-raised after the status is rolled back.
        Returns whatever data is committed once this call is done.
        """
        token = self._mint_token()

        entry = self._entry
        if entry is not None and entry.key == key and entry.is_fresh(self._clock()):
            self.data = entry.data
            self.status = FetchStatus.SUCCESS
            self.error = None
            logger.debug("Cache hit for %r (token %d)", key, token)
            return self.data

        previous = self.status
        self.status = FetchStatus.LOADING
        logger.debug("Fetching %r (token %d)", key, token)

        try:
            result = await producer()
        except Exception as exc:
            if token != self._latest_token:
                logger.debug("Dropping failure of superseded fetch %d: %s", token, exc)
                return self.data
            self.status = FetchStatus.ERROR
            self.error = exc
            return self.data
        except BaseException:
            if token == self._latest_token:
                self.status = self._settled_status(previous)
                logger.debug("Fetch %d cancelled, status back to %s", token, self.status.value)
            raise

        if token != self._latest_token:
            logger.debug("Dropping result of superseded fetch %d", token)
            return self.data

        self._entry = CacheEntry(data=result, fetched_at=self._clock(), ttl=self.ttl, key=key)
        self.data = result
        self.status = FetchStatus.SUCCESS
        self.error = None
        return self.data

    def invalidate(self) -> None:
        """Expire the cache entry; the next fetch always runs its producer."""
        entry = self._entry
        if entry is not None:
            self._entry = CacheEntry(
                data=entry.data,
                fetched_at=entry.fetched_at,
                ttl=0.0,
                key=entry.key,
            )

    def reset(self) -> None:
        """Drop cached data and orphan any in-flight fetch."""
        self._mint_token()
        self._entry = None
        self.data = self._initial
        self.status = FetchStatus.IDLE
        self.error = None

    def _settled_status(self, previous: FetchStatus) -> FetchStatus:
        # A LOADING predecessor was superseded by this call and will never settle.
        if previous is not FetchStatus.LOADING:
            return previous
        if self.error is not None:
            return FetchStatus.ERROR
        return FetchStatus.SUCCESS if self._entry is not None else FetchStatus.IDLE

    def _mint_token(self) -> int:
        self._latest_token += 1
        return self._latest_token


__all__ = ["CacheEntry", "FetchCacheController", "FetchStatus"]
