"""
Size- and age-bounded caching of raw delivery responses.

Each content type gets two partitions: one for single-entry lookups
(queries with `limit == 1`) and one for collection queries. Entries are
evicted least-recently-used once a partition is full and expire `max_age`
seconds after they were stored.
"""

import asyncio
import json
import logging
import re
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Mapping, Optional, Protocol, Tuple, Union

from .client import ContentfulClient

logger = logging.getLogger(__name__)

RawEntityCollection = Dict[str, Any]

ITEM = "item"
COLLECTION = "collection"

_UNITS = {"ms": 0.001, "s": 1, "m": 60, "h": 3600, "d": 86400}
_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h|d)?\s*$")


def parse_duration(value: Union[str, int, float]) -> float:
    """
    Convert '10m', '1h', '30s', '250ms' or a number of seconds into seconds.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    match = _DURATION_RE.match(value)
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return float(amount) * _UNITS[unit or "s"]


@dataclass(frozen=True)
class CachePolicy:
    """Limits of one cache partition: entry count and age in seconds."""

    max: int
    max_age: Union[str, float]

    def __post_init__(self) -> None:
        object.__setattr__(self, "max_age", parse_duration(self.max_age))
        if self.max <= 0:
            raise ValueError(f"Cache max must be positive, got {self.max}")
        if self.max_age <= 0:
            raise ValueError(f"Cache max_age must be positive, got {self.max_age}")


# {content_type: {"item": CachePolicy, "collection": CachePolicy}}
CacheOptions = Mapping[str, Mapping[str, CachePolicy]]


class TTLCache:
    """
    LRU mapping whose entries expire `max_age` seconds after insertion.

    Not thread-safe; meant to be used from a single event loop.
    """

    def __init__(
        self,
        max: int,
        max_age: float,
        *,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max = max
        self.max_age = max_age
        self._timer = timer
        self._entries: "OrderedDict[Hashable, Tuple[float, Any]]" = OrderedDict()

    def get(self, key: Hashable, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default
        expires_at, value = entry
        if self._timer() >= expires_at:
            del self._entries[key]
            return default
        self._entries.move_to_end(key)
        return value

    def set(self, key: Hashable, value: Any) -> None:
        now = self._timer()
        self._entries[key] = (now + self.max_age, value)
        self._entries.move_to_end(key)
        if len(self._entries) > self.max:
            self._purge_expired(now)
        while len(self._entries) > self.max:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Cache full, evicted %s", evicted)

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._timer() < entry[0]

    def __len__(self) -> int:
        now = self._timer()
        return sum(1 for expires_at, _ in self._entries.values() if now < expires_at)


class CachedFetchProvider(Protocol):
    """What the content façade needs from a fetch backend."""

    async def get_cache_entries(
        self, content_type: str, query: Mapping[str, Any]
    ) -> RawEntityCollection:
        ...


def cache_key(query: Mapping[str, Any]) -> str:
    """Canonical, order-independent key for a query."""
    return json.dumps(query, sort_keys=True, separators=(",", ":"), default=str)


def partition_for(query: Mapping[str, Any]) -> str:
    return ITEM if query.get("limit") == 1 else COLLECTION


class CachedContentfulApi:
    """
    `CachedFetchProvider` backed by a `ContentfulClient`.

    Blocking HTTP calls run in a worker thread so awaiting callers never block
    the event loop; the client hands each worker thread its own
    `requests.Session`. Content types without configured options bypass the cache.
    Failures are never cached. Concurrent misses for the same query are not
    coalesced.

    Example:
        >>> api = CachedContentfulApi(ContentfulClient(creds), CACHE_OPTIONS)
        >>> raw = await api.get_cache_entries("article", {"content_type": "article", "limit": 5})
    """

    def __init__(
        self,
        client: ContentfulClient,
        options: CacheOptions,
        *,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self._caches: Dict[Tuple[str, str], TTLCache] = {}
        for content_type, partitions in options.items():
            for partition, policy in partitions.items():
                self._caches[(content_type, partition)] = TTLCache(
                    policy.max, policy.max_age, timer=timer
                )

    def cache_for(self, content_type: str, query: Mapping[str, Any]) -> Optional[TTLCache]:
        return self._caches.get((content_type, partition_for(query)))

    async def get_cache_entries(
        self, content_type: str, query: Mapping[str, Any]
    ) -> RawEntityCollection:
        cache = self.cache_for(content_type, query)
        if cache is None:
            return await self._fetch(query)

        key = cache_key(query)
        cached = cache.get(key)
        if cached is not None:
            logger.debug("Cache hit %s/%s %s", content_type, partition_for(query), key)
            return cached

        logger.debug("Cache miss %s/%s %s", content_type, partition_for(query), key)
        result = await self._fetch(query)
        cache.set(key, result)
        return result

    async def _fetch(self, query: Mapping[str, Any]) -> RawEntityCollection:
        return await asyncio.to_thread(self.client.get_entries, dict(query))

    def clear(self, content_type: Optional[str] = None) -> None:
        """Drop cached responses, for one content type or for all."""
        for (cached_type, _), cache in self._caches.items():
            if content_type is None or cached_type == content_type:
                cache.clear()
