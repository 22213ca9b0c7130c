"""Cache Layer

Get-or-compute memo in front of period lookups and balance aggregations.
Entries carry invalidation tags; invalidating a tag drops every entry
indexed under it, whatever its key. The cache is an optimization only:
backend failures are logged and reads fall through to computation.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional, Type, TypeVar
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

KEY_NAMESPACE = "ledger"


class CacheScope:
    ACTIVE_PERIOD = "active-period"
    PERIOD_FOR_DATE = "period-for-date"
    TOTAL_EXPENSES = "total-expenses"
    MEAL_RATE = "meal-rate"
    USER_MEAL_COUNT = "user-meal-count"
    USER_BALANCE = "user-balance"
    GROUP_SUMMARY = "group-summary"
    PERIOD_SUMMARY = "period-summary"


def room_tag(room_id: str) -> str:
    """Everything cached for a room (period lookups and aggregations)"""
    return f"group-{room_id}"


def periods_tag(room_id: str) -> str:
    return f"periods-{room_id}"


def balances_tag(room_id: str) -> str:
    return f"balances-{room_id}"


def period_tag(period_id: str) -> str:
    """Aggregations computed over one period's ledgers"""
    return f"period-{period_id}"


def period_lookup_tags(room_id: str) -> list[str]:
    return [room_tag(room_id), periods_tag(room_id)]


def aggregation_tags(room_id: str, period_id: Optional[str]) -> list[str]:
    tags = [room_tag(room_id), balances_tag(room_id)]
    if period_id:
        tags.append(period_tag(period_id))
    return tags


@dataclass(frozen=True)
class CacheKey:
    """Structured cache key, rendered deterministically"""

    scope: str
    room_id: str
    period_id: Optional[str] = None
    user_id: Optional[str] = None
    qualifier: Optional[str] = None

    def render(self) -> str:
        parts = [KEY_NAMESPACE, self.scope, self.room_id, self.period_id, self.user_id, self.qualifier]
        return ":".join(part if part else "-" for part in parts)


class CacheBackend(ABC):
    """Storage for serialized cache entries plus a tag -> keys index"""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int, tags: Iterable[str] = ()) -> None:
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        pass

    @abstractmethod
    async def invalidate_tags(self, tags: Iterable[str]) -> int:
        """Drop every key indexed under any of ``tags``; returns keys removed"""
        pass

    @abstractmethod
    async def clear(self) -> None:
        pass


class CacheService:
    """
    Cache-aside access for pydantic values

    Usage:
        summary = await cache.get_or_set(
            CacheKey(CacheScope.GROUP_SUMMARY, room_id, period_id),
            compute,
            GroupBalanceSummaryDTO,
            ttl=180,
            tags=aggregation_tags(room_id, period_id),
        )
    """

    def __init__(self, backend: CacheBackend, enabled: bool = True):
        self.backend = backend
        self.enabled = enabled

    async def get(self, key: CacheKey, model: Type[M]) -> Optional[M]:
        if not self.enabled:
            return None

        rendered = key.render()
        try:
            raw = await self.backend.get(rendered)
        except Exception as e:
            logger.warning(f"Cache get failed for {rendered}, computing directly: {e}")
            return None

        if raw is None:
            return None

        try:
            return model.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Discarding undecodable cache entry {rendered}: {e}")
            await self._delete_quietly(rendered)
            return None

    async def set(self, key: CacheKey, value: BaseModel, ttl: int, tags: Iterable[str] = ()) -> None:
        if not self.enabled:
            return

        rendered = key.render()
        try:
            await self.backend.set(rendered, value.model_dump_json(), ttl, list(tags))
        except Exception as e:
            logger.warning(f"Cache set failed for {rendered}: {e}")

    async def get_or_set(
        self,
        key: CacheKey,
        compute: Callable[[], Awaitable[Optional[M]]],
        model: Type[M],
        ttl: int,
        tags: Iterable[str] = (),
    ) -> Optional[M]:
        """
        Return the cached value for ``key`` or compute, store and return it

        ``None`` results are returned but never stored, so a missing period
        is looked up again on the next read.
        """
        cached = await self.get(key, model)
        if cached is not None:
            return cached

        value = await compute()
        if value is not None:
            await self.set(key, value, ttl, tags)
        return value

    async def invalidate(self, *tags: str) -> int:
        if not tags:
            return 0
        try:
            removed = await self.backend.invalidate_tags(tags)
        except Exception as e:
            logger.error(f"Cache invalidation failed for tags {list(tags)}: {e}")
            return 0
        logger.debug(f"Invalidated {removed} cache entries for tags {list(tags)}")
        return removed

    async def _delete_quietly(self, rendered: str) -> None:
        try:
            await self.backend.delete(rendered)
        except Exception as e:
            logger.warning(f"Cache delete failed for {rendered}: {e}")
