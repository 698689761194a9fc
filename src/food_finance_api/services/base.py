"""Shared plumbing for tenant-scoped services."""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from food_finance_api.services.cache_service import CacheInvalidator, get_cache_ttl

M = TypeVar("M", bound=BaseModel)


class TenantService:
    """Base for services whose writes invalidate tenant cache tags.

    Subclasses list the tags their mutations affect in ``tags``; they are
    invalidated after the session commits, never before.
    """

    tags: tuple[str, ...] = ()

    def __init__(self, session: AsyncSession, cache: CacheInvalidator) -> None:
        """Initialize service with database session and cache."""
        self.session = session
        self.cache = cache

    async def _commit(self, tenant_id: str, *extra_tags: str) -> None:
        """Commit the unit of work, then drop stale cache entries."""
        await self.session.commit()
        await self.cache.invalidate_tenant(tenant_id, *self.tags, *extra_tags)

    async def _cached(
        self,
        tag: str,
        tenant_id: str,
        model: type[M],
        loader: Callable[[], Awaitable[M]],
        *key_parts: str,
    ) -> M:
        """Serve a read model from cache, loading and storing it on a miss."""
        key = self.cache.make_key(tag, tenant_id, *key_parts)
        cached = await self.cache.get_json(key)
        if cached is not None:
            return model.model_validate(cached)

        result = await loader()
        await self.cache.set_json(key, result, get_cache_ttl(tag))
        return result
