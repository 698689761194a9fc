"""Redis caching service for tenant-scoped read caching."""

import json
import logging
from typing import Protocol

import redis.asyncio as redis
from pydantic import BaseModel

from food_finance_api.config import get_settings

logger = logging.getLogger(__name__)


class CacheConfig:
    """Cache tags. Every key is ``<tag>:<tenant_id>[:<part>...]``."""

    TAG_SUPPLIERS = "suppliers"
    TAG_PURCHASES = "purchases"
    TAG_STOCK_ITEMS = "stock-items"
    TAG_EMPLOYEES = "employees"
    TAG_PAYMENTS = "payments"
    TAG_EXPENSE_CATEGORIES = "expense-categories"
    TAG_EXPENSES = "expenses"
    TAG_SALES = "sales"
    TAG_STORE = "store"
    TAG_DASHBOARD = "dashboard"
    TAG_BACKUP_SUMMARY = "backup-summary"

    ALL_TAGS = (
        TAG_SUPPLIERS,
        TAG_PURCHASES,
        TAG_STOCK_ITEMS,
        TAG_EMPLOYEES,
        TAG_PAYMENTS,
        TAG_EXPENSE_CATEGORIES,
        TAG_EXPENSES,
        TAG_SALES,
        TAG_STORE,
        TAG_DASHBOARD,
        TAG_BACKUP_SUMMARY,
    )


def get_cache_ttl(tag: str) -> int:
    """Get TTL for a cache tag from settings.

    Args:
        tag: Cache tag

    Returns:
        TTL in seconds
    """
    settings = get_settings()
    ttl_map = {
        CacheConfig.TAG_DASHBOARD: settings.cache_ttl_dashboard,
        CacheConfig.TAG_BACKUP_SUMMARY: settings.cache_ttl_backup_summary,
        CacheConfig.TAG_STORE: settings.cache_ttl_store,
    }
    return ttl_map.get(tag, settings.cache_ttl_lists)


class CacheInvalidator(Protocol):
    """Anything services can notify after a committed write."""

    async def invalidate(self, tag: str, tenant_id: str) -> int: ...

    async def invalidate_tenant(self, tenant_id: str, *tags: str) -> int: ...

    async def get_json(self, key: str) -> dict | list | None: ...

    async def set_json(self, key: str, value: dict | list | BaseModel, ttl: int | None = None) -> bool: ...

    def make_key(self, tag: str, tenant_id: str, *parts: str) -> str: ...


class CacheService:
    """Service for Redis-based caching of per-tenant reads.

    The cache is advisory: when Redis is unreachable every read misses and
    every write or invalidation is a no-op.
    """

    _instance: "CacheService | None" = None
    _client: redis.Redis | None = None

    def __init__(self) -> None:
        """Initialize cache service."""
        self._connected = False

    @classmethod
    async def get_instance(cls) -> "CacheService":
        """Get or create cache service instance.

        Returns:
            CacheService singleton instance
        """
        if cls._instance is None:
            cls._instance = CacheService()
            await cls._instance._connect()
        return cls._instance

    async def _connect(self) -> None:
        """Connect to Redis server."""
        settings = get_settings()

        if not settings.redis_url:
            logger.warning("REDIS_URL not configured - caching disabled")
            return

        try:
            self._client = redis.from_url(
                str(settings.redis_url),
                encoding="utf-8",
                decode_responses=True,
            )
            await self._client.ping()
            self._connected = True
            logger.info("Redis cache connected successfully")
        except redis.RedisError as e:
            logger.warning("Failed to connect to Redis for caching: %s", e)
            self._client = None
            self._connected = False

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._client is not None:
            await self._client.aclose()
        self._client = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        """Check if cache is connected."""
        return self._connected and self._client is not None

    def make_key(self, tag: str, tenant_id: str, *parts: str) -> str:
        """Create a cache key for a tenant.

        Args:
            tag: Cache tag
            tenant_id: Owning tenant
            *parts: Additional key parts

        Returns:
            Formatted cache key
        """
        key_parts = [tag, tenant_id] + [str(p) for p in parts if p]
        return ":".join(key_parts)

    async def get(self, key: str) -> str | None:
        """Get value from cache."""
        if not self.is_connected:
            return None

        try:
            return await self._client.get(key)
        except redis.RedisError as e:
            logger.error("Cache get error: %s", e)
            return None

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        """Set value in cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time-to-live in seconds

        Returns:
            True if successful
        """
        if not self.is_connected:
            return False

        try:
            if ttl:
                await self._client.setex(key, ttl, value)
            else:
                await self._client.set(key, value)
            return True
        except redis.RedisError as e:
            logger.error("Cache set error: %s", e)
            return False

    async def delete(self, *keys: str) -> int:
        """Delete keys from cache."""
        if not self.is_connected or not keys:
            return 0

        try:
            return await self._client.delete(*keys)
        except redis.RedisError as e:
            logger.error("Cache delete error: %s", e)
            return 0

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching a pattern.

        Args:
            pattern: Key pattern (e.g., "dashboard:tenant-1:*")

        Returns:
            Number of keys deleted
        """
        if not self.is_connected:
            return 0

        try:
            keys = []
            async for key in self._client.scan_iter(match=pattern):
                keys.append(key)

            if keys:
                return await self._client.delete(*keys)
            return 0
        except redis.RedisError as e:
            logger.error("Cache delete pattern error: %s", e)
            return 0

    async def get_json(self, key: str) -> dict | list | None:
        """Get JSON value from cache."""
        value = await self.get(key)
        if value:
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return None
        return None

    async def set_json(
        self,
        key: str,
        value: dict | list | BaseModel,
        ttl: int | None = None,
    ) -> bool:
        """Set JSON value in cache.

        Args:
            key: Cache key
            value: Value to cache (dict, list, or Pydantic model)
            ttl: Time-to-live in seconds

        Returns:
            True if successful
        """
        try:
            if isinstance(value, BaseModel):
                json_str = value.model_dump_json()
            else:
                json_str = json.dumps(value)
            return await self.set(key, json_str, ttl)
        except (redis.RedisError, TypeError, ValueError) as e:
            logger.error("Cache set_json error: %s", e)
            return False

    async def invalidate(self, tag: str, tenant_id: str) -> int:
        """Drop every cached entry of one tag for one tenant.

        Args:
            tag: Cache tag
            tenant_id: Owning tenant

        Returns:
            Number of keys deleted
        """
        base = self.make_key(tag, tenant_id)
        count = await self.delete(base)
        count += await self.delete_pattern(f"{base}:*")
        return count

    async def invalidate_tenant(self, tenant_id: str, *tags: str) -> int:
        """Invalidate several tags for a tenant (all tags when none given).

        Returns:
            Number of keys deleted
        """
        count = 0
        for tag in tags or CacheConfig.ALL_TAGS:
            count += await self.invalidate(tag, tenant_id)
        return count


# Global instance getter
_cache_instance: CacheService | None = None


async def get_cache_service() -> CacheService:
    """Get the cache service instance.

    Returns:
        CacheService singleton instance
    """
    global _cache_instance
    if _cache_instance is None:
        _cache_instance = await CacheService.get_instance()
    return _cache_instance


async def close_cache_service() -> None:
    """Close the shared cache connection, if one was opened."""
    global _cache_instance
    if _cache_instance is not None:
        await _cache_instance.close()
    _cache_instance = None
    CacheService._instance = None
