"""Rate limiting configuration for expensive endpoints."""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from food_finance_api.config import get_settings


def get_client_ip(request: Request) -> str:
    """Client address used as the rate limit key.

    The first X-Forwarded-For hop is honoured only when the service runs
    behind the platform proxy in production.
    """
    settings = get_settings()
    if settings.environment == "production":
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
    return get_remote_address(request)


def _get_storage_uri() -> str:
    """Get rate limiter storage URI.

    Uses Redis database 1 when Redis is configured (database 0 is the cache),
    in-memory storage otherwise.
    """
    settings = get_settings()
    if not settings.redis_url:
        if settings.environment == "production":
            raise ValueError(
                "REDIS_URL must be configured in production for distributed rate limiting."
            )
        return "memory://"

    redis_url = str(settings.redis_url).rstrip("/")
    if redis_url.count("/") == 2:
        return f"{redis_url}/1"
    return redis_url


_settings = get_settings()

limiter = Limiter(
    key_func=get_client_ip,
    default_limits=[f"{_settings.rate_limit_default}/minute"],
    storage_uri=_get_storage_uri(),
    enabled=_settings.rate_limit_enabled,
)

# Backup operations read or rewrite a whole tenant
BACKUP_EXPORT_LIMIT = _settings.rate_limit_backup_export
BACKUP_IMPORT_LIMIT = _settings.rate_limit_backup_import
BACKUP_INFO_LIMIT = "30/minute"
