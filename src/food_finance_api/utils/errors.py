"""HTTP error helpers for upload handling in routers.

Service-level failures are domain exceptions; these cover errors raised
before a service is involved.
"""

from typing import NoReturn

from fastapi import HTTPException, status


def raise_bad_request(message: str = "Invalid request") -> NoReturn:
    """Raise a 400 Bad Request error.

    Raises:
        HTTPException: With 400 status code
    """
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=message,
    )


def raise_payload_too_large(max_mb: int) -> NoReturn:
    """Raise a 413 error for oversized uploads.

    Args:
        max_mb: Accepted maximum in megabytes

    Raises:
        HTTPException: With 413 status code
    """
    raise HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail=f"File too large. Maximum size is {max_mb} MB",
    )
