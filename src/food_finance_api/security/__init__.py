"""Security package."""

from food_finance_api.security.auth import create_access_token, get_current_user

__all__ = [
    "create_access_token",
    "get_current_user",
]
