"""Authenticated user domain model."""

from pydantic import BaseModel


class CurrentUser(BaseModel):
    """User resolved from the session token.

    The user id is the tenant key: every record the user can see or change
    carries it.
    """

    id: str
    email: str | None = None
    name: str | None = None

    @property
    def tenant_id(self) -> str:
        """Tenant key used to scope all queries."""
        return self.id
