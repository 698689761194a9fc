"""Store profile router."""

from typing import Annotated

from fastapi import APIRouter, Depends

from food_finance_api.dependencies import AuthenticatedUser, get_store_service
from food_finance_api.models.dto.store import StoreResponse, StoreUpdate
from food_finance_api.services.store_service import StoreService

router = APIRouter()

Service = Annotated[StoreService, Depends(get_store_service)]


@router.get("", response_model=StoreResponse | None)
async def get_store(current_user: AuthenticatedUser, service: Service) -> StoreResponse | None:
    """Get the store profile (null until it is filled in)."""
    return await service.get_store(current_user.tenant_id)


@router.put("", response_model=StoreResponse)
async def update_store(body: StoreUpdate, current_user: AuthenticatedUser, service: Service) -> StoreResponse:
    """Create or update the store profile."""
    return await service.upsert_store(current_user.tenant_id, body)
