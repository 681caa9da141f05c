"""Bot registry endpoints"""

from typing import List
from fastapi import APIRouter, Depends

from fsb_admin.api.deps import require_admin, get_registry
from fsb_admin.schemas import BotCreate, BotResponse, ErrorResponse
from fsb_admin.services.registry_service import RegistryService

router = APIRouter(prefix="/bots", tags=["Bots"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[BotResponse])
async def list_bots(registry: RegistryService = Depends(get_registry)):
    """All registered bots, most recently created first."""
    return await registry.list_bots()


@router.post(
    "",
    response_model=BotResponse,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def add_bot(data: BotCreate, registry: RegistryService = Depends(get_registry)):
    """Register a bot. Tokens must be unique."""
    return await registry.add_bot(data)
