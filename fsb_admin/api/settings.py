"""Runtime settings stored in the settings table"""

from typing import Dict
from fastapi import APIRouter, Depends

from fsb_admin.api.deps import require_admin, get_registry
from fsb_admin.schemas import SettingUpdate, SettingResponse, ErrorResponse
from fsb_admin.services.registry_service import RegistryService

router = APIRouter(prefix="/settings", tags=["Settings"], dependencies=[Depends(require_admin)])


@router.get("", response_model=Dict[str, str])
async def list_settings(registry: RegistryService = Depends(get_registry)):
    return await registry.list_settings()


@router.put("/{key}", response_model=SettingResponse, responses={400: {"model": ErrorResponse}})
async def update_setting(
    key: str,
    data: SettingUpdate,
    registry: RegistryService = Depends(get_registry),
):
    return await registry.update_setting(key, data.value)
