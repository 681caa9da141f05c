"""Processed file listing"""

from typing import List
from fastapi import APIRouter, Depends, Query

from fsb_admin.api.deps import require_admin, get_registry
from fsb_admin.schemas import FileRecordResponse
from fsb_admin.services.registry_service import RegistryService, DEFAULT_FILES_LIMIT

router = APIRouter(prefix="/files", tags=["Files"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[FileRecordResponse])
async def list_files(
    limit: int = Query(DEFAULT_FILES_LIMIT, description="Page size, negative values count as 0"),
    offset: int = Query(0, description="Rows to skip, negative values count as 0"),
    registry: RegistryService = Depends(get_registry),
):
    return await registry.list_files(limit=limit, offset=offset)
