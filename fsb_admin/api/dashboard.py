"""Dashboard HTML page"""

from pathlib import Path
from fastapi import APIRouter
from fastapi.responses import FileResponse

from fsb_admin.config import settings

router = APIRouter(prefix="/admin", tags=["Dashboard"], include_in_schema=False)


@router.get("")
@router.get("/")
async def dashboard_page():
    return FileResponse(Path(settings.static_dir) / "index.html", media_type="text/html")
