from fsb_admin.api.bots import router as bots_router
from fsb_admin.api.files import router as files_router
from fsb_admin.api.settings import router as settings_router
from fsb_admin.api.stats import router as stats_router, ws_router as stats_ws_router
from fsb_admin.api.dashboard import router as dashboard_router

__all__ = [
    "bots_router",
    "files_router",
    "settings_router",
    "stats_router",
    "stats_ws_router",
    "dashboard_router",
]
