"""
FSB Admin Panel - Main Application Entry Point

The bootstrap process either mounts `app` in its own ASGI server or calls
serve(). Startup fails if the schema cannot be created.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from fsb_admin import __version__
from fsb_admin.config import settings
from fsb_admin.db import init_db, engine, async_session_maker
from fsb_admin.errors import RegistryError
from fsb_admin.api import (
    bots_router,
    files_router,
    settings_router,
    stats_router,
    stats_ws_router,
    dashboard_router,
)
from fsb_admin.structured_logging import (
    api_log,
    configure_logging,
    generate_request_id,
    set_request_context,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown"""
    configure_logging(settings.log_level, settings.log_json)
    api_log.info("FSB admin panel starting up", {"version": __version__})

    # StoreInitError propagates: no traffic without a schema
    await init_db()

    if not settings.admin_api_key:
        api_log.warning("No admin API key configured; /api endpoints are open")

    api_log.info("FSB admin panel ready")
    yield

    await engine.dispose()
    api_log.info("FSB admin panel shutdown complete")


app = FastAPI(
    title=settings.app_name,
    description="Bot registry, processed file listing and live statistics for the file stream bot",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or generate_request_id()
    set_request_context(request_id)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# ============ Error envelope ============

@app.exception_handler(RegistryError)
async def registry_error_handler(request: Request, exc: RegistryError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())[1:])
        problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"error": "; ".join(problems) or "invalid request"})


# Include routers
app.include_router(stats_router, prefix=settings.api_prefix)
app.include_router(stats_ws_router, prefix=settings.api_prefix)
app.include_router(bots_router, prefix=settings.api_prefix)
app.include_router(files_router, prefix=settings.api_prefix)
app.include_router(settings_router, prefix=settings.api_prefix)
app.include_router(dashboard_router)

app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")


@app.get("/health")
async def health():
    """Liveness check with a database probe."""
    db_status = "connected"
    try:
        async with async_session_maker() as db:
            await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        db_status = f"error: {e}"

    return {
        "name": settings.app_name,
        "status": "healthy" if db_status == "connected" else "degraded",
        "version": __version__,
        "database": db_status,
    }


def serve() -> None:
    """Run the admin panel with uvicorn on the configured host/port."""
    import uvicorn

    uvicorn.run(
        "fsb_admin.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
