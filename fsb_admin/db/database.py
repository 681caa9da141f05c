"""Database connection, session management and schema initialization"""

from sqlalchemy import event, insert, select
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, AsyncConnection, async_sessionmaker
from sqlalchemy.pool import StaticPool, NullPool
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.dialects.postgresql import insert as pg_insert

from fsb_admin.config import settings
from fsb_admin.db.models import Base, Setting, DEFAULT_SETTINGS
from fsb_admin.errors import StoreInitError
from fsb_admin.structured_logging import db_log

_url = make_url(settings.database_url)

# Create async engine
if _url.get_backend_name() == "sqlite":
    if _url.database in (None, "", ":memory:"):
        # In-memory database only exists on a single connection
        engine = create_async_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=settings.debug,
        )
    else:
        # One connection per session; sqlite serializes writers itself
        engine = create_async_engine(
            settings.database_url,
            connect_args={"check_same_thread": False, "timeout": 30},
            poolclass=NullPool,
            echo=settings.debug,
        )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
else:
    engine = create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
    )

# Session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncSession:
    """Dependency for getting database sessions"""
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def _seed_default_settings(conn: AsyncConnection) -> None:
    """Insert the default settings that are missing. Never overwrites."""
    rows = [{"key": key, "value": value} for key, value in DEFAULT_SETTINGS.items()]
    dialect = conn.dialect.name

    if dialect == "sqlite":
        await conn.execute(
            sqlite_insert(Setting).values(rows).on_conflict_do_nothing(index_elements=["key"])
        )
    elif dialect == "postgresql":
        await conn.execute(
            pg_insert(Setting).values(rows).on_conflict_do_nothing(index_elements=["key"])
        )
    else:
        existing = set((await conn.execute(select(Setting.key))).scalars().all())
        missing = [row for row in rows if row["key"] not in existing]
        if missing:
            await conn.execute(insert(Setting), missing)


async def init_db():
    """Create tables if absent and seed default settings.

    Safe to call on every start. Any failure raises StoreInitError; the
    service cannot accept traffic without its schema.
    """
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            await _seed_default_settings(conn)
    except SQLAlchemyError as e:
        db_log.critical("Schema initialization failed", {"error": str(e)})
        raise StoreInitError(f"Schema initialization failed: {e}") from e

    db_log.info("Schema ready", {"url": _url.render_as_string(hide_password=True)})


async def drop_db():
    """Drop all database tables (for testing)"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
