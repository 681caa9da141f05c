"""Database initialization script

    python -m fsb_admin.db.init_db
"""

import asyncio

from fsb_admin.config import settings
from fsb_admin.db.database import init_db, engine
from fsb_admin.structured_logging import configure_logging, db_log


async def main():
    configure_logging(settings.log_level, settings.log_json)
    db_log.info("Creating database tables...")
    try:
        await init_db()
    finally:
        await engine.dispose()
    db_log.info("Database initialized successfully")


if __name__ == "__main__":
    asyncio.run(main())
