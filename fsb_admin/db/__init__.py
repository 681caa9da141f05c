from fsb_admin.db.models import Base, Bot, FileRecord, Setting, DEFAULT_SETTINGS
from fsb_admin.db.database import get_db, init_db, drop_db, async_session_maker, engine

__all__ = [
    "Base",
    "Bot",
    "FileRecord",
    "Setting",
    "DEFAULT_SETTINGS",
    # Database
    "get_db",
    "init_db",
    "drop_db",
    "async_session_maker",
    "engine",
]
