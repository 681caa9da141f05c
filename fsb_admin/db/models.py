"""
Database models for the FSB admin registry

Three tables:
- bots: registered bot instances (tokens are sensitive)
- files: processed files and their generated download links
- settings: singleton key/value configuration
"""

from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import String, Text, DateTime, Integer, BigInteger, Boolean, ForeignKey, true
from sqlalchemy.orm import Mapped, mapped_column, declarative_base

Base = declarative_base()


# Seeded on every startup with insert-if-absent semantics
DEFAULT_SETTINGS = {
    "cache_time_minutes": "15",
    "max_cache_size_gb": "10",
    "max_file_size_mb": "100",
}


class Bot(Base):
    """A registered bot instance tracked for administrative visibility."""
    __tablename__ = "bots"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    token: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    username: Mapped[str] = mapped_column(String(100), default="")
    client_name: Mapped[str] = mapped_column(String(100), default="")
    channel_id: Mapped[str] = mapped_column(String(64), default="")
    channel_name: Mapped[str] = mapped_column(String(255), default="")
    description: Mapped[str] = mapped_column(Text, default="")

    # Reserved for heartbeat tracking
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default=true())
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    last_active: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class FileRecord(Base):
    """Metadata about a processed file and its generated access link."""
    __tablename__ = "files"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    bot_id: Mapped[str] = mapped_column(String(32), ForeignKey("bots.id"), nullable=False, index=True)
    file_id: Mapped[str] = mapped_column(String(255), default="")  # Source (Telegram) file id
    file_name: Mapped[str] = mapped_column(String(500), default="")
    file_size: Mapped[int] = mapped_column(BigInteger, default=0)  # Bytes
    file_type: Mapped[str] = mapped_column(String(100), default="")
    download_url: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, index=True)
    download_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0")


class Setting(Base):
    """Singleton key/value configuration entry."""
    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
