"""Pydantic schemas for API request/response validation"""

from datetime import datetime, timezone
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


def _coerce_str(value):
    # Telegram ids frequently arrive as JSON numbers
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize to the naive UTC form the store keeps."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Stored timestamps are naive UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ============ Bots ============

class BotCreate(BaseModel):
    token: str = Field(min_length=1, max_length=255)
    username: str = Field("", max_length=100)
    client_name: str = Field("", max_length=100)
    channel_id: str = Field(min_length=1, max_length=64)
    channel_name: str = Field("", max_length=255)
    description: str = Field("", max_length=2000)

    @field_validator("channel_id", mode="before")
    @classmethod
    def coerce_channel_id(cls, value):
        return _coerce_str(value)


class BotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    token: str
    username: str
    client_name: str
    channel_id: str
    channel_name: str
    description: str
    is_active: bool
    created_at: datetime
    last_active: datetime

    @field_serializer("created_at", "last_active")
    def serialize_utc(self, value: datetime) -> datetime:
        return _as_utc(value)


# ============ Files ============

class FileRecordCreate(BaseModel):
    bot_id: str = Field(min_length=1)
    file_id: str = ""
    file_name: str = ""
    file_size: int = Field(0, ge=0)
    file_type: str = ""
    download_url: str = ""
    expires_at: Optional[datetime] = None  # None = now + cache_time_minutes

    @field_validator("expires_at")
    @classmethod
    def normalize_expiry(cls, value):
        return to_naive_utc(value)


class FileRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    bot_id: str
    file_id: str
    file_name: str
    file_size: int
    file_type: str
    download_url: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    download_count: int

    @field_serializer("created_at", "expires_at")
    def serialize_utc(self, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


# ============ Stats ============

class StatsResponse(BaseModel):
    """Aggregate counters for the dashboard and the live feed.

    Cache fields are null with cache_status="unknown" when no cache
    metrics provider is configured.
    """
    active_bots: int
    total_files: int
    active_links: int
    cache_size_gb: Optional[float] = None
    cache_free_space_percent: Optional[float] = None
    cache_status: Literal["ok", "unknown"] = "unknown"


# ============ Settings ============

class SettingUpdate(BaseModel):
    value: str = Field(min_length=1, max_length=100)

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, value):
        return _coerce_str(value)


class SettingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    value: str


class ErrorResponse(BaseModel):
    error: str
