"""
Registry Service - bots, processed files, settings and aggregate stats

Every read goes to the store; nothing is cached between requests. Store
exceptions are translated into the registry error taxonomy here so the
API layer only ever sees RegistryError subclasses.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Dict, List, Optional

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fsb_admin.config import settings
from fsb_admin.db.models import Bot, FileRecord, Setting, DEFAULT_SETTINGS
from fsb_admin.errors import InvalidInput, NotFound, ConstraintViolation, StoreUnavailable
from fsb_admin.schemas import BotCreate, FileRecordCreate, StatsResponse, to_naive_utc
from fsb_admin.services.cache_metrics import CacheMetrics, CacheUsage
from fsb_admin.services.clock import Clock, IdGenerator, SystemClock, MonotonicIdGenerator
from fsb_admin.structured_logging import SubsystemLogger, registry_log

DEFAULT_FILES_LIMIT = 50

_BYTES_PER_MB = 1024 * 1024


def _store_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class RegistryService:
    """
    Business logic over the bots/files/settings tables.

    Collaborators are injected:
    - clock: source of "now" for timestamps and link expiry
    - id_generator: bot identifiers
    - cache_metrics: optional provider; without it cache stats are unknown
    - log: subsystem logger
    """

    def __init__(
        self,
        db: AsyncSession,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        cache_metrics: Optional[CacheMetrics] = None,
        log: Optional[SubsystemLogger] = None,
    ):
        self.db = db
        self.clock = clock or SystemClock()
        self.id_generator = id_generator or MonotonicIdGenerator()
        self.cache_metrics = cache_metrics
        self.log = log or registry_log

    @asynccontextmanager
    async def _store_errors(self, action: str):
        try:
            yield
        except IntegrityError as e:
            await self.db.rollback()
            self.log.warning(f"Constraint violation during {action}", {"error": _store_message(e)})
            raise ConstraintViolation(_store_message(e)) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            self.log.error(f"Store failure during {action}", {"error": _store_message(e)})
            raise StoreUnavailable(_store_message(e)) from e

    # ============ Bots ============

    async def add_bot(self, data: BotCreate) -> Bot:
        """Register a bot. The id and timestamps are assigned here, never by the caller."""
        token = data.token.strip()
        channel_id = data.channel_id.strip()
        if not token:
            raise InvalidInput("token is required")
        if not channel_id:
            raise InvalidInput("channel_id is required")

        now = self.clock.now()
        bot = Bot(
            id=self.id_generator.next_id(),
            token=token,
            username=data.username.strip(),
            client_name=data.client_name.strip(),
            channel_id=channel_id,
            channel_name=data.channel_name.strip(),
            description=data.description,
            is_active=True,
            created_at=now,
            last_active=now,
        )

        async with self._store_errors("add_bot"):
            self.db.add(bot)
            await self.db.commit()

        self.log.info("Bot registered", {"bot_id": bot.id, "username": bot.username})
        return bot

    async def list_bots(self) -> List[Bot]:
        async with self._store_errors("list_bots"):
            result = await self.db.execute(
                select(Bot).order_by(Bot.created_at.desc(), Bot.id.desc())
            )
            return list(result.scalars().all())

    # ============ Files ============

    async def list_files(self, limit: int = DEFAULT_FILES_LIMIT, offset: int = 0) -> List[FileRecord]:
        """Most recent files first. Negative limit/offset are clamped to zero."""
        limit = min(max(limit, 0), settings.max_page_size)
        offset = max(offset, 0)
        if limit == 0:
            return []

        async with self._store_errors("list_files"):
            result = await self.db.execute(
                select(FileRecord)
                .order_by(FileRecord.created_at.desc())
                .limit(limit)
                .offset(offset)
            )
            return list(result.scalars().all())

    async def record_file(self, data: FileRecordCreate) -> FileRecord:
        """
        Record a file processed by a bot.

        Used by the streaming side when it generates a link. Without an
        explicit expiry the link lives for cache_time_minutes.
        """
        max_size_mb = await self._int_setting("max_file_size_mb")
        if data.file_size > max_size_mb * _BYTES_PER_MB:
            raise InvalidInput(f"file_size exceeds max_file_size_mb ({max_size_mb} MB)")

        now = self.clock.now()
        expires_at = to_naive_utc(data.expires_at)
        if expires_at is None:
            cache_minutes = await self._int_setting("cache_time_minutes")
            expires_at = now + timedelta(minutes=cache_minutes)

        record = FileRecord(
            bot_id=data.bot_id,
            file_id=data.file_id,
            file_name=data.file_name,
            file_size=data.file_size,
            file_type=data.file_type,
            download_url=data.download_url,
            created_at=now,
            expires_at=expires_at,
            download_count=0,
        )

        async with self._store_errors("record_file"):
            self.db.add(record)
            await self.db.commit()

        self.log.debug("File recorded", {"file_id": record.id, "bot_id": record.bot_id})
        return record

    async def register_download(self, file_id: str) -> int:
        """Increment a file's download counter and return the new value."""
        async with self._store_errors("register_download"):
            result = await self.db.execute(
                update(FileRecord)
                .where(FileRecord.id == file_id)
                .values(download_count=FileRecord.download_count + 1)
            )
            if result.rowcount == 0:
                await self.db.rollback()
                raise NotFound(f"file {file_id} not found")
            count = (
                await self.db.execute(
                    select(FileRecord.download_count).where(FileRecord.id == file_id)
                )
            ).scalar_one()
            await self.db.commit()
        return count

    # ============ Stats ============

    async def _count(self, stmt) -> int:
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def _measure_cache(self) -> Optional[CacheUsage]:
        if self.cache_metrics is None:
            return None
        try:
            return await asyncio.to_thread(self.cache_metrics.measure)
        except Exception as e:
            # Provider failures degrade to "unknown", never fail the stats
            self.log.warning("Cache metrics unavailable", {"error": str(e), "type": type(e).__name__})
            return None

    async def get_stats(self) -> StatsResponse:
        now = self.clock.now()

        async with self._store_errors("get_stats"):
            active_bots = await self._count(
                select(func.count(Bot.id)).where(Bot.is_active.is_(True))
            )
            total_files = await self._count(select(func.count(FileRecord.id)))
            active_links = await self._count(
                select(func.count(FileRecord.id)).where(FileRecord.expires_at > now)
            )

        cache = await self._measure_cache()
        if cache is None:
            return StatsResponse(
                active_bots=active_bots,
                total_files=total_files,
                active_links=active_links,
            )
        return StatsResponse(
            active_bots=active_bots,
            total_files=total_files,
            active_links=active_links,
            cache_size_gb=cache.size_gb,
            cache_free_space_percent=cache.free_space_percent,
            cache_status="ok",
        )

    # ============ Settings ============

    async def list_settings(self) -> Dict[str, str]:
        async with self._store_errors("list_settings"):
            result = await self.db.execute(select(Setting).order_by(Setting.key))
            return {s.key: s.value for s in result.scalars().all()}

    async def _int_setting(self, key: str) -> int:
        async with self._store_errors("read_setting"):
            value = (
                await self.db.execute(select(Setting.value).where(Setting.key == key))
            ).scalar_one_or_none()
        try:
            return int(value)
        except (TypeError, ValueError):
            return int(DEFAULT_SETTINGS[key])

    async def update_setting(self, key: str, value: str) -> Setting:
        if key not in DEFAULT_SETTINGS:
            raise InvalidInput(f"unknown setting: {key}")
        try:
            parsed = int(value.strip())
        except ValueError:
            parsed = 0
        if parsed <= 0:
            raise InvalidInput(f"{key} must be a positive integer")
        value = str(parsed)

        async with self._store_errors("update_setting"):
            setting = await self.db.get(Setting, key)
            if setting is None:
                setting = Setting(key=key, value=value)
                self.db.add(setting)
            else:
                setting.value = value
            await self.db.commit()

        self.log.info("Setting updated", {"key": key, "value": value})
        return setting
