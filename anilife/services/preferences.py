import json
from abc import ABC, abstractmethod
from datetime import datetime

import redis.asyncio as redis
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from anilife.core.config import settings
from anilife.core.exceptions import InternalError
from anilife.core.security import redact_viewer_id
from anilife.models.catalog import utcnow
from anilife.models.preferences import ViewerPreferences, WatchHistoryEntry


class PreferenceStore(ABC):
    """
    Per-viewer favorites, watch-later list and watch history.

    Backends only implement loading and saving one viewer's blob; list
    semantics (no duplicates, most-recent-first history, history cap) live here.
    """

    def __init__(self, history_limit: int | None = None):
        self.history_limit = history_limit or settings.WATCH_HISTORY_LIMIT

    @abstractmethod
    async def _load(self, viewer_id: str) -> ViewerPreferences | None:
        pass

    @abstractmethod
    async def _save(self, viewer_id: str, prefs: ViewerPreferences) -> None:
        pass

    async def close(self) -> None:
        return None

    async def get_preferences(self, viewer_id: str) -> ViewerPreferences:
        prefs = await self._load(viewer_id)
        return prefs if prefs is not None else ViewerPreferences()

    async def get_favorite_ids(self, viewer_id: str) -> set[str]:
        prefs = await self.get_preferences(viewer_id)
        return prefs.favorite_ids()

    async def get_watch_history(self, viewer_id: str) -> list[WatchHistoryEntry]:
        prefs = await self.get_preferences(viewer_id)
        return prefs.watch_history

    async def add_favorite(self, viewer_id: str, title_id: str) -> ViewerPreferences:
        prefs = await self.get_preferences(viewer_id)
        if title_id not in prefs.favorites:
            prefs.favorites.append(title_id)
            await self._save(viewer_id, prefs)
        return prefs

    async def remove_favorite(self, viewer_id: str, title_id: str) -> ViewerPreferences:
        prefs = await self.get_preferences(viewer_id)
        if title_id in prefs.favorites:
            prefs.favorites = [fid for fid in prefs.favorites if fid != title_id]
            await self._save(viewer_id, prefs)
        return prefs

    async def add_watch_later(self, viewer_id: str, title_id: str) -> ViewerPreferences:
        prefs = await self.get_preferences(viewer_id)
        if title_id not in prefs.watch_later:
            prefs.watch_later.append(title_id)
            await self._save(viewer_id, prefs)
        return prefs

    async def remove_watch_later(self, viewer_id: str, title_id: str) -> ViewerPreferences:
        prefs = await self.get_preferences(viewer_id)
        if title_id in prefs.watch_later:
            prefs.watch_later = [wid for wid in prefs.watch_later if wid != title_id]
            await self._save(viewer_id, prefs)
        return prefs

    async def record_watch(
        self,
        viewer_id: str,
        title_id: str,
        progress: int = 0,
        completed: bool = False,
        watched_at: datetime | None = None,
    ) -> WatchHistoryEntry:
        """Move the title to the front of the history and trim the list to `history_limit`."""
        entry = WatchHistoryEntry(
            title_id=title_id,
            last_watched=watched_at or utcnow(),
            progress=progress,
            completed=completed,
        )
        prefs = await self.get_preferences(viewer_id)
        rest = [item for item in prefs.watch_history if item.title_id != title_id]
        prefs.watch_history = [entry] + rest[: self.history_limit - 1]
        await self._save(viewer_id, prefs)
        return entry

    async def remove_from_history(self, viewer_id: str, title_id: str) -> ViewerPreferences:
        prefs = await self.get_preferences(viewer_id)
        remaining = [item for item in prefs.watch_history if item.title_id != title_id]
        if len(remaining) != len(prefs.watch_history):
            prefs.watch_history = remaining
            await self._save(viewer_id, prefs)
        return prefs

    async def continue_watching(self, viewer_id: str) -> list[WatchHistoryEntry]:
        """Started but unfinished titles."""
        history = await self.get_watch_history(viewer_id)
        return [item for item in history if not item.completed and item.progress > 0]

    async def completed(self, viewer_id: str) -> list[WatchHistoryEntry]:
        history = await self.get_watch_history(viewer_id)
        return [item for item in history if item.completed]


class MemoryPreferenceStore(PreferenceStore):
    """Process-local preferences; lost on restart."""

    def __init__(self, history_limit: int | None = None) -> None:
        super().__init__(history_limit)
        self._data: dict[str, ViewerPreferences] = {}

    async def _load(self, viewer_id: str) -> ViewerPreferences | None:
        prefs = self._data.get(viewer_id)
        # hand out a copy so callers never mutate the stored state directly
        return prefs.model_copy(deep=True) if prefs is not None else None

    async def _save(self, viewer_id: str, prefs: ViewerPreferences) -> None:
        self._data[viewer_id] = prefs.model_copy(deep=True)


class RedisPreferenceStore(PreferenceStore):
    """Redis-backed preferences: one JSON document per viewer."""

    KEY_PREFIX = settings.REDIS_PREFERENCE_KEY

    def __init__(self, client: redis.Redis | None = None, history_limit: int | None = None) -> None:
        super().__init__(history_limit)
        self._client = client
        if client is None and not settings.REDIS_URL:
            logger.warning("REDIS_URL is not set. Preference storage will fail until a Redis instance is configured.")

    async def _get_client(self) -> redis.Redis:
        if self._client is None:
            logger.info("Creating Redis client for preference store")
            self._client = redis.from_url(
                settings.REDIS_URL,
                decode_responses=True,
                encoding="utf-8",
                socket_connect_timeout=5,
                socket_timeout=5,
                max_connections=settings.REDIS_MAX_CONNECTIONS,
                health_check_interval=30,
                socket_keepalive=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the Redis client (call on shutdown)."""
        if self._client is None:
            return
        try:
            logger.info("Closing preference store Redis client")
            await self._client.aclose()
        except (redis.RedisError, OSError) as exc:
            logger.debug(f"Silent failure closing redis client: {exc}")
        finally:
            self._client = None

    def _format_key(self, viewer_id: str) -> str:
        return f"{self.KEY_PREFIX}{viewer_id}"

    def _format_corrupt_key(self, viewer_id: str) -> str:
        return f"{self._format_key(viewer_id)}:corrupt"

    async def _load(self, viewer_id: str) -> ViewerPreferences | None:
        try:
            client = await self._get_client()
            raw = await client.get(self._format_key(viewer_id))
        except (redis.RedisError, OSError) as exc:
            logger.error(f"[{redact_viewer_id(viewer_id)}] Failed to read preferences from Redis: {exc}")
            raise InternalError("Preference store unavailable") from exc

        if not raw:
            return None
        try:
            return ViewerPreferences.model_validate(json.loads(raw))
        except (json.JSONDecodeError, PydanticValidationError) as exc:
            logger.error(f"[{redact_viewer_id(viewer_id)}] Corrupt preference document, starting empty: {exc}")
            await self._quarantine(client, viewer_id, raw)
            return None

    async def _quarantine(self, client: redis.Redis, viewer_id: str, raw: str) -> None:
        """Keep an unreadable document under a side key so the next save does not destroy it."""
        key = self._format_corrupt_key(viewer_id)
        try:
            await client.set(key, raw)
        except (redis.RedisError, OSError) as exc:
            logger.error(f"[{redact_viewer_id(viewer_id)}] Failed to preserve corrupt preferences: {exc}")
            raise InternalError("Preference store unavailable") from exc
        logger.warning(f"[{redact_viewer_id(viewer_id)}] Corrupt preference document moved to its :corrupt key")

    async def _save(self, viewer_id: str, prefs: ViewerPreferences) -> None:
        try:
            client = await self._get_client()
            await client.set(self._format_key(viewer_id), prefs.model_dump_json())
        except (redis.RedisError, OSError) as exc:
            logger.error(f"[{redact_viewer_id(viewer_id)}] Failed to write preferences to Redis: {exc}")
            raise InternalError("Preference store unavailable") from exc


def build_preference_store() -> PreferenceStore:
    """Pick the backend named by PREFERENCE_BACKEND."""
    if settings.PREFERENCE_BACKEND == "redis":
        logger.info("Using Redis preference store")
        return RedisPreferenceStore()
    logger.info("Using in-memory preference store")
    return MemoryPreferenceStore()
