import threading
import uuid
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from loguru import logger
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from anilife.core.exceptions import NotFoundError, ValidationError, validation_error_from_pydantic
from anilife.models.catalog import Episode, EpisodeCreate, Title, TitleCreate, WatchProgress, utcnow


def new_id() -> str:
    return str(uuid.uuid4())


def coerce_input(model: type[BaseModel], data: Any, message: str) -> Any:
    """Validate `data` against `model`, raising the catalog ValidationError on failure."""
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    if not isinstance(data, Mapping):
        raise ValidationError(message, errors=[{"msg": f"Expected an object, got {type(data).__name__}"}])
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise validation_error_from_pydantic(exc, message) from exc


class CatalogStorage(ABC):
    """
    Storage contract for titles, episodes and watch progress.

    Implementations own identifier generation and referential checks, so an
    in-memory map can be swapped for a persistent engine without touching callers.
    """

    @abstractmethod
    def create_title(self, data: TitleCreate | Mapping[str, Any]) -> Title:
        pass

    @abstractmethod
    def get_title(self, title_id: str) -> Title | None:
        pass

    @abstractmethod
    def list_titles(self) -> list[Title]:
        pass

    @abstractmethod
    def create_episode(self, data: EpisodeCreate | Mapping[str, Any]) -> Episode:
        pass

    @abstractmethod
    def get_episode(self, episode_id: str) -> Episode | None:
        pass

    @abstractmethod
    def get_episodes_of(self, title_id: str) -> list[Episode]:
        pass

    @abstractmethod
    def add_progress(self, record: WatchProgress) -> WatchProgress:
        pass

    @abstractmethod
    def list_progress(self) -> list[WatchProgress]:
        pass


class MemoryCatalogStore(CatalogStorage):
    """In-memory catalog. Dicts keep insertion order; one lock serializes writers."""

    def __init__(self) -> None:
        self._titles: dict[str, Title] = {}
        self._episodes: dict[str, Episode] = {}
        self._progress: dict[str, WatchProgress] = {}
        self._lock = threading.RLock()

    def create_title(self, data: TitleCreate | Mapping[str, Any]) -> Title:
        payload = coerce_input(TitleCreate, data, "Invalid title data")
        with self._lock:
            title_id = new_id()
            while title_id in self._titles:
                title_id = new_id()
            fields = payload.model_dump(include=set(TitleCreate.model_fields))
            title = Title(**fields, id=title_id, created_at=utcnow())
            self._titles[title_id] = title
        logger.info(f"Created title {title.id} ({title.name})")
        return title

    def get_title(self, title_id: str) -> Title | None:
        return self._titles.get(title_id)

    def list_titles(self) -> list[Title]:
        return list(self._titles.values())

    def create_episode(self, data: EpisodeCreate | Mapping[str, Any]) -> Episode:
        payload = coerce_input(EpisodeCreate, data, "Invalid episode data")
        with self._lock:
            if payload.title_id not in self._titles:
                raise NotFoundError(f"Title {payload.title_id} not found")

            taken = {ep.episode_number for ep in self._episodes.values() if ep.title_id == payload.title_id}
            if payload.episode_number in taken:
                raise ValidationError(
                    f"Episode {payload.episode_number} already exists for title {payload.title_id}",
                    errors=[{"loc": ["episodeNumber"], "msg": "Duplicate episode number", "type": "duplicate"}],
                )

            episode_id = new_id()
            while episode_id in self._episodes:
                episode_id = new_id()
            fields = payload.model_dump(include=set(EpisodeCreate.model_fields))
            episode = Episode(**fields, id=episode_id, created_at=utcnow())
            self._episodes[episode_id] = episode
        logger.debug(f"Created episode {episode.episode_number} for title {episode.title_id}")
        return episode

    def get_episode(self, episode_id: str) -> Episode | None:
        return self._episodes.get(episode_id)

    def get_episodes_of(self, title_id: str) -> list[Episode]:
        episodes = [ep for ep in self._episodes.values() if ep.title_id == title_id]
        return sorted(episodes, key=lambda ep: ep.episode_number)

    def add_progress(self, record: WatchProgress) -> WatchProgress:
        with self._lock:
            if record.id in self._progress:
                raise ValidationError(f"Watch progress {record.id} already recorded")
            self._progress[record.id] = record
        return record

    def list_progress(self) -> list[WatchProgress]:
        return list(self._progress.values())
