from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CatalogModel(BaseModel):
    """Base for catalog records: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CatalogInput(CatalogModel):
    """Base for create payloads. Required strings are stripped and must not be empty."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class ReleaseStatus(str, Enum):
    COMPLETED = "COMPLETED"
    ONGOING = "ONGOING"


# Labels used by the original Korean fixtures
STATUS_ALIASES: dict[str, ReleaseStatus] = {
    "완결": ReleaseStatus.COMPLETED,
    "방영중": ReleaseStatus.ONGOING,
    "completed": ReleaseStatus.COMPLETED,
    "ongoing": ReleaseStatus.ONGOING,
}


class TitleCreate(CatalogInput):
    name: str = Field(min_length=1)
    synopsis: str = Field(min_length=1)
    genre: str = Field(min_length=1)
    rating: str = Field(min_length=1, description="Decimal string, e.g. '9.8'")
    episode_count: int = Field(gt=0)
    status: ReleaseStatus
    year: int
    thumbnail_url: str = Field(min_length=1)
    hero_image_url: str | None = None
    is_regional_original: bool = False
    is_featured: bool = False
    is_latest: bool = False

    @field_validator("status", mode="before")
    @classmethod
    def _resolve_status_alias(cls, value: Any) -> Any:
        if isinstance(value, str):
            return STATUS_ALIASES.get(value.strip(), value.strip())
        return value

    @field_validator("hero_image_url", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("is_regional_original", "is_featured", "is_latest", mode="before")
    @classmethod
    def _null_flag_to_false(cls, value: Any) -> Any:
        return False if value is None else value


class Title(TitleCreate):
    """A catalog entry (a show or a film)."""

    id: str
    created_at: datetime = Field(default_factory=utcnow)


class EpisodeCreate(CatalogInput):
    title_id: str = Field(min_length=1)
    episode_number: int = Field(gt=0)
    name: str = Field(min_length=1)
    video_url: str | None = None
    duration: str = Field(min_length=1, description="Running time as text, e.g. '24:00'")


class Episode(EpisodeCreate):
    """One installment of a title."""

    id: str
    created_at: datetime = Field(default_factory=utcnow)


class ProgressCreate(CatalogInput):
    title_id: str = Field(min_length=1)
    episode_id: str = Field(min_length=1)
    viewer_id: str = Field(min_length=1)
    progress_seconds: int | None = Field(default=None, ge=0)
    completed: bool | None = None


class WatchProgress(CatalogModel):
    """One immutable record of a viewer's consumption of an episode."""

    id: str
    title_id: str
    episode_id: str
    viewer_id: str
    progress_seconds: int = Field(default=0, ge=0)
    completed: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class GenreCount(CatalogModel):
    genre: str
    count: int
