from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from anilife.models.catalog import utcnow


class WatchHistoryEntry(BaseModel):
    """A title the viewer has watched, as kept by the preference store."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title_id: str = Field(min_length=1)
    last_watched: datetime = Field(default_factory=utcnow)
    progress: int = Field(default=0, ge=0, le=100, description="Percent watched")
    completed: bool = False


class WatchHistoryUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    progress: int = Field(default=0, ge=0, le=100)
    completed: bool = False


class ViewerPreferences(BaseModel):
    """
    Everything the preference store keeps for one viewer.

    `watch_history` is most-recent-first with at most one entry per title.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    favorites: list[str] = Field(default_factory=list)
    watch_later: list[str] = Field(default_factory=list)
    watch_history: list[WatchHistoryEntry] = Field(default_factory=list)

    def favorite_ids(self) -> set[str]:
        return set(self.favorites)
