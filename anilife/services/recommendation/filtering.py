from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from anilife.core.exceptions import ValidationError, validation_error_from_pydantic
from anilife.models.catalog import Title
from anilife.models.preferences import WatchHistoryEntry


class RecommendationFiltering:
    """
    Handles input validation, preferred-genre derivation and exclusion sets.
    """

    @staticmethod
    def coerce_history(watch_history: Iterable[WatchHistoryEntry | Mapping[str, Any]]) -> list[WatchHistoryEntry]:
        """Validate history entries at the boundary; mappings are parsed into WatchHistoryEntry."""
        entries = []
        for index, item in enumerate(watch_history):
            if isinstance(item, WatchHistoryEntry):
                entries.append(item)
                continue
            if not isinstance(item, Mapping):
                raise ValidationError(
                    "Invalid watch history",
                    errors=[{"loc": [index], "msg": f"Expected an object, got {type(item).__name__}"}],
                )
            try:
                entries.append(WatchHistoryEntry.model_validate(item))
            except PydanticValidationError as exc:
                raise validation_error_from_pydantic(exc, "Invalid watch history") from exc
        return entries

    @staticmethod
    def preferred_genres(
        titles_by_id: Mapping[str, Title],
        favorite_ids: set[str],
        history: list[WatchHistoryEntry],
        window: int,
    ) -> set[str]:
        """Genres of every favorite plus genres of the `window` most recent history entries."""
        genres = set()
        for title_id in favorite_ids:
            title = titles_by_id.get(title_id)
            if title is not None:
                genres.add(title.genre)

        for entry in history[:window]:
            title = titles_by_id.get(entry.title_id)
            if title is not None:
                genres.add(title.genre)
        return genres

    @staticmethod
    def exclude(titles: Iterable[Title], excluded_ids: set[str]) -> list[Title]:
        return [t for t in titles if t.id not in excluded_ids]
