from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from anilife.core.constants import COLD_START_LIMIT, HISTORY_GENRE_WINDOW, RECOMMENDATION_LIMIT
from anilife.models.catalog import Title
from anilife.models.preferences import WatchHistoryEntry
from anilife.services.recommendation.filtering import RecommendationFiltering
from anilife.services.recommendation.scoring import RecommendationScoring


class RecommendationEngine:
    """
    Picks titles for one viewer from their favorites and watch history.

    The ranking is a pure function of the catalog, the favorites and the
    history: identical inputs give an identical ordered result. Nothing that is
    favorited or already in the history is ever recommended, except that the
    cold-start row only filters favorites.
    """

    def __init__(
        self,
        limit: int = RECOMMENDATION_LIMIT,
        cold_start_limit: int = COLD_START_LIMIT,
        history_window: int = HISTORY_GENRE_WINDOW,
    ):
        self.limit = limit
        self.cold_start_limit = cold_start_limit
        self.history_window = history_window

    def recommend(
        self,
        titles: Iterable[Title],
        favorite_ids: Iterable[str],
        watch_history: Iterable[WatchHistoryEntry | Mapping[str, Any]],
    ) -> list[Title]:
        """
        Rank catalog titles for a viewer.

        Args:
            titles: Full catalog, in catalog order (used to break rating ties)
            favorite_ids: Ids of the viewer's favorited titles
            watch_history: Watched titles, most recent first

        Returns:
            Up to `limit` titles, best match first. Empty when nothing qualifies.
        """
        catalog = list(titles)
        favorites = set(favorite_ids)
        history = RecommendationFiltering.coerce_history(watch_history)
        if not catalog:
            return []

        titles_by_id = {t.id: t for t in catalog}
        genres = RecommendationFiltering.preferred_genres(titles_by_id, favorites, history, self.history_window)

        # No signal at all: fall back to the best rated titles
        if not genres:
            pool = RecommendationFiltering.exclude(catalog, favorites)
            picks = RecommendationScoring.rank_by_rating(pool)[: self.cold_start_limit]
            logger.debug(f"Cold start: recommending {len(picks)} top rated titles")
            return picks

        seen = favorites | {entry.title_id for entry in history}
        candidates = [t for t in RecommendationFiltering.exclude(catalog, seen) if t.genre in genres]
        picks = RecommendationScoring.rank_by_rating(candidates)[: self.limit]

        if len(picks) < self.limit:
            picked = {t.id for t in picks}
            backfill = RecommendationScoring.rank_by_rating(RecommendationFiltering.exclude(catalog, seen | picked))
            picks.extend(backfill[: self.limit - len(picks)])

        logger.debug(f"Recommending {len(picks)} titles from preferred genres {sorted(genres)}")
        return picks


recommendation_engine = RecommendationEngine()
