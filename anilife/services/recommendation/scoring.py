import math
from collections.abc import Iterable

from loguru import logger

from anilife.models.catalog import Title

# Sort key for ratings that cannot be parsed
LOWEST_RATING: float = float("-inf")


class RecommendationScoring:
    """
    Handles rating parsing and rating-based ranking.
    """

    @staticmethod
    def parse_rating(rating: str | None) -> float:
        """Parse a decimal rating string. Malformed values rank lowest instead of raising."""
        try:
            value = float(str(rating).strip())
        except (TypeError, ValueError):
            logger.debug(f"Unparseable rating {rating!r}; ranking it lowest")
            return LOWEST_RATING
        if math.isnan(value):
            return LOWEST_RATING
        return value

    @staticmethod
    def rank_by_rating(titles: Iterable[Title]) -> list[Title]:
        """Highest rating first. The sort is stable, so ties keep their input order."""
        return sorted(titles, key=lambda t: RecommendationScoring.parse_rating(t.rating), reverse=True)
