"""
Recommendation engine: genre-affinity ranking over the catalog with a
rating-ordered cold start and backfill.
"""

from anilife.services.recommendation.engine import RecommendationEngine, recommendation_engine
from anilife.services.recommendation.filtering import RecommendationFiltering
from anilife.services.recommendation.scoring import RecommendationScoring

__all__ = [
    "RecommendationEngine",
    "RecommendationFiltering",
    "RecommendationScoring",
    "recommendation_engine",
]
