from fastapi import APIRouter, Depends
from loguru import logger

from anilife.api.deps import get_engine, get_preferences, get_query
from anilife.core.security import redact_viewer_id
from anilife.models.catalog import Title
from anilife.services.preferences import PreferenceStore
from anilife.services.query import CatalogQuery
from anilife.services.recommendation import RecommendationEngine

router = APIRouter(tags=["recommendations"])


@router.get("/viewers/{viewer_id}/recommendations", response_model=list[Title])
async def get_recommendations(
    viewer_id: str,
    prefs: PreferenceStore = Depends(get_preferences),
    query: CatalogQuery = Depends(get_query),
    engine: RecommendationEngine = Depends(get_engine),
):
    """
    Personalized picks for a viewer.

    An empty list means there is nothing to recommend and the section should
    not be shown.
    """
    viewer_prefs = await prefs.get_preferences(viewer_id)
    picks = engine.recommend(query.all_titles(), viewer_prefs.favorite_ids(), viewer_prefs.watch_history)
    logger.info(f"[{redact_viewer_id(viewer_id)}] Serving {len(picks)} recommendations")
    return picks
