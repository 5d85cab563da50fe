from fastapi import Request

from anilife.services.catalog_store import CatalogStorage
from anilife.services.preferences import PreferenceStore
from anilife.services.progress import ProgressTracker
from anilife.services.query import CatalogQuery
from anilife.services.recommendation import RecommendationEngine


def get_store(request: Request) -> CatalogStorage:
    return request.app.state.store


def get_query(request: Request) -> CatalogQuery:
    return CatalogQuery(request.app.state.store)


def get_tracker(request: Request) -> ProgressTracker:
    return ProgressTracker(request.app.state.store)


def get_preferences(request: Request) -> PreferenceStore:
    return request.app.state.preferences


def get_engine(request: Request) -> RecommendationEngine:
    return request.app.state.engine
