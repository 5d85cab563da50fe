from fastapi import APIRouter, Depends
from loguru import logger

from anilife.api.deps import get_preferences, get_query, get_store
from anilife.core.exceptions import NotFoundError
from anilife.core.security import redact_viewer_id
from anilife.models.catalog import Title
from anilife.models.preferences import ViewerPreferences, WatchHistoryEntry, WatchHistoryUpdate
from anilife.services.catalog_store import CatalogStorage
from anilife.services.preferences import PreferenceStore
from anilife.services.query import CatalogQuery

router = APIRouter(prefix="/viewers/{viewer_id}", tags=["preferences"])


def _require_title(store: CatalogStorage, title_id: str) -> Title:
    title = store.get_title(title_id)
    if title is None:
        raise NotFoundError("Title not found")
    return title


@router.get("/preferences", response_model=ViewerPreferences)
async def get_viewer_preferences(viewer_id: str, prefs: PreferenceStore = Depends(get_preferences)):
    return await prefs.get_preferences(viewer_id)


@router.get("/favorites", response_model=list[Title])
async def list_favorites(
    viewer_id: str,
    prefs: PreferenceStore = Depends(get_preferences),
    query: CatalogQuery = Depends(get_query),
):
    favorite_ids = await prefs.get_favorite_ids(viewer_id)
    return [t for t in query.all_titles() if t.id in favorite_ids]


@router.put("/favorites/{title_id}", response_model=ViewerPreferences)
async def add_favorite(
    viewer_id: str,
    title_id: str,
    prefs: PreferenceStore = Depends(get_preferences),
    store: CatalogStorage = Depends(get_store),
):
    title = _require_title(store, title_id)
    logger.info(f"[{redact_viewer_id(viewer_id)}] Favorited {title.name}")
    return await prefs.add_favorite(viewer_id, title_id)


@router.delete("/favorites/{title_id}", response_model=ViewerPreferences)
async def remove_favorite(viewer_id: str, title_id: str, prefs: PreferenceStore = Depends(get_preferences)):
    return await prefs.remove_favorite(viewer_id, title_id)


@router.get("/watch-later", response_model=list[Title])
async def list_watch_later(
    viewer_id: str,
    prefs: PreferenceStore = Depends(get_preferences),
    query: CatalogQuery = Depends(get_query),
):
    saved = set((await prefs.get_preferences(viewer_id)).watch_later)
    return [t for t in query.all_titles() if t.id in saved]


@router.put("/watch-later/{title_id}", response_model=ViewerPreferences)
async def add_watch_later(
    viewer_id: str,
    title_id: str,
    prefs: PreferenceStore = Depends(get_preferences),
    store: CatalogStorage = Depends(get_store),
):
    _require_title(store, title_id)
    return await prefs.add_watch_later(viewer_id, title_id)


@router.delete("/watch-later/{title_id}", response_model=ViewerPreferences)
async def remove_watch_later(viewer_id: str, title_id: str, prefs: PreferenceStore = Depends(get_preferences)):
    return await prefs.remove_watch_later(viewer_id, title_id)


@router.get("/history", response_model=list[WatchHistoryEntry])
async def list_history(viewer_id: str, prefs: PreferenceStore = Depends(get_preferences)):
    return await prefs.get_watch_history(viewer_id)


@router.post("/history/{title_id}", response_model=WatchHistoryEntry)
async def record_watch(
    viewer_id: str,
    title_id: str,
    payload: WatchHistoryUpdate | None = None,
    prefs: PreferenceStore = Depends(get_preferences),
    store: CatalogStorage = Depends(get_store),
):
    _require_title(store, title_id)
    payload = payload or WatchHistoryUpdate()
    return await prefs.record_watch(viewer_id, title_id, progress=payload.progress, completed=payload.completed)


@router.delete("/history/{title_id}", response_model=ViewerPreferences)
async def remove_from_history(viewer_id: str, title_id: str, prefs: PreferenceStore = Depends(get_preferences)):
    return await prefs.remove_from_history(viewer_id, title_id)


@router.get("/continue-watching", response_model=list[WatchHistoryEntry])
async def continue_watching(viewer_id: str, prefs: PreferenceStore = Depends(get_preferences)):
    return await prefs.continue_watching(viewer_id)


@router.get("/completed", response_model=list[WatchHistoryEntry])
async def completed(viewer_id: str, prefs: PreferenceStore = Depends(get_preferences)):
    return await prefs.completed(viewer_id)
