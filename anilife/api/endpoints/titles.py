from fastapi import APIRouter, Depends
from loguru import logger

from anilife.api.deps import get_query, get_store
from anilife.core.config import settings
from anilife.core.exceptions import NotFoundError, ValidationError
from anilife.models.catalog import Episode, EpisodeCreate, GenreCount, Title, TitleCreate
from anilife.services.catalog_store import CatalogStorage
from anilife.services.query import CatalogQuery

router = APIRouter(tags=["titles"])


class EpisodeBody(EpisodeCreate):
    """Episode payload for a title given in the path."""

    title_id: str | None = None


@router.get("/titles", response_model=list[Title])
async def list_titles(query: CatalogQuery = Depends(get_query)):
    return query.all_titles()


@router.get("/titles/featured", response_model=list[Title])
async def featured_titles(query: CatalogQuery = Depends(get_query)):
    return query.featured()


@router.get("/titles/latest", response_model=list[Title])
async def latest_titles(query: CatalogQuery = Depends(get_query)):
    return query.latest()


@router.get("/titles/regional", response_model=list[Title])
async def regional_titles(query: CatalogQuery = Depends(get_query)):
    return query.regional_originals()


@router.get("/titles/search/{q}", response_model=list[Title])
async def search_titles(q: str, query: CatalogQuery = Depends(get_query)):
    """Search names, synopses and genres. Queries shorter than the minimum are rejected."""
    min_length = settings.SEARCH_MIN_QUERY_LENGTH
    if len(q.strip()) < min_length:
        logger.warning(f"Rejected search query {q!r}: shorter than {min_length} characters")
        raise ValidationError(f"Search query must be at least {min_length} characters")
    return query.search(q)


@router.get("/titles/genre/{genre}", response_model=list[Title])
async def titles_by_genre(genre: str, query: CatalogQuery = Depends(get_query)):
    return query.by_genre(genre)


@router.get("/genres", response_model=list[GenreCount])
async def list_genres(query: CatalogQuery = Depends(get_query)):
    return query.genres()


@router.get("/titles/{title_id}", response_model=Title)
async def get_title(title_id: str, store: CatalogStorage = Depends(get_store)):
    title = store.get_title(title_id)
    if title is None:
        raise NotFoundError("Title not found")
    return title


@router.post("/titles", response_model=Title, status_code=201)
async def create_title(payload: TitleCreate, store: CatalogStorage = Depends(get_store)):
    return store.create_title(payload)


@router.get("/titles/{title_id}/episodes", response_model=list[Episode])
async def list_episodes(title_id: str, query: CatalogQuery = Depends(get_query)):
    return query.episodes_of(title_id)


@router.post("/titles/{title_id}/episodes", response_model=Episode, status_code=201)
async def create_episode(title_id: str, payload: EpisodeBody, store: CatalogStorage = Depends(get_store)):
    data = payload.model_dump()
    data["title_id"] = title_id
    return store.create_episode(data)
