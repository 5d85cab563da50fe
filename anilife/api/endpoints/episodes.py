from fastapi import APIRouter, Depends

from anilife.api.deps import get_store
from anilife.core.exceptions import NotFoundError
from anilife.models.catalog import Episode
from anilife.services.catalog_store import CatalogStorage

router = APIRouter(tags=["episodes"])


@router.get("/episodes/{episode_id}", response_model=Episode)
async def get_episode(episode_id: str, store: CatalogStorage = Depends(get_store)):
    episode = store.get_episode(episode_id)
    if episode is None:
        raise NotFoundError("Episode not found")
    return episode
