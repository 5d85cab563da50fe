from fastapi import APIRouter, Depends

from anilife.api.deps import get_store
from anilife.services.catalog_store import CatalogStorage

router = APIRouter(tags=["health"])


@router.get("/health", summary="Simple readiness probe")
async def health_check(store: CatalogStorage = Depends(get_store)) -> dict:
    return {"status": "ok", "titles": len(store.list_titles())}
