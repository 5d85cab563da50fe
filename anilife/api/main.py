from fastapi import APIRouter

from .endpoints.episodes import router as episodes_router
from .endpoints.health import router as health_router
from .endpoints.preferences import router as preferences_router
from .endpoints.progress import router as progress_router
from .endpoints.recommendations import router as recommendations_router
from .endpoints.titles import router as titles_router

api_router = APIRouter(prefix="/api")


@api_router.get("/")
async def root():
    return {"message": "Anilife API is running"}


api_router.include_router(health_router)
api_router.include_router(titles_router)
api_router.include_router(episodes_router)
api_router.include_router(progress_router)
api_router.include_router(preferences_router)
api_router.include_router(recommendations_router)
