from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from anilife.api.main import api_router
from anilife.core.exceptions import CatalogError, InternalError, ValidationError
from anilife.services.catalog_store import CatalogStorage, MemoryCatalogStore
from anilife.services.preferences import PreferenceStore, build_preference_store
from anilife.services.recommendation import RecommendationEngine, recommendation_engine
from anilife.services.seed import seed_catalog

from .config import settings
from .version import __version__


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events (startup/shutdown).
    """
    yield
    try:
        await app.state.preferences.close()
        logger.info("Preference store closed")
    except Exception as exc:
        logger.warning(f"Failed to close preference store: {exc}")


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    content: dict = {"message": exc.message}
    if isinstance(exc, ValidationError):
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
        if exc.errors:
            content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [{k: v for k, v in err.items() if k in ("loc", "msg", "type")} for err in exc.errors()]
    logger.warning(f"{request.method} {request.url.path} rejected: {len(errors)} validation error(s)")
    return JSONResponse(status_code=400, content={"message": "Invalid request data", "errors": errors})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(
    store: CatalogStorage | None = None,
    preferences: PreferenceStore | None = None,
    engine: RecommendationEngine | None = None,
) -> FastAPI:
    """Build the API around explicit collaborators; missing ones come from settings."""
    app = FastAPI(
        title=settings.APP_NAME,
        description="Media catalog browsing, watch progress and recommendations",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if settings.APP_ENV != "development" else "/docs",
        redoc_url=None if settings.APP_ENV != "development" else "/redoc",
    )

    if store is None:
        store = MemoryCatalogStore()
        if settings.SEED_CATALOG:
            seed_catalog(store)

    app.state.store = store
    app.state.preferences = preferences or build_preference_store()
    app.state.engine = engine or recommendation_engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_router)
    return app


app = create_app()
