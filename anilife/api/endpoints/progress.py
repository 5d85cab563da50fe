from fastapi import APIRouter, Depends

from anilife.api.deps import get_tracker
from anilife.models.catalog import ProgressCreate, WatchProgress
from anilife.services.progress import ProgressTracker

router = APIRouter(prefix="/watch-progress", tags=["progress"])


@router.post("", response_model=WatchProgress)
async def record_progress(payload: ProgressCreate, tracker: ProgressTracker = Depends(get_tracker)):
    """Append a progress fact; earlier facts for the same episode are kept."""
    return tracker.record_progress(**payload.model_dump())


@router.get("/{viewer_id}/{title_id}", response_model=list[WatchProgress])
async def get_progress(viewer_id: str, title_id: str, tracker: ProgressTracker = Depends(get_tracker)):
    return tracker.get_progress(viewer_id, title_id)


@router.get("/{viewer_id}/{title_id}/latest", response_model=list[WatchProgress])
async def get_latest_progress(viewer_id: str, title_id: str, tracker: ProgressTracker = Depends(get_tracker)):
    return tracker.latest_progress(viewer_id, title_id)
