from loguru import logger

from anilife.core.exceptions import NotFoundError, ValidationError
from anilife.core.security import redact_viewer_id
from anilife.models.catalog import ProgressCreate, WatchProgress, utcnow
from anilife.services.catalog_store import CatalogStorage, coerce_input, new_id


class ProgressTracker:
    """
    Records watch progress facts. The only writer of the progress collection.

    Records are append-only: every call creates a new fact, nothing is updated
    in place, so the full viewing history is preserved.
    """

    def __init__(self, store: CatalogStorage):
        self.store = store

    def record_progress(
        self,
        title_id: str,
        episode_id: str,
        viewer_id: str,
        progress_seconds: int | None = None,
        completed: bool | None = None,
    ) -> WatchProgress:
        payload = coerce_input(
            ProgressCreate,
            {
                "title_id": title_id,
                "episode_id": episode_id,
                "viewer_id": viewer_id,
                "progress_seconds": progress_seconds,
                "completed": completed,
            },
            "Missing required fields",
        )

        if self.store.get_title(payload.title_id) is None:
            raise NotFoundError(f"Title {payload.title_id} not found")
        episode = self.store.get_episode(payload.episode_id)
        if episode is None:
            raise NotFoundError(f"Episode {payload.episode_id} not found")
        if episode.title_id != payload.title_id:
            raise ValidationError(
                f"Episode {payload.episode_id} does not belong to title {payload.title_id}",
                errors=[{"loc": ["episodeId"], "msg": "Episode belongs to another title", "type": "mismatch"}],
            )

        now = utcnow()
        record = WatchProgress(
            id=new_id(),
            title_id=payload.title_id,
            episode_id=payload.episode_id,
            viewer_id=payload.viewer_id,
            progress_seconds=payload.progress_seconds or 0,
            completed=payload.completed or False,
            created_at=now,
            updated_at=now,
        )
        self.store.add_progress(record)
        logger.info(
            f"[{redact_viewer_id(record.viewer_id)}] Progress on episode {episode.episode_number} "
            f"of {record.title_id}: {record.progress_seconds}s completed={record.completed}"
        )
        return record

    def get_progress(self, viewer_id: str, title_id: str) -> list[WatchProgress]:
        """All facts for the (viewer, title) pair, in store order. No dedup."""
        return [p for p in self.store.list_progress() if p.viewer_id == viewer_id and p.title_id == title_id]

    def latest_progress(self, viewer_id: str, title_id: str) -> list[WatchProgress]:
        """
        Current state per episode: the most recent fact for each episode.

        A derived view only; the stored facts are left untouched. Ties on
        `updated_at` go to the later-recorded fact.
        """
        latest: dict[str, tuple[int, WatchProgress]] = {}
        for order, record in enumerate(self.get_progress(viewer_id, title_id)):
            current = latest.get(record.episode_id)
            if current is None or (record.updated_at, order) >= (current[1].updated_at, current[0]):
                latest[record.episode_id] = (order, record)

        episode_numbers = {ep.id: ep.episode_number for ep in self.store.get_episodes_of(title_id)}
        return sorted(
            (record for _, record in latest.values()),
            key=lambda rec: episode_numbers.get(rec.episode_id, 0),
        )
