from loguru import logger

from anilife.models.catalog import Episode, GenreCount, Title
from anilife.services.catalog_store import CatalogStorage


class CatalogQuery:
    """
    Read-only views over the catalog store.

    Every call re-scans the live store, so results always reflect the current
    contents. Empty lists are valid answers, never errors.
    """

    def __init__(self, store: CatalogStorage):
        self.store = store

    def all_titles(self) -> list[Title]:
        return self.store.list_titles()

    def featured(self) -> list[Title]:
        return [t for t in self.store.list_titles() if t.is_featured]

    def latest(self) -> list[Title]:
        return [t for t in self.store.list_titles() if t.is_latest]

    def regional_originals(self) -> list[Title]:
        return [t for t in self.store.list_titles() if t.is_regional_original]

    def by_genre(self, genre: str) -> list[Title]:
        """Case-insensitive substring match against each title's genre tag."""
        needle = genre.lower()
        matches = [t for t in self.store.list_titles() if needle in t.genre.lower()]
        logger.debug(f"Genre filter '{genre}' matched {len(matches)} titles")
        return matches

    def search(self, query: str) -> list[Title]:
        """
        Case-insensitive substring match against name, synopsis or genre.

        No minimum length is enforced here; the HTTP layer rejects short queries.
        """
        needle = query.lower()
        matches = [
            t
            for t in self.store.list_titles()
            if needle in t.name.lower() or needle in t.synopsis.lower() or needle in t.genre.lower()
        ]
        logger.debug(f"Search '{query}' matched {len(matches)} titles")
        return matches

    def episodes_of(self, title_id: str) -> list[Episode]:
        return self.store.get_episodes_of(title_id)

    def genres(self) -> list[GenreCount]:
        """Distinct genre tags with the number of titles carrying each, in first-seen order."""
        counts: dict[str, int] = {}
        for title in self.store.list_titles():
            counts[title.genre] = counts.get(title.genre, 0) + 1
        return [GenreCount(genre=genre, count=count) for genre, count in counts.items()]
