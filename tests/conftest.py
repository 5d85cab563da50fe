import pytest
from fastapi.testclient import TestClient

from anilife.core.app import create_app
from anilife.models.catalog import ReleaseStatus, TitleCreate
from anilife.services.catalog_store import MemoryCatalogStore
from anilife.services.preferences import MemoryPreferenceStore
from anilife.services.seed import seed_catalog


def make_title(**overrides) -> TitleCreate:
    data = {
        "name": "Sample Show",
        "synopsis": "A show used in tests",
        "genre": "액션",
        "rating": "8.0",
        "episode_count": 12,
        "status": ReleaseStatus.COMPLETED,
        "year": 2023,
        "thumbnail_url": "https://example.com/thumb.jpg",
    }
    data.update(overrides)
    return TitleCreate(**data)


@pytest.fixture
def store():
    return MemoryCatalogStore()


@pytest.fixture
def seeded_store():
    return seed_catalog(MemoryCatalogStore())


@pytest.fixture
def preferences():
    return MemoryPreferenceStore()


@pytest.fixture
def client(seeded_store, preferences):
    return TestClient(create_app(store=seeded_store, preferences=preferences))


@pytest.fixture
def titles_by_name(seeded_store):
    return {t.name: t for t in seeded_store.list_titles()}
