import pytest
from fastapi.testclient import TestClient

from anilife.core.app import create_app
from anilife.core.exceptions import InternalError
from anilife.services.catalog_store import MemoryCatalogStore
from anilife.services.preferences import MemoryPreferenceStore

NEW_TITLE = {
    "name": "장송의 프리렌",
    "synopsis": "마왕을 물리친 뒤의 여정",
    "genre": "판타지",
    "rating": "9.6",
    "episodeCount": 28,
    "status": "방영중",
    "year": 2023,
    "thumbnailUrl": "https://example.com/frieren.jpg",
}


def first_title_id(client, path="/api/titles"):
    return client.get(path).json()[0]["id"]


def test_list_titles_uses_camel_case(client):
    response = client.get("/api/titles")

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 10
    assert {"id", "name", "episodeCount", "isFeatured", "isRegionalOriginal", "thumbnailUrl"} <= body[0].keys()


@pytest.mark.parametrize("path, expected", [("featured", 4), ("latest", 7), ("regional", 2)])
def test_flag_endpoints(client, path, expected):
    response = client.get(f"/api/titles/{path}")

    assert response.status_code == 200
    assert len(response.json()) == expected


def test_get_title_and_not_found(client):
    title_id = first_title_id(client)

    assert client.get(f"/api/titles/{title_id}").json()["id"] == title_id

    missing = client.get("/api/titles/does-not-exist")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Title not found"}


@pytest.mark.parametrize("query", ["a", " a ", " "])
def test_search_rejects_queries_shorter_than_two(client, query):
    response = client.get(f"/api/titles/search/{query}")

    assert response.status_code == 400
    assert "at least 2" in response.json()["message"]


def test_search_accepts_two_characters(client):
    response = client.get("/api/titles/search/ab")

    assert response.status_code == 200
    assert response.json() == []


def test_search_finds_titles(client):
    response = client.get("/api/titles/search/가족")

    assert [t["name"] for t in response.json()] == ["스파이 패밀리"]


def test_titles_by_genre(client):
    body = client.get("/api/titles/genre/액션").json()

    assert len(body) == 6
    assert {t["genre"] for t in body} == {"액션"}


def test_genres_endpoint(client):
    body = client.get("/api/genres").json()

    assert body[0] == {"genre": "액션", "count": 6}


def test_create_title(client):
    response = client.post("/api/titles", json=NEW_TITLE)

    assert response.status_code == 201
    created = response.json()
    assert created["id"]
    assert created["status"] == "ONGOING"
    assert created["isFeatured"] is False
    assert client.get(f"/api/titles/{created['id']}").status_code == 200


def test_create_title_validation_failure_is_400(client):
    response = client.post("/api/titles", json={"name": "Only a name"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid request data"
    assert body["errors"]


def test_episodes_sorted_and_episode_lookup(client):
    title_id = first_title_id(client)
    for number in [9, 7]:
        created = client.post(
            f"/api/titles/{title_id}/episodes",
            json={"episodeNumber": number, "name": f"{number}화", "duration": "24:00"},
        )
        assert created.status_code == 201

    episodes = client.get(f"/api/titles/{title_id}/episodes").json()
    assert [ep["episodeNumber"] for ep in episodes] == [1, 2, 3, 4, 5, 6, 7, 9]

    episode = client.get(f"/api/episodes/{episodes[0]['id']}").json()
    assert episode["titleId"] == title_id
    assert client.get("/api/episodes/missing").status_code == 404


def test_create_episode_errors(client):
    title_id = first_title_id(client)

    duplicate = client.post(
        f"/api/titles/{title_id}/episodes", json={"episodeNumber": 1, "name": "again", "duration": "24:00"}
    )
    assert duplicate.status_code == 400

    unknown = client.post("/api/titles/missing/episodes", json={"episodeNumber": 1, "name": "x", "duration": "1:00"})
    assert unknown.status_code == 404


def test_watch_progress_round_trip(client):
    title_id = first_title_id(client)
    episode_id = client.get(f"/api/titles/{title_id}/episodes").json()[0]["id"]
    payload = {"titleId": title_id, "episodeId": episode_id, "viewerId": "viewer-1", "progressSeconds": 90}

    first = client.post("/api/watch-progress", json=payload)
    second = client.post("/api/watch-progress", json={**payload, "progressSeconds": 600, "completed": True})

    assert first.status_code == 200
    assert second.json()["completed"] is True
    records = client.get(f"/api/watch-progress/viewer-1/{title_id}").json()
    assert sorted(r["progressSeconds"] for r in records) == [90, 600]

    latest = client.get(f"/api/watch-progress/viewer-1/{title_id}/latest").json()
    assert [r["progressSeconds"] for r in latest] == [600]


def test_watch_progress_defaults_when_optional_fields_are_null(client):
    title_id = first_title_id(client)
    episode_id = client.get(f"/api/titles/{title_id}/episodes").json()[0]["id"]

    response = client.post(
        "/api/watch-progress",
        json={"titleId": title_id, "episodeId": episode_id, "viewerId": "v", "progressSeconds": None},
    )

    assert response.json()["progressSeconds"] == 0
    assert response.json()["completed"] is False


def test_watch_progress_missing_ids_is_400(client):
    response = client.post("/api/watch-progress", json={"titleId": "x"})

    assert response.status_code == 400


def test_watch_progress_unknown_episode_is_404(client):
    title_id = first_title_id(client)

    response = client.post(
        "/api/watch-progress", json={"titleId": title_id, "episodeId": "missing", "viewerId": "viewer-1"}
    )

    assert response.status_code == 404


def test_my_list_endpoints(client):
    title_id = first_title_id(client)

    assert client.put(f"/api/viewers/v1/favorites/{title_id}").json()["favorites"] == [title_id]
    assert [t["id"] for t in client.get("/api/viewers/v1/favorites").json()] == [title_id]
    assert client.put("/api/viewers/v1/favorites/missing").status_code == 404
    assert client.delete(f"/api/viewers/v1/favorites/{title_id}").json()["favorites"] == []

    assert client.put(f"/api/viewers/v1/watch-later/{title_id}").json()["watchLater"] == [title_id]
    assert len(client.get("/api/viewers/v1/watch-later").json()) == 1
    assert client.delete(f"/api/viewers/v1/watch-later/{title_id}").json()["watchLater"] == []

    entry = client.post(f"/api/viewers/v1/history/{title_id}", json={"progress": 35}).json()
    assert entry["titleId"] == title_id
    assert [e["titleId"] for e in client.get("/api/viewers/v1/continue-watching").json()] == [title_id]
    assert client.get("/api/viewers/v1/completed").json() == []
    assert client.delete(f"/api/viewers/v1/history/{title_id}").json()["watchHistory"] == []


def test_history_rejects_out_of_range_progress(client):
    title_id = first_title_id(client)

    response = client.post(f"/api/viewers/v1/history/{title_id}", json={"progress": 150})

    assert response.status_code == 400


def test_recommendations_cold_start(client):
    body = client.get("/api/viewers/new-viewer/recommendations").json()

    assert [t["rating"] for t in body][:3] == ["9.8", "9.7", "9.5"]
    assert len(body) == 8


def test_recommendations_exclude_favorites_and_history(client):
    titles = client.get("/api/titles").json()
    favorite, watched = titles[0]["id"], titles[7]["id"]
    client.put(f"/api/viewers/v1/favorites/{favorite}")
    client.post(f"/api/viewers/v1/history/{watched}", json={"progress": 50})

    body = client.get("/api/viewers/v1/recommendations").json()

    assert len(body) == 6
    assert not {favorite, watched} & {t["id"] for t in body}


def test_recommendations_empty_catalog():
    client = TestClient(create_app(store=MemoryCatalogStore(), preferences=MemoryPreferenceStore()))

    response = client.get("/api/viewers/v1/recommendations")

    assert response.status_code == 200
    assert response.json() == []


def test_internal_errors_are_generic_500(seeded_store):
    class FailingPreferences(MemoryPreferenceStore):
        async def _load(self, viewer_id):
            raise InternalError("redis exploded at 10.0.0.3")

    client = TestClient(create_app(store=seeded_store, preferences=FailingPreferences()))

    response = client.get("/api/viewers/v1/recommendations")

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok", "titles": 10}
