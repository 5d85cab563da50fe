from datetime import timedelta

import pytest

from anilife.core.exceptions import NotFoundError, ValidationError
from anilife.services.progress import ProgressTracker


@pytest.fixture
def tracker(seeded_store):
    return ProgressTracker(seeded_store)


@pytest.fixture
def attack(titles_by_name):
    return titles_by_name["진격의 거인 파이널 시즌"]


def test_record_progress_defaults(tracker, seeded_store, attack):
    ep = seeded_store.get_episodes_of(attack.id)[0]

    record = tracker.record_progress(attack.id, ep.id, "viewer-1")

    assert record.progress_seconds == 0
    assert record.completed is False
    assert record.id
    assert record.created_at == record.updated_at


def test_recording_twice_appends_two_records(tracker, seeded_store, attack):
    ep = seeded_store.get_episodes_of(attack.id)[0]

    first = tracker.record_progress(attack.id, ep.id, "viewer-1", 120)
    second = tracker.record_progress(attack.id, ep.id, "viewer-1", 300, True)

    records = tracker.get_progress("viewer-1", attack.id)
    assert first.id != second.id
    assert {r.id for r in records} == {first.id, second.id}


def test_get_progress_is_scoped_to_viewer_and_title(tracker, seeded_store, titles_by_name, attack):
    other = titles_by_name["체인소 맨"]
    tracker.record_progress(attack.id, seeded_store.get_episodes_of(attack.id)[0].id, "viewer-1", 10)
    tracker.record_progress(attack.id, seeded_store.get_episodes_of(attack.id)[0].id, "viewer-2", 20)
    tracker.record_progress(other.id, seeded_store.get_episodes_of(other.id)[0].id, "viewer-1", 30)

    records = tracker.get_progress("viewer-1", attack.id)

    assert [r.progress_seconds for r in records] == [10]
    assert tracker.get_progress("nobody", attack.id) == []


def test_unknown_title_or_episode_fails(tracker, seeded_store, attack):
    ep = seeded_store.get_episodes_of(attack.id)[0]

    with pytest.raises(NotFoundError):
        tracker.record_progress("missing", ep.id, "viewer-1")
    with pytest.raises(NotFoundError):
        tracker.record_progress(attack.id, "missing", "viewer-1")


def test_episode_from_another_title_fails(tracker, seeded_store, titles_by_name, attack):
    other_ep = seeded_store.get_episodes_of(titles_by_name["체인소 맨"].id)[0]

    with pytest.raises(ValidationError):
        tracker.record_progress(attack.id, other_ep.id, "viewer-1")


@pytest.mark.parametrize("viewer_id", ["", "   ", None])
def test_missing_viewer_fails(tracker, seeded_store, attack, viewer_id):
    ep = seeded_store.get_episodes_of(attack.id)[0]

    with pytest.raises(ValidationError):
        tracker.record_progress(attack.id, ep.id, viewer_id)


def test_negative_progress_fails(tracker, seeded_store, attack):
    ep = seeded_store.get_episodes_of(attack.id)[0]

    with pytest.raises(ValidationError):
        tracker.record_progress(attack.id, ep.id, "viewer-1", -5)


def test_latest_progress_keeps_most_recent_per_episode(tracker, seeded_store, attack):
    first_ep, second_ep = seeded_store.get_episodes_of(attack.id)[:2]
    tracker.record_progress(attack.id, second_ep.id, "viewer-1", 50)
    tracker.record_progress(attack.id, first_ep.id, "viewer-1", 100)
    tracker.record_progress(attack.id, first_ep.id, "viewer-1", 1440, True)

    latest = tracker.latest_progress("viewer-1", attack.id)

    assert [(r.episode_id, r.progress_seconds) for r in latest] == [(first_ep.id, 1440), (second_ep.id, 50)]
    # the append-only history is untouched
    assert len(tracker.get_progress("viewer-1", attack.id)) == 3


def test_latest_progress_prefers_newer_timestamp(tracker, seeded_store, attack):
    ep = seeded_store.get_episodes_of(attack.id)[0]
    newer = tracker.record_progress(attack.id, ep.id, "viewer-1", 200)
    older = tracker.record_progress(attack.id, ep.id, "viewer-1", 100)
    # rewrite the stored record's timestamp to simulate a late-arriving older fact
    seeded_store._progress[older.id] = older.model_copy(update={"updated_at": newer.updated_at - timedelta(minutes=5)})

    latest = tracker.latest_progress("viewer-1", attack.id)

    assert [r.id for r in latest] == [newer.id]
