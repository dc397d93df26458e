import pytest

from mixpoint.schemas.track import TrackRecord
from mixpoint.services.track_service import TrackService


def _candidate(**kw):
    fields = dict(name="deep.mp3", size=7_340_032, mime_type="audio/mpeg", duration=312.5, sample_rate=44100)
    fields.update(kw)
    return TrackRecord(**fields)


@pytest.mark.anyio
async def test_put_track_assigns_id_and_stamps_last_modified(tracks):
    stored = await tracks.put_track(_candidate(bpm=124.0))

    assert stored.id is not None
    assert stored.last_modified is not None and stored.last_modified > 0
    assert (await tracks.get_track(stored.id)).bpm == 124.0


@pytest.mark.anyio
async def test_analyzed_duplicate_is_returned_unchanged(tracks):
    first = await tracks.put_track(_candidate(bpm=124.0))
    second = await tracks.put_track(_candidate(bpm=90.0, file_handle="file:other"))

    assert second.id == first.id
    assert second.bpm == 124.0
    assert second.last_modified == first.last_modified
    assert len(await tracks.list_tracks()) == 1


@pytest.mark.anyio
async def test_fingerprint_ignores_directory(tracks):
    first = await tracks.put_track(_candidate(bpm=124.0, dir_handle="dir:/music/a"))
    second = await tracks.put_track(_candidate(dir_handle="dir:/downloads"))

    assert second.id == first.id
    assert second.dir_handle == "dir:/music/a"


@pytest.mark.anyio
async def test_unanalyzed_duplicate_is_updated_in_place(tracks):
    first = await tracks.put_track(_candidate())
    assert first.bpm is None

    second = await tracks.put_track(_candidate(bpm=128.0))

    assert second.id == first.id
    rows = await tracks.list_tracks()
    assert len(rows) == 1
    assert rows[0].bpm == 128.0


@pytest.mark.anyio
async def test_different_size_is_a_different_track(tracks):
    a = await tracks.put_track(_candidate(bpm=124.0))
    b = await tracks.put_track(_candidate(size=1234, bpm=124.0))
    assert a.id != b.id
    assert (await tracks.find_by_fingerprint("deep.mp3", 1234)).id == b.id


@pytest.mark.anyio
async def test_remove_track_is_idempotent(tracks):
    stored = await tracks.put_track(_candidate(bpm=124.0))

    assert await tracks.remove_track(stored.id) is True
    assert await tracks.remove_track(stored.id) is False
    assert await tracks.get_track(stored.id) is None


@pytest.mark.anyio
async def test_storage_failure_is_reported_once_and_returns_none(broken_database, notifications):
    svc = TrackService(broken_database.sessions, notifications)

    assert await svc.put_track(_candidate(bpm=124.0)) is None

    messages = notifications.drain()
    assert len(messages) == 1
    assert messages[0].startswith("Oops, there was a problem:")

    assert await svc.remove_track(1) is None
    assert len(notifications) == 1
