import asyncio

import pytest

from mixpoint.core.errors import SlotUnavailable, UnknownStateField
from mixpoint.models import MIX_STATE, SET_STATE
from mixpoint.schemas.state import MixState, TrackSlotState
from mixpoint.services.state_service import SessionStateStore


def _slot(track_id, name, bpm=120.0):
    return TrackSlotState(id=track_id, name=name, size=1000 + track_id, bpm=bpm, adjusted_bpm=bpm)


@pytest.fixture
async def loaded(store):
    await store.update_track_state(_slot(1, "a.mp3", 120.0), slot="track0")
    await store.update_track_state(_slot(2, "b.mp3", 124.0), slot="track1")
    return store


@pytest.mark.anyio
async def test_documents_are_seeded(store):
    assert await store.get_state(MIX_STATE) == {"tracks": {}, "bpmSync": False}
    assert await store.get_state(SET_STATE) == {}


@pytest.mark.anyio
async def test_seed_never_overwrites(store):
    await store.update_mix_state({"bpmSync": True})

    assert await store.seed() is False

    assert (await store.get_mix_state()).bpm_sync is True


@pytest.mark.anyio
async def test_seed_is_shared_across_store_instances(database, store):
    await store.update_mix_state({"bpmSync": True})

    restarted = SessionStateStore(database.sessions)
    assert await restarted.seed() is False
    assert (await restarted.get_mix_state()).bpm_sync is True


@pytest.mark.anyio
async def test_missing_document_reads_as_empty(database):
    store = SessionStateStore(database.sessions)
    assert await store.get_state(MIX_STATE) == {}
    assert await store.get_mix_state() == MixState()


@pytest.mark.anyio
async def test_partial_update_keeps_other_keys(store):
    a, b = _slot(1, "a.mp3"), _slot(2, "b.mp3")
    await store.update_track_state(a, slot="track0")
    await store.update_mix_state({"bpmSync": True})

    result = await store.update_mix_state({"tracks": {"track1": b}})

    stored = await store.get_mix_state()
    assert stored == result
    assert stored.tracks["track0"].name == "a.mp3"
    assert stored.tracks["track1"].name == "b.mp3"
    assert stored.bpm_sync is True


@pytest.mark.anyio
async def test_concurrent_slot_updates_are_both_kept(loaded):
    t0 = asyncio.create_task(loaded.update_slot("track0", adjusted_bpm=128.0))
    t1 = asyncio.create_task(loaded.update_slot("track1", adjusted_bpm=126.5))
    await asyncio.gather(t0, t1)

    state = await loaded.get_mix_state()
    assert state.tracks["track0"].adjusted_bpm == 128.0
    assert state.tracks["track1"].adjusted_bpm == 126.5


@pytest.mark.anyio
async def test_many_interleaved_updates_lose_nothing(loaded):
    await asyncio.gather(
        *(loaded.update_slot(f"track{i % 2}", offset=float(i)) for i in range(10)),
        loaded.update_mix_state({"bpmSync": True}),
    )

    state = await loaded.get_mix_state()
    assert state.tracks["track0"].offset == 8.0
    assert state.tracks["track1"].offset == 9.0
    assert state.bpm_sync is True


@pytest.mark.anyio
async def test_same_key_updates_apply_in_call_order(loaded):
    await asyncio.gather(
        loaded.update_slot("track0", adjusted_bpm=121.0),
        loaded.update_slot("track0", adjusted_bpm=122.0),
        loaded.update_slot("track0", adjusted_bpm=123.0),
    )
    assert (await loaded.get_mix_state()).tracks["track0"].adjusted_bpm == 123.0


@pytest.mark.anyio
async def test_track_state_placement(store):
    await store.update_track_state(_slot(1, "a.mp3"))
    await store.update_track_state(_slot(2, "b.mp3"))
    state = await store.update_track_state(_slot(1, "a.mp3", bpm=118.0))

    assert state.tracks["track0"].id == 1
    assert state.tracks["track0"].bpm == 118.0
    assert state.tracks["track1"].id == 2

    with pytest.raises(SlotUnavailable):
        await store.update_track_state(_slot(3, "c.mp3"))


@pytest.mark.anyio
async def test_unknown_field_leaves_document_untouched(loaded):
    before = await loaded.get_state(MIX_STATE)

    with pytest.raises(UnknownStateField):
        await loaded.update_mix_state({"track0_bpm": "128.0"})
    with pytest.raises(UnknownStateField):
        await loaded.update_set_state({"currentSet": 4})

    assert await loaded.get_state(MIX_STATE) == before


@pytest.mark.anyio
async def test_slot_outside_configured_range(store):
    with pytest.raises(ValueError):
        await store.update_track_state(_slot(1, "a.mp3"), slot="track2")


@pytest.mark.anyio
async def test_clear_slot(loaded):
    state = await loaded.clear_slot("track0")
    assert list(state.tracks) == ["track1"]


@pytest.mark.anyio
async def test_update_state_replaces_whole_document(loaded):
    doc = await loaded.update_state({"bpmSync": True}, MIX_STATE)

    assert doc == {"tracks": {}, "bpmSync": True}
    assert await loaded.get_state(MIX_STATE) == doc

    with pytest.raises(KeyError):
        await loaded.update_state({}, "appState")


@pytest.mark.anyio
async def test_storage_failure_returns_none(broken_database, notifications):
    store = SessionStateStore(broken_database.sessions, notifications)

    assert await store.seed() is None
    assert await store.get_state(MIX_STATE) is None
    assert await store.update_mix_state({"bpmSync": True}) is None

    assert len(notifications.drain()) == 3


@pytest.mark.anyio
async def test_patch_to_empty_slot_writes_nothing(loaded):
    await loaded.clear_slot("track0")

    with pytest.raises(SlotUnavailable):
        await loaded.update_slot("track0", adjusted_bpm=128.0)

    state = await loaded.get_mix_state()
    assert list(state.tracks) == ["track1"]
