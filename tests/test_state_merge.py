import pytest

from mixpoint.core.errors import SlotUnavailable, UnknownStateField
from mixpoint.schemas.state import (
    MixState,
    SetState,
    TrackSlotState,
    merge_mix_state,
    merge_set_state,
    merge_slot_state,
)


def _slot(track_id, name, bpm=120.0):
    return TrackSlotState(id=track_id, name=name, size=1000 + track_id, bpm=bpm, adjusted_bpm=bpm)


def test_partial_update_keeps_existing_keys():
    a, b = _slot(1, "a.mp3"), _slot(2, "b.mp3")
    current = MixState(tracks={"track0": a}, bpm_sync=True)

    merged = merge_mix_state(current, {"tracks": {"track1": b}})

    assert merged.tracks == {"track0": a, "track1": b}
    assert merged.bpm_sync is True


def test_slot_patch_touches_only_named_fields():
    current = MixState(tracks={"track0": _slot(1, "a.mp3"), "track1": _slot(2, "b.mp3")})

    merged = merge_mix_state(current, {"tracks": {"track0": {"adjustedBpm": 126.0}}})

    assert merged.tracks["track0"].adjusted_bpm == 126.0
    assert merged.tracks["track0"].name == "a.mp3"
    assert merged.tracks["track1"] == current.tracks["track1"]


def test_camel_and_snake_keys_are_equivalent():
    current = MixState()
    assert merge_mix_state(current, {"bpmSync": True}).bpm_sync is True
    assert merge_mix_state(current, {"bpm_sync": True}).bpm_sync is True


def test_unknown_keys_are_rejected():
    with pytest.raises(UnknownStateField) as exc:
        merge_mix_state(MixState(), {"track0_bpm": "128.0"})
    assert exc.value.fields == ["track0_bpm"]

    current = MixState(tracks={"track0": _slot(1, "a.mp3")})
    with pytest.raises(UnknownStateField):
        merge_mix_state(current, {"tracks": {"track0": {"adjustedBPM": 126.0}}})


def test_none_clears_a_slot():
    current = MixState(tracks={"track0": _slot(1, "a.mp3"), "track1": _slot(2, "b.mp3")})
    merged = merge_mix_state(current, {"tracks": {"track0": None}})
    assert list(merged.tracks) == ["track1"]


def test_bad_slot_key():
    with pytest.raises(ValueError):
        merge_mix_state(MixState(), {"tracks": {"deckA": _slot(1, "a.mp3")}})


def test_full_slot_state_replaces_and_patch_keeps_file_reference():
    marker = object()
    current = _slot(1, "a.mp3").model_copy(update={"file": marker, "adjusted_bpm": 128.0})

    replaced = merge_slot_state(current, _slot(2, "b.mp3", bpm=100.0))
    assert replaced.id == 2
    assert replaced.adjusted_bpm == 100.0
    assert replaced.file is None

    patched = merge_slot_state(current, {"offset": 4.5})
    assert patched.offset == 4.5
    assert patched.file is marker


def test_file_reference_is_not_serialized():
    slot = _slot(1, "a.mp3").model_copy(update={"file": object()})
    dumped = MixState(tracks={"track0": slot}).model_dump(mode="json", by_alias=True)
    assert "file" not in dumped["tracks"]["track0"]
    assert dumped["tracks"]["track0"]["adjustedBpm"] == 120.0


def test_set_state_has_no_free_form_keys():
    assert merge_set_state(SetState(), {}) == SetState()
    with pytest.raises(UnknownStateField):
        merge_set_state(SetState(), {"anything": 1})


def test_field_patch_to_empty_slot():
    with pytest.raises(SlotUnavailable):
        merge_mix_state(MixState(), {"tracks": {"track0": {"adjustedBpm": 128.0}}})

    # a complete track is still accepted as a patch
    merged = merge_mix_state(MixState(), {"tracks": {"track0": {"name": "a.mp3", "size": 1}}})
    assert merged.tracks["track0"].name == "a.mp3"
