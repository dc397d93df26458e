"""
Typed session state documents and their merge rules.

Documents persist under the `state` table as camelCase JSON:

    mixState = {"tracks": {"track0": {...}, "track1": {...}}, "bpmSync": false}
    setState = {}

Every patch is checked against the document's fields before merging;
unknown keys raise UnknownStateField instead of being stored silently.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from mixpoint.core.errors import SlotUnavailable, UnknownStateField
from mixpoint.schemas.track import TrackRecord

SLOT_KEY_RE = re.compile(r"^track\d+$")


def slot_key(index: int) -> str:
    return f"track{index}"


class TrackSlotState(TrackRecord):
    """Working copy of a track loaded into one slot."""

    model_config = ConfigDict(extra="forbid")

    adjusted_bpm: float | None = None               # user override, one decimal place
    file: Any | None = Field(default=None, exclude=True)   # decoded file reference, never persisted


class MixState(BaseModel):
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    tracks: Dict[str, TrackSlotState] = Field(default_factory=dict)
    bpm_sync: bool = False

    @field_validator("tracks")
    @classmethod
    def _check_slot_keys(cls, v: Dict[str, TrackSlotState]) -> Dict[str, TrackSlotState]:
        for key in v:
            if not SLOT_KEY_RE.match(key):
                raise ValueError(f"invalid slot key {key!r}")
        return v


class SetState(BaseModel):
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


def normalize_patch(model: type[BaseModel], patch: Mapping[str, Any], document: str) -> dict[str, Any]:
    """Map camelCase or snake_case patch keys onto field names, rejecting anything else."""
    by_alias = {f.alias: name for name, f in model.model_fields.items() if f.alias}
    out: dict[str, Any] = {}
    unknown: list[str] = []
    for key, value in patch.items():
        if key in model.model_fields:
            out[key] = value
        elif key in by_alias:
            out[by_alias[key]] = value
        else:
            unknown.append(key)
    if unknown:
        raise UnknownStateField(document, unknown)
    return out


def merge_slot_state(current: TrackSlotState | None, patch: TrackSlotState | Mapping[str, Any]) -> TrackSlotState:
    """
    A full TrackSlotState replaces the slot outright (a new file entering the
    slot starts clean). A mapping is a field patch: its fields win, every
    other field of the current slot is kept. Patching an empty slot raises
    SlotUnavailable unless the patch is a complete track.
    """
    if isinstance(patch, TrackSlotState):
        return patch

    fields = normalize_patch(TrackSlotState, patch, "TrackSlotState")
    if current is None:
        missing = [n for n, f in TrackSlotState.model_fields.items() if f.is_required() and n not in fields]
        if missing:
            raise SlotUnavailable("slot is empty", details=f"patch lacks {', '.join(missing)}")
    base = current.model_dump() if current is not None else {}
    merged = TrackSlotState.model_validate({**base, **fields})
    if "file" not in fields and current is not None:
        merged.file = current.file
    return merged


def merge_mix_state(current: MixState, partial: MixState | Mapping[str, Any]) -> MixState:
    if isinstance(partial, MixState):
        partial = {name: getattr(partial, name) for name in partial.model_fields_set}

    fields = normalize_patch(MixState, partial, "MixState")

    tracks = dict(current.tracks)
    for key, slot_patch in (fields.pop("tracks", None) or {}).items():
        if not SLOT_KEY_RE.match(key):
            raise ValueError(f"invalid slot key {key!r}")
        if slot_patch is None:
            tracks.pop(key, None)
        else:
            tracks[key] = merge_slot_state(tracks.get(key), slot_patch)

    validated = MixState.model_validate(fields)
    update = {name: getattr(validated, name) for name in fields}
    return current.model_copy(update={**update, "tracks": tracks})


def merge_set_state(current: SetState, partial: SetState | Mapping[str, Any]) -> SetState:
    if isinstance(partial, SetState):
        partial = {name: getattr(partial, name) for name in partial.model_fields_set}
    fields = normalize_patch(SetState, partial, "SetState")
    return SetState.model_validate({**current.model_dump(), **fields})
