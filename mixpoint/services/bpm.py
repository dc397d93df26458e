"""
Tempo matching helpers.

Pure functions only; results reach storage through SessionStateStore.

    compute_playback_rate(128, 120)  -> 1.0666...
    normalize_adjusted_bpm(127.96)   -> 128.0

Per-slot lifecycle:

    EMPTY -> ANALYZING -> READY(native bpm) -> ADJUSTED(adjusted bpm)
                               ^                     |
                               +------ reset --------+

EMPTY is re-entered whenever a new file replaces the slot's track.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum

from mixpoint.schemas.state import TrackSlotState


class SlotPhase(str, Enum):
    EMPTY = "empty"
    ANALYZING = "analyzing"
    READY = "ready"
    ADJUSTED = "adjusted"


def compute_playback_rate(target_bpm: float | None, native_bpm: float | None) -> float:
    """Rate multiplier that plays a track at native_bpm as target_bpm. 1.0 until a tempo is known."""
    if not native_bpm or native_bpm <= 0 or not target_bpm:
        return 1.0
    return float(target_bpm) / float(native_bpm)


def normalize_adjusted_bpm(raw_bpm: float | str) -> float:
    """Round to one decimal place, half-up. Raises ValueError for text that is not a finite number."""
    try:
        value = Decimal(str(raw_bpm).strip())
        if value.is_finite():
            # half-up on the decimal text, not banker's rounding on the binary float
            return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        pass
    raise ValueError(f"not a tempo: {raw_bpm!r}")


def is_bpm_adjusted(adjusted_bpm: float | None, native_bpm: float | None) -> bool:
    """True when a reset affordance should be offered."""
    if adjusted_bpm is None or not native_bpm:
        return False
    return normalize_adjusted_bpm(adjusted_bpm) != normalize_adjusted_bpm(native_bpm)


def resolve_display_bpm(slot: TrackSlotState | None) -> float:
    if slot is None:
        return 0.0
    if slot.adjusted_bpm is not None:
        return normalize_adjusted_bpm(slot.adjusted_bpm)
    if slot.bpm:
        return normalize_adjusted_bpm(slot.bpm)
    return 0.0


def slot_phase(slot: TrackSlotState | None, *, analyzing: bool = False) -> SlotPhase:
    if analyzing:
        return SlotPhase.ANALYZING
    if slot is None:
        return SlotPhase.EMPTY
    if is_bpm_adjusted(slot.adjusted_bpm, slot.bpm):
        return SlotPhase.ADJUSTED
    return SlotPhase.READY
