from __future__ import annotations

import logging

from mixpoint.core.errors import AnalysisUnavailable, CancelledOperation, SlotUnavailable, StorageError
from mixpoint.schemas.state import TrackSlotState
from mixpoint.schemas.track import TrackRecord
from mixpoint.services.bpm import (
    SlotPhase,
    compute_playback_rate,
    is_bpm_adjusted,
    normalize_adjusted_bpm,
    resolve_display_bpm,
    slot_phase,
)
from mixpoint.services.collaborators import AnalysisResult, FilePicker, PickedFile, TrackAnalyzer
from mixpoint.services.state_service import SessionStateStore
from mixpoint.services.track_service import TrackService


class TrackPanel:
    """
    Controller behind one track-editing panel (slot "track0", "track1", ...).

    `analyzing` and `playback_rate` are local to the panel and never
    persisted; everything else is read from and written to the session
    state store.
    """

    def __init__(
        self,
        slot: str,
        *,
        store: SessionStateStore,
        tracks: TrackService,
        picker: FilePicker,
        analyzer: TrackAnalyzer,
    ):
        self.slot = slot
        self.store = store
        self.tracks = tracks
        self.picker = picker
        self.analyzer = analyzer

        self.analyzing = False
        self.playback_rate = 1.0
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def current(self) -> TrackSlotState | None:
        state = await self.store.get_mix_state()
        return state.tracks.get(self.slot) if state is not None else None

    async def phase(self) -> SlotPhase:
        return slot_phase(await self.current(), analyzing=self.analyzing)

    async def display_bpm(self) -> float:
        return resolve_display_bpm(await self.current())

    async def can_reset(self) -> bool:
        slot = await self.current()
        return slot is not None and is_bpm_adjusted(slot.adjusted_bpm, slot.bpm)

    async def load_track(self) -> TrackSlotState | None:
        """
        Pick a file, analyze it unless an identical file was already analyzed,
        and make it this slot's track. Returns None on cancel or storage failure.
        """
        self.analyzing = True
        try:
            return await self._load()
        finally:
            self.analyzing = False

    async def _load(self) -> TrackSlotState | None:
        try:
            picked = await self.picker.pick()
        except CancelledOperation:
            self.logger.debug("%s: file pick cancelled", self.slot)
            return None

        try:
            track = await self.tracks.lookup_fingerprint(picked.name, picked.size)
        except StorageError:
            return None
        if track is None or not track.bpm:
            analysis = await self._analyze(picked)
            candidate = TrackRecord(
                name=picked.name,
                size=picked.size,
                mime_type=picked.mime_type,
                duration=analysis.duration if analysis else None,
                bpm=analysis.bpm if analysis else None,
                sample_rate=analysis.sample_rate if analysis else None,
                file_handle=picked.file_handle,
                dir_handle=picked.dir_handle,
            )
            track = await self.tracks.put_track(candidate)
            if track is None:
                return None

        # a new file starts clean: no adjusted bpm carried over from the previous one
        slot_state = TrackSlotState(
            **track.model_dump(),
            adjusted_bpm=normalize_adjusted_bpm(track.bpm) if track.bpm else None,
            file=picked.file,
        )
        if await self.store.update_track_state(slot_state, slot=self.slot) is None:
            return None

        self.playback_rate = 1.0
        self.logger.info("%s: loaded %r (bpm=%s)", self.slot, track.name, track.bpm)
        return slot_state

    async def _analyze(self, picked: PickedFile) -> AnalysisResult | None:
        try:
            result = await self.analyzer.analyze(picked)
        except AnalysisUnavailable as e:
            self.logger.warning("%s: analysis unavailable for %r: %s", self.slot, picked.name, e)
            return None
        if result.bpm is None:
            self.logger.warning("%s: no tempo detected for %r", self.slot, picked.name)
        return result

    async def adjust_bpm(self, bpm: float | str | None = None) -> float | None:
        """
        Set the slot's tempo override and return the new playback rate.
        Empty input falls back to the native tempo. Returns None without
        writing while the native tempo is unknown (tempo controls are
        disabled), for input that is not a number, or when the slot was
        emptied in the meantime.
        """
        slot = await self.current()
        if slot is None or not slot.bpm:
            return None

        if isinstance(bpm, str):
            bpm = bpm.strip()
        try:
            adjusted = normalize_adjusted_bpm(bpm or slot.bpm)
        except ValueError as e:
            self.logger.debug("%s: ignoring tempo input: %s", self.slot, e)
            return None

        try:
            state = await self.store.update_slot(self.slot, adjusted_bpm=adjusted)
        except SlotUnavailable:
            self.logger.debug("%s: slot emptied before the tempo change landed", self.slot)
            return None
        if state is None:
            return None

        self.playback_rate = compute_playback_rate(adjusted, slot.bpm)
        return self.playback_rate

    async def reset_bpm(self) -> float | None:
        slot = await self.current()
        if slot is None or not slot.bpm:
            return None
        return await self.adjust_bpm(slot.bpm)

    async def eject(self) -> None:
        """Return the slot to EMPTY."""
        await self.store.clear_slot(self.slot)
        self.playback_rate = 1.0
