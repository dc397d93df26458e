from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class PickedFile:
    """
    name/size: the fingerprint used to recognise an already-analyzed file
    file_handle: opaque token the picker can reopen without prompting
    dir_handle: opaque token for the parent directory, if the picker granted one
    """
    name: str
    size: int
    mime_type: str | None = None
    file_handle: str | None = None
    dir_handle: str | None = None
    file: Any | None = None          # materialized file object, if any


@dataclass(frozen=True)
class AnalysisResult:
    duration: float
    sample_rate: int
    bpm: float | None = None


class FilePicker(Protocol):
    async def pick(self) -> PickedFile:
        """Raise CancelledOperation if the user aborts; OSError on I/O failure."""
        ...


class TrackAnalyzer(Protocol):
    async def analyze(self, picked: PickedFile) -> AnalysisResult:
        """Raise AnalysisUnavailable when no usable tempo can be produced."""
        ...
