from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TrackRecord(BaseModel):
    """One decoded audio file. `id` is assigned on first persistence."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int | None = None
    name: str
    size: int
    mime_type: str | None = None
    last_modified: int | None = None
    duration: float | None = None
    bpm: float | None = None
    sample_rate: int | None = None
    offset: float | None = None
    file_handle: str | None = None
    dir_handle: str | None = None

    @property
    def fingerprint(self) -> tuple[str, int]:
        return (self.name, self.size)
