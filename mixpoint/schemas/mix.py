from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Doc(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class MixPoint(_Doc):
    times: List[float]                                  # one timestamp per track, seconds
    effects: dict[str, Any] = Field(default_factory=dict)


class MixIn(_Doc):
    track_ids: List[int] = Field(..., min_length=1)
    mix_points: List[MixPoint] = Field(default_factory=list)


class MixOut(_Doc):
    id: int
    track_ids: List[int]
    mix_points: List[MixPoint]


class SetIn(_Doc):
    mix_ids: List[int]


class SetOut(_Doc):
    id: int
    mix_ids: List[int]
