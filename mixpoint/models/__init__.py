from mixpoint.models.base import Base
from mixpoint.models.track import Track
from mixpoint.models.mix import Mix, MixSet
from mixpoint.models.state import StateDocument, MIX_STATE, SET_STATE, STATE_KEYS

__all__ = [
    "Base",
    "Track",
    "Mix",
    "MixSet",
    "StateDocument",
    "MIX_STATE",
    "SET_STATE",
    "STATE_KEYS",
]
