from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from mixpoint.models.base import Base, JSONDocument

class Mix(Base):
    __tablename__ = "mixes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    track_ids: Mapped[list] = mapped_column(JSONDocument, nullable=False)     # [track.id, ...] in play order
    mix_points: Mapped[list] = mapped_column(JSONDocument, nullable=False)    # [{times: [...], effects: {...}}, ...]


class MixSet(Base):
    __tablename__ = "sets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    mix_ids: Mapped[list] = mapped_column(JSONDocument, nullable=False)
