from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from mixpoint.models.base import Base, JSONDocument

MIX_STATE = "mixState"
SET_STATE = "setState"
STATE_KEYS = (MIX_STATE, SET_STATE)


class StateDocument(Base):
    __tablename__ = "state"

    key: Mapped[str] = mapped_column(Text, primary_key=True)
    document: Mapped[dict] = mapped_column(JSONDocument, nullable=False)
