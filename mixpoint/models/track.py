from sqlalchemy import BigInteger, Float, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from mixpoint.models.base import Base

class Track(Base):
    __tablename__ = "tracks"
    __table_args__ = (
        # fingerprint lookup; if put_track stops deduping on (name, size) drop this
        Index("ix_tracks_name_size", "name", "size"),
        Index("ix_tracks_name", "name"),
        Index("ix_tracks_bpm", "bpm"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    mime_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_modified: Mapped[int | None] = mapped_column(BigInteger, nullable=True)   # epoch ms

    duration: Mapped[float | None] = mapped_column(Float, nullable=True)           # seconds
    bpm: Mapped[float | None] = mapped_column(Float, nullable=True)                # unset until analysis completes
    sample_rate: Mapped[int | None] = mapped_column(Integer, nullable=True)
    offset: Mapped[float | None] = mapped_column(Float, nullable=True)             # user-set start offset, seconds

    # opaque handles used to reopen the file without prompting again
    file_handle: Mapped[str | None] = mapped_column(Text, nullable=True)
    dir_handle: Mapped[str | None] = mapped_column(Text, nullable=True)
