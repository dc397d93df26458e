"""tracks, mixes, sets and session state

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from mixpoint.models.base import JSONDocument

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "tracks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("size", sa.BigInteger(), nullable=False),
        sa.Column("mime_type", sa.Text(), nullable=True),
        sa.Column("last_modified", sa.BigInteger(), nullable=True),
        sa.Column("duration", sa.Float(), nullable=True),
        sa.Column("bpm", sa.Float(), nullable=True),
        sa.Column("sample_rate", sa.Integer(), nullable=True),
        sa.Column("offset", sa.Float(), nullable=True),
        sa.Column("file_handle", sa.Text(), nullable=True),
        sa.Column("dir_handle", sa.Text(), nullable=True),
    )
    op.create_index("ix_tracks_name_size", "tracks", ["name", "size"])
    op.create_index("ix_tracks_name", "tracks", ["name"])
    op.create_index("ix_tracks_bpm", "tracks", ["bpm"])

    op.create_table(
        "mixes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("track_ids", JSONDocument, nullable=False),
        sa.Column("mix_points", JSONDocument, nullable=False),
    )
    op.create_table(
        "sets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("mix_ids", JSONDocument, nullable=False),
    )
    op.create_table(
        "state",
        sa.Column("key", sa.Text(), primary_key=True),
        sa.Column("document", JSONDocument, nullable=False),
    )


def downgrade() -> None:
    op.drop_table("state")
    op.drop_table("sets")
    op.drop_table("mixes")
    op.drop_index("ix_tracks_bpm", table_name="tracks")
    op.drop_index("ix_tracks_name", table_name="tracks")
    op.drop_index("ix_tracks_name_size", table_name="tracks")
    op.drop_table("tracks")
