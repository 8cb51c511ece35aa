"""task_reviews_and_replies

Revision ID: b8810dd52471
Revises: 3f2c1b9c8e12
Create Date: 2026-09-21 10:42:17.204113

"""

from typing import Sequence, Union

import sqlalchemy as sa
import sqlmodel
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "b8810dd52471"
down_revision: Union[str, Sequence[str], None] = "3f2c1b9c8e12"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "reviews",
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("task_id", sa.Uuid(), nullable=False),
        sa.Column("reviewer_id", sa.Uuid(), nullable=False),
        sa.Column("reviewer_type", sqlmodel.AutoString(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("feedback", sqlmodel.AutoString(), nullable=True),
        sa.Column("reply", sqlmodel.AutoString(), nullable=True),
        sa.Column("replied_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["reviewer_id"], ["users.id"]),
        sa.UniqueConstraint("task_id", "reviewer_id", name="uq_reviews_task_id_reviewer_id"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
        sa.CheckConstraint(
            "(reply IS NULL) = (replied_at IS NULL)",
            name="ck_reviews_reply_pair",
        ),
    )
    op.create_index("ix_reviews_task_id", "reviews", ["task_id"], unique=False)
    op.create_index("ix_reviews_reviewer_id", "reviews", ["reviewer_id"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_reviews_reviewer_id", table_name="reviews")
    op.drop_index("ix_reviews_task_id", table_name="reviews")
    op.drop_table("reviews")
