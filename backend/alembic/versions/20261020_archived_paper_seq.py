"""Add insertion sequence to archived_papers for stable in-issue ordering.

created_at is the transaction start time, so papers added by one batch
share it. seq is assigned per row.

Revision ID: 003_archived_paper_seq
Revises: 002_unique_pending_invite
Create Date: 2026-10-20

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "003_archived_paper_seq"
down_revision: Union[str, None] = "002_unique_pending_invite"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "archived_papers",
        sa.Column("seq", sa.BigInteger, sa.Identity(always=False), nullable=False),
    )
    op.create_index(
        "ix_archived_papers_issue_page_seq",
        "archived_papers",
        ["issue_id", "page_start", "seq"],
    )


def downgrade() -> None:
    op.drop_index("ix_archived_papers_issue_page_seq", table_name="archived_papers")
    op.drop_column("archived_papers", "seq")
