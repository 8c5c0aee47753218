"""Allow at most one PENDING invite per email.

Revision ID: 002_unique_pending_invite
Revises: 001_initial_schema
Create Date: 2026-10-20

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002_unique_pending_invite"
down_revision: Union[str, None] = "001_initial_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1. Expire all but the newest PENDING invite per email
    op.execute(
        "UPDATE invite_tokens SET status = 'EXPIRED', updated_at = now() "
        "WHERE status = 'PENDING' AND id NOT IN ("
        "  SELECT DISTINCT ON (email) id FROM invite_tokens "
        "  WHERE status = 'PENDING' ORDER BY email, created_at DESC"
        ")"
    )

    # 2. Partial unique index backs the one-pending-invite rule
    op.create_index(
        "uq_invite_tokens_pending_email",
        "invite_tokens",
        ["email"],
        unique=True,
        postgresql_where=sa.text("status = 'PENDING'"),
    )


def downgrade() -> None:
    op.drop_index("uq_invite_tokens_pending_email", table_name="invite_tokens")
