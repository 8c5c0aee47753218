"""Initial journal schema: users, submissions, DOI sequence, archive, audit, invites.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

"""

import uuid
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CATEGORIES = [
    ("Information and Communications Technology", "ict"),
    ("AI and Robotics", "ai-robotics"),
    ("Web and Mobile", "web-mobile"),
    ("Software Development", "software-dev"),
    ("Computer Networking", "networking"),
    ("Information Systems", "info-systems"),
    ("Other related technological studies", "other-tech"),
    ("Computer Science and Engineering", "cse"),
    ("Electronics & Communications Engineering", "ece"),
    ("Mathematics", "math"),
    ("Industrial Technology", "ind-tech"),
]


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create all tables and seed categories."""

    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("role", sa.String(20), server_default="AUTHOR", nullable=False),
        sa.Column("is_active", sa.Boolean, server_default="true", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    categories = op.create_table(
        "categories",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("slug", sa.String(255), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_table(
        "authors",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("affiliation", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_authors_email", "authors", ["email"], unique=True)

    op.create_table(
        "papers",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("abstract", sa.Text, nullable=False),
        sa.Column("keywords", postgresql.JSONB, nullable=False),
        sa.Column(
            "category_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("categories.id"),
            nullable=True,
        ),
        sa.Column(
            "submitter_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id"),
            nullable=True,
        ),
        sa.Column("status", sa.String(20), server_default="SUBMITTED", nullable=False),
        sa.Column("doi", sa.String(64), nullable=True),
        sa.Column("published_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("publication_step", sa.Integer, server_default="0", nullable=False),
        sa.Column("publication_note", sa.Text, nullable=True),
        sa.Column("raw_file_url", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("doi", name="uq_papers_doi"),
    )
    op.create_index("ix_papers_status", "papers", ["status"])
    op.create_index("ix_papers_category_id", "papers", ["category_id"])
    op.create_index("ix_papers_submitter_id", "papers", ["submitter_id"])

    op.create_table(
        "paper_authors",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "paper_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("papers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "author_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("authors.id"),
            nullable=False,
        ),
        sa.Column("order", sa.Integer, nullable=False),
        sa.Column("is_corresponding_author", sa.Boolean, server_default="false", nullable=False),
        sa.UniqueConstraint("paper_id", "author_id", name="uq_paper_authors_pair"),
    )
    op.create_index("ix_paper_authors_paper_id", "paper_authors", ["paper_id"])
    op.create_index("ix_paper_authors_author_id", "paper_authors", ["author_id"])

    op.create_table(
        "doi_sequences",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("year", sa.Integer, nullable=False, unique=True),
        sa.Column("count", sa.Integer, server_default="0", nullable=False),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_table(
        "conferences",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("full_name", sa.Text, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("start_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("end_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("venue", sa.String(255), nullable=True),
        sa.Column("theme", sa.Text, nullable=True),
        sa.Column("is_published", sa.Boolean, server_default="true", nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "volumes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("volume_number", sa.Integer, nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("cover_image_url", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_volumes_year", "volumes", ["year"])

    op.create_table(
        "issues",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "volume_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("volumes.id"),
            nullable=False,
        ),
        sa.Column(
            "conference_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("conferences.id"),
            nullable=True,
        ),
        sa.Column("issue_number", sa.Integer, nullable=False),
        sa.Column("month", sa.String(20), nullable=True),
        sa.Column("published_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("issn", sa.String(9), nullable=True),
        sa.Column("theme", sa.Text, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("cover_image_url", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_issues_volume_id", "issues", ["volume_id"])
    op.create_index("ix_issues_conference_id", "issues", ["conference_id"])

    op.create_table(
        "archived_papers",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "issue_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("issues.id"),
            nullable=False,
        ),
        sa.Column(
            "category_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("categories.id"),
            nullable=True,
        ),
        sa.Column(
            "uploader_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id"),
            nullable=True,
        ),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("abstract", sa.Text, nullable=False),
        sa.Column("keywords", postgresql.JSONB, nullable=False),
        sa.Column("doi", sa.String(64), nullable=True),
        sa.Column("pdf_url", sa.Text, nullable=False),
        sa.Column("docx_url", sa.Text, nullable=True),
        sa.Column("page_start", sa.Integer, nullable=True),
        sa.Column("page_end", sa.Integer, nullable=True),
        sa.Column("published_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("submitted_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("accepted_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "uploaded_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index("ix_archived_papers_issue_id", "archived_papers", ["issue_id"])
    op.create_index("ix_archived_papers_category_id", "archived_papers", ["category_id"])

    op.create_table(
        "archived_paper_authors",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "paper_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("archived_papers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("affiliation", sa.String(255), nullable=True),
        sa.Column("order", sa.Integer, nullable=False),
        sa.Column("is_corresponding", sa.Boolean, server_default="false", nullable=False),
    )
    op.create_index(
        "ix_archived_paper_authors_paper_id", "archived_paper_authors", ["paper_id"]
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("actor_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("actor_email", sa.String(255), nullable=True),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("target_id", sa.String(64), nullable=True),
        sa.Column("target_type", sa.String(64), nullable=True),
        sa.Column("metadata", postgresql.JSONB, nullable=True),
        sa.Column("ip_address", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_audit_logs_actor_id", "audit_logs", ["actor_id"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index("ix_audit_logs_target_id", "audit_logs", ["target_id"])
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"])

    op.create_table(
        "invite_tokens",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("token", sa.String(128), nullable=False),
        sa.Column("status", sa.String(20), server_default="PENDING", nullable=False),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column(
            "invited_by_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )
    op.create_index("ix_invite_tokens_email", "invite_tokens", ["email"])
    op.create_index("ix_invite_tokens_token", "invite_tokens", ["token"], unique=True)
    op.create_index("ix_invite_tokens_status", "invite_tokens", ["status"])

    op.bulk_insert(
        categories,
        [{"id": uuid.uuid4(), "name": name, "slug": slug} for name, slug in CATEGORIES],
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""

    op.drop_table("invite_tokens")
    op.drop_table("audit_logs")
    op.drop_table("archived_paper_authors")
    op.drop_table("archived_papers")
    op.drop_table("issues")
    op.drop_table("volumes")
    op.drop_table("conferences")
    op.drop_table("doi_sequences")
    op.drop_table("paper_authors")
    op.drop_table("papers")
    op.drop_table("authors")
    op.drop_table("categories")
    op.drop_table("users")
