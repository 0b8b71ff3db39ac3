"""create job table

Revision ID: 3f1c9a2b7d4e
Revises:
Create Date: 2026-10-19 10:12:41.118204
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "3f1c9a2b7d4e"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "job",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("company_name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column(
            "job_type",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_job_title", "job", ["title"])
    op.create_index("ix_job_company_name", "job", ["company_name"])
    op.create_index("ix_job_user_id", "job", ["user_id"])
    op.create_index("ix_job_created_at", "job", ["created_at"])
    op.create_index("ix_job_created_id", "job", ["created_at", "id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_job_created_id", table_name="job")
    op.drop_index("ix_job_created_at", table_name="job")
    op.drop_index("ix_job_user_id", table_name="job")
    op.drop_index("ix_job_company_name", table_name="job")
    op.drop_index("ix_job_title", table_name="job")
    op.drop_table("job")
