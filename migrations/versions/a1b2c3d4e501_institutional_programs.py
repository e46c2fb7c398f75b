"""Institutional programs, documents, mentors and mentees.

Revision ID: a1b2c3d4e501
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa

revision = "a1b2c3d4e501"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # 1. institutional_programs (no FK deps)
    op.create_table(
        "institutional_programs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("program_name", sa.String(200), nullable=False),
        sa.Column("institution_id", sa.Integer()),
        sa.Column("description", sa.Text()),
        sa.Column("start_date", sa.Date()),
        sa.Column("end_date", sa.Date()),
        sa.Column("duration_in_days", sa.Integer()),
        sa.Column("program_image_url", sa.String(500)),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index(
        "ix_institutional_programs_institution_id", "institutional_programs", ["institution_id"]
    )

    # 2. documents (FK → institutional_programs, cascade)
    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "program_id", sa.Integer(),
            sa.ForeignKey("institutional_programs.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("path", sa.String(1024), nullable=False),
        sa.Column("content_type", sa.String(255)),
        sa.Column("size_bytes", sa.Integer()),
        sa.Column("position", sa.Integer()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_documents_program_id", "documents", ["program_id"])

    # 3. mentors / mentees (FK → institutional_programs, set null)
    for table in ("mentors", "mentees"):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("first_name", sa.String(100), nullable=False),
            sa.Column("last_name", sa.String(100), nullable=False),
            sa.Column("email", sa.String(200)),
            sa.Column(
                "institutional_program_id", sa.Integer(),
                sa.ForeignKey("institutional_programs.id", ondelete="SET NULL"),
            ),
            sa.Column("created_at", sa.DateTime(timezone=True)),
        )
        op.create_index(
            f"ix_{table}_institutional_program_id", table, ["institutional_program_id"]
        )


def downgrade():
    for table in ("mentees", "mentors"):
        op.drop_index(f"ix_{table}_institutional_program_id", table_name=table)
        op.drop_table(table)
    op.drop_index("ix_documents_program_id", table_name="documents")
    op.drop_table("documents")
    op.drop_index("ix_institutional_programs_institution_id", table_name="institutional_programs")
    op.drop_table("institutional_programs")
