"""Create employees and export_jobs tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

import sqlalchemy as sa
from alembic import op

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create employees and export_jobs tables."""
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("hire_date", sa.Date(), nullable=True),
        sa.Column("salary", sa.Float(), nullable=True),
        sa.Column("position", sa.String(100), nullable=True),
        sa.Column("department", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_employee_email", "employees", ["email"])
    op.create_index("ix_employee_department", "employees", ["department"])
    op.create_index("ix_employee_position", "employees", ["position"])
    op.create_index("ix_employee_salary", "employees", ["salary"])
    op.create_index("ix_employee_hire_date", "employees", ["hire_date"])
    op.create_index("ix_employee_name", "employees", ["first_name", "last_name"])

    op.create_table(
        "export_jobs",
        sa.Column("reference_id", sa.String(50), nullable=False),
        sa.Column("owner_id", sa.String(100), nullable=True),
        sa.Column("export_type", sa.String(20), nullable=False, server_default="csv"),
        sa.Column("parameters", sa.JSON(), nullable=False),
        sa.Column("fields", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("total_records", sa.Integer(), nullable=True),
        sa.Column("result", sa.LargeBinary(), nullable=True),
        sa.Column("file_size", sa.BigInteger(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("warning_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("reference_id"),
    )
    op.create_index("ix_export_jobs_owner_id", "export_jobs", ["owner_id"])
    op.create_index("ix_export_jobs_status", "export_jobs", ["status"])
    op.create_index("ix_export_jobs_created_at", "export_jobs", ["created_at"])


def downgrade() -> None:
    """Drop export_jobs and employees tables."""
    op.drop_table("export_jobs")
    op.drop_table("employees")
