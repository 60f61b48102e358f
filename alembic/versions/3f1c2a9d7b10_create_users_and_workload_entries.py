"""create users and workload_entries

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-18 09:12:40.118204

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # Enum values match the Python enum string values
    role_enum = sa.Enum("admin", "manager", "user", name="userrole")
    task_type_enum = sa.Enum(
        "development",
        "bug-fix",
        "review",
        "meeting",
        "documentation",
        "other",
        name="tasktype",
    )
    status_enum = sa.Enum("planned", "in-progress", "completed", "blocked", name="workstatus")
    priority_enum = sa.Enum("high", "medium", "low", name="priority")

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", role_enum, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_role"), "users", ["role"], unique=False)

    op.create_table(
        "workload_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("developer_id", sa.Integer(), nullable=False),
        sa.Column("project", sa.String(length=255), nullable=False),
        sa.Column("task_name", sa.String(length=255), nullable=False),
        sa.Column("task_type", task_type_enum, nullable=False),
        sa.Column("hours_spent", sa.Float(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("status", status_enum, nullable=False),
        sa.Column("priority", priority_enum, nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("blockers", sa.Text(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("dependencies", sa.JSON(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.CheckConstraint("hours_spent >= 0", name="ck_workload_entries_hours_non_negative"),
        sa.ForeignKeyConstraint(["developer_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_workload_entries_id"), "workload_entries", ["id"], unique=False)
    op.create_index(
        op.f("ix_workload_entries_developer_id"), "workload_entries", ["developer_id"], unique=False
    )
    op.create_index(
        op.f("ix_workload_entries_project"), "workload_entries", ["project"], unique=False
    )
    op.create_index(
        op.f("ix_workload_entries_task_type"), "workload_entries", ["task_type"], unique=False
    )
    op.create_index(op.f("ix_workload_entries_date"), "workload_entries", ["date"], unique=False)
    op.create_index(
        op.f("ix_workload_entries_status"), "workload_entries", ["status"], unique=False
    )
    op.create_index(
        "ix_workload_entries_developer_date",
        "workload_entries",
        ["developer_id", "date"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_workload_entries_developer_date", table_name="workload_entries")
    op.drop_index(op.f("ix_workload_entries_status"), table_name="workload_entries")
    op.drop_index(op.f("ix_workload_entries_date"), table_name="workload_entries")
    op.drop_index(op.f("ix_workload_entries_task_type"), table_name="workload_entries")
    op.drop_index(op.f("ix_workload_entries_project"), table_name="workload_entries")
    op.drop_index(op.f("ix_workload_entries_developer_id"), table_name="workload_entries")
    op.drop_index(op.f("ix_workload_entries_id"), table_name="workload_entries")
    op.drop_table("workload_entries")

    op.drop_index(op.f("ix_users_role"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_table("users")

    for enum_name in ("priority", "workstatus", "tasktype", "userrole"):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
