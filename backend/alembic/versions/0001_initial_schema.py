"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

USER_ROLE = sa.Enum("user", "admin", name="user_role")
PROJECT_STATUS = sa.Enum("active", "archived", "completed", name="project_status")
BUG_STATUS = sa.Enum("open", "in-progress", "resolved", "closed", name="bug_status")
BUG_PRIORITY = sa.Enum("low", "medium", "high", "critical", name="bug_priority")
BUG_SEVERITY = sa.Enum("minor", "major", "blocker", name="bug_severity")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("first_name", sa.String(length=50), nullable=False),
        sa.Column("last_name", sa.String(length=50), nullable=False),
        sa.Column("username", sa.String(length=30), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", USER_ROLE, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("avatar", sa.String(length=2048), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_user_username", "user", ["username"], unique=True)
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "project",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("key", sa.String(length=10), nullable=False),
        sa.Column("creator_id", sa.Uuid(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("bug_types", sa.JSON(), nullable=False),
        sa.Column("status", PROJECT_STATUS, nullable=False),
        sa.Column("bug_sequence", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_project_name", "project", ["name"])
    op.create_index("ix_project_key", "project", ["key"], unique=True)

    op.create_table(
        "project_member",
        sa.Column(
            "project_id",
            sa.Uuid(),
            sa.ForeignKey("project.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )

    op.create_table(
        "bug",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "project_id",
            sa.Uuid(),
            sa.ForeignKey("project.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("project_key", sa.String(length=10), nullable=True),
        sa.Column("status", BUG_STATUS, nullable=False),
        sa.Column("priority", BUG_PRIORITY, nullable=False),
        sa.Column("severity", BUG_SEVERITY, nullable=False),
        sa.Column("type", sa.String(length=50), nullable=True),
        sa.Column("steps_to_reproduce", sa.JSON(), nullable=False),
        sa.Column("expected_behavior", sa.Text(), nullable=True),
        sa.Column("actual_behavior", sa.Text(), nullable=True),
        sa.Column("reporter", sa.String(length=100), nullable=False),
        sa.Column(
            "reported_by_id",
            sa.Uuid(),
            sa.ForeignKey("user.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("assignee", sa.String(length=100), nullable=True),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column("estimated_hours", sa.Float(), nullable=True),
        sa.Column("actual_hours", sa.Float(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("environment", sa.JSON(), nullable=True),
        sa.Column("bug_number", sa.String(length=32), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_bug_project_id", "bug", ["project_id"])
    op.create_index("ix_bug_bug_number", "bug", ["bug_number"], unique=True)
    op.create_index(
        "ix_bug_status_priority_created", "bug", ["status", "priority", "created_at"]
    )


def downgrade() -> None:
    op.drop_table("bug")
    op.drop_table("project_member")
    op.drop_table("project")
    op.drop_table("user")
    bind = op.get_bind()
    for enum in (BUG_SEVERITY, BUG_PRIORITY, BUG_STATUS, PROJECT_STATUS, USER_ROLE):
        enum.drop(bind, checkfirst=True)
