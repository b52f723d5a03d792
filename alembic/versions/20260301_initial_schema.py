"""initial schema: users, pets, action logs, monitored users, scheduler locks

Revision ID: 20260301_initial
Revises:
Create Date: 2026-03-01 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20260301_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(*, updatable: bool = True) -> list[sa.Column]:
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)]
    if updatable:
        columns.append(sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False))
    return columns


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("phone", sa.String(length=15), nullable=False),
        sa.Column("city", sa.String(length=120), nullable=False),
        sa.Column("age", sa.Integer, nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.Enum("Regular", "Admin", name="userrole"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_city", "users", ["city"])

    op.create_table(
        "pets",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("species", sa.Enum("Dog", "Cat", name="petspecies"), nullable=False),
        sa.Column("age", sa.Integer, nullable=False),
        sa.Column("status", sa.Enum("Available", "Adopted", name="petstatus"), nullable=False),
        sa.Column("image", sa.String(length=500), nullable=False),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("age >= 1 AND age <= 30", name="ck_pets_age_range"),
    )
    op.create_index("ix_pets_status", "pets", ["status"])
    op.create_index("ix_pets_user_id", "pets", ["user_id"])

    op.create_table(
        "action_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, nullable=False),
        sa.Column("action", sa.String(length=255), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(updatable=False),
    )
    op.create_index("ix_action_logs_timestamp", "action_logs", ["timestamp"])
    op.create_index("ix_action_logs_user_id", "action_logs", ["user_id"])

    op.create_table(
        "monitored_users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, nullable=False),
        sa.Column("reason", sa.String(length=255), nullable=False),
        *_timestamps(updatable=False),
        sa.UniqueConstraint("user_id", name="uq_monitored_users_user_id"),
    )

    op.create_table(
        "scheduler_locks",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=64), nullable=False, unique=True),
        sa.Column("owner", sa.String(length=128), nullable=False),
        sa.Column("acquired_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("scheduler_locks")
    op.drop_table("monitored_users")
    op.drop_index("ix_action_logs_user_id", table_name="action_logs")
    op.drop_index("ix_action_logs_timestamp", table_name="action_logs")
    op.drop_table("action_logs")
    op.drop_index("ix_pets_user_id", table_name="pets")
    op.drop_index("ix_pets_status", table_name="pets")
    op.drop_table("pets")
    op.drop_index("ix_users_city", table_name="users")
    op.drop_table("users")
