"""Create users, user_streaks and activity_records

Revision ID: v1
Revises: 
Create Date: 2026-10-18 00:00:00
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'v1'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=False, server_default="inactive"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "user_streaks",
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("timezone", sa.String(), nullable=False, server_default="UTC"),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default='0'),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default='0'),
        sa.Column("total_active_days", sa.Integer(), nullable=False, server_default='0'),
        sa.Column("last_active_local_date", sa.Date(), nullable=True),
        sa.Column("last_active_at_utc", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default='1'),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "activity_records",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("activity_type", sa.String(50), nullable=False),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("activity_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_activity_records_user_date", "activity_records", ["user_id", "activity_date"])
    op.create_index("ix_activity_records_user_occurred", "activity_records", ["user_id", "occurred_at"])


def downgrade() -> None:
    op.drop_index("ix_activity_records_user_occurred", table_name="activity_records")
    op.drop_index("ix_activity_records_user_date", table_name="activity_records")
    op.drop_table("activity_records")
    op.drop_table("user_streaks")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
