"""initial_schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-01 12:00:00.000000 UTC

Creates every core table:
  - users               (accounts + running point/charge/kWh totals)
  - stations            (charging locations, owner FK → users)
  - station_connectors  (one row per station/connector type)
  - reviews, favorites, promotions
  - charging_sessions   (in_progress → completed | cancelled)
  - rewards, user_rewards
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- users table ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("password_hash", sa.String(length=256), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("total_points", sa.Integer(), nullable=False, server_default="0", comment="Spendable points balance"),
        sa.Column("total_charges", sa.Integer(), nullable=False, server_default="0", comment="Number of completed charging sessions"),
        sa.Column("total_kwh", sa.Float(), nullable=False, server_default="0", comment="kWh delivered across completed charging sessions"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )

    # --- stations table ---
    op.create_table(
        "stations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("address", sa.String(length=255), nullable=False),
        sa.Column("city", sa.String(length=128), nullable=False),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lng", sa.Float(), nullable=False),
        sa.Column("price_per_kwh", sa.Float(), nullable=True),
        sa.Column("is_free", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("power", sa.Integer(), nullable=False, comment="Rated power in kW"),
        sa.Column("opening_hours", sa.String(length=128), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="available", comment="'available', 'busy' or 'offline'"),
        sa.Column("has_wifi", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("has_free_parking", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("has_restaurant", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("has_waiting_area", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("owner_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_stations_status"), "stations", ["status"], unique=False)
    op.create_index(op.f("ix_stations_owner_id"), "stations", ["owner_id"], unique=False)

    # --- station_connectors table ---
    op.create_table(
        "station_connectors",
        sa.Column("station_id", sa.Integer(), nullable=False),
        sa.Column("connector_type", sa.String(length=32), nullable=False),
        sa.ForeignKeyConstraint(["station_id"], ["stations.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("station_id", "connector_type"),
    )

    # --- reviews table ---
    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("station_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False, comment="1-5 stars"),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["station_id"], ["stations.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_reviews_station_id"), "reviews", ["station_id"], unique=False)
    op.create_index(op.f("ix_reviews_user_id"), "reviews", ["user_id"], unique=False)

    # --- favorites table ---
    op.create_table(
        "favorites",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("station_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["station_id"], ["stations.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("user_id", "station_id"),
    )

    # --- promotions table ---
    op.create_table(
        "promotions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("station_id", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("points_value", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["station_id"], ["stations.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_promotions_station_id"), "promotions", ["station_id"], unique=False)

    # --- charging_sessions table ---
    op.create_table(
        "charging_sessions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("station_id", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("kwh_charged", sa.Float(), nullable=True),
        sa.Column("points_earned", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_price", sa.Float(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="in_progress", comment="'in_progress', 'completed' or 'cancelled'"),
        sa.ForeignKeyConstraint(["station_id"], ["stations.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_charging_sessions_user_id"), "charging_sessions", ["user_id"], unique=False)
    op.create_index(op.f("ix_charging_sessions_station_id"), "charging_sessions", ["station_id"], unique=False)
    op.create_index(op.f("ix_charging_sessions_status"), "charging_sessions", ["status"], unique=False)

    # --- rewards table ---
    op.create_table(
        "rewards",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("points_required", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("value", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- user_rewards table ---
    op.create_table(
        "user_rewards",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("reward_id", sa.Integer(), nullable=False),
        sa.Column("is_used", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["reward_id"], ["rewards.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_rewards_user_id"), "user_rewards", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_user_rewards_user_id"), table_name="user_rewards")
    op.drop_table("user_rewards")
    op.drop_table("rewards")
    op.drop_index(op.f("ix_charging_sessions_status"), table_name="charging_sessions")
    op.drop_index(op.f("ix_charging_sessions_station_id"), table_name="charging_sessions")
    op.drop_index(op.f("ix_charging_sessions_user_id"), table_name="charging_sessions")
    op.drop_table("charging_sessions")
    op.drop_index(op.f("ix_promotions_station_id"), table_name="promotions")
    op.drop_table("promotions")
    op.drop_table("favorites")
    op.drop_index(op.f("ix_reviews_user_id"), table_name="reviews")
    op.drop_index(op.f("ix_reviews_station_id"), table_name="reviews")
    op.drop_table("reviews")
    op.drop_table("station_connectors")
    op.drop_index(op.f("ix_stations_owner_id"), table_name="stations")
    op.drop_index(op.f("ix_stations_status"), table_name="stations")
    op.drop_table("stations")
    op.drop_table("users")
