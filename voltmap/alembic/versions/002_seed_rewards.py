"""seed_rewards

Revision ID: 002_seed_rewards
Revises: 001_initial_schema
Create Date: 2026-10-02 09:00:00.000000 UTC

Seeds the starter rewards catalog. There is no HTTP endpoint for creating
rewards; the catalog is maintained through migrations.
"""
from datetime import datetime, timezone
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "002_seed_rewards"
down_revision: Union[str, None] = "001_initial_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_SEED_NAMES = ("10% off next charge", "Free 10 kWh", "25% off next charge", "Free fast charge")


def upgrade() -> None:
    rewards = sa.table(
        "rewards",
        sa.column("name", sa.String),
        sa.column("description", sa.Text),
        sa.column("points_required", sa.Integer),
        sa.column("type", sa.String),
        sa.column("value", sa.Float),
        sa.column("created_at", sa.DateTime(timezone=True)),
    )
    now = datetime.now(timezone.utc)
    op.bulk_insert(
        rewards,
        [
            {"name": _SEED_NAMES[0], "description": "10% discount on your next paid charging session.",
             "points_required": 100, "type": "discount", "value": 10.0, "created_at": now},
            {"name": _SEED_NAMES[1], "description": "10 kWh of free charging at any partner station.",
             "points_required": 250, "type": "free_charge", "value": 10.0, "created_at": now},
            {"name": _SEED_NAMES[2], "description": "25% discount on your next paid charging session.",
             "points_required": 400, "type": "discount", "value": 25.0, "created_at": now},
            {"name": _SEED_NAMES[3], "description": "One free DC fast-charging session up to 30 kWh.",
             "points_required": 750, "type": "free_charge", "value": 30.0, "created_at": now},
        ],
    )


def downgrade() -> None:
    rewards = sa.table("rewards", sa.column("name", sa.String))
    op.execute(rewards.delete().where(rewards.c.name.in_(_SEED_NAMES)))
