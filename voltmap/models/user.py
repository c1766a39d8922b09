"""
models/user.py — SQLAlchemy ORM model for application users.

Table: users
Running totals (total_points, total_charges, total_kwh) are derived aggregates.
store.py only ever changes them with SQL-side increments inside the same
transaction as the charging session / reward claim that caused the change.
"""
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from voltmap.database import Base


class UserORM(Base):
    """
    ORM model for a registered user.

    password_hash: Argon2id PHC string — never logged, never serialized.
    total_points:  spendable balance (earned by charging, spent on rewards).
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    total_points: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Spendable points balance",
    )
    total_charges: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Number of completed charging sessions",
    )
    total_kwh: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=0.0,
        comment="kWh delivered across completed charging sessions",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
