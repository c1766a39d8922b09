"""
models/charging_session.py — SQLAlchemy ORM model for charging sessions.

Table: charging_sessions

Lifecycle:
  in_progress → completed   (end: end_time, kwh_charged, points_earned, total_price set)
  in_progress → cancelled   (cancel: end_time set, nothing charged, no points)

Rows are never deleted. Status transitions are compare-and-swap UPDATEs
(WHERE status = 'in_progress') so a session can only leave in_progress once.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from voltmap.database import Base


class ChargingSessionORM(Base):
    __tablename__ = "charging_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    station_id: Mapped[int] = mapped_column(ForeignKey("stations.id"), nullable=False, index=True)
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    kwh_charged: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    points_earned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="in_progress",
        index=True,
        comment="'in_progress', 'completed' or 'cancelled'",
    )
