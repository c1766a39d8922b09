"""
models/promotion.py — SQLAlchemy ORM model for time-boxed station promotions.

Table: promotions
A promotion is "active" while start_date <= now <= end_date.
"""
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from voltmap.database import Base
from voltmap.models.station import StationORM


class PromotionORM(Base):
    __tablename__ = "promotions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    station_id: Mapped[int] = mapped_column(ForeignKey("stations.id"), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    points_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Loaded explicitly (selectinload) by the active-promotions query only
    station: Mapped[StationORM] = relationship()
