"""
models/favorite.py — SQLAlchemy ORM model for user/station bookmarks.

Table: favorites
The composite primary key makes a duplicate (user, station) pair impossible
at the database level; store.add_favorite checks first to return a clean 400.
"""
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from voltmap.database import Base


class FavoriteORM(Base):
    __tablename__ = "favorites"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), primary_key=True)
    station_id: Mapped[int] = mapped_column(ForeignKey("stations.id"), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
