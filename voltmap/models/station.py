"""
models/station.py — SQLAlchemy ORM models for charging stations.

Tables: stations, station_connectors
Connector types live in their own table (one row per station/connector pair)
so the "any of these connectors" filter is a plain EXISTS subquery on every
database backend.
"""
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from voltmap.database import Base


class StationORM(Base):
    """
    ORM model for a physical charging location.

    status: 'available' | 'busy' | 'offline' — mirrors StationStatus enum.
    price_per_kwh: NULL is treated as 0 when pricing a session.
    owner_id: the user who registered the station; only they may edit it.
    """
    __tablename__ = "stations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(128), nullable=False)
    lat: Mapped[float] = mapped_column(Float, nullable=False)
    lng: Mapped[float] = mapped_column(Float, nullable=False)
    price_per_kwh: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    is_free: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    power: Mapped[int] = mapped_column(Integer, nullable=False, comment="Rated power in kW")
    opening_hours: Mapped[str] = mapped_column(String(128), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default="available",
        index=True,
        comment="'available', 'busy' or 'offline'",
    )
    has_wifi: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_free_parking: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_restaurant: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_waiting_area: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    owner_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id"),
        nullable=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    connectors: Mapped[List["StationConnectorORM"]] = relationship(
        back_populates="station",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def connector_types(self) -> list[str]:
        return sorted(c.connector_type for c in self.connectors)


class StationConnectorORM(Base):
    """One connector type (e.g. 'CCS', 'Type 2', 'CHAdeMO') offered by a station."""
    __tablename__ = "station_connectors"

    station_id: Mapped[int] = mapped_column(
        ForeignKey("stations.id", ondelete="CASCADE"),
        primary_key=True,
    )
    connector_type: Mapped[str] = mapped_column(String(32), primary_key=True)

    station: Mapped[StationORM] = relationship(back_populates="connectors")
