"""Tour package database model."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.database import Base, utcnow

if TYPE_CHECKING:
    from app.models.booking import Booking
    from app.models.favorite import Favorite
    from app.models.review import Review


class Package(Base):
    """Tour package listed in the catalog."""

    __tablename__ = "packages"
    __table_args__ = (CheckConstraint("price >= 0", name="ck_packages_price_non_negative"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Catalog
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    duration: Mapped[str] = mapped_column(String(100), nullable=False)  # e.g. "5 days / 4 nights"
    image_url: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    # Relationships
    # Bookings and reviews block deletion; never null out their package_id
    bookings: Mapped[list["Booking"]] = relationship(
        "Booking", back_populates="package", passive_deletes="all"
    )
    favorites: Mapped[list["Favorite"]] = relationship(
        "Favorite", back_populates="package", passive_deletes=True
    )
    reviews: Mapped[list["Review"]] = relationship(
        "Review", back_populates="package", passive_deletes="all"
    )
