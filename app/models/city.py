"""
City model: one entry in a user's personal city list.

A user cannot add the same city name twice; the pair (owner_id, city_name)
is enforced by a unique constraint so duplicates fail at insert time.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.models.base import Base, UUIDMixin, utcnow


class City(Base, UUIDMixin):
    __tablename__ = "cities"
    __table_args__ = (
        UniqueConstraint("owner_id", "city_name", name="uq_cities_owner_city_name"),
        Index("ix_cities_owner_added_at", "owner_id", "added_at"),
    )

    owner_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="User who owns this entry",
    )

    city_name = Column(String(120), nullable=False, comment="City name as entered")

    country = Column(String(120), nullable=True, comment="Optional country name")

    favorite = Column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the owner marked this city as favorite",
    )

    added_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="Timestamp when the city was added",
    )

    owner = relationship("User", back_populates="cities")

    def __repr__(self):
        return f"<City(id={self.id}, city_name='{self.city_name}', owner_id={self.owner_id})>"
