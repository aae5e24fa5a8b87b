"""
User model for authentication and city ownership.

Architecture:
    User → City

Users are created on registration and never modified afterwards. The
bcrypt hash is the only credential stored; it is never serialized outward.
"""

from sqlalchemy import Column, Index, String
from sqlalchemy.orm import relationship

from app.models.base import Base, CreatedAtMixin, UUIDMixin


class User(Base, UUIDMixin, CreatedAtMixin):
    """
    Registered account that owns a personal list of cities.
    """

    __tablename__ = "users"
    __table_args__ = (Index("ix_users_email", "email", unique=True),)

    name = Column(
        String(100),
        nullable=False,
        comment="Display name chosen at registration",
    )

    email = Column(
        String(255),
        nullable=False,
        comment="Unique, lower-cased email used for login",
    )

    hashed_password = Column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password",
    )

    cities = relationship(
        "City",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
        doc="Cities added by this user",
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
