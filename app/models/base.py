"""
Base configuration and mixins for database models.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Uuid
from sqlalchemy.orm import declarative_base


def utcnow() -> datetime:
    return datetime.now(UTC)


Base = declarative_base()


class UUIDMixin:
    """
    Mixin class that adds a UUID primary key to models.

    The key is generated client-side with uuid4() so new objects have an id
    before they are flushed.
    """

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
        comment="Primary key using UUID4 format",
    )


class CreatedAtMixin:
    """Adds a created_at column set once on insert."""

    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="Timestamp when the record was created",
    )


__all__ = ["Base", "UUIDMixin", "CreatedAtMixin", "utcnow"]
