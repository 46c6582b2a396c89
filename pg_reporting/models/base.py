"""
Base model configuration for SQLAlchemy ORM.

Provides the abstract timestamped base with a UUID string primary key.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from pg_reporting.db.base import Base
from pg_reporting.utils.datetime_utils import local_now


def _now() -> datetime:
    return local_now()


class TimestampModel(Base):
    """
    Abstract base model with id and timestamp tracking.
    """

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
        comment="Primary key (UUID)",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=_now,
        index=True,
        comment="Record creation timestamp (reporting timezone)",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=_now,
        onupdate=_now,
        comment="Record last update timestamp (reporting timezone)",
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"
