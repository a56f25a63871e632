"""Declarative base and column mixins shared by the ORM models.

Example:
    >>> from pickem_engine.data.schema import Base, TimestampMixin, WeekMixin
    >>> class Note(WeekMixin, TimestampMixin, Base):
    ...     __tablename__ = "notes"
    ...     id: Mapped[int] = mapped_column(primary_key=True)
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import MetaData, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from pickem_engine.types import SeasonType, WeekKey

# Check and unique constraints are named explicitly on each model
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base for the games, picks and awards tables."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class TimestampMixin:
    """created_at / updated_at columns maintained by the ORM."""

    created_at: Mapped[datetime] = mapped_column(default=datetime.now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=datetime.now, onupdate=datetime.now, nullable=False
    )


class WeekMixin:
    """Columns identifying the scoring week a row belongs to."""

    week: Mapped[int] = mapped_column(nullable=False)
    season: Mapped[int] = mapped_column(nullable=False)
    season_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SeasonType.REGULAR.value
    )

    @property
    def week_key(self) -> WeekKey:
        return WeekKey(self.week, self.season, SeasonType(self.season_type))
