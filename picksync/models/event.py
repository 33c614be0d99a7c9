from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from picksync.database import Base
from picksync.utils.dates import utcnow


class Event(Base):
    """A scheduled game within a season."""

    __tablename__ = "events"
    __table_args__ = (
        UniqueConstraint("external_id", "external_source", name="uq_events_external"),
        Index("ix_events_season_date", "season_id", "event_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    season_id: Mapped[int] = mapped_column(Integer, ForeignKey("seasons.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    event_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)  # naive UTC
    status: Mapped[str] = mapped_column(String(30), nullable=False)  # ESPN state: pre / in / post
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    venue: Mapped[str | None] = mapped_column(String(255))
    location: Mapped[str | None] = mapped_column(String(255))
    week: Mapped[int | None] = mapped_column(Integer)
    round: Mapped[int | None] = mapped_column(Integer)
    event_type: Mapped[str | None] = mapped_column(String(30))  # season type slug: regular, post

    external_id: Mapped[str] = mapped_column(String(50), nullable=False)
    external_source: Mapped[str] = mapped_column(String(20), nullable=False)

    # Owned by other subsystems, never written by sync
    notes: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )


class EventParticipant(Base):
    """Join row between an event and a competitor, carrying the result."""

    __tablename__ = "event_participants"
    __table_args__ = (
        UniqueConstraint("event_id", "competitor_id", name="uq_event_participants_event_competitor"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    competitor_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("competitors.id"), nullable=False, index=True
    )
    is_home: Mapped[bool | None] = mapped_column(Boolean)
    score: Mapped[int | None] = mapped_column(Integer)  # None until played
    is_winner: Mapped[bool | None] = mapped_column(Boolean)
    position: Mapped[int | None] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )
