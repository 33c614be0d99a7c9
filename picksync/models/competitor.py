from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from picksync.database import Base
from picksync.utils.dates import utcnow


class Competitor(Base):
    """A team or an individual. Rows are created and updated by sync, never deleted."""

    __tablename__ = "competitors"
    __table_args__ = (
        UniqueConstraint("external_id", "external_source", name="uq_competitors_external"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sport_id: Mapped[int] = mapped_column(Integer, ForeignKey("sports.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)  # display name
    code: Mapped[str] = mapped_column(String(20), nullable=False)  # abbreviation

    # Teams
    location: Mapped[str | None] = mapped_column(String(100))
    nickname: Mapped[str | None] = mapped_column(String(100))
    # Individuals
    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))

    logo_url: Mapped[str | None] = mapped_column(Text)
    color: Mapped[str | None] = mapped_column(String(10))  # hex without '#': "0b162a"
    alternate_color: Mapped[str | None] = mapped_column(String(10))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    external_id: Mapped[str] = mapped_column(String(50), nullable=False)
    external_source: Mapped[str] = mapped_column(String(20), nullable=False)

    # Owned by the league subsystem, never written by sync
    in_active_league: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    notes: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )
