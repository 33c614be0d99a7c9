"""
Mapped record shapes produced from ESPN payloads.

These are plain values: the mapper builds them in one constructor call and the
reconciler turns them into ORM rows. Nothing here references database ids.
"""
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class CompetitorRecord:
    external_id: str
    name: str
    code: str
    location: str | None = None
    nickname: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    logo_url: str | None = None
    color: str | None = None
    alternate_color: str | None = None
    is_active: bool = True


@dataclass(frozen=True)
class ParticipantRecord:
    competitor_external_id: str
    is_home: bool
    score: int | None = None
    is_winner: bool | None = None
    position: int | None = None
    # Used only to create a placeholder competitor when the team is unknown locally
    competitor_name: str | None = None
    competitor_code: str | None = None


@dataclass(frozen=True)
class EventRecord:
    external_id: str
    name: str
    event_date: datetime
    season_year: int
    status: str
    is_completed: bool
    participants: tuple[ParticipantRecord, ...]
    event_type: str | None = None
    week: int | None = None
    venue: str | None = None

    @property
    def home(self) -> ParticipantRecord | None:
        return next((p for p in self.participants if p.is_home), None)

    @property
    def away(self) -> ParticipantRecord | None:
        return next((p for p in self.participants if not p.is_home), None)


@dataclass
class MappingReport:
    """Collects per-record warnings while mapping one payload."""

    skipped: int = 0
    warnings: list[str] = field(default_factory=list)

    def skip(self, message: str) -> None:
        self.skipped += 1
        self.warnings.append(message)
