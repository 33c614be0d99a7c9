"""
Reconciliation of mapped records into the database.

Rows are matched on (external_id, external_source) and merged field by field:
only provider-owned columns are written, and an incoming None never erases a
stored optional value. Each batch is one unit of work: a single commit at the
end, and a rollback on any failure.
"""
import logging
from dataclasses import dataclass
from typing import Any, Iterable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from picksync.models import Competitor, Event, EventParticipant
from picksync.repositories import CompetitorRepository, EventRepository
from picksync.schemas.records import CompetitorRecord, EventRecord, ParticipantRecord

logger = logging.getLogger(__name__)

R = TypeVar("R", CompetitorRecord, EventRecord)

# Provider-owned columns; everything else on the row belongs to other subsystems
COMPETITOR_REQUIRED_FIELDS = ("name", "is_active")
COMPETITOR_OPTIONAL_FIELDS = (
    "code",
    "location",
    "nickname",
    "first_name",
    "last_name",
    "logo_url",
    "color",
    "alternate_color",
)
EVENT_REQUIRED_FIELDS = ("season_id", "name", "event_date", "status", "is_completed")
EVENT_OPTIONAL_FIELDS = ("venue", "week", "event_type")
PARTICIPANT_REQUIRED_FIELDS = ("is_home",)
PARTICIPANT_OPTIONAL_FIELDS = ("score", "is_winner", "position")


@dataclass
class ReconcileStats:
    inserted: int = 0
    updated: int = 0
    unchanged: int = 0

    @property
    def total(self) -> int:
        return self.inserted + self.updated + self.unchanged


def merge_fields(
    row: Any,
    values: dict[str, Any],
    required: Iterable[str],
    optional: Iterable[str],
) -> bool:
    """
    Copy provider values onto an existing row.

    Required fields are always written; optional fields are written only when
    the incoming value is not None. Returns True when anything changed.
    """
    changed = False
    for field_name in required:
        if getattr(row, field_name) != values[field_name]:
            setattr(row, field_name, values[field_name])
            changed = True
    for field_name in optional:
        value = values.get(field_name)
        if value is None or value == "":
            continue
        if getattr(row, field_name) != value:
            setattr(row, field_name, value)
            changed = True
    return changed


def dedupe_by_external_id(records: Iterable[R], kind: str) -> list[R]:
    """Keep the last record per external id, preserving first-seen order."""
    by_id: dict[str, R] = {}
    for record in records:
        if record.external_id in by_id:
            logger.warning(f"Duplicate {kind} {record.external_id} in payload, keeping the last one")
        by_id[record.external_id] = record
    return list(by_id.values())


def _competitor_values(record: CompetitorRecord) -> dict[str, Any]:
    return {
        "name": record.name,
        "code": record.code,
        "location": record.location,
        "nickname": record.nickname,
        "first_name": record.first_name,
        "last_name": record.last_name,
        "logo_url": record.logo_url,
        "color": record.color,
        "alternate_color": record.alternate_color,
        "is_active": record.is_active,
    }


def _event_values(record: EventRecord, season_id: int) -> dict[str, Any]:
    return {
        "season_id": season_id,
        "name": record.name,
        "event_date": record.event_date,
        "status": record.status,
        "is_completed": record.is_completed,
        "venue": record.venue,
        "week": record.week,
        "event_type": record.event_type,
    }


def _participant_values(record: ParticipantRecord) -> dict[str, Any]:
    return {
        "is_home": record.is_home,
        "score": record.score,
        "is_winner": record.is_winner,
        "position": record.position,
    }


class Reconciler:
    """Idempotent add-or-update of competitors and events for one external source."""

    def __init__(self, db: AsyncSession, external_source: str):
        self.db = db
        self.external_source = external_source
        self.competitors = CompetitorRepository(db)
        self.events = EventRepository(db)

    async def upsert_competitors(
        self, records: Iterable[CompetitorRecord], sport_id: int
    ) -> ReconcileStats:
        """
        Add or update competitors, committing once for the whole batch.

        Args:
            records: Mapped competitor records
            sport_id: Sport the competitors belong to

        Returns:
            Insert/update/unchanged counts
        """
        stats = ReconcileStats()
        try:
            for record in dedupe_by_external_id(records, "competitor"):
                values = _competitor_values(record)
                existing = await self.competitors.find_by_external_id(
                    record.external_id, self.external_source
                )
                if existing is None:
                    await self.competitors.add(
                        Competitor(
                            sport_id=sport_id,
                            external_id=record.external_id,
                            external_source=self.external_source,
                            **values,
                        )
                    )
                    stats.inserted += 1
                elif merge_fields(
                    existing, values, COMPETITOR_REQUIRED_FIELDS, COMPETITOR_OPTIONAL_FIELDS
                ):
                    stats.updated += 1
                else:
                    stats.unchanged += 1
            await self.db.commit()
        except BaseException:
            await self.db.rollback()
            raise

        logger.info(
            f"Reconciled {stats.total} competitors "
            f"({stats.inserted} new, {stats.updated} updated, {stats.unchanged} unchanged)"
        )
        return stats

    async def upsert_events(
        self,
        records: Iterable[EventRecord],
        season_ids: dict[int, int],
        *,
        sport_id: int,
    ) -> ReconcileStats:
        """
        Add or update events and their participants, committing once.

        Args:
            records: Mapped event records
            season_ids: Season year -> season row id for every year in `records`
            sport_id: Sport used for placeholder competitors

        Returns:
            Insert/update/unchanged counts (per event)
        """
        stats = ReconcileStats()
        competitor_ids: dict[str, int] = {}
        try:
            for record in dedupe_by_external_id(records, "event"):
                season_id = season_ids.get(record.season_year)
                if season_id is None:
                    raise ValueError(
                        f"No season row for year {record.season_year} (event {record.external_id})"
                    )
                values = _event_values(record, season_id)
                existing = await self.events.find_by_external_id(
                    record.external_id, self.external_source
                )

                if existing is None:
                    event = await self.events.add(
                        Event(
                            external_id=record.external_id,
                            external_source=self.external_source,
                            **values,
                        )
                    )
                    await self._sync_participants(event, record, sport_id, competitor_ids, is_new=True)
                    stats.inserted += 1
                    continue

                changed = merge_fields(
                    existing, values, EVENT_REQUIRED_FIELDS, EVENT_OPTIONAL_FIELDS
                )
                if await self._sync_participants(existing, record, sport_id, competitor_ids):
                    changed = True
                if changed:
                    stats.updated += 1
                else:
                    stats.unchanged += 1
            await self.db.commit()
        except BaseException:
            await self.db.rollback()
            raise

        logger.info(
            f"Reconciled {stats.total} events "
            f"({stats.inserted} new, {stats.updated} updated, {stats.unchanged} unchanged)"
        )
        return stats

    async def _resolve_competitor_id(
        self,
        participant: ParticipantRecord,
        sport_id: int,
        cache: dict[str, int],
    ) -> int:
        external_id = participant.competitor_external_id
        if external_id in cache:
            return cache[external_id]

        competitor = await self.competitors.find_by_external_id(external_id, self.external_source)
        if competitor is None:
            # Placeholder until the next competitor sync fills in the details
            competitor = await self.competitors.add(
                Competitor(
                    sport_id=sport_id,
                    name=participant.competitor_name or f"Team {external_id}",
                    code=participant.competitor_code or "",
                    is_active=True,
                    external_id=external_id,
                    external_source=self.external_source,
                )
            )
            logger.info(f"Created placeholder competitor {external_id}")

        cache[external_id] = competitor.id
        return competitor.id

    async def _sync_participants(
        self,
        event: Event,
        record: EventRecord,
        sport_id: int,
        competitor_ids: dict[str, int],
        *,
        is_new: bool = False,
    ) -> bool:
        """Make the stored participant set equal the incoming one, matched by competitor."""
        stored = {} if is_new else {
            p.competitor_id: p for p in await self.events.get_participants(event.id)
        }
        changed = False
        seen: set[int] = set()

        for incoming in record.participants:
            competitor_id = await self._resolve_competitor_id(incoming, sport_id, competitor_ids)
            if competitor_id in seen:
                logger.warning(
                    f"Event {record.external_id}: competitor {incoming.competitor_external_id} "
                    f"listed twice, keeping the first entry"
                )
                continue
            seen.add(competitor_id)
            values = _participant_values(incoming)
            row = stored.get(competitor_id)
            if row is not None:
                if merge_fields(row, values, PARTICIPANT_REQUIRED_FIELDS, PARTICIPANT_OPTIONAL_FIELDS):
                    changed = True
                continue

            if not is_new:
                logger.warning(
                    f"Event {record.external_id}: unexpected participant "
                    f"{incoming.competitor_external_id}, adding it"
                )
            await self.events.add_participant(
                EventParticipant(event_id=event.id, competitor_id=competitor_id, **values)
            )
            changed = True

        for competitor_id, row in stored.items():
            if competitor_id not in seen:
                logger.warning(
                    f"Event {record.external_id}: removing participant competitor_id={competitor_id} "
                    f"no longer reported by the provider"
                )
                await self.events.remove_participant(row)
                changed = True

        return changed
