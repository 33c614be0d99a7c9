"""
ESPN payload mapping.

Pure functions turning raw `/teams` and `/scoreboard` payloads into record
values. A single malformed entry never aborts a batch: it is skipped, logged
and counted on the optional MappingReport.
"""
import logging
from typing import Any

from picksync.schemas.records import (
    CompetitorRecord,
    EventRecord,
    MappingReport,
    ParticipantRecord,
)
from picksync.utils.dates import parse_datetime
from picksync.utils.numbers import safe_int

logger = logging.getLogger(__name__)

DEFAULT_EVENT_TYPE = "regular"
UNKNOWN_STATUS = "unknown"


class MappingError(ValueError):
    """A raw record lacks something required to build a record value."""


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _skip(report: MappingReport | None, message: str) -> None:
    logger.warning(message)
    if report is not None:
        report.skip(message)


# ==================== Competitors ====================


def _first_logo(team: dict) -> str | None:
    for logo in _list(team.get("logos")):
        href = _text(_dict(logo).get("href"))
        if href:
            return href
    return None


def map_competitor(team: dict) -> CompetitorRecord:
    """Build a CompetitorRecord from one `team` object."""
    external_id = _text(team.get("id"))
    name = _text(team.get("displayName"))
    if not external_id:
        raise MappingError("team is missing id")
    if not name:
        raise MappingError(f"team {external_id} is missing displayName")

    is_active = team.get("isActive")
    return CompetitorRecord(
        external_id=external_id,
        name=name,
        code=_text(team.get("abbreviation")) or "",
        location=_text(team.get("location")),
        nickname=_text(team.get("nickname")),
        logo_url=_first_logo(team),
        color=_text(team.get("color")),
        alternate_color=_text(team.get("alternateColor")),
        is_active=is_active if isinstance(is_active, bool) else True,
    )


def map_competitors(payload: Any, report: MappingReport | None = None) -> list[CompetitorRecord]:
    """
    Map a `/teams` payload (sports -> leagues -> teams) to competitor records.

    Args:
        payload: Decoded JSON body, or None when no data is available
        report: Optional report collecting skipped entries

    Returns:
        Mapped records in payload order
    """
    records: list[CompetitorRecord] = []
    for sport in _list(_dict(payload).get("sports")):
        for league in _list(_dict(sport).get("leagues")):
            for entry in _list(_dict(league).get("teams")):
                team = _dict(_dict(entry).get("team"))
                try:
                    records.append(map_competitor(team))
                except Exception as exc:
                    _skip(report, f"Skipping team: {exc}")
    return records


# ==================== Events ====================


def _home_away(raw: dict) -> str | None:
    side = _text(raw.get("homeAway"))
    return side.lower() if side else None


def _map_participant(raw: dict, is_completed: bool) -> ParticipantRecord:
    team = _dict(raw.get("team"))
    external_id = _text(team.get("id")) or _text(raw.get("id"))
    if not external_id:
        raise MappingError("competitor is missing team id")

    winner = raw.get("winner")
    is_winner = winner if isinstance(winner, bool) else None

    position = None
    if is_completed and is_winner is not None:
        position = 1 if is_winner else 2

    return ParticipantRecord(
        competitor_external_id=external_id,
        is_home=_home_away(raw) == "home",
        score=safe_int(raw.get("score")),
        is_winner=is_winner,
        position=position,
        competitor_name=_text(team.get("displayName")),
        competitor_code=_text(team.get("abbreviation")),
    )


def _pick_season(event: dict, batch_season: dict, fallback_season: int) -> tuple[int, str]:
    """Season year and slug: event first, then the batch, then the fallback year."""
    for season in (_dict(event.get("season")), batch_season):
        year = safe_int(season.get("year"))
        if year is not None:
            slug = _text(season.get("slug")) or DEFAULT_EVENT_TYPE
            return year, slug
    return fallback_season, DEFAULT_EVENT_TYPE


def map_event(event: dict, fallback_season: int, batch: dict | None = None) -> EventRecord:
    """Build an EventRecord from one scoreboard `events[]` entry."""
    batch = batch or {}
    external_id = _text(event.get("id"))
    name = _text(event.get("name"))
    if not external_id:
        raise MappingError("event is missing id")
    if not name:
        raise MappingError(f"event {external_id} is missing name")

    event_date = parse_datetime(event.get("date"))
    if event_date is None:
        raise MappingError(f"event {external_id} has unparseable date {event.get('date')!r}")

    competitions = _list(event.get("competitions"))
    if not competitions:
        raise MappingError(f"event {external_id} has no competitions")
    competition = _dict(competitions[0])

    raw_competitors = [_dict(c) for c in _list(competition.get("competitors"))]
    if len(raw_competitors) != 2:
        raise MappingError(
            f"event {external_id} has {len(raw_competitors)} competitors, expected 2"
        )
    sides = sorted(side for side in map(_home_away, raw_competitors) if side)
    if sides != ["away", "home"]:
        raise MappingError(f"event {external_id} lacks a home and an away competitor")

    status_type = _dict(_dict(event.get("status")).get("type"))
    status = _text(status_type.get("state")) or UNKNOWN_STATUS
    is_completed = status_type.get("completed") is True

    participants = tuple(_map_participant(c, is_completed) for c in raw_competitors)
    if participants[0].competitor_external_id == participants[1].competitor_external_id:
        raise MappingError(
            f"event {external_id} lists team {participants[0].competitor_external_id} on both sides"
        )

    season_year, event_type = _pick_season(
        event, _dict(batch.get("season")), fallback_season
    )
    week = safe_int(_dict(event.get("week")).get("number"))
    if week is None:
        week = safe_int(_dict(batch.get("week")).get("number"))

    return EventRecord(
        external_id=external_id,
        name=name,
        event_date=event_date,
        season_year=season_year,
        status=status,
        is_completed=is_completed,
        participants=participants,
        event_type=event_type,
        week=week,
        venue=_text(_dict(competition.get("venue")).get("fullName")),
    )


def map_events(
    payload: Any,
    fallback_season: int,
    report: MappingReport | None = None,
) -> list[EventRecord]:
    """
    Map a `/scoreboard` payload to event records.

    Args:
        payload: Decoded JSON body, or None when no data is available
        fallback_season: Season year used when neither the event nor the
            batch carries one
        report: Optional report collecting skipped entries

    Returns:
        Mapped records in payload order
    """
    batch = _dict(payload)
    records: list[EventRecord] = []
    for raw in _list(batch.get("events")):
        try:
            records.append(map_event(_dict(raw), fallback_season, batch))
        except Exception as exc:
            _skip(report, f"Skipping event: {exc}")
    return records
