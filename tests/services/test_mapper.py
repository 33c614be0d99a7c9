from datetime import datetime

import pytest

from picksync.schemas.records import MappingReport
from picksync.services.sync.mapper import MappingError, map_competitor, map_competitors, map_events
from tests.payloads import (
    competitor_entry,
    event_entry,
    scoreboard_payload,
    team_entry,
    teams_payload,
)


class TestMapCompetitors:
    def test_maps_nested_teams(self):
        payload = teams_payload(
            team_entry("3", "Chicago Bears", "CHI", color="0b162a"),
            team_entry("8", "Detroit Lions", "DET"),
        )

        records = map_competitors(payload)

        assert [r.external_id for r in records] == ["3", "8"]
        bears = records[0]
        assert bears.name == "Chicago Bears"
        assert bears.code == "CHI"
        assert bears.location == "Chicago"
        assert bears.nickname == "Bears"
        assert bears.color == "0b162a"
        assert bears.logo_url == "https://a.espncdn.com/i/teamlogos/nfl/500/chi.png"
        assert bears.is_active is True

    def test_walks_every_league(self):
        payload = {
            "sports": [
                {"leagues": [{"teams": [team_entry("1", "A Team", "A")]}]},
                {"leagues": [{"teams": [team_entry("2", "B Team", "B")]}, {"teams": []}]},
            ]
        }

        assert len(map_competitors(payload)) == 2

    def test_one_malformed_team_out_of_ten(self):
        entries = [team_entry(str(i), f"Team {i}", f"T{i}") for i in range(10)]
        del entries[4]["team"]["id"]
        report = MappingReport()

        records = map_competitors(teams_payload(*entries), report)

        assert len(records) == 9
        assert report.skipped == 1
        assert "missing id" in report.warnings[0]

    def test_optional_fields_default(self):
        record = map_competitor({"id": 99, "displayName": "Expansion Team"})

        assert record.external_id == "99"
        assert record.code == ""
        assert record.logo_url is None
        assert record.is_active is True

    def test_missing_display_name(self):
        with pytest.raises(MappingError):
            map_competitor({"id": "1"})

    def test_no_data(self):
        assert map_competitors(None) == []
        assert map_competitors({"sports": []}) == []


class TestMapEvents:
    def test_scoreboard_scenario(self):
        payload = scoreboard_payload(
            event_entry(
                "401",
                [
                    competitor_entry("1", "home", score="24", winner=True),
                    competitor_entry("2", "away", score="17", winner=False),
                ],
            )
        )

        records = map_events(payload, fallback_season=2020)

        assert len(records) == 1
        event = records[0]
        assert event.external_id == "401"
        assert event.event_date == datetime(2025, 10, 12, 17, 0)
        assert event.season_year == 2025
        assert event.week == 6
        assert event.status == "post"
        assert event.is_completed is True
        assert event.venue == "Soldier Field"
        assert event.event_type == "regular-season"
        assert len(event.participants) == 2

        home, away = event.home, event.away
        assert (home.competitor_external_id, home.score, home.is_winner, home.position) == ("1", 24, True, 1)
        assert (away.competitor_external_id, away.score, away.is_winner, away.position) == ("2", 17, False, 2)

    def test_unparseable_score_is_none_not_zero(self):
        payload = scoreboard_payload(
            event_entry(
                "402",
                [competitor_entry("1", "home", score="--"), competitor_entry("2", "away", score={"value": 3.0})],
                state="in",
                completed=False,
            )
        )

        home, away = map_events(payload, 2025)[0].participants

        assert home.score is None
        assert away.score == 3
        assert home.position is None

    def test_upcoming_game_has_no_result(self):
        payload = scoreboard_payload(
            event_entry(
                "403",
                [competitor_entry("1", "home"), competitor_entry("2", "away")],
                state="pre",
                completed=False,
            )
        )

        event = map_events(payload, 2025)[0]

        assert event.is_completed is False
        assert all(p.score is None and p.is_winner is None for p in event.participants)

    def test_season_fallback_order(self):
        competitors = [competitor_entry("1", "home"), competitor_entry("2", "away")]
        own_season = event_entry("1", competitors, season={"year": 2024, "type": 3, "slug": "post-season"})
        batch_season = event_entry("2", competitors)

        records = map_events(scoreboard_payload(own_season, batch_season, season_year=2025), 2019)
        assert [(r.season_year, r.event_type) for r in records] == [
            (2024, "post-season"),
            (2025, "regular-season"),
        ]

        no_season = {"events": [event_entry("3", competitors)]}
        record = map_events(no_season, 2019)[0]
        assert (record.season_year, record.event_type, record.week) == (
            2019, "regular", None,
        )

    def test_event_week_preferred_over_batch_week(self):
        event = event_entry(
            "1", [competitor_entry("1", "home"), competitor_entry("2", "away")], week={"number": 18}
        )

        assert map_events(scoreboard_payload(event, week=17), 2025)[0].week == 18

    @pytest.mark.parametrize(
        "broken",
        [
            {"id": None},
            {"name": ""},
            {"date": "not-a-date"},
            {"competitions": []},
        ],
    )
    def test_malformed_event_skipped(self, broken):
        good = event_entry("1", [competitor_entry("1", "home"), competitor_entry("2", "away")])
        bad = event_entry("2", [competitor_entry("3", "home"), competitor_entry("4", "away")], **broken)
        report = MappingReport()

        records = map_events(scoreboard_payload(good, bad), 2025, report)

        assert [r.external_id for r in records] == ["1"]
        assert report.skipped == 1

    def test_competitor_shape_rules(self):
        three = event_entry(
            "1",
            [competitor_entry("1", "home"), competitor_entry("2", "away"), competitor_entry("3", "away")],
        )
        two_home = event_entry("2", [competitor_entry("1", "home"), competitor_entry("2", "home")])
        report = MappingReport()

        assert map_events(scoreboard_payload(three, two_home), 2025, report) == []
        assert report.skipped == 2

    def test_nine_of_ten(self):
        events = [
            event_entry(str(i), [competitor_entry("1", "home"), competitor_entry("2", "away")])
            for i in range(10)
        ]
        del events[7]["id"]

        assert len(map_events(scoreboard_payload(*events), 2025)) == 9

    def test_same_team_on_both_sides_skipped(self):
        good = event_entry("401", [competitor_entry("1", "home"), competitor_entry("2", "away")])
        mirrored = event_entry("402", [competitor_entry("3", "home"), competitor_entry("3", "away")])
        report = MappingReport()

        records = map_events(scoreboard_payload(good, mirrored), 2025, report)

        assert [r.external_id for r in records] == ["401"]
        assert report.skipped == 1
        assert "both sides" in report.warnings[0]

    def test_home_away_is_case_insensitive(self):
        event = event_entry("1", [competitor_entry("1", "HOME"), competitor_entry("2", "Away")])

        record = map_events(scoreboard_payload(event), 2025)[0]

        assert record.home.competitor_external_id == "1"
        assert record.away.competitor_external_id == "2"
