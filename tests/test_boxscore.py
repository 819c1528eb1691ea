# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for the box score builder.

Validates boxscore.py:
  1. Batters in lineup order, substitutes flagged
  2. Pitcher lines with season ERA
  3. Team totals copied from the feed aggregate, never summed
  4. Notes and missing data
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from boxscore import MISSING_AVERAGE, MISSING_ERA, Boxscore, build_boxscore, last_name
from feed_builders import batter_entry, boxscore_team, parsed_feed, pitcher_entry


def _feed(team_rbi: int = 0):
    players = {
        "ID1": batter_entry(1, "Julio Rodriguez", "200", rbi=1),
        "ID2": batter_entry(2, "J.P. Crawford", "100", position="SS", rbi=1),
        "ID3": batter_entry(3, "Dylan Moore", "201", position="PH"),
        "ID4": {"person": {"id": 4, "fullName": "Bench Guy"}},
        "ID10": pitcher_entry(10, "Logan Gilbert"),
    }
    box = {
        "teams": {
            "away": boxscore_team("Seattle Mariners", players, [1, 2, 3, 4], [10],
                                  team_rbi=team_rbi),
            "home": boxscore_team("Houston Astros", {}, [], []),
        },
        "info": [{"label": "Weather", "value": "72 degrees, Roof Closed."}, {"label": ""}],
    }
    return parsed_feed(boxscore=box)


class TestBatters:
    def test_lineup_order(self):
        team = build_boxscore(_feed()).away
        assert [b.name for b in team.batters] == ["Crawford", "Rodriguez", "Moore"]
        assert [b.order for b in team.batters] == [1, 2, 2]

    def test_substitute_flag(self):
        team = build_boxscore(_feed()).away
        assert [b.is_substitute for b in team.batters] == [False, False, True]

    def test_players_without_slot_are_skipped(self):
        team = build_boxscore(_feed()).away
        assert "Guy" not in [b.name for b in team.batters]

    def test_average_from_season_stats(self):
        team = build_boxscore(_feed()).away
        assert team.batters[0].average == ".280"


class TestPitchers:
    def test_pitcher_line(self):
        pitcher = build_boxscore(_feed()).away.pitchers[0]
        assert pitcher.name == "Gilbert"
        assert pitcher.innings_pitched == "6.0"
        assert (pitcher.pitches, pitcher.strikes) == (98, 64)
        assert pitcher.era == "3.10"


class TestTotals:
    def test_rbi_total_from_aggregate(self):
        # player rows add up to 2; the feed's team aggregate wins
        team = build_boxscore(_feed(team_rbi=7)).away
        assert sum(b.rbi for b in team.batters) == 2
        assert team.batting_totals.rbi == 7

    def test_totals_have_blank_rates(self):
        team = build_boxscore(_feed()).away
        assert team.batting_totals.average == ""
        assert team.pitching_totals.era == ""
        assert team.pitching_totals.pitches == 140


class TestNotes:
    def test_team_and_game_notes(self):
        boxscore = build_boxscore(_feed())
        assert boxscore.away.notes == ("a: Singled for Smith in the 7th.",)
        assert boxscore.game_notes == ("Weather: 72 degrees, Roof Closed.",)


class TestMissingData:
    def test_no_teams(self):
        boxscore = build_boxscore(parsed_feed())
        assert boxscore == Boxscore()
        assert boxscore.team("home").batters == ()

    def test_missing_rates_use_placeholders(self):
        players = {"ID1": {"person": {"id": 1, "fullName": "Rookie"}, "battingOrder": "100"},
                   "ID2": {"person": {"id": 2, "fullName": "Call Up"}}}
        box = {"teams": {"away": boxscore_team("A", players, [1], [2]),
                         "home": boxscore_team("H", {}, [], [])}}
        team = build_boxscore(parsed_feed(boxscore=box)).away
        assert team.batters[0].average == MISSING_AVERAGE
        assert team.pitchers[0].era == MISSING_ERA

    def test_last_name(self):
        assert last_name("Julio Rodriguez") == "Rodriguez"
        assert last_name("") == "-"
