# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for the standings table.

Validates standings.py:
  1. Division headers before the teams, divisions in a fixed order
  2. Division names and missing team names filled from the team table
  3. The highlight covers divisions and teams and wraps at both ends
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import models
from standings import DIVISION_IDS, HEADER, Standing, StandingsState
from teams import load_teams


def _record(team_id: int, name: str, wins: int, losses: int, streak: str | None = "W2") -> dict:
    record = {"team": {"id": team_id, "name": name}, "wins": wins, "losses": losses,
              "winningPercentage": f".{wins * 1000 // (wins + losses):03d}",
              "gamesBack": "-", "wildCardGamesBack": "+2.0"}
    if streak is not None:
        record["streak"] = {"streakCode": streak}
    return record


RECORDS = models.parse_standings([
    {"division": {"id": 202}, "teamRecords": [_record(114, "Cleveland Guardians", 52, 30)]},
    {"division": {"id": 201}, "teamRecords": [
        _record(110, "Baltimore Orioles", 55, 30),
        _record(147, "New York Yankees", 54, 32, streak=None),
    ]},
])


class TestDefaults:
    def test_empty_divisions(self):
        state = StandingsState()
        assert [d.id for d in state.divisions] == list(DIVISION_IDS)
        assert [r.cells for r in state.rows()][:2] == [["AL West"], ["AL East"]]

    def test_header(self):
        assert HEADER == ["Team", "W", "L", "PCT", "GB", "WCGB", "STRK"]


class TestUpdate:
    def test_sorted_by_division(self):
        state = StandingsState()
        state.update(RECORDS)
        assert [d.name for d in state.divisions] == ["AL East", "AL Central"]

    def test_rows(self):
        state = StandingsState()
        state.update(RECORDS)
        rows = state.rows()
        assert [r.row_id for r in rows] == [201, 110, 147, 202, 114]
        assert rows[0].is_division
        assert rows[1].cells == ["Baltimore Orioles", "55", "30", ".647", "-", "+2.0", "W2"]
        assert rows[2].cells[-1] == "-"

    def test_missing_team_name_from_table(self):
        records = models.parse_standings(
            [{"division": {"id": 201}, "teamRecords": [{"team": {"id": 147}, "wins": 1}]}])
        state = StandingsState()
        state.update(records, load_teams())
        assert state.divisions[0].standings[0].team_name == "New York Yankees"

    def test_unknown_division_skipped(self):
        records = models.parse_standings([{"division": {"id": 999}, "teamRecords": []}])
        state = StandingsState()
        state.update(records)
        assert [d.id for d in state.divisions] == list(DIVISION_IDS)

    def test_selection_reset_when_table_shrinks(self):
        state = StandingsState()
        state.selected = 30
        state.update(RECORDS)
        assert state.selected == 0

    def test_standing_cells(self):
        standing = Standing(team_id=1, team_name="Team", wins=3, losses=4)
        assert standing.cells() == ["Team", "3", "4", ".000", "-", "-", "-"]


class TestNavigation:
    def test_next_and_selected_id(self):
        state = StandingsState()
        state.update(RECORDS)
        assert state.get_selected() == 201
        state.next()
        assert state.get_selected() == 110

    def test_next_wraps(self):
        state = StandingsState()
        state.update(RECORDS)
        for _ in range(5):
            state.next()
        assert state.get_selected() == 201

    def test_previous_wraps(self):
        state = StandingsState()
        state.update(RECORDS)
        state.previous()
        assert state.get_selected() == 114

    def test_out_of_range_selection(self):
        state = StandingsState(divisions=[])
        assert state.get_selected() == 0
        state.next()
        assert state.selected == 0
