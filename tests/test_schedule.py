# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0"]
# ///
"""Tests for the schedule list.

Validates schedule.py:
  1. Parsing schedule entries from the API
  2. Favorite team games listed first
  3. Selection kept across refreshes
  4. Navigation wraps at both ends
  5. Start times in the configured timezone
  6. Win probability toggle and clearing on a date change
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from schedule import ScheduleState, format_start_time, parse_schedule_game
from teams import load_teams


def _game(game_pk: int, away: str, home: str, away_score: int | None = None,
          home_score: int | None = None, state: str = "Scheduled",
          start: str = "2024-07-04T23:10:00Z") -> dict:
    away_side: dict = {"team": {"name": away}}
    home_side: dict = {"team": {"name": home}}
    if away_score is not None:
        away_side["score"] = away_score
        home_side["score"] = home_score
    return {
        "gamePk": game_pk,
        "gameDate": start,
        "status": {"detailedState": state},
        "teams": {"away": away_side, "home": home_side},
    }


GAMES = [
    _game(1, "New York Yankees", "Boston Red Sox"),
    _game(2, "Seattle Mariners", "Houston Astros", 3, 1, "Final"),
    _game(3, "Chicago Cubs", "St. Louis Cardinals"),
]


class TestParse:
    def test_fields(self):
        game = parse_schedule_game(GAMES[1])
        assert game.game_pk == 2
        assert (game.away, game.home) == ("Seattle Mariners", "Houston Astros")
        assert (game.away_runs, game.home_runs) == (3, 1)
        assert game.status == "Final"
        assert game.start_time == datetime(2024, 7, 4, 23, 10, tzinfo=timezone.utc)
        assert game.winning_side() == "away"

    def test_missing_game_pk(self):
        assert parse_schedule_game({"teams": {}}) is None

    def test_missing_fields(self):
        game = parse_schedule_game({"gamePk": 9})
        assert game.away == "unknown"
        assert game.status == "-"
        assert game.start_time is None
        assert game.winning_side() is None


class TestUpdate:
    def test_favorite_first(self):
        state = ScheduleState()
        state.update(GAMES, favorite_team="Seattle Mariners")
        assert [g.game_pk for g in state.games] == [2, 1, 3]
        assert state.get_selected_game_opt() == 2

    def test_no_favorite_keeps_order(self):
        state = ScheduleState()
        state.update(GAMES)
        assert [g.game_pk for g in state.games] == [1, 2, 3]
        assert state.get_selected_game_opt() == 1

    def test_selection_survives_refresh(self):
        state = ScheduleState()
        state.update(GAMES)
        state.select_game(3)
        state.update(GAMES)
        assert state.get_selected_game_opt() == 3

    def test_empty(self):
        state = ScheduleState()
        state.update([])
        assert state.get_selected_game_opt() is None

    def test_select_unknown(self):
        state = ScheduleState()
        state.update(GAMES)
        assert state.select_game(99) is False
        assert state.get_selected_game_opt() == 1


class TestNavigation:
    def test_next_wraps(self):
        state = ScheduleState()
        state.update(GAMES)
        state.select_game(3)
        state.next()
        assert state.get_selected_game_opt() == 1

    def test_previous_wraps(self):
        state = ScheduleState()
        state.update(GAMES)
        state.previous()
        assert state.get_selected_game_opt() == 3

    def test_empty_is_noop(self):
        state = ScheduleState()
        state.next()
        state.previous()
        assert state.selected is None


class TestRows:
    def test_start_time(self):
        start = datetime(2024, 7, 4, 23, 10, tzinfo=timezone.utc)
        assert format_start_time(start, ZoneInfo("America/Los_Angeles")) == " 4:10 pm"
        assert format_start_time(None, ZoneInfo("America/Los_Angeles")) == "-"

    def test_rows_use_nicknames(self):
        state = ScheduleState()
        state.update(GAMES)
        rows = state.rows(ZoneInfo("America/New_York"), load_teams())
        assert rows[1] == ["Mariners", "3", "Astros", "1", " 7:10 pm", "Final"]
        assert rows[0][1] == ""


class TestToggleAndClear:
    def test_win_probability_toggle(self):
        state = ScheduleState()
        assert state.show_win_probability is True
        state.toggle_win_probability()
        assert state.show_win_probability is False

    def test_clear(self):
        state = ScheduleState()
        state.update(GAMES)
        state.toggle_win_probability()
        state.clear()
        assert state.games == []
        assert state.get_selected_game_opt() is None
        assert state.show_win_probability is False
