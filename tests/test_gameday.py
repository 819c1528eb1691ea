# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for the gameday view state.

Validates gameday.py:
  1. Applying a different game clears the at-bat selection
  2. Navigation delegates to the selection
  3. Status summary for live and historical at-bats
  4. Panel toggles
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from feed_builders import parsed_feed, play
from gameday import GamedayState, PanelToggles
from teams import load_teams


def _state_with_plays() -> GamedayState:
    state = GamedayState(load_teams())
    state.apply(parsed_feed(game_pk=1, plays=[play(0), play(1), play(2, top=False)]))
    return state


class TestApply:
    def test_same_game_keeps_selection(self):
        state = _state_with_plays()
        state.previous_at_bat()
        state.apply(parsed_feed(game_pk=1, plays=[play(0), play(1), play(2, top=False)]))
        assert state.selection.selected == 1

    def test_new_game_goes_live(self):
        state = _state_with_plays()
        state.previous_at_bat()
        state.apply(parsed_feed(game_pk=2))
        assert state.is_following_live()
        assert state.current_game_id() == 2
        assert len(state.session.history) == 0

    def test_reset(self):
        state = _state_with_plays()
        state.start()
        state.reset()
        assert state.is_following_live()
        assert state.current_game_id() == 0


class TestNavigation:
    def test_previous_next_live(self):
        state = _state_with_plays()
        state.previous_at_bat()
        state.previous_at_bat()
        assert state.selection.selected == 0
        state.next_at_bat()
        assert state.selection.selected == 1
        state.live()
        assert state.is_following_live()

    def test_start(self):
        state = _state_with_plays()
        state.start()
        at_bat, is_current = state.selected_at_bat()
        assert at_bat.index == 0
        assert not is_current


class TestSummary:
    def test_live(self):
        assert _state_with_plays().selected_at_bat_summary() == "live"

    def test_history(self):
        state = _state_with_plays()
        state.start()
        assert state.selected_at_bat_summary() == "top 1 (viewing history)"


class TestPanels:
    def test_defaults(self):
        assert GamedayState().panels == PanelToggles(True, True, True, False)

    def test_toggles(self):
        state = GamedayState()
        state.toggle_info()
        state.toggle_at_bat()
        state.toggle_boxscore()
        state.toggle_win_probability()
        assert state.panels == PanelToggles(False, False, False, True)
