# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Gameday view state: the session, the at-bat selection and panel toggles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

import models
from at_bat import AtBat
from game_session import GameSession
from selection import AtBatSelection
from teams import Team


@dataclass
class PanelToggles:
    info: bool = True
    at_bat: bool = True
    boxscore: bool = True
    win_probability: bool = False


class GamedayState:
    """Owns one :class:`GameSession` and what the user is looking at in it."""

    def __init__(self, teams: Mapping[str, Team] | None = None) -> None:
        self.session = GameSession(teams)
        self.selection = AtBatSelection()
        self.panels = PanelToggles()

    def apply(self, feed: models.LiveFeed,
              win_probability: Iterable[models.WinProbabilityEntry] | None = None) -> None:
        """Merge a poll; a different game also drops the at-bat selection."""
        if feed.game_pk != self.session.game_id:
            self.selection.go_live()
        self.session.update(feed, win_probability)

    def reset(self) -> None:
        self.session.reset()
        self.selection.go_live()

    # -- queries -----------------------------------------------------------

    def current_game_id(self) -> int:
        return self.session.game_id

    def is_following_live(self) -> bool:
        return self.selection.is_following_live()

    def selected_at_bat(self) -> tuple[AtBat, bool]:
        return self.selection.resolve(self.session.history, self.session.current_at_bat)

    def selected_at_bat_summary(self) -> str:
        """Short status line, e.g. ``live`` or ``top 3 (viewing history)``."""
        at_bat, is_current = self.selected_at_bat()
        if is_current:
            return "live"
        half = "top" if at_bat.is_top_inning else "bottom"
        return f"{half} {at_bat.inning} (viewing history)"

    # -- navigation --------------------------------------------------------

    def previous_at_bat(self) -> None:
        self.selection.move_to_previous(self.session.history, self.session.current_at_bat)

    def next_at_bat(self) -> None:
        self.selection.move_to_next(self.session.history, self.session.current_at_bat)

    def live(self) -> None:
        self.selection.go_live()

    def start(self) -> None:
        self.selection.move_to_start(self.session.history)

    # -- panels ------------------------------------------------------------

    def toggle_info(self) -> None:
        self.panels.info = not self.panels.info

    def toggle_at_bat(self) -> None:
        self.panels.at_bat = not self.panels.at_bat

    def toggle_boxscore(self) -> None:
        self.panels.boxscore = not self.panels.boxscore

    def toggle_win_probability(self) -> None:
        self.panels.win_probability = not self.panels.win_probability
