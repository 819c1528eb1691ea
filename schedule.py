# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""The day's games and which one is highlighted on the scoreboard.

Unlike at-bat navigation, moving through the schedule wraps around at both
ends.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping
from zoneinfo import ZoneInfo

from teams import Team

logger = logging.getLogger("schedule")


@dataclass(frozen=True)
class ScheduleGame:
    game_pk: int
    away: str
    home: str
    away_runs: int | None = None
    home_runs: int | None = None
    status: str = "-"
    start_time: datetime | None = None

    def winning_side(self) -> str | None:
        if self.away_runs is None or self.home_runs is None:
            return None
        if self.home_runs > self.away_runs:
            return "home"
        if self.away_runs > self.home_runs:
            return "away"
        return None

    def involves(self, team_name: str) -> bool:
        return team_name in (self.away, self.home)


def _parse_start(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable gameDate %r", value)
        return None


def _runs(side: dict[str, Any]) -> int | None:
    score = side.get("score")
    return score if isinstance(score, int) else None


def parse_schedule_game(game: dict[str, Any]) -> ScheduleGame | None:
    """Build a :class:`ScheduleGame` from one schedule entry; ``None`` if it has no gamePk."""
    game_pk = game.get("gamePk")
    if not isinstance(game_pk, int):
        return None
    teams = game.get("teams") or {}
    away = teams.get("away") or {}
    home = teams.get("home") or {}
    status = game.get("status") or {}
    return ScheduleGame(
        game_pk=game_pk,
        away=(away.get("team") or {}).get("name", "unknown"),
        home=(home.get("team") or {}).get("name", "unknown"),
        away_runs=_runs(away),
        home_runs=_runs(home),
        status=status.get("detailedState") or "-",
        start_time=_parse_start(game.get("gameDate")),
    )


def format_start_time(start: datetime | None, timezone: ZoneInfo) -> str:
    """``" 7:05 pm"`` in *timezone*, or ``"-"`` when unknown."""
    if start is None:
        return "-"
    local = start.astimezone(timezone)
    hour = local.hour % 12 or 12
    suffix = "am" if local.hour < 12 else "pm"
    return f"{hour:>2}:{local.minute:02d} {suffix}"


@dataclass
class ScheduleState:
    games: list[ScheduleGame] = field(default_factory=list)
    selected: int | None = None
    show_win_probability: bool = True

    def update(self, raw_games: list[dict[str, Any]], favorite_team: str | None = None) -> None:
        """Replace the list, keeping the highlighted game when it is still listed.

        Games involving *favorite_team* are listed first.
        """
        previous = self.get_selected_game_opt()
        favorites: list[ScheduleGame] = []
        others: list[ScheduleGame] = []
        for raw in raw_games:
            game = parse_schedule_game(raw)
            if game is None:
                continue
            if favorite_team and game.involves(favorite_team):
                favorites.append(game)
            else:
                others.append(game)
        self.games = favorites + others

        if not self.games:
            self.selected = None
            return
        pks = [g.game_pk for g in self.games]
        if previous is not None and previous in pks:
            self.selected = pks.index(previous)
        else:
            self.selected = 0

    def get_selected_game_opt(self) -> int | None:
        if self.selected is None or not (0 <= self.selected < len(self.games)):
            return None
        return self.games[self.selected].game_pk

    def select_game(self, game_pk: int) -> bool:
        for pos, game in enumerate(self.games):
            if game.game_pk == game_pk:
                self.selected = pos
                return True
        return False

    def toggle_win_probability(self) -> None:
        self.show_win_probability = not self.show_win_probability

    def clear(self) -> None:
        self.games = []
        self.selected = None

    def next(self) -> None:
        if not self.games:
            return
        if self.selected is None:
            self.selected = 0
        else:
            self.selected = (self.selected + 1) % len(self.games)

    def previous(self) -> None:
        if not self.games:
            return
        if self.selected is None:
            self.selected = 0
        else:
            self.selected = (self.selected - 1) % len(self.games)

    def rows(self, timezone: ZoneInfo, teams: Mapping[str, Team] | None = None) -> list[list[str]]:
        """``[away, away runs, home, home runs, start time, status]`` per game."""
        teams = teams or {}
        rows = []
        for game in self.games:
            away = teams[game.away].team_name if game.away in teams else game.away
            home = teams[game.home].team_name if game.home in teams else game.home
            rows.append([
                away,
                "" if game.away_runs is None else str(game.away_runs),
                home,
                "" if game.home_runs is None else str(game.home_runs),
                format_start_time(game.start_time, timezone),
                game.status,
            ])
        return rows
