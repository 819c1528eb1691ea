# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Aggregated state of the one game currently being followed.

:class:`GameSession` is fed a parsed live feed on every poll.  A different
``gamePk`` discards everything first, so no at-bat, score or player from a
previous game can leak into the new one.  Updates are incremental: each
play in the feed is reconstructed and upserted into the at-bat history,
overwriting the previous version of the same at-bat.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

import models
from at_bat import DEFAULT_NAME, AtBat, build_at_bat
from at_bat_history import AtBatHistory
from boxscore import Boxscore, build_boxscore
from linescore import Linescore, build_linescore
from teams import UNKNOWN_AWAY, UNKNOWN_HOME, Team
from win_probability import WinProbabilitySeries

logger = logging.getLogger("game_session")


# ---------------------------------------------------------------------------
# Players
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Player:
    id: int = 0
    first_name: str = DEFAULT_NAME
    last_name: str = DEFAULT_NAME
    boxscore_name: str = DEFAULT_NAME
    bat_side: str = DEFAULT_NAME
    pitch_hand: str = DEFAULT_NAME
    summary: str | None = None
    note: str | None = None
    pitches_thrown: int | None = None
    strikes: int | None = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


DEFAULT_PLAYER = Player()


def _build_players(feed: models.LiveFeed) -> dict[int, Player]:
    """Names from ``gameData.players`` merged with today's box score line."""
    box_lines: dict[int, models.BoxscorePlayer] = {}
    teams = feed.live_data.boxscore.teams
    if teams is not None:
        for side in (teams.away, teams.home):
            for player in side.players.values():
                box_lines[player.person.id] = player

    players: dict[int, Player] = {}
    for full in feed.game_data.players.values():
        summary = note = None
        pitches = strikes = None
        box = box_lines.get(full.id)
        if box is not None:
            if box.position.position_type == "Pitcher":
                pitching = box.stats.pitching
                summary, note = pitching.summary, pitching.note
                pitches = pitching.pitches_thrown or pitching.number_of_pitches
                strikes = pitching.strikes
            else:
                summary, note = box.stats.batting.summary, box.stats.batting.note
        players[full.id] = Player(
            id=full.id,
            first_name=full.use_name or full.first_name or DEFAULT_NAME,
            last_name=full.use_last_name or full.last_name or DEFAULT_NAME,
            boxscore_name=full.boxscore_name or DEFAULT_NAME,
            bat_side=full.bat_side.code or DEFAULT_NAME,
            pitch_hand=f"{full.pitch_hand.code}HP" if full.pitch_hand.code else DEFAULT_NAME,
            summary=summary,
            note=note,
            pitches_thrown=pitches,
            strikes=strikes,
        )
    return players


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

class GameSession:
    """Everything known about the current game, rebuilt from each poll."""

    def __init__(self, teams: Mapping[str, Team] | None = None) -> None:
        self._teams = teams or {}
        self.game_id: int = 0
        self.current_at_bat: int = 0
        self.history = AtBatHistory()
        self.linescore = Linescore()
        self.boxscore = Boxscore()
        self.win_probability = WinProbabilitySeries()
        self.players: dict[int, Player] = {}
        self.home_team: Team = UNKNOWN_HOME
        self.away_team: Team = UNKNOWN_AWAY
        self.on_deck: int | None = None
        self.in_hole: int | None = None
        self.status: str = ""

    def reset(self) -> None:
        """Back to the empty state of a freshly constructed session."""
        self.game_id = 0
        self.current_at_bat = 0
        self.history.clear()
        self.linescore = Linescore()
        self.boxscore = Boxscore()
        self.win_probability = WinProbabilitySeries()
        self.players = {}
        self.home_team = UNKNOWN_HOME
        self.away_team = UNKNOWN_AWAY
        self.on_deck = None
        self.in_hole = None
        self.status = ""

    def update(
        self,
        feed: models.LiveFeed,
        win_probability: Iterable[models.WinProbabilityEntry] | None = None,
    ) -> None:
        """Merge one poll of the live feed into the session.

        Args:
            feed: Parsed live feed.
            win_probability: Parsed win probability entries, or ``None`` to
                keep the current series.
        """
        if feed.game_pk != self.game_id:
            if self.game_id:
                logger.info("Game changed %d -> %d, resetting", self.game_id, feed.game_pk)
            self.reset()
        self.game_id = feed.game_pk
        self.status = feed.game_data.status.abstract_game_state
        self.players = _build_players(feed)
        self._set_teams(feed)

        offense = feed.live_data.linescore.offense
        self.on_deck = offense.on_deck.id if offense.on_deck else None
        self.in_hole = offense.in_hole.id if offense.in_hole else None

        plays = feed.live_data.plays
        self.current_at_bat = plays.current_play.about.at_bat_index if plays.current_play else 0
        self.linescore = build_linescore(feed)
        self.boxscore = build_boxscore(feed)
        for play in plays.all_plays or []:
            self.update_single_play(play)

        if win_probability is not None:
            self.update_win_probability(win_probability)
        logger.debug(
            "Game %d: %d at-bats, current %d",
            self.game_id, len(self.history), self.current_at_bat,
        )

    def update_win_probability(self, entries: Iterable[models.WinProbabilityEntry]) -> None:
        self.win_probability = WinProbabilitySeries.from_entries(entries)

    def update_single_play(self, play: models.Play) -> AtBat:
        at_bat = build_at_bat(play)
        self.history.upsert(at_bat)
        return at_bat

    def _set_teams(self, feed: models.LiveFeed) -> None:
        home = feed.game_data.teams.home
        away = feed.game_data.teams.away
        self.home_team = self._teams.get(home.name) or _feed_team(home, UNKNOWN_HOME)
        self.away_team = self._teams.get(away.name) or _feed_team(away, UNKNOWN_AWAY)

    def player(self, player_id: int) -> Player:
        return self.players.get(player_id, DEFAULT_PLAYER)

    def latest_at_bat(self) -> AtBat:
        return self.history.latest_or_default(self.current_at_bat)

    def format_on_deck(self) -> str | None:
        if self.on_deck is None or self.on_deck not in self.players:
            return None
        return f"on deck: {self.players[self.on_deck].last_name}"

    def format_in_hole(self) -> str | None:
        if self.in_hole is None or self.in_hole not in self.players:
            return None
        return f"in hole: {self.players[self.in_hole].last_name}"


def _feed_team(info: models.TeamInfo, fallback: Team) -> Team:
    if not info.name:
        return fallback
    return Team(
        id=info.id,
        name=info.name,
        team_name=info.team_name or info.name,
        abbreviation=info.abbreviation or fallback.abbreviation,
    )
