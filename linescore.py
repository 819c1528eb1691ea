# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Runs/hits/errors per inning for both teams of the current game."""

from __future__ import annotations

from dataclasses import dataclass

import models


@dataclass(frozen=True)
class LinescoreLine:
    abbreviation: str
    inning_runs: tuple[int, ...] = ()
    runs: int = 0
    hits: int = 0
    errors: int = 0


@dataclass(frozen=True)
class Linescore:
    away: LinescoreLine = LinescoreLine("A")
    home: LinescoreLine = LinescoreLine("H")
    current_inning: int = 0
    is_top_inning: bool = True

    @property
    def batting_side(self) -> str:
        return "away" if self.is_top_inning else "home"


def _line(linescore: models.Linescore, side: str, abbreviation: str) -> LinescoreLine:
    runs = []
    hits = errors = 0
    for inning in linescore.innings:
        detail = inning.home if side == "home" else inning.away
        runs.append(detail.runs or 0)
        hits += detail.hits
        errors += detail.errors
    return LinescoreLine(
        abbreviation=abbreviation,
        inning_runs=tuple(runs),
        runs=sum(runs),
        hits=hits,
        errors=errors,
    )


def build_linescore(feed: models.LiveFeed) -> Linescore:
    """Sum the per-inning detail of the feed into totals for each side."""
    linescore = feed.live_data.linescore
    teams = feed.game_data.teams
    return Linescore(
        away=_line(linescore, "away", teams.away.abbreviation or "A"),
        home=_line(linescore, "home", teams.home.abbreviation or "H"),
        current_inning=linescore.current_inning or 0,
        is_top_inning=True if linescore.is_top_inning is None else linescore.is_top_inning,
    )
