# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Division standings and the highlighted row.

The table is grouped by division, each division introduced by a header
row.  The highlight moves over division and team rows alike and wraps
around at both ends, like the schedule list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

import models
from teams import DIVISIONS, Team, lookup_team

logger = logging.getLogger("standings")

HEADER = ["Team", "W", "L", "PCT", "GB", "WCGB", "STRK"]

# AL West .. NL Central, in display order
DIVISION_IDS = (200, 201, 202, 203, 204, 205)


@dataclass(frozen=True)
class Standing:
    team_id: int
    team_name: str
    wins: int = 0
    losses: int = 0
    winning_percentage: str = ".000"
    games_back: str = "-"
    wild_card_games_back: str = "-"
    streak: str = "-"

    def cells(self) -> list[str]:
        return [
            self.team_name,
            str(self.wins),
            str(self.losses),
            self.winning_percentage,
            self.games_back,
            self.wild_card_games_back,
            self.streak,
        ]


@dataclass
class Division:
    id: int
    name: str
    standings: list[Standing] = field(default_factory=list)


@dataclass(frozen=True)
class StandingsRow:
    row_id: int
    cells: list[str]
    is_division: bool = False


def default_divisions() -> list[Division]:
    """Division headers with no teams, shown until the first load."""
    return [Division(id=d, name=DIVISIONS[d]) for d in DIVISION_IDS]


def build_standing(record: models.TeamRecord, teams: Mapping[str, Team] | None = None) -> Standing:
    name = record.team.name
    if not name and teams is not None:
        team = lookup_team(teams, record.team.id)
        name = team.name if team else ""
    return Standing(
        team_id=record.team.id,
        team_name=name or str(record.team.id),
        wins=record.wins,
        losses=record.losses,
        winning_percentage=record.winning_percentage,
        games_back=record.games_back,
        wild_card_games_back=record.wild_card_games_back,
        streak=record.streak.streak_code if record.streak else "-",
    )


@dataclass
class StandingsState:
    divisions: list[Division] = field(default_factory=default_divisions)
    selected: int = 0

    def update(self, records: list[models.StandingsRecord],
               teams: Mapping[str, Team] | None = None) -> None:
        """Replace the table; divisions are always listed in the same order."""
        divisions = []
        for record in records:
            division_id = record.division.id
            if division_id not in DIVISIONS:
                logger.debug("Skipping standings for unknown division %d", division_id)
                continue
            divisions.append(Division(
                id=division_id,
                name=DIVISIONS[division_id],
                standings=[build_standing(r, teams) for r in record.team_records],
            ))
        divisions.sort(key=lambda d: d.id)
        self.divisions = divisions or default_divisions()
        if self.selected >= len(self.rows()):
            self.selected = 0

    def rows(self) -> list[StandingsRow]:
        rows = []
        for division in self.divisions:
            rows.append(StandingsRow(division.id, [division.name], is_division=True))
            for standing in division.standings:
                rows.append(StandingsRow(standing.team_id, standing.cells()))
        return rows

    def get_selected(self) -> int:
        """Id of the highlighted division or team, 0 when there is none."""
        rows = self.rows()
        if not 0 <= self.selected < len(rows):
            return 0
        return rows[self.selected].row_id

    def next(self) -> None:
        total = len(self.rows())
        if total:
            self.selected = (self.selected + 1) % total

    def previous(self) -> None:
        total = len(self.rows())
        if total:
            self.selected = (self.selected - 1) % total
