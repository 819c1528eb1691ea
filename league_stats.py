# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Season stats table for teams or qualified players.

Stats are stored by column in display order.  Each column can be hidden
from the options pane, and any visible column can be used to sort the
rows.  Pressing sort again on the same column flips the direction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

import models

logger = logging.getLogger("league_stats")

PITCHING = "pitching"
HITTING = "hitting"

TEAM_COLUMN = "Team"
PLAYER_COLUMN = "Player"
NAME_COLUMNS = (TEAM_COLUMN, PLAYER_COLUMN)

# (header, model field, description, shown by default), left to right
PITCHING_COLUMNS = [
    ("W", "wins", "wins", True),
    ("L", "losses", "losses", True),
    ("ERA", "era", "earned run average", True),
    ("G", "games_played", "games played", True),
    ("GS", "games_started", "games started", True),
    ("CG", "complete_games", "complete games", True),
    ("SHO", "shutouts", "shutouts", False),
    ("SV", "saves", "saves", True),
    ("SVO", "save_opportunities", "save opportunities", True),
    ("IP", "innings_pitched", "innings pitched", True),
    ("H", "hits", "hits", True),
    ("R", "runs", "runs", True),
    ("ER", "earned_runs", "earned runs", True),
    ("HR", "home_runs", "home runs", True),
    ("HB", "hit_batsmen", "hit batsmen", False),
    ("BB", "base_on_balls", "walks", True),
    ("SO", "strike_outs", "strike outs", True),
]

HITTING_COLUMNS = [
    ("G", "games_played", "games played", True),
    ("AB", "at_bats", "at bats", True),
    ("AVG", "avg", "batting avg", True),
    ("OBP", "obp", "on-base percent", True),
    ("SLG", "slg", "slugging percent", True),
    ("OPS", "ops", "on-base + slug", True),
    ("R", "runs", "runs", True),
    ("H", "hits", "hits", True),
    ("2B", "doubles", "doubles", True),
    ("3B", "triples", "triples", True),
    ("HR", "home_runs", "home runs", True),
    ("RBI", "rbi", "runs batted in", True),
    ("BB", "base_on_balls", "walks", True),
    ("SO", "strike_outs", "strike outs", True),
    ("SB", "stolen_bases", "stolen bases", True),
    ("CS", "caught_stealing", "caught stealing", True),
]

GROUP_COLUMNS = {PITCHING: PITCHING_COLUMNS, HITTING: HITTING_COLUMNS}
GROUP_MODELS = {PITCHING: models.PitchingStat, HITTING: models.HittingStat}


class SortOrder(str, Enum):
    ASCENDING = "^"
    DESCENDING = "v"

    def flipped(self) -> SortOrder:
        if self is SortOrder.ASCENDING:
            return SortOrder.DESCENDING
        return SortOrder.ASCENDING


@dataclass
class StatColumn:
    description: str
    active: bool
    values: list[str] = field(default_factory=list)


def _sort_value(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        return 0.0


@dataclass
class StatsState:
    group: str = PITCHING
    player: bool = False
    columns: dict[str, StatColumn] = field(default_factory=dict)
    selected: int = 0
    sort_column: str | None = None
    sort_order: SortOrder = SortOrder.ASCENDING
    show_options: bool = True

    def __post_init__(self):
        if not self.columns:
            self.columns = self._empty_columns()

    # -- building ----------------------------------------------------------

    def name_column(self) -> str:
        return PLAYER_COLUMN if self.player else TEAM_COLUMN

    def _empty_columns(self) -> dict[str, StatColumn]:
        columns = {self.name_column(): StatColumn("", True)}
        for key, _, description, active in GROUP_COLUMNS[self.group]:
            columns[key] = StatColumn(description, active)
        return columns

    def update(self, splits: list[models.StatSplit]) -> None:
        """Load *splits* into the columns, keeping which columns are shown."""
        columns = self._empty_columns()
        for key, column in columns.items():
            previous = self.columns.get(key)
            if previous is not None:
                column.active = previous.active

        stat_model = GROUP_MODELS[self.group]
        for split in splits:
            stat = stat_model.model_validate(split.stat)
            columns[self.name_column()].values.append(split.display_name())
            for key, field_name, _, _ in GROUP_COLUMNS[self.group]:
                columns[key].values.append(str(getattr(stat, field_name)))
        self.columns = columns
        logger.debug("Loaded %d %s rows", len(splits), self.group)

    def _reset(self) -> None:
        self.columns = self._empty_columns()
        self.selected = 0
        self.sort_column = None
        self.sort_order = SortOrder.ASCENDING

    def set_group(self, group: str) -> bool:
        """Switch between pitching and hitting; returns True if it changed."""
        if group not in GROUP_COLUMNS:
            raise ValueError(f"Unknown stat group: {group}")
        if group == self.group:
            return False
        self.group = group
        self._reset()
        return True

    def set_player(self, player: bool) -> bool:
        """Switch between team and player stats; returns True if it changed."""
        if player == self.player:
            return False
        self.player = player
        self._reset()
        return True

    # -- options pane ------------------------------------------------------

    def keys(self) -> list[str]:
        return list(self.columns)

    def selected_key(self) -> str:
        keys = self.keys()
        return keys[self.selected] if 0 <= self.selected < len(keys) else keys[0]

    def next(self) -> None:
        self.selected = (self.selected + 1) % len(self.columns)

    def previous(self) -> None:
        self.selected = (self.selected - 1) % len(self.columns)

    def toggle_options(self) -> None:
        self.show_options = not self.show_options

    def toggle_stat(self) -> None:
        """Show or hide the selected column; the name column is always shown."""
        key = self.selected_key()
        if key in NAME_COLUMNS:
            return
        column = self.columns[key]
        column.active = not column.active
        if not column.active and key == self.sort_column:
            self.sort_column = None

    def store_sort_column(self) -> None:
        """Sort by the selected column, flipping the direction on every press."""
        key = self.selected_key()
        if not self.columns[key].active:
            return
        self.sort_column = key
        self.sort_order = self.sort_order.flipped()

    # -- table -------------------------------------------------------------

    def table(self) -> tuple[list[str], list[list[str]]]:
        """Header and rows of the visible columns, sorted if a sort is set."""
        active = [(key, column) for key, column in self.columns.items() if column.active]
        header = [key for key, _ in active]
        count = len(self.columns[self.name_column()].values)
        rows = [[column.values[i] for _, column in active] for i in range(count)]

        if self.sort_column in header:
            index = header.index(self.sort_column)
            reverse = self.sort_order is SortOrder.DESCENDING
            if self.sort_column in NAME_COLUMNS:
                rows.sort(key=lambda row: row[index], reverse=reverse)
            else:
                rows.sort(key=lambda row: _sort_value(row[index]), reverse=reverse)
        return header, rows
