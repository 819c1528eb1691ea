# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Which at-bat the user is looking at.

``selected is None`` means "follow live": every view resolves to the
current at-bat of the session.  An explicit selection is only a hint;
if the index is unknown the views fall back to the live at-bat.

Stepping through at-bats clamps at the first and last known index and
never wraps (unlike the schedule list, which does).
"""

from __future__ import annotations

from dataclasses import dataclass

from at_bat import AtBat
from at_bat_history import AtBatHistory


@dataclass
class AtBatSelection:
    selected: int | None = None

    def select(self, index: int) -> None:
        self.selected = index

    def go_live(self) -> None:
        self.selected = None

    def is_following_live(self) -> bool:
        return self.selected is None

    def resolve(self, history: AtBatHistory, current_index: int) -> tuple[AtBat, bool]:
        return history.get_or_fallback(self.selected, current_index)

    def _start_position(self, ordered: list[int], history: AtBatHistory,
                        current_index: int) -> int:
        for index in (self.selected, current_index):
            if index is not None and index in history:
                return ordered.index(index)
        # Nothing resolvable yet: treat the newest known at-bat as the start.
        return len(ordered) - 1

    def move_to_previous(self, history: AtBatHistory, current_index: int) -> None:
        ordered = history.sorted_indices()
        if not ordered:
            return
        pos = self._start_position(ordered, history, current_index)
        self.selected = ordered[max(pos - 1, 0)]

    def move_to_next(self, history: AtBatHistory, current_index: int) -> None:
        ordered = history.sorted_indices()
        if not ordered:
            return
        pos = self._start_position(ordered, history, current_index)
        self.selected = ordered[min(pos + 1, len(ordered) - 1)]

    def move_to_start(self, history: AtBatHistory) -> None:
        ordered = history.sorted_indices()
        if ordered:
            self.selected = ordered[0]
