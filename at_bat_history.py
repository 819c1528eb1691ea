# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Indexed history of reconstructed at-bats for one game."""

from __future__ import annotations

from typing import Iterator

from at_bat import AtBat

DEFAULT_AT_BAT = AtBat()


class AtBatHistory:
    """Insertion-ordered mapping of at-bat index to :class:`AtBat`.

    Entries are overwritten wholesale when the same index is reconstructed
    again and keep their original position.  Lookups of "the latest" at-bat
    never fail; a missing index resolves to :data:`DEFAULT_AT_BAT`.
    """

    def __init__(self) -> None:
        self._at_bats: dict[int, AtBat] = {}

    def __len__(self) -> int:
        return len(self._at_bats)

    def __contains__(self, index: object) -> bool:
        return index in self._at_bats

    def __iter__(self) -> Iterator[AtBat]:
        return iter(self._at_bats.values())

    def upsert(self, at_bat: AtBat) -> None:
        self._at_bats[at_bat.index] = at_bat

    def get(self, index: int) -> AtBat | None:
        return self._at_bats.get(index)

    def latest_or_default(self, current_index: int) -> AtBat:
        return self._at_bats.get(current_index, DEFAULT_AT_BAT)

    def get_or_fallback(self, selected: int | None, current_index: int) -> tuple[AtBat, bool]:
        """Resolve a selected index, falling back to the current at-bat.

        Returns ``(at_bat, is_current)``.  An unknown selection is treated as
        the live at-bat rather than an error.
        """
        index = current_index if selected is None else selected
        at_bat = self._at_bats.get(index)
        if at_bat is None:
            return self.latest_or_default(current_index), True
        return at_bat, index == current_index

    def count_events(self) -> int:
        """Total events across all at-bats plus one line per at-bat result."""
        return sum(len(ab.events) + 1 for ab in self._at_bats.values())

    def indices(self) -> list[int]:
        return list(self._at_bats)

    def sorted_indices(self) -> list[int]:
        return sorted(self._at_bats)

    def values(self) -> list[AtBat]:
        return list(self._at_bats.values())

    def in_half_inning(self, inning: int, is_top: bool) -> list[AtBat]:
        return [
            ab for ab in self._at_bats.values()
            if ab.inning == inning and ab.is_top_inning == is_top
        ]

    def clear(self) -> None:
        self._at_bats.clear()
