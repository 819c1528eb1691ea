# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Per-at-bat win probability series for the current game."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from models import WinProbabilityEntry


@dataclass(frozen=True)
class WinProbabilityAtBat:
    at_bat_index: int = 0
    is_top_inning: bool = True
    inning: int = 1
    home_team_wp: float = 50.0
    away_team_wp: float = 50.0
    home_team_wp_added: float = 0.0
    leverage_index: float = 0.0

    @classmethod
    def from_entry(cls, entry: WinProbabilityEntry) -> WinProbabilityAtBat:
        return cls(
            at_bat_index=entry.at_bat_index,
            is_top_inning=entry.about.is_top_inning,
            inning=entry.about.inning,
            home_team_wp=entry.home_team_win_probability,
            away_team_wp=entry.away_team_win_probability,
            home_team_wp_added=entry.home_team_win_probability_added,
            leverage_index=entry.leverage_index or 0.0,
        )


NEUTRAL_SAMPLE = WinProbabilityAtBat()


class WinProbabilitySeries:
    """Ordered at-bat index -> sample mapping, never empty.

    The series is replaced wholesale from its own document; an empty
    document leaves a single neutral 50/50 sample at index 0.
    """

    def __init__(self, samples: Iterable[WinProbabilityAtBat] = ()) -> None:
        self._samples: dict[int, WinProbabilityAtBat] = {}
        self.replace(samples)

    @classmethod
    def from_entries(cls, entries: Iterable[WinProbabilityEntry]) -> WinProbabilitySeries:
        return cls(WinProbabilityAtBat.from_entry(e) for e in entries)

    def replace(self, samples: Iterable[WinProbabilityAtBat]) -> None:
        self._samples = {s.at_bat_index: s for s in samples}
        if not self._samples:
            self._samples[NEUTRAL_SAMPLE.at_bat_index] = NEUTRAL_SAMPLE

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self):
        return iter(self._samples.values())

    def get(self, at_bat_index: int) -> WinProbabilityAtBat | None:
        return self._samples.get(at_bat_index)

    def position_of(self, at_bat_index: int) -> int | None:
        """Position of an at-bat in series order, or None if absent."""
        for pos, index in enumerate(self._samples):
            if index == at_bat_index:
                return pos
        return None

    def samples(self) -> list[WinProbabilityAtBat]:
        return list(self._samples.values())

    def latest(self) -> WinProbabilityAtBat:
        return next(reversed(self._samples.values()))
