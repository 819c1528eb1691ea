# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for the win probability series.

Validates win_probability.py:
  1. Samples built from the parsed document
  2. The series is never empty
  3. Positions and lookups by at-bat index
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import models
from feed_builders import parsed_win_probability
from win_probability import NEUTRAL_SAMPLE, WinProbabilityAtBat, WinProbabilitySeries


class TestSamples:
    def test_from_entry(self):
        entry = parsed_win_probability([(3, 61.5)])[0]
        sample = WinProbabilityAtBat.from_entry(entry)
        assert sample.at_bat_index == 3
        assert sample.home_team_wp == 61.5
        assert sample.away_team_wp == 38.5
        assert sample.leverage_index == 1.25
        assert sample.is_top_inning is False

    def test_missing_leverage_is_zero(self):
        entry = models.WinProbabilityEntry.model_validate({"atBatIndex": 1})
        assert WinProbabilityAtBat.from_entry(entry).leverage_index == 0.0


class TestSeries:
    def test_empty_series_has_neutral_sample(self):
        series = WinProbabilitySeries()
        assert series.samples() == [NEUTRAL_SAMPLE]
        assert series.latest() is NEUTRAL_SAMPLE

    def test_empty_document(self):
        series = WinProbabilitySeries.from_entries([])
        assert len(series) == 1
        assert series.get(0) == NEUTRAL_SAMPLE

    def test_replace_wholesale(self):
        series = WinProbabilitySeries.from_entries(parsed_win_probability([(0, 50.0), (1, 55.0)]))
        series.replace([WinProbabilityAtBat(at_bat_index=9)])
        assert [s.at_bat_index for s in series] == [9]

    def test_position_and_latest(self):
        series = WinProbabilitySeries.from_entries(
            parsed_win_probability([(0, 50.0), (1, 55.0), (2, 45.0)]))
        assert series.position_of(1) == 1
        assert series.position_of(7) is None
        assert series.latest().at_bat_index == 2
        assert series.get(2).home_team_wp == 45.0
