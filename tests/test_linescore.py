# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for the line score builder.

Validates linescore.py:
  1. Per-inning runs and R/H/E totals for both sides
  2. Abbreviations from the feed
  3. Defaults when the game has not started
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from feed_builders import parsed_feed
from linescore import Linescore, build_linescore


class TestBuildLinescore:
    def test_runs_and_totals(self):
        linescore = build_linescore(parsed_feed(innings=[(1, 0), (0, 2), (3, 0)]))
        assert linescore.away.inning_runs == (1, 0, 3)
        assert linescore.home.inning_runs == (0, 2, 0)
        assert (linescore.away.runs, linescore.away.hits, linescore.away.errors) == (4, 3, 0)
        assert linescore.home.runs == 2
        assert linescore.current_inning == 3

    def test_abbreviations(self):
        linescore = build_linescore(parsed_feed())
        assert linescore.away.abbreviation == "SEA"
        assert linescore.home.abbreviation == "HOU"

    def test_not_started(self):
        linescore = build_linescore(parsed_feed())
        assert linescore.current_inning == 0
        assert linescore.away.inning_runs == ()
        assert linescore.batting_side == "away"

    def test_defaults(self):
        linescore = Linescore()
        assert linescore.away.abbreviation == "A"
        assert linescore.home.abbreviation == "H"
