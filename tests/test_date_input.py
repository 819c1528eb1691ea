# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0"]
# ///
"""Tests for the date picker input.

Validates date_input.py:
  1. YYYY-MM-DD and t / today are accepted, anything else is flagged
  2. Validation consumes the typed text
  3. Arrow steps move one day at a time from the shown date
"""

import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from date_input import DateInput

TODAY = date(2024, 7, 4)


def _typed(text: str) -> DateInput:
    entry = DateInput()
    for char in text:
        entry.push(char)
    return entry


class TestValidate:
    def test_iso_date(self):
        entry = _typed("2023-10-01")
        assert entry.validate(TODAY) == date(2023, 10, 1)
        assert entry.is_valid
        assert entry.text == ""

    @pytest.mark.parametrize("text", ["t", "today"])
    def test_today(self, text):
        assert _typed(text).validate(TODAY) == TODAY

    @pytest.mark.parametrize("text", ["", "tomorrow", "2023-13-01", "10/01/2023", "2023-1-1x"])
    def test_invalid(self, text):
        entry = _typed(text)
        assert entry.validate(TODAY) is None
        assert entry.is_valid is False
        assert entry.text == ""

    def test_typing_clears_invalid_flag(self):
        entry = _typed("nope")
        entry.validate(TODAY)
        entry.push("2")
        assert entry.is_valid is True


class TestEditing:
    def test_pop(self):
        entry = _typed("2024-07-0")
        entry.pop()
        assert entry.text == "2024-07-"

    def test_pop_empty(self):
        entry = DateInput()
        entry.pop()
        assert entry.text == ""

    def test_clear(self):
        entry = _typed("x")
        entry.is_valid = False
        entry.clear()
        assert entry == DateInput()


class TestStep:
    def test_forward_and_back(self):
        entry = DateInput()
        assert entry.step(True, TODAY) == date(2024, 7, 5)
        assert entry.step(True, TODAY) == date(2024, 7, 6)
        assert entry.step(False, TODAY) == date(2024, 7, 5)
        assert entry.text == "2024-07-05"

    def test_step_then_submit(self):
        entry = DateInput()
        entry.step(False, TODAY)
        assert entry.validate(TODAY) == date(2024, 7, 3)
        assert entry.offset == 0

    def test_month_boundary(self):
        entry = DateInput()
        assert entry.step(False, date(2024, 3, 1)) == date(2024, 2, 29)
