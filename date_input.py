# /// script
# requires-python = ">=3.12"
# ///
"""Text entry for the date picker.

Accepts ``YYYY-MM-DD``, or ``t``/``today`` for today in the configured
timezone.  The arrow keys move the candidate one day at a time from the
date currently shown and write it into the input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta

logger = logging.getLogger("date_input")

DATE_FORMAT = "%Y-%m-%d"
TODAY_WORDS = ("t", "today")


@dataclass
class DateInput:
    text: str = ""
    is_valid: bool = True
    offset: int = 0

    def push(self, char: str) -> None:
        self.is_valid = True
        self.text += char

    def pop(self) -> None:
        self.text = self.text[:-1]

    def clear(self) -> None:
        self.text = ""
        self.is_valid = True
        self.offset = 0

    def step(self, forward: bool, base: date) -> date:
        """Move the candidate one day from *base* and show it in the input."""
        self.offset += 1 if forward else -1
        candidate = base + timedelta(days=self.offset)
        self.text = candidate.isoformat()
        self.is_valid = True
        return candidate

    def validate(self, today: date) -> date | None:
        """Consume the input; returns the date, or None and marks it invalid."""
        text, self.text = self.text.strip(), ""
        self.offset = 0
        if text in TODAY_WORDS:
            self.is_valid = True
            return today
        try:
            parsed = datetime.strptime(text, DATE_FORMAT).date()
        except ValueError:
            logger.debug("Rejected date input %r", text)
            self.is_valid = False
            return None
        self.is_valid = True
        return parsed
