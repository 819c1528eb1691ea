# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Keyboard bindings.

Global keys work on every tab; the rest depend on the active tab.  While
the date picker is open every key except ``q`` goes to the date input.
Every handler goes through :class:`app.App` methods, which take the shared
lock.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from league_stats import HITTING, PITCHING

if TYPE_CHECKING:
    from app import App

logger = logging.getLogger("keys")

ESCAPE = "\x1b"
RIGHT = "\x1b[C"
LEFT = "\x1b[D"
ARROW_KEYS = (RIGHT, LEFT)

Handler = Callable[["App"], None]


def _gameday(action: Callable) -> Handler:
    def handler(app: App) -> None:
        app.with_gameday(action)
    return handler


def _stats(action: Callable) -> Handler:
    def handler(app: App) -> None:
        app.with_stats(action)
    return handler


def _standings(action: Callable) -> Handler:
    def handler(app: App) -> None:
        app.with_standings(action)
    return handler


GLOBAL_KEYS: dict[str, Handler] = {
    "q": lambda app: app.quit(),
    "f": lambda app: app.toggle_full_screen(),
    "d": lambda app: app.toggle_debug(),
    "1": lambda app: app.show_scoreboard(),
    "2": lambda app: app.show_gameday(),
    "3": lambda app: app.show_stats(),
    "4": lambda app: app.show_standings(),
    "?": lambda app: app.show_help(),
    "h": lambda app: app.set_boxscore_side("home"),
    "a": lambda app: app.set_boxscore_side("away"),
}

SCOREBOARD_KEYS: dict[str, Handler] = {
    "j": lambda app: app.next_game(),
    "k": lambda app: app.previous_game(),
    "w": lambda app: app.toggle_scoreboard_win_probability(),
    ":": lambda app: app.open_date_picker(),
    "\r": lambda app: app.show_gameday(),
    "\n": lambda app: app.show_gameday(),
}

GAMEDAY_KEYS: dict[str, Handler] = {
    "i": _gameday(lambda g: g.toggle_info()),
    "p": _gameday(lambda g: g.toggle_at_bat()),
    "b": _gameday(lambda g: g.toggle_boxscore()),
    "w": _gameday(lambda g: g.toggle_win_probability()),
    "j": _gameday(lambda g: g.previous_at_bat()),
    "k": _gameday(lambda g: g.next_at_bat()),
    "l": _gameday(lambda g: g.live()),
    "s": _gameday(lambda g: g.start()),
}

STATS_KEYS: dict[str, Handler] = {
    "j": _stats(lambda s: s.next()),
    "k": _stats(lambda s: s.previous()),
    "o": _stats(lambda s: s.toggle_options()),
    "s": _stats(lambda s: s.store_sort_column()),
    "\r": _stats(lambda s: s.toggle_stat()),
    "\n": _stats(lambda s: s.toggle_stat()),
    "p": lambda app: app.set_stat_group(PITCHING),
    "h": lambda app: app.set_stat_group(HITTING),
    "l": lambda app: app.set_stat_player(True),
    "t": lambda app: app.set_stat_player(False),
    ":": lambda app: app.open_date_picker(),
}

STANDINGS_KEYS: dict[str, Handler] = {
    "j": _standings(lambda s: s.next()),
    "k": _standings(lambda s: s.previous()),
    ":": lambda app: app.open_date_picker(),
}

HELP_KEYS: dict[str, Handler] = {
    ESCAPE: lambda app: app.leave_help(),
}

# everything else typed in the date picker goes into the input
DATE_PICKER_KEYS: dict[str, Handler] = {
    "q": lambda app: app.quit(),
    "\r": lambda app: app.submit_date(),
    "\n": lambda app: app.submit_date(),
    ESCAPE: lambda app: app.cancel_date(),
    "\x7f": lambda app: app.date_input_backspace(),
    "\b": lambda app: app.date_input_backspace(),
    RIGHT: lambda app: app.date_input_step(True),
    LEFT: lambda app: app.date_input_step(False),
}

TAB_KEYS: dict[str, dict[str, Handler]] = {
    "scoreboard": SCOREBOARD_KEYS,
    "gameday": GAMEDAY_KEYS,
    "stats": STATS_KEYS,
    "standings": STANDINGS_KEYS,
    "help": HELP_KEYS,
}

HELP_TEXT: list[tuple[str, str]] = [
    ("q", "quit"),
    ("f", "toggle full screen"),
    ("d", "toggle debug info"),
    ("1", "scoreboard"),
    ("2", "gameday"),
    ("3", "stats"),
    ("4", "standings"),
    ("?", "help, Esc to leave"),
    ("h / a", "home / away box score"),
    ("scoreboard j / k", "next / previous game"),
    ("scoreboard Enter", "open the selected game"),
    ("scoreboard w", "toggle win probability"),
    (":", "pick a date (YYYY-MM-DD or t), Left / Right step a day, Esc cancels"),
    ("gameday j / k", "previous / next at-bat"),
    ("gameday l", "follow the live at-bat"),
    ("gameday s", "first at-bat of the game"),
    ("gameday i / p / b / w", "toggle info / pitches / box score / win probability"),
    ("stats p / h", "pitching / hitting"),
    ("stats t / l", "team / player"),
    ("stats j / k", "move through the stat options"),
    ("stats Enter", "show or hide the selected stat"),
    ("stats s", "sort by the selected stat, again to flip"),
    ("stats o", "toggle the stat options"),
    ("standings j / k", "move through the standings"),
]


def _handle_date_picker(app: App, key: str) -> bool:
    handler = DATE_PICKER_KEYS.get(key)
    if handler is not None:
        handler(app)
        return True
    if len(key) == 1 and key.isprintable():
        app.date_input_key(key)
        return True
    return False


def handle_key(app: App, key: str) -> bool:
    """Dispatch one key press.  Returns True if the key did something."""
    tab = app.active_tab()
    if tab == "date_picker":
        return _handle_date_picker(app, key)
    tab_handler = TAB_KEYS.get(tab, {}).get(key)
    handler = tab_handler or GLOBAL_KEYS.get(key)
    if handler is None:
        logger.debug("Unbound key %r", key)
        return False
    handler(app)
    return True
