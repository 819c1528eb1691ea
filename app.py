# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0", "rich>=13.0"]
# ///
"""Terminal MLB Gameday dashboard.

Shows the day's schedule, the selected game's line score and win
probability, and a gameday view with the live (or a historical) at-bat,
the inning's play-by-play, the box score and the win probability table.
Two more tabs list the division standings and season stats for teams or
qualified players, and a date picker moves every tab to another day.

All mutable state lives in :class:`AppState` behind one re-entrant lock.
The poller thread and the UI thread (key presses and frame rendering) both
go through :class:`App`, which takes the lock for every read and write.

Usage::

    uv run app.py
    uv run app.py --date 2024-07-04
    uv run app.py --game-pk 745804 --interval 15
"""

from __future__ import annotations

import argparse
import logging
import os
import select
import sys
import termios
import threading
import tty
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Callable, Mapping, Sequence

from rich.console import Console
from rich.live import Live

import keys
import ui
from config import AppSettings, ConfigError, clamp_poll_interval, configure_logging, load_settings
from date_input import DateInput
from gameday import GamedayState
from league_stats import StatsState
from live_game_feed import (
    GameDataRequest,
    GameFeedPoller,
    PollResult,
    ScheduleResult,
    StandingsRequest,
    StatsRequest,
    TabDataResult,
    TabRequest,
)
from schedule import ScheduleState
from standings import StandingsState
from teams import Team, load_teams

logger = logging.getLogger("app")

REDRAW_INTERVAL = 0.5  # seconds, 2 fps when nothing changes
JOIN_TIMEOUT = 1.0  # seconds to wait for each background thread on exit


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

class Tab(str, Enum):
    SCOREBOARD = "scoreboard"
    GAMEDAY = "gameday"
    STATS = "stats"
    STANDINGS = "standings"
    HELP = "help"
    DATE_PICKER = "date_picker"


# tabs that remember where they were opened from
OVERLAY_TABS = (Tab.HELP, Tab.DATE_PICKER)
GAME_TABS = (Tab.SCOREBOARD, Tab.GAMEDAY)


@dataclass
class AppState:
    date: date
    gameday: GamedayState
    schedule: ScheduleState = field(default_factory=ScheduleState)
    standings: StandingsState = field(default_factory=StandingsState)
    stats: StatsState = field(default_factory=StatsState)
    date_input: DateInput = field(default_factory=DateInput)
    active_tab: Tab = Tab.SCOREBOARD
    previous_tab: Tab = Tab.SCOREBOARD
    boxscore_side: str = "away"
    full_screen: bool = False
    show_debug: bool = False
    loading: bool = False
    last_error: str | None = None
    epoch: int = 0
    pinned_game: int | None = None
    should_quit: bool = False

    def view_tab(self) -> Tab:
        """The tab whose data is on screen; the date picker sits on top of one."""
        if self.active_tab is Tab.DATE_PICKER:
            return self.previous_tab
        return self.active_tab


class App:
    """Shared application state plus every operation on it, each under the lock."""

    def __init__(self, settings: AppSettings, teams: Mapping[str, Team], day: date,
                 game_pk: int | None = None):
        self.settings = settings
        self.teams = teams
        self.lock = threading.RLock()
        self.state = AppState(date=day, gameday=GamedayState(teams), pinned_game=game_pk)
        if game_pk is not None:
            self.state.active_tab = Tab.GAMEDAY
            self.state.loading = True
        self.poller: GameFeedPoller | None = None
        self._changed = threading.Event()

    # -- helpers -----------------------------------------------------------

    def _selected_game_id(self) -> int | None:
        if self.state.pinned_game is not None:
            return self.state.pinned_game
        return self.state.schedule.get_selected_game_opt()

    def _mark_changed(self) -> None:
        self._changed.set()

    def wait_for_change(self, timeout: float) -> None:
        self._changed.wait(timeout)
        self._changed.clear()

    def _game_changed(self) -> None:
        """Start a new request epoch; results of older requests will be dropped."""
        self.state.epoch += 1
        self.state.loading = True
        self.state.last_error = None
        if self.poller is not None:
            self.poller.trigger()

    # -- poller side -------------------------------------------------------

    def current_request(self) -> GameDataRequest | None:
        with self.lock:
            if self.state.view_tab() not in GAME_TABS:
                return None
            game_id = self._selected_game_id()
            if game_id is None:
                return None
            return GameDataRequest(game_id=game_id, epoch=self.state.epoch)

    def apply_poll_result(self, result: PollResult) -> bool:
        """Merge a poll into the gameday state unless the user has moved on.

        Returns False (and changes nothing) when the result belongs to an
        older epoch or to a game that is no longer selected.  A feed for a
        different game than the one requested is reported as an error and
        the current snapshot is kept.
        """
        with self.lock:
            request = result.request
            if request.epoch != self.state.epoch or request.game_id != self._selected_game_id():
                return False
            self.state.loading = False
            if result.ok and result.feed.game_pk != request.game_id:
                logger.warning("Feed for game %d answered a request for %d",
                               result.feed.game_pk, request.game_id)
                self.state.last_error = f"Unusable game feed for {request.game_id}"
            elif result.ok:
                self.state.gameday.apply(result.feed, result.win_probability)
                self.state.last_error = None
            else:
                self.state.last_error = result.error
            self._mark_changed()
            return True

    def schedule_date(self) -> date:
        with self.lock:
            return self.state.date

    def apply_schedule(self, result: ScheduleResult) -> None:
        with self.lock:
            if result.date != self.state.date.isoformat():
                return
            if result.games is None:
                self.state.last_error = result.error
            else:
                favorite = self.settings.favorite_team
                self.state.schedule.update(result.games, favorite.name if favorite else None)
                if self.state.pinned_game is not None:
                    self.state.schedule.select_game(self.state.pinned_game)
                if self.state.schedule.get_selected_game_opt() is None:
                    self.state.loading = False
            self._mark_changed()

    def tab_request(self) -> TabRequest | None:
        """Standings or stats wanted by the tab on screen, if it shows either."""
        with self.lock:
            match self.state.view_tab():
                case Tab.STANDINGS:
                    return StandingsRequest(date=self.state.date)
                case Tab.STATS:
                    stats = self.state.stats
                    return StatsRequest(date=self.state.date, group=stats.group,
                                        player=stats.player)
                case _:
                    return None

    def apply_tab_data(self, result: TabDataResult) -> bool:
        """Load standings or stats; results for another tab, date or stat type are dropped."""
        with self.lock:
            if result.request != self.tab_request():
                return False
            if result.error is not None:
                self.state.last_error = result.error
            elif result.standings is not None:
                self.state.standings.update(result.standings, self.teams)
                self.state.last_error = None
            elif result.splits is not None:
                self.state.stats.update(result.splits)
                self.state.last_error = None
            self._mark_changed()
            return True

    # -- UI side -----------------------------------------------------------

    def active_tab(self) -> str:
        with self.lock:
            return self.state.active_tab.value

    def quit(self) -> None:
        with self.lock:
            self.state.should_quit = True
            self._mark_changed()

    def should_quit(self) -> bool:
        with self.lock:
            return self.state.should_quit

    def toggle_full_screen(self) -> None:
        with self.lock:
            self.state.full_screen = not self.state.full_screen

    def toggle_debug(self) -> None:
        with self.lock:
            self.state.show_debug = not self.state.show_debug

    def _trigger_poll(self) -> None:
        if self.poller is not None:
            self.poller.trigger()

    def _set_tab(self, tab: Tab) -> None:
        if tab in OVERLAY_TABS and self.state.active_tab not in OVERLAY_TABS:
            self.state.previous_tab = self.state.active_tab
        self.state.active_tab = tab

    def show_scoreboard(self) -> None:
        with self.lock:
            self._set_tab(Tab.SCOREBOARD)
            self.state.gameday.live()
        self._trigger_poll()

    def show_gameday(self) -> None:
        with self.lock:
            self._set_tab(Tab.GAMEDAY)
        self._trigger_poll()

    def show_stats(self) -> None:
        with self.lock:
            self._set_tab(Tab.STATS)
        self._trigger_poll()

    def show_standings(self) -> None:
        with self.lock:
            self._set_tab(Tab.STANDINGS)
        self._trigger_poll()

    def show_help(self) -> None:
        with self.lock:
            self._set_tab(Tab.HELP)

    def leave_help(self) -> None:
        with self.lock:
            if self.state.active_tab is Tab.HELP:
                self.state.active_tab = self.state.previous_tab

    def set_boxscore_side(self, side: str) -> None:
        with self.lock:
            self.state.boxscore_side = side

    def next_game(self) -> None:
        with self.lock:
            self.state.pinned_game = None
            self.state.schedule.next()
            self._game_changed()

    def previous_game(self) -> None:
        with self.lock:
            self.state.pinned_game = None
            self.state.schedule.previous()
            self._game_changed()

    def toggle_scoreboard_win_probability(self) -> None:
        with self.lock:
            self.state.schedule.toggle_win_probability()

    def with_gameday(self, action: Callable[[GamedayState], None]) -> None:
        with self.lock:
            action(self.state.gameday)

    # -- stats and standings -----------------------------------------------

    def with_stats(self, action: Callable[[StatsState], None]) -> None:
        with self.lock:
            action(self.state.stats)

    def with_standings(self, action: Callable[[StandingsState], None]) -> None:
        with self.lock:
            action(self.state.standings)

    def set_stat_group(self, group: str) -> None:
        with self.lock:
            changed = self.state.stats.set_group(group)
        if changed:
            self._trigger_poll()

    def set_stat_player(self, player: bool) -> None:
        with self.lock:
            changed = self.state.stats.set_player(player)
        if changed:
            self._trigger_poll()

    # -- date picker -------------------------------------------------------

    def open_date_picker(self) -> None:
        with self.lock:
            self.state.date_input.clear()
            self._set_tab(Tab.DATE_PICKER)

    def date_input_key(self, char: str) -> None:
        with self.lock:
            self.state.date_input.push(char)

    def date_input_backspace(self) -> None:
        with self.lock:
            self.state.date_input.pop()

    def date_input_step(self, forward: bool) -> None:
        with self.lock:
            self.state.date_input.step(forward, self.state.date)

    def cancel_date(self) -> None:
        with self.lock:
            self.state.date_input.clear()
            if self.state.active_tab is Tab.DATE_PICKER:
                self.state.active_tab = self.state.previous_tab

    def submit_date(self) -> bool:
        """Switch every tab to the entered date.

        An invalid entry keeps the picker open and flags the input.  A new
        date drops the schedule, any pinned game and the gameday snapshot,
        and starts a new request epoch before the schedule is fetched again.
        """
        with self.lock:
            today = datetime.now(self.settings.timezone).date()
            day = self.state.date_input.validate(today)
            if day is None:
                return False
            self.state.active_tab = self.state.previous_tab
            if day != self.state.date:
                logger.info("Date changed to %s", day.isoformat())
                self.state.date = day
                self.state.schedule.clear()
                self.state.pinned_game = None
                self.state.gameday.reset()
                self._game_changed()
        if self.poller is not None:
            self.poller.refresh_schedule()
        return True

    # -- input and drawing -------------------------------------------------

    def handle_key(self, key: str) -> None:
        if keys.handle_key(self, key):
            self._mark_changed()

    def render(self, height: int, width: int = 0):
        with self.lock:
            return ui.render_app(self.state, self.settings, self.teams, height, width)


# ---------------------------------------------------------------------------
# Keyboard
# ---------------------------------------------------------------------------

def _read_keys(app: App, stop_event: threading.Event) -> None:
    """Feed single key presses to the app until *stop_event* is set.

    Left and right arrows are passed through for the date picker; other
    escape sequences are dropped.  A lone Escape is passed through.
    """
    fd = sys.stdin.fileno()
    while not stop_event.is_set():
        ready, _, _ = select.select([fd], [], [], 0.1)
        if not ready:
            continue
        chunk = os.read(fd, 32).decode("utf-8", errors="ignore")
        if not chunk:
            app.quit()
            return
        if chunk.startswith(keys.ESCAPE) and len(chunk) > 1:
            if chunk in keys.ARROW_KEYS:
                app.handle_key(chunk)
            continue
        for key in chunk:
            app.handle_key(key)


def start_key_reader(
    app: App, stop_event: threading.Event,
) -> tuple[list | None, threading.Thread | None]:
    """Put the terminal in cbreak mode and start the reader thread.

    Returns the saved terminal attributes, so they can be restored, and the
    reader thread.  Both are None when stdin is not a terminal.
    """
    if not sys.stdin.isatty():
        return None, None
    fd = sys.stdin.fileno()
    saved = termios.tcgetattr(fd)
    tty.setcbreak(fd)
    thread = threading.Thread(target=_read_keys, args=(app, stop_event),
                              name="key-reader", daemon=True)
    thread.start()
    return saved, thread


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mlb-gameday",
        description="Follow MLB games live in the terminal.",
    )
    parser.add_argument(
        "--date", type=date.fromisoformat, default=None,
        help="Schedule date as YYYY-MM-DD (default: today in the configured timezone)",
    )
    parser.add_argument(
        "--game-pk", type=int, default=None,
        help="Open this game (gamePk) directly in the gameday view",
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to mlbt.toml (default: $XDG_CONFIG_HOME/mlbt/mlbt.toml)",
    )
    parser.add_argument(
        "--interval", type=float, default=None,
        help="Poll interval in seconds, 5-120 (default from config, 10)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    teams = load_teams()
    try:
        settings = load_settings(teams, args.config)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if args.interval is not None:
        settings = replace(settings, poll_interval=clamp_poll_interval(args.interval))

    log_path = configure_logging(settings)
    logger.info("Starting (log file %s)", log_path)

    day = args.date or datetime.now(settings.timezone).date()
    app = App(settings, teams, day, game_pk=args.game_pk)
    poller = GameFeedPoller(app, poll_interval=settings.poll_interval)
    app.poller = poller

    console = Console()
    stop_keys = threading.Event()
    saved_terminal, key_thread = start_key_reader(app, stop_keys)
    poller.start()
    try:
        with Live(app.render(console.size.height, console.size.width), console=console,
                  screen=True, auto_refresh=False) as live:
            while not app.should_quit():
                app.wait_for_change(REDRAW_INTERVAL)
                live.update(app.render(console.size.height, console.size.width), refresh=True)
    except KeyboardInterrupt:
        pass
    finally:
        poller.stop()
        stop_keys.set()
        poller.join(JOIN_TIMEOUT)
        if key_thread is not None:
            key_thread.join(JOIN_TIMEOUT)
        if saved_terminal is not None:
            termios.tcsetattr(sys.stdin.fileno(), termios.TCSADRAIN, saved_terminal)
    logger.info("Exiting")
    return 0


if __name__ == "__main__":
    sys.exit(main())
