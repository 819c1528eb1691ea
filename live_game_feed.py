# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Background polling of the MLB Stats API for the dashboard.

A :class:`GameFeedPoller` thread asks its target which game to fetch,
fetches the live feed and win probability *outside* the target's lock, and
hands the result back.  Every request carries the epoch the target had when
the request was made; the target drops results whose epoch or game no
longer matches, so a slow response for a game the user has already left
can never overwrite the new game's state.  The same thread refreshes the
schedule, and the standings or season stats while one of those tabs is
open.

Usage::

    poller = GameFeedPoller(app, poll_interval=10)
    poller.start()
    ...
    poller.trigger()   # user picked another game, poll now
    ...
    poller.stop()
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Protocol

from data.mlb_api import (
    MLBApiError,
    get_live_game_feed,
    get_player_stats,
    get_schedule_by_date,
    get_standings,
    get_team_stats,
    get_win_probability,
)
from models import (
    LiveFeed,
    StandingsRecord,
    StatSplit,
    WinProbabilityEntry,
    parse_live_feed,
    parse_stat_splits,
    parse_standings,
    parse_win_probability,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_POLL_INTERVAL = 10  # seconds
MIN_POLL_INTERVAL = 5
MAX_POLL_INTERVAL = 120
BACKOFF_POLL_INTERVAL = 30  # seconds, used when the feed is temporarily unavailable
SCHEDULE_POLL_INTERVAL = 60  # seconds

# Game states from the MLB Stats API; nothing changes in these, so they are
# polled at the schedule interval.
GAME_STATE_FINAL = "Final"
GAME_STATE_PREVIEW = "Preview"
IDLE_GAME_STATES = (GAME_STATE_FINAL, GAME_STATE_PREVIEW)

POLL_ERRORS = (MLBApiError, OSError, ValueError)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logger = logging.getLogger("live_game_feed")


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GameDataRequest:
    """Which game to fetch, tagged with the selection epoch it was made in."""
    game_id: int
    epoch: int


@dataclass
class PollResult:
    """Result of one poll of the live feed.

    Attributes:
        request: The request this result answers.
        feed: Parsed live feed (None on error).
        win_probability: Parsed win probability entries, or None when that
            fetch failed and the current series should be kept.
        error: Error message if the feed fetch failed.
    """
    request: GameDataRequest
    feed: LiveFeed | None = None
    win_probability: list[WinProbabilityEntry] | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.feed is not None


@dataclass
class ScheduleResult:
    date: str
    games: list[dict[str, Any]] | None = None
    error: str | None = None


@dataclass(frozen=True)
class StandingsRequest:
    date: date


@dataclass(frozen=True)
class StatsRequest:
    date: date
    group: str
    player: bool = False


TabRequest = StandingsRequest | StatsRequest


@dataclass
class TabDataResult:
    """Standings or stats for the tab that asked for them.

    Exactly one of ``standings``, ``splits`` and ``error`` is set.
    """
    request: TabRequest
    standings: list[StandingsRecord] | None = None
    splits: list[StatSplit] | None = None
    error: str | None = None


class PollTarget(Protocol):
    """What the poller needs from the application."""

    def current_request(self) -> GameDataRequest | None: ...

    def apply_poll_result(self, result: PollResult) -> bool: ...

    def schedule_date(self) -> date: ...

    def apply_schedule(self, result: ScheduleResult) -> None: ...

    def tab_request(self) -> TabRequest | None: ...

    def apply_tab_data(self, result: TabDataResult) -> bool: ...


# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------

def fetch_game_data(
    request: GameDataRequest,
    fetch_feed: Callable[[int], Any] | None = None,
    fetch_win_probability: Callable[[int], Any] | None = None,
) -> PollResult:
    """Fetch and parse the live feed and win probability for *request*.

    Errors are captured in the result rather than raised.  A payload that
    is not a feed for the requested game is an error too, so an empty or
    garbled response never replaces a good snapshot.  A failed win
    probability fetch does not fail the poll.
    """
    fetch_feed = fetch_feed or get_live_game_feed
    fetch_win_probability = fetch_win_probability or get_win_probability

    try:
        raw_feed = fetch_feed(request.game_id)
    except POLL_ERRORS as exc:
        error_msg = f"Failed to fetch game feed: {exc}"
        logger.warning(error_msg)
        return PollResult(request=request, error=error_msg)

    feed = parse_live_feed(raw_feed)
    if feed.game_pk != request.game_id:
        error_msg = f"Unusable game feed for {request.game_id}"
        logger.warning("%s (payload reports game %d)", error_msg, feed.game_pk)
        return PollResult(request=request, error=error_msg)

    win_probability = None
    try:
        win_probability = parse_win_probability(fetch_win_probability(request.game_id))
    except POLL_ERRORS as exc:
        logger.warning("Failed to fetch win probability for %d: %s", request.game_id, exc)

    return PollResult(request=request, feed=feed, win_probability=win_probability)


def fetch_schedule(
    day: date,
    fetch_fn: Callable[[str], list[dict[str, Any]]] | None = None,
) -> ScheduleResult:
    fetch_fn = fetch_fn or get_schedule_by_date
    day_str = day.isoformat()
    try:
        return ScheduleResult(date=day_str, games=fetch_fn(day_str))
    except POLL_ERRORS as exc:
        error_msg = f"Failed to fetch schedule: {exc}"
        logger.warning(error_msg)
        return ScheduleResult(date=day_str, error=error_msg)


def fetch_tab_data(
    request: TabRequest,
    fetch_standings_fn: Callable[[str], Any] | None = None,
    fetch_team_stats_fn: Callable[[str, str], Any] | None = None,
    fetch_player_stats_fn: Callable[[str, str], Any] | None = None,
) -> TabDataResult:
    """Fetch the standings or the season stats described by *request*."""
    day = request.date.isoformat()
    try:
        if isinstance(request, StandingsRequest):
            fetch = fetch_standings_fn or get_standings
            return TabDataResult(request=request, standings=parse_standings(fetch(day)))
        if request.player:
            fetch = fetch_player_stats_fn or get_player_stats
        else:
            fetch = fetch_team_stats_fn or get_team_stats
        return TabDataResult(request=request, splits=parse_stat_splits(fetch(day, request.group)))
    except POLL_ERRORS as exc:
        what = "standings" if isinstance(request, StandingsRequest) else f"{request.group} stats"
        error_msg = f"Failed to fetch {what}: {exc}"
        logger.warning(error_msg)
        return TabDataResult(request=request, error=error_msg)


# ---------------------------------------------------------------------------
# Poller thread
# ---------------------------------------------------------------------------

class GameFeedPoller(threading.Thread):
    """Polls the current game every ``poll_interval`` seconds.

    Backs off to :data:`BACKOFF_POLL_INTERVAL` after a failed poll, slows to
    :data:`SCHEDULE_POLL_INTERVAL` for games that are final or not started,
    and refreshes the schedule every :data:`SCHEDULE_POLL_INTERVAL` seconds.
    Standings and stats are fetched when the target asks for different ones
    and otherwise on the schedule interval.
    """

    def __init__(
        self,
        target: PollTarget,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        fetch_feed: Callable[[int], Any] | None = None,
        fetch_win_probability: Callable[[int], Any] | None = None,
        fetch_schedule_fn: Callable[[str], list[dict[str, Any]]] | None = None,
        fetch_standings_fn: Callable[[str], Any] | None = None,
        fetch_team_stats_fn: Callable[[str, str], Any] | None = None,
        fetch_player_stats_fn: Callable[[str, str], Any] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(name="game-feed-poller", daemon=True)
        self.poll_target = target
        self.poll_interval = min(max(poll_interval, MIN_POLL_INTERVAL), MAX_POLL_INTERVAL)
        self.consecutive_errors = 0
        self.total_polls = 0
        self.game_state: str | None = None
        self._fetch_feed = fetch_feed
        self._fetch_win_probability = fetch_win_probability
        self._fetch_schedule = fetch_schedule_fn
        self._fetch_standings = fetch_standings_fn
        self._fetch_team_stats = fetch_team_stats_fn
        self._fetch_player_stats = fetch_player_stats_fn
        self._clock = clock
        self._next_schedule_poll = 0.0
        self._next_tab_poll = 0.0
        self._last_tab_request: TabRequest | None = None
        self._wake = threading.Event()
        self._stop_event = threading.Event()

    # -- control -----------------------------------------------------------

    def trigger(self) -> None:
        """Poll now instead of waiting out the interval."""
        self._wake.set()

    def refresh_schedule(self) -> None:
        self._next_schedule_poll = 0.0
        self._wake.set()

    def stop(self) -> None:
        self._stop_event.set()
        self._wake.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    # -- one iteration -----------------------------------------------------

    def poll_once(self) -> PollResult | None:
        """Fetch the target's current game and hand the result back.

        Returns None when no game is selected.
        """
        request = self.poll_target.current_request()
        if request is None:
            return None

        result = fetch_game_data(request, self._fetch_feed, self._fetch_win_probability)
        self.total_polls += 1
        if result.ok:
            self.consecutive_errors = 0
            self.game_state = result.feed.game_data.status.abstract_game_state
        else:
            self.consecutive_errors += 1
        applied = self.poll_target.apply_poll_result(result)
        if not applied:
            logger.debug("Discarded stale result for game %d (epoch %d)",
                         request.game_id, request.epoch)
        return result

    def poll_schedule(self) -> ScheduleResult:
        result = fetch_schedule(self.poll_target.schedule_date(), self._fetch_schedule)
        self.poll_target.apply_schedule(result)
        return result

    def poll_tab_data(self) -> TabDataResult | None:
        """Fetch the standings or stats the target is showing, if any."""
        request = self.poll_target.tab_request()
        if request is None:
            return None
        result = fetch_tab_data(request, self._fetch_standings, self._fetch_team_stats,
                                self._fetch_player_stats)
        self._last_tab_request = request
        if not self.poll_target.apply_tab_data(result):
            logger.debug("Discarded stale %s", type(request).__name__)
        return result

    def _tab_data_due(self, now: float) -> bool:
        request = self.poll_target.tab_request()
        if request is None:
            return False
        return request != self._last_tab_request or now >= self._next_tab_poll

    def next_delay(self) -> float:
        if self.consecutive_errors:
            return BACKOFF_POLL_INTERVAL
        if self.game_state in IDLE_GAME_STATES:
            return max(self.poll_interval, SCHEDULE_POLL_INTERVAL)
        return self.poll_interval

    def run(self) -> None:
        logger.info("Poller started (interval %.0fs)", self.poll_interval)
        while not self._stop_event.is_set():
            self._wake.clear()
            now = self._clock()
            if now >= self._next_schedule_poll:
                self.poll_schedule()
                self._next_schedule_poll = now + SCHEDULE_POLL_INTERVAL
            if self._tab_data_due(now):
                self.poll_tab_data()
                self._next_tab_poll = now + SCHEDULE_POLL_INTERVAL
            self.poll_once()
            self._wake.wait(self.next_delay())
        logger.info("Poller stopped after %d polls", self.total_polls)
