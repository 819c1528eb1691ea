# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Client for the MLB Stats API (statsapi.mlb.com).

Fetches the documents the dashboard needs: the live game feed, the
per-at-bat win probability list, the day's schedule, the standings and
season stats.  All functions return plain Python dicts/lists parsed from
the API's JSON responses; interpretation happens in :mod:`models`,
:mod:`schedule`, :mod:`standings` and :mod:`league_stats`.

Nothing is cached.  Every call goes to the network.

Usage::

    from data.mlb_api import (
        get_live_game_feed,
        get_win_probability,
        get_schedule_by_date,
        get_standings,
        get_team_stats,
        get_player_stats,
    )
"""

from __future__ import annotations

import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any

logger = logging.getLogger("mlb_api")


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

BASE_URL = "https://statsapi.mlb.com/api"
DEFAULT_TIMEOUT = 10  # seconds
MAX_RETRIES = 3
RETRY_BACKOFF_BASE = 1.0  # seconds; actual delay = base * 2^attempt
USER_AGENT = "mlb-gameday/0.1"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class MLBApiError(Exception):
    """Base exception for MLB Stats API errors."""

    def __init__(self, message: str, status_code: int | None = None,
                 url: str | None = None):
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class MLBApiNotFoundError(MLBApiError):
    """Raised when a resource is not found (404)."""


class MLBApiConnectionError(MLBApiError):
    """Raised when a connection to the API cannot be established."""


class MLBApiTimeoutError(MLBApiError):
    """Raised when a request to the API times out."""


# ---------------------------------------------------------------------------
# Low-level HTTP helpers
# ---------------------------------------------------------------------------

def _fetch_json(url: str, timeout: int = DEFAULT_TIMEOUT,
                max_retries: int = MAX_RETRIES) -> Any:
    """Fetch JSON from *url* with retry logic for transient failures.

    Retries on connection errors, timeouts and 5xx responses using
    exponential backoff.  Raises :class:`MLBApiError` subclasses for
    non-retryable failures.

    Args:
        url: Full URL to fetch.
        timeout: Request timeout in seconds.
        max_retries: Maximum attempts for transient errors.

    Returns:
        The decoded JSON document.

    Raises:
        MLBApiNotFoundError: If the server returns 404.
        MLBApiTimeoutError: If all attempts time out.
        MLBApiConnectionError: If the server is unreachable after retries.
        MLBApiError: For other HTTP errors or an undecodable body.
    """
    last_error: Exception | None = None

    for attempt in range(max_retries):
        try:
            req = urllib.request.Request(url)
            req.add_header("Accept", "application/json")
            req.add_header("User-Agent", USER_AGENT)
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                data = resp.read()
            try:
                return json.loads(data)
            except ValueError as exc:
                raise MLBApiError(f"Invalid JSON from {url}: {exc}", url=url) from exc

        except urllib.error.HTTPError as exc:
            if exc.code == 404:
                raise MLBApiNotFoundError(
                    f"Resource not found: {url}",
                    status_code=404,
                    url=url,
                ) from exc
            if exc.code >= 500:
                # Server error -- retryable
                logger.debug("HTTP %d from %s (attempt %d)", exc.code, url, attempt + 1)
                last_error = exc
                if attempt < max_retries - 1:
                    _backoff_sleep(attempt)
                continue
            # Client errors -- not retryable
            raise MLBApiError(
                f"HTTP {exc.code} from {url}",
                status_code=exc.code,
                url=url,
            ) from exc

        except (TimeoutError, urllib.error.URLError) as exc:
            if isinstance(exc, TimeoutError) or isinstance(
                getattr(exc, "reason", None), TimeoutError
            ):
                last_error = MLBApiTimeoutError(
                    f"Request timed out: {url}", url=url
                )
            else:
                last_error = MLBApiConnectionError(
                    f"Connection failed: {exc}", url=url
                )
            logger.debug("%s (attempt %d)", last_error, attempt + 1)
            if attempt < max_retries - 1:
                _backoff_sleep(attempt)
            continue

        except OSError as exc:
            last_error = MLBApiConnectionError(
                f"Connection error: {exc}", url=url
            )
            if attempt < max_retries - 1:
                _backoff_sleep(attempt)
            continue

    # All retries exhausted
    if isinstance(last_error, (MLBApiTimeoutError, MLBApiConnectionError)):
        raise last_error
    raise MLBApiConnectionError(
        f"Failed after {max_retries} retries: {last_error}", url=url
    )


def _backoff_sleep(attempt: int) -> None:
    """Sleep with exponential backoff."""
    delay = RETRY_BACKOFF_BASE * (2 ** attempt)
    time.sleep(delay)


def _build_url(version: str, path: str,
               params: dict[str, Any] | None = None) -> str:
    """Build a full MLB Stats API URL.

    Args:
        version: API version (e.g. ``"v1"`` or ``"v1.1"``).
        path: Resource path (e.g. ``"game/716463/winProbability"``).
        params: Optional query parameters; ``None`` values are dropped.

    Returns:
        The full URL string.
    """
    url = f"{BASE_URL}/{version}/{path}"
    if params:
        filtered = {k: v for k, v in params.items() if v is not None}
        if filtered:
            query = "&".join(f"{k}={v}" for k, v in filtered.items())
            url = f"{url}?{query}"
    return url


# ---------------------------------------------------------------------------
# Live game feed
# ---------------------------------------------------------------------------

def get_live_game_feed(game_pk: int) -> dict[str, Any]:
    """Fetch the live game feed (GUMBO) for a game.

    Returns the full play-by-play, linescore, boxscore, and game metadata.

    Raises:
        MLBApiNotFoundError: If the game does not exist.
        MLBApiError: On other API errors.
    """
    url = _build_url("v1.1", f"game/{game_pk}/feed/live")
    return _fetch_json(url)


def get_win_probability(game_pk: int) -> list[dict[str, Any]]:
    """Fetch the per-at-bat win probability list for a game.

    Games that have not started return an empty list.
    """
    url = _build_url("v1", f"game/{game_pk}/winProbability")
    data = _fetch_json(url)
    return data if isinstance(data, list) else []


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------

def get_schedule_by_date(
    date: str,
    sport_id: int = 1,
    hydrate: str | None = "linescore",
) -> list[dict[str, Any]]:
    """Fetch the game schedule for a given date.

    Args:
        date: Date string in ``YYYY-MM-DD`` format.
        sport_id: Sport ID (``1`` for MLB).
        hydrate: Optional hydration string; the linescore is included by
            default so the schedule can show the current score.

    Returns:
        A flat list of game dicts from all matching dates.  Each game
        dict contains ``gamePk``, ``gameDate``, ``status`` and ``teams``
        (with ``away`` and ``home``).

    Raises:
        MLBApiError: On API errors.
    """
    params: dict[str, Any] = {"sportId": sport_id, "date": date, "hydrate": hydrate}
    url = _build_url("v1", "schedule", params)
    data = _fetch_json(url)

    # Flatten: collect all games from all dates
    games: list[dict[str, Any]] = []
    for date_entry in data.get("dates", []) if isinstance(data, dict) else []:
        games.extend(date_entry.get("games", []))
    return games


# ---------------------------------------------------------------------------
# Standings
# ---------------------------------------------------------------------------

AMERICAN_LEAGUE_ID = 103
NATIONAL_LEAGUE_ID = 104


def get_standings(date: str, sport_id: int = 1) -> list[dict[str, Any]]:
    """Fetch the division standings as of *date* (``YYYY-MM-DD``).

    Returns the ``records`` list: one entry per division, each with a
    ``division`` id and its ``teamRecords``.
    """
    params: dict[str, Any] = {
        "sportId": sport_id,
        "season": date[:4],
        "date": date,
        "leagueId": f"{AMERICAN_LEAGUE_ID},{NATIONAL_LEAGUE_ID}",
    }
    data = _fetch_json(_build_url("v1", "standings", params))
    if not isinstance(data, dict):
        return []
    return data.get("records") or []


# ---------------------------------------------------------------------------
# Season stats
# ---------------------------------------------------------------------------

STAT_GROUPS = ("pitching", "hitting")
PLAYER_STATS_LIMIT = 50


def _stats_params(date: str, group: str, sport_id: int) -> dict[str, Any]:
    if group not in STAT_GROUPS:
        raise ValueError(f"Unknown stat group {group!r}, expected one of {STAT_GROUPS}")
    return {
        "stats": "byDateRange",
        "season": date[:4],
        "startDate": f"{date[:4]}-01-01",
        "endDate": date,
        "group": group,
        "sportId": sport_id,
        "gameType": "R",
    }


def _flatten_splits(data: Any) -> list[dict[str, Any]]:
    splits: list[dict[str, Any]] = []
    for stat in data.get("stats", []) if isinstance(data, dict) else []:
        splits.extend(stat.get("splits", []))
    return splits


def get_team_stats(date: str, group: str, sport_id: int = 1) -> list[dict[str, Any]]:
    """Fetch season-to-date team stats for *group* (``pitching`` or ``hitting``).

    Returns a flat list of splits, one per team, each with ``team`` and
    ``stat``.
    """
    url = _build_url("v1", "teams/stats", _stats_params(date, group, sport_id))
    return _flatten_splits(_fetch_json(url))


def get_player_stats(date: str, group: str, sport_id: int = 1,
                     limit: int = PLAYER_STATS_LIMIT) -> list[dict[str, Any]]:
    """Fetch season-to-date stats for qualified players in *group*.

    Returns a flat list of splits, one per player, each with ``player``,
    ``team`` and ``stat``.
    """
    params = _stats_params(date, group, sport_id)
    params.update({"playerPool": "qualified", "limit": limit})
    return _flatten_splits(_fetch_json(_build_url("v1", "stats", params)))
