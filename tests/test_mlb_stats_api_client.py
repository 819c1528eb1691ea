# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0"]
# ///
"""Tests for the mlb_stats_api_client feature.

Validates the MLB Stats API client module (data/mlb_api.py):
  1. Fetch the live game feed by gamePk from the v1.1 endpoint
  2. Fetch the per-at-bat win probability list
  3. Fetch the schedule by date and flatten dates into games
  4. Handle API errors: 404, other 4xx, invalid JSON, connection failures
  5. Request timeout and retry with exponential backoff for transient failures
  6. Fetch division standings and season-to-date team and player stats
"""

import json
import sys
import urllib.error
from pathlib import Path
from unittest.mock import MagicMock, patch

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from data.mlb_api import (
    BASE_URL,
    DEFAULT_TIMEOUT,
    MAX_RETRIES,
    MLBApiConnectionError,
    MLBApiError,
    MLBApiNotFoundError,
    MLBApiTimeoutError,
    _build_url,
    _fetch_json,
    get_live_game_feed,
    get_player_stats,
    get_schedule_by_date,
    get_standings,
    get_team_stats,
    get_win_probability,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_schedule_response():
    """Sample MLB Stats API schedule response."""
    return {
        "totalGames": 3,
        "dates": [
            {
                "date": "2024-07-04",
                "games": [
                    {
                        "gamePk": 745804,
                        "gameDate": "2024-07-04T23:10:00Z",
                        "status": {"abstractGameState": "Live", "detailedState": "In Progress"},
                        "teams": {
                            "away": {"team": {"id": 136, "name": "Seattle Mariners"}, "score": 2},
                            "home": {"team": {"id": 117, "name": "Houston Astros"}, "score": 1},
                        },
                    },
                    {
                        "gamePk": 745805,
                        "gameDate": "2024-07-05T02:10:00Z",
                        "status": {"abstractGameState": "Preview", "detailedState": "Scheduled"},
                        "teams": {
                            "away": {"team": {"id": 147, "name": "New York Yankees"}},
                            "home": {"team": {"id": 111, "name": "Boston Red Sox"}},
                        },
                    },
                ],
            },
            {
                "date": "2024-07-05",
                "games": [{"gamePk": 745900}],
            },
        ],
    }


def _mock_urlopen(response_data, status: int = 200):
    """Create a mock for urllib.request.urlopen that returns JSON data."""
    mock_resp = MagicMock()
    mock_resp.read.return_value = json.dumps(response_data).encode("utf-8")
    mock_resp.__enter__ = MagicMock(return_value=mock_resp)
    mock_resp.__exit__ = MagicMock(return_value=False)
    return mock_resp


# ===========================================================================
# Step 1: Live game feed
# ===========================================================================

class TestStep1LiveGameFeed:
    @patch("data.mlb_api._fetch_json")
    def test_get_live_game_feed(self, mock_fetch):
        mock_fetch.return_value = {"gamePk": 745804}
        assert get_live_game_feed(745804) == {"gamePk": 745804}

    @patch("data.mlb_api._fetch_json")
    def test_get_live_game_feed_uses_v11(self, mock_fetch):
        mock_fetch.return_value = {}
        get_live_game_feed(745804)
        url = mock_fetch.call_args[0][0]
        assert url == f"{BASE_URL}/v1.1/game/745804/feed/live"

    @patch("data.mlb_api._fetch_json")
    def test_get_live_game_feed_not_found(self, mock_fetch):
        mock_fetch.side_effect = MLBApiNotFoundError("not found", status_code=404)
        with pytest.raises(MLBApiNotFoundError):
            get_live_game_feed(1)


# ===========================================================================
# Step 2: Win probability
# ===========================================================================

class TestStep2WinProbability:
    @patch("data.mlb_api._fetch_json")
    def test_get_win_probability(self, mock_fetch):
        mock_fetch.return_value = [{"atBatIndex": 0, "homeTeamWinProbability": 52.1}]
        result = get_win_probability(745804)
        assert result[0]["atBatIndex"] == 0
        url = mock_fetch.call_args[0][0]
        assert url == f"{BASE_URL}/v1/game/745804/winProbability"

    @patch("data.mlb_api._fetch_json")
    def test_get_win_probability_not_started(self, mock_fetch):
        mock_fetch.return_value = []
        assert get_win_probability(745804) == []

    @patch("data.mlb_api._fetch_json")
    def test_get_win_probability_unexpected_shape(self, mock_fetch):
        mock_fetch.return_value = {"message": "unavailable"}
        assert get_win_probability(745804) == []


# ===========================================================================
# Step 3: Schedule
# ===========================================================================

class TestStep3ScheduleFetching:
    @patch("data.mlb_api._fetch_json")
    def test_get_schedule_by_date(self, mock_fetch, sample_schedule_response):
        mock_fetch.return_value = sample_schedule_response
        games = get_schedule_by_date("2024-07-04")
        assert [g["gamePk"] for g in games] == [745804, 745805, 745900]

    @patch("data.mlb_api._fetch_json")
    def test_get_schedule_url_params(self, mock_fetch):
        mock_fetch.return_value = {"dates": []}
        get_schedule_by_date("2024-07-04")
        url = mock_fetch.call_args[0][0]
        assert url.startswith(f"{BASE_URL}/v1/schedule?")
        assert "sportId=1" in url
        assert "date=2024-07-04" in url
        assert "hydrate=linescore" in url

    @patch("data.mlb_api._fetch_json")
    def test_get_schedule_without_hydrate(self, mock_fetch):
        mock_fetch.return_value = {"dates": []}
        get_schedule_by_date("2024-07-04", hydrate=None)
        assert "hydrate" not in mock_fetch.call_args[0][0]

    @patch("data.mlb_api._fetch_json")
    def test_get_schedule_off_season(self, mock_fetch):
        mock_fetch.return_value = {"totalGames": 0, "dates": []}
        assert get_schedule_by_date("2024-12-25") == []


# ===========================================================================
# Step 4: Error handling
# ===========================================================================

class TestStep4ErrorHandling:
    """Test error handling for connection failures, invalid IDs, etc."""

    def test_mlb_api_error_has_status_code(self):
        err = MLBApiError("test", status_code=500, url="http://example.com")
        assert err.status_code == 500
        assert err.url == "http://example.com"
        assert "test" in str(err)

    def test_subclasses(self):
        for cls in (MLBApiNotFoundError, MLBApiConnectionError, MLBApiTimeoutError):
            assert issubclass(cls, MLBApiError)

    @patch("data.mlb_api.urllib.request.urlopen")
    def test_fetch_json_404_raises_not_found(self, mock_urlopen):
        mock_urlopen.side_effect = urllib.error.HTTPError(
            "http://test", 404, "Not Found", {}, None
        )
        with pytest.raises(MLBApiNotFoundError):
            _fetch_json("http://test")

    @patch("data.mlb_api.urllib.request.urlopen")
    def test_fetch_json_400_raises_error(self, mock_urlopen):
        mock_urlopen.side_effect = urllib.error.HTTPError(
            "http://test", 400, "Bad Request", {}, None
        )
        with pytest.raises(MLBApiError) as exc_info:
            _fetch_json("http://test")
        assert exc_info.value.status_code == 400
        assert mock_urlopen.call_count == 1

    @patch("data.mlb_api.urllib.request.urlopen")
    def test_fetch_json_invalid_json(self, mock_urlopen):
        resp = _mock_urlopen({})
        resp.read.return_value = b"<html>oops</html>"
        mock_urlopen.return_value = resp
        with pytest.raises(MLBApiError, match="Invalid JSON"):
            _fetch_json("http://test")

    @patch("data.mlb_api._backoff_sleep")
    @patch("data.mlb_api.urllib.request.urlopen")
    def test_fetch_json_500_retries(self, mock_urlopen, mock_sleep):
        error = urllib.error.HTTPError("http://test", 503, "Unavailable", {}, None)
        mock_urlopen.side_effect = [error, _mock_urlopen({"ok": True})]
        assert _fetch_json("http://test") == {"ok": True}
        assert mock_urlopen.call_count == 2

    @patch("data.mlb_api._backoff_sleep")
    @patch("data.mlb_api.urllib.request.urlopen")
    def test_fetch_json_500_exhausts_retries(self, mock_urlopen, mock_sleep):
        mock_urlopen.side_effect = urllib.error.HTTPError(
            "http://test", 500, "Server Error", {}, None
        )
        with pytest.raises(MLBApiConnectionError):
            _fetch_json("http://test")
        assert mock_urlopen.call_count == MAX_RETRIES

    @patch("data.mlb_api._backoff_sleep")
    @patch("data.mlb_api.urllib.request.urlopen")
    def test_fetch_json_connection_error(self, mock_urlopen, mock_sleep):
        mock_urlopen.side_effect = urllib.error.URLError("Name or service not known")
        with pytest.raises(MLBApiConnectionError):
            _fetch_json("http://test")

    @patch("data.mlb_api._backoff_sleep")
    @patch("data.mlb_api.urllib.request.urlopen")
    def test_fetch_json_timeout(self, mock_urlopen, mock_sleep):
        mock_urlopen.side_effect = TimeoutError("timed out")
        with pytest.raises(MLBApiTimeoutError):
            _fetch_json("http://test")

    @patch("data.mlb_api._backoff_sleep")
    @patch("data.mlb_api.urllib.request.urlopen")
    def test_fetch_json_url_error_wrapping_timeout(self, mock_urlopen, mock_sleep):
        mock_urlopen.side_effect = urllib.error.URLError(TimeoutError("timed out"))
        with pytest.raises(MLBApiTimeoutError):
            _fetch_json("http://test")


# ===========================================================================
# Step 5: Timeout and retry
# ===========================================================================

class TestStep5TimeoutAndRetry:
    """Test timeout configuration and retry behavior."""

    def test_default_timeout_value(self):
        assert DEFAULT_TIMEOUT == 10

    def test_max_retries_value(self):
        assert MAX_RETRIES == 3

    def test_build_url_basic(self):
        assert _build_url("v1", "schedule") == f"{BASE_URL}/v1/schedule"

    def test_build_url_filters_none_params(self):
        url = _build_url("v1", "schedule", {"sportId": 1, "hydrate": None})
        assert url == f"{BASE_URL}/v1/schedule?sportId=1"

    @patch("data.mlb_api._backoff_sleep")
    @patch("data.mlb_api.urllib.request.urlopen")
    def test_retry_uses_exponential_backoff(self, mock_urlopen, mock_sleep):
        mock_urlopen.side_effect = OSError("fail")
        with pytest.raises(MLBApiConnectionError):
            _fetch_json("http://test", max_retries=3)
        # Should sleep between retries with increasing delays
        assert mock_sleep.call_count == 2
        mock_sleep.assert_any_call(0)
        mock_sleep.assert_any_call(1)

    @patch("data.mlb_api.urllib.request.urlopen")
    def test_fetch_json_success_no_retries(self, mock_urlopen):
        mock_urlopen.return_value = _mock_urlopen({"dates": []})
        assert _fetch_json("http://test") == {"dates": []}
        assert mock_urlopen.call_count == 1

    @patch("data.mlb_api.urllib.request.urlopen")
    def test_request_sends_timeout_and_headers(self, mock_urlopen):
        mock_urlopen.return_value = _mock_urlopen({})
        _fetch_json("http://test")
        request = mock_urlopen.call_args[0][0]
        assert mock_urlopen.call_args.kwargs["timeout"] == DEFAULT_TIMEOUT
        assert request.get_header("Accept") == "application/json"

    @patch("data.mlb_api.time.sleep")
    @patch("data.mlb_api.urllib.request.urlopen")
    def test_backoff_delays(self, mock_urlopen, mock_sleep):
        mock_urlopen.side_effect = OSError("fail")
        with pytest.raises(MLBApiConnectionError):
            _fetch_json("http://test", max_retries=3)
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.0, 2.0]


# ===========================================================================
# Step 6: Standings and season stats
# ===========================================================================

class TestStep6StandingsAndStats:
    @patch("data.mlb_api._fetch_json")
    def test_get_standings_url(self, mock_fetch):
        mock_fetch.return_value = {"records": []}
        get_standings("2024-07-04")
        url = mock_fetch.call_args[0][0]
        assert url == (f"{BASE_URL}/v1/standings?sportId=1&season=2024"
                       "&date=2024-07-04&leagueId=103,104")

    @patch("data.mlb_api._fetch_json")
    def test_get_standings_records(self, mock_fetch):
        mock_fetch.return_value = {"records": [{"division": {"id": 201}, "teamRecords": []}]}
        assert get_standings("2024-07-04") == [{"division": {"id": 201}, "teamRecords": []}]

    @patch("data.mlb_api._fetch_json")
    def test_get_standings_unexpected_shape(self, mock_fetch):
        mock_fetch.return_value = []
        assert get_standings("2024-07-04") == []

    @patch("data.mlb_api._fetch_json")
    def test_get_team_stats(self, mock_fetch):
        mock_fetch.return_value = {"stats": [{"splits": [{"team": {"id": 147}}]},
                                             {"splits": [{"team": {"id": 111}}]}]}
        splits = get_team_stats("2024-07-04", "pitching")
        assert [s["team"]["id"] for s in splits] == [147, 111]
        url = mock_fetch.call_args[0][0]
        assert url.startswith(f"{BASE_URL}/v1/teams/stats?")
        assert "stats=byDateRange" in url
        assert "startDate=2024-01-01" in url
        assert "endDate=2024-07-04" in url
        assert "group=pitching" in url
        assert "playerPool" not in url

    @patch("data.mlb_api._fetch_json")
    def test_get_player_stats(self, mock_fetch):
        mock_fetch.return_value = {"stats": []}
        assert get_player_stats("2024-07-04", "hitting") == []
        url = mock_fetch.call_args[0][0]
        assert url.startswith(f"{BASE_URL}/v1/stats?")
        assert "group=hitting" in url
        assert "playerPool=qualified" in url
        assert "limit=50" in url

    @patch("data.mlb_api._fetch_json")
    def test_unknown_group(self, mock_fetch):
        with pytest.raises(ValueError):
            get_team_stats("2024-07-04", "fielding")
        mock_fetch.assert_not_called()
