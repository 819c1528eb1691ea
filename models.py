# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Data models for the MLB Stats API documents the dashboard reads.

Read-only views of one poll's GUMBO document
(``/api/v1.1/game/{gamePk}/feed/live``), of the separate win
probability document (``/api/v1/game/{gamePk}/winProbability``), and of
the standings and season stats responses.

The upstream shape legitimately varies with game state (pre-game,
in-progress, final), so every field has a default.  Keys that are absent or
``null`` fall back to that default, numbers that arrive malformed are
coerced to zero, and text fields that arrive as objects or lists become
empty strings, so one odd field never discards the whole document.  Use
the ``parse_*`` functions at the boundary; they never raise.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

logger = logging.getLogger("models")


# ---------------------------------------------------------------------------
# Lenient scalar coercion
# ---------------------------------------------------------------------------

def _safe_int(value: Any, default: int = 0) -> int:
    """Convert a value to int, returning *default* on failure."""
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _safe_float(value: Any, default: float = 0.0) -> float:
    """Convert a value to float, returning *default* on failure."""
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _safe_bool(value: Any, default: bool = False) -> bool:
    """Convert a JSON-ish flag to bool, returning *default* on failure."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "y"):
            return True
        if lowered in ("false", "0", "no", "n", ""):
            return False
    return default


def _safe_str(value: Any, default: str = "") -> str:
    """Keep strings, stringify numbers, anything else becomes *default*."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def _safe_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _safe_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


SafeInt = Annotated[int, BeforeValidator(_safe_int)]
SafeFloat = Annotated[float, BeforeValidator(_safe_float)]
SafeBool = Annotated[bool, BeforeValidator(_safe_bool)]
SafeStr = Annotated[str, BeforeValidator(_safe_str)]


class FeedModel(BaseModel):
    """Base for every feed model: camelCase aliases, nulls mean "use default"."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, BaseModel):
            return data
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if v is not None}


# ---------------------------------------------------------------------------
# Shared pieces
# ---------------------------------------------------------------------------

class Person(FeedModel):
    id: SafeInt = 0
    full_name: SafeStr = ""


class Side(FeedModel):
    code: SafeStr = ""


class CodeDescription(FeedModel):
    code: SafeStr = ""
    description: SafeStr = ""


class LabelValue(FeedModel):
    label: SafeStr = ""
    value: SafeStr = ""


# ---------------------------------------------------------------------------
# Plays
# ---------------------------------------------------------------------------

class Count(FeedModel):
    balls: SafeInt = 0
    strikes: SafeInt = 0
    outs: SafeInt = 0


class About(FeedModel):
    at_bat_index: SafeInt = 0
    half_inning: SafeStr = ""
    is_top_inning: SafeBool = True
    inning: SafeInt = 0
    is_complete: SafeBool = False
    is_scoring_play: Optional[SafeBool] = None


class Result(FeedModel):
    event: Optional[SafeStr] = None
    event_type: Optional[SafeStr] = None
    description: Optional[SafeStr] = None
    rbi: Optional[SafeInt] = None
    away_score: Optional[SafeInt] = None
    home_score: Optional[SafeInt] = None
    is_out: Optional[SafeBool] = None


class Matchup(FeedModel):
    batter: Person = Field(default_factory=Person)
    bat_side: Side = Field(default_factory=Side)
    pitcher: Person = Field(default_factory=Person)
    pitch_hand: Side = Field(default_factory=Side)
    post_on_first: Optional[Person] = None
    post_on_second: Optional[Person] = None
    post_on_third: Optional[Person] = None


class EventDetails(FeedModel):
    description: Optional[SafeStr] = None
    code: Optional[SafeStr] = None
    call: Optional[CodeDescription] = None
    pitch_type: Optional[CodeDescription] = Field(default=None, alias="type")
    is_in_play: Optional[SafeBool] = None
    is_strike: Optional[SafeBool] = None
    is_ball: Optional[SafeBool] = None
    is_scoring_play: Optional[SafeBool] = None
    away_score: Optional[SafeInt] = None
    home_score: Optional[SafeInt] = None


class PitchData(FeedModel):
    start_speed: Optional[SafeFloat] = None
    end_speed: Optional[SafeFloat] = None
    strike_zone_top: Optional[SafeFloat] = None
    strike_zone_bottom: Optional[SafeFloat] = None
    coordinates: Annotated[dict[str, SafeFloat], BeforeValidator(_safe_dict)] = Field(
        default_factory=dict
    )
    zone: Optional[SafeInt] = None


class HitData(FeedModel):
    launch_speed: Optional[SafeFloat] = None
    launch_angle: Optional[SafeFloat] = None
    total_distance: Optional[SafeFloat] = None
    hardness: Optional[SafeStr] = None


class PlayEvent(FeedModel):
    details: EventDetails = Field(default_factory=EventDetails)
    count: Count = Field(default_factory=Count)
    pitch_data: Optional[PitchData] = None
    hit_data: Optional[HitData] = None
    is_pitch: SafeBool = False
    is_base_running_play: Optional[SafeBool] = None
    pitch_number: Optional[SafeInt] = None


class Play(FeedModel):
    result: Result = Field(default_factory=Result)
    about: About = Field(default_factory=About)
    count: Count = Field(default_factory=Count)
    matchup: Matchup = Field(default_factory=Matchup)
    play_events: Annotated[list[PlayEvent], BeforeValidator(_safe_list)] = Field(
        default_factory=list
    )


class Plays(FeedModel):
    all_plays: Optional[Annotated[list[Play], BeforeValidator(_safe_list)]] = None
    current_play: Optional[Play] = None


# ---------------------------------------------------------------------------
# Line score
# ---------------------------------------------------------------------------

class TeamInningDetail(FeedModel):
    runs: Optional[SafeInt] = None
    hits: SafeInt = 0
    errors: SafeInt = 0
    left_on_base: SafeInt = 0


class Inning(FeedModel):
    num: SafeInt = 0
    ordinal_num: SafeStr = ""
    home: TeamInningDetail = Field(default_factory=TeamInningDetail)
    away: TeamInningDetail = Field(default_factory=TeamInningDetail)


class Offense(FeedModel):
    on_deck: Optional[Person] = None
    in_hole: Optional[Person] = None


class Linescore(FeedModel):
    current_inning: Optional[SafeInt] = None
    inning_state: Optional[SafeStr] = None
    is_top_inning: Optional[SafeBool] = None
    scheduled_innings: SafeInt = 9
    innings: Annotated[list[Inning], BeforeValidator(_safe_list)] = Field(default_factory=list)
    offense: Offense = Field(default_factory=Offense)
    balls: Optional[SafeInt] = None
    strikes: Optional[SafeInt] = None
    outs: Optional[SafeInt] = None


# ---------------------------------------------------------------------------
# Box score
# ---------------------------------------------------------------------------

class BattingStats(FeedModel):
    at_bats: Optional[SafeInt] = None
    runs: Optional[SafeInt] = None
    hits: Optional[SafeInt] = None
    rbi: Optional[SafeInt] = None
    base_on_balls: Optional[SafeInt] = None
    strike_outs: Optional[SafeInt] = None
    home_runs: Optional[SafeInt] = None
    left_on_base: Optional[SafeInt] = None
    avg: Optional[SafeStr] = None
    summary: Optional[SafeStr] = None
    note: Optional[SafeStr] = None


class PitchingStats(FeedModel):
    innings_pitched: Optional[SafeStr] = None
    hits: Optional[SafeInt] = None
    runs: Optional[SafeInt] = None
    earned_runs: Optional[SafeInt] = None
    base_on_balls: Optional[SafeInt] = None
    strike_outs: Optional[SafeInt] = None
    home_runs: Optional[SafeInt] = None
    number_of_pitches: Optional[SafeInt] = None
    pitches_thrown: Optional[SafeInt] = None
    strikes: Optional[SafeInt] = None
    era: Optional[SafeStr] = None
    summary: Optional[SafeStr] = None
    note: Optional[SafeStr] = None


class StatBlock(FeedModel):
    batting: BattingStats = Field(default_factory=BattingStats)
    pitching: PitchingStats = Field(default_factory=PitchingStats)


class Position(FeedModel):
    name: SafeStr = ""
    abbreviation: SafeStr = ""
    position_type: SafeStr = Field(default="", alias="type")


class BoxscorePlayer(FeedModel):
    person: Person = Field(default_factory=Person)
    position: Position = Field(default_factory=Position)
    stats: StatBlock = Field(default_factory=StatBlock)
    season_stats: StatBlock = Field(default_factory=StatBlock)
    batting_order: Optional[SafeStr] = None


class TeamRef(FeedModel):
    id: SafeInt = 0
    name: SafeStr = ""


class BoxscoreTeam(FeedModel):
    team: TeamRef = Field(default_factory=TeamRef)
    team_stats: StatBlock = Field(default_factory=StatBlock)
    players: Annotated[dict[str, BoxscorePlayer], BeforeValidator(_safe_dict)] = Field(
        default_factory=dict
    )
    batters: Annotated[list[SafeInt], BeforeValidator(_safe_list)] = Field(default_factory=list)
    pitchers: Annotated[list[SafeInt], BeforeValidator(_safe_list)] = Field(default_factory=list)
    batting_order: Annotated[list[SafeInt], BeforeValidator(_safe_list)] = Field(
        default_factory=list
    )
    note: Annotated[list[LabelValue], BeforeValidator(_safe_list)] = Field(default_factory=list)


class BoxscoreTeams(FeedModel):
    away: BoxscoreTeam = Field(default_factory=BoxscoreTeam)
    home: BoxscoreTeam = Field(default_factory=BoxscoreTeam)


class Boxscore(FeedModel):
    teams: Optional[BoxscoreTeams] = None
    info: Annotated[list[LabelValue], BeforeValidator(_safe_list)] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Game data (reference data)
# ---------------------------------------------------------------------------

class FullPlayer(FeedModel):
    id: SafeInt = 0
    full_name: SafeStr = ""
    first_name: SafeStr = ""
    last_name: SafeStr = ""
    use_name: SafeStr = ""
    use_last_name: SafeStr = ""
    boxscore_name: SafeStr = ""
    bat_side: Side = Field(default_factory=Side)
    pitch_hand: Side = Field(default_factory=Side)


class TeamInfo(FeedModel):
    id: SafeInt = 0
    name: SafeStr = ""
    team_name: SafeStr = ""
    abbreviation: SafeStr = ""


class GameTeams(FeedModel):
    away: TeamInfo = Field(default_factory=TeamInfo)
    home: TeamInfo = Field(default_factory=TeamInfo)


class GameStatus(FeedModel):
    abstract_game_state: SafeStr = ""
    detailed_state: SafeStr = ""


class GameData(FeedModel):
    status: GameStatus = Field(default_factory=GameStatus)
    teams: GameTeams = Field(default_factory=GameTeams)
    players: Annotated[dict[str, FullPlayer], BeforeValidator(_safe_dict)] = Field(
        default_factory=dict
    )


class LiveData(FeedModel):
    plays: Plays = Field(default_factory=Plays)
    linescore: Linescore = Field(default_factory=Linescore)
    boxscore: Boxscore = Field(default_factory=Boxscore)


class LiveFeed(FeedModel):
    """One poll of the live game feed."""
    game_pk: SafeInt = 0
    game_data: GameData = Field(default_factory=GameData)
    live_data: LiveData = Field(default_factory=LiveData)


# ---------------------------------------------------------------------------
# Win probability document
# ---------------------------------------------------------------------------

class WinProbabilityAbout(FeedModel):
    at_bat_index: SafeInt = 0
    is_top_inning: SafeBool = True
    inning: SafeInt = 1


class WinProbabilityEntry(FeedModel):
    about: WinProbabilityAbout = Field(default_factory=WinProbabilityAbout)
    at_bat_index: SafeInt = 0
    home_team_win_probability: SafeFloat = 50.0
    away_team_win_probability: SafeFloat = 50.0
    home_team_win_probability_added: SafeFloat = 0.0
    leverage_index: Optional[SafeFloat] = None


_WIN_PROBABILITY_ADAPTER = TypeAdapter(
    Annotated[list[WinProbabilityEntry], BeforeValidator(_safe_list)]
)


# ---------------------------------------------------------------------------
# Standings (/api/v1/standings)
# ---------------------------------------------------------------------------

class IdRef(FeedModel):
    id: SafeInt = 0


class Streak(FeedModel):
    streak_code: SafeStr = "-"


class TeamRecord(FeedModel):
    team: TeamRef = Field(default_factory=TeamRef)
    wins: SafeInt = 0
    losses: SafeInt = 0
    winning_percentage: SafeStr = ".000"
    games_back: SafeStr = "-"
    wild_card_games_back: SafeStr = "-"
    division_rank: SafeStr = ""
    streak: Optional[Streak] = None


class StandingsRecord(FeedModel):
    """One division's table."""
    league: IdRef = Field(default_factory=IdRef)
    division: IdRef = Field(default_factory=IdRef)
    team_records: Annotated[list[TeamRecord], BeforeValidator(_safe_list)] = Field(
        default_factory=list
    )


# ---------------------------------------------------------------------------
# Season stats (/api/v1/teams/stats and /api/v1/stats)
# ---------------------------------------------------------------------------

class PitchingStat(FeedModel):
    wins: SafeInt = 0
    losses: SafeInt = 0
    era: SafeStr = "-.--"
    games_played: SafeInt = 0
    games_started: SafeInt = 0
    complete_games: SafeInt = 0
    shutouts: SafeInt = 0
    saves: SafeInt = 0
    save_opportunities: SafeInt = 0
    innings_pitched: SafeStr = "0.0"
    hits: SafeInt = 0
    runs: SafeInt = 0
    earned_runs: SafeInt = 0
    home_runs: SafeInt = 0
    hit_batsmen: SafeInt = 0
    base_on_balls: SafeInt = 0
    strike_outs: SafeInt = 0


class HittingStat(FeedModel):
    games_played: SafeInt = 0
    at_bats: SafeInt = 0
    avg: SafeStr = ".000"
    obp: SafeStr = ".000"
    slg: SafeStr = ".000"
    ops: SafeStr = ".000"
    runs: SafeInt = 0
    hits: SafeInt = 0
    doubles: SafeInt = 0
    triples: SafeInt = 0
    home_runs: SafeInt = 0
    rbi: SafeInt = 0
    base_on_balls: SafeInt = 0
    strike_outs: SafeInt = 0
    stolen_bases: SafeInt = 0
    caught_stealing: SafeInt = 0


class StatSplit(FeedModel):
    """One row of a stats response.

    ``stat`` stays a plain dict; whether it holds pitching or hitting
    numbers depends on the group that was requested.
    """
    team: TeamRef = Field(default_factory=TeamRef)
    player: Optional[Person] = None
    stat: Annotated[dict[str, Any], BeforeValidator(_safe_dict)] = Field(default_factory=dict)

    def display_name(self) -> str:
        if self.player is not None and self.player.full_name:
            return self.player.full_name
        return self.team.name


_STANDINGS_ADAPTER = TypeAdapter(
    Annotated[list[StandingsRecord], BeforeValidator(_safe_list)]
)
_STAT_SPLITS_ADAPTER = TypeAdapter(
    Annotated[list[StatSplit], BeforeValidator(_safe_list)]
)


# ---------------------------------------------------------------------------
# Boundary parsing
# ---------------------------------------------------------------------------

def parse_live_feed(payload: Any) -> LiveFeed:
    """Parse a raw live feed payload, falling back to an empty feed.

    Args:
        payload: Decoded JSON from the live feed endpoint.

    Returns:
        A :class:`LiveFeed`.  Anything that cannot be interpreted at all
        produces the default (empty) feed.
    """
    try:
        return LiveFeed.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Unusable live feed payload (%d errors)", exc.error_count())
        return LiveFeed()


def parse_win_probability(payload: Any) -> list[WinProbabilityEntry]:
    """Parse the win probability document; unusable input gives ``[]``."""
    try:
        return _WIN_PROBABILITY_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        logger.warning("Unusable win probability payload (%d errors)", exc.error_count())
        return []


def parse_standings(payload: Any) -> list[StandingsRecord]:
    """Parse the ``records`` list of a standings response; unusable input gives ``[]``."""
    try:
        return _STANDINGS_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        logger.warning("Unusable standings payload (%d errors)", exc.error_count())
        return []


def parse_stat_splits(payload: Any) -> list[StatSplit]:
    """Parse a flat list of stat splits; unusable input gives ``[]``."""
    try:
        return _STAT_SPLITS_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        logger.warning("Unusable stats payload (%d errors)", exc.error_count())
        return []
