# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""At-bat reconstruction.

Turns one :class:`models.Play` from the live feed into an immutable
:class:`AtBat`: the matchup as it stood, the ordered pitch/running events and
the result.  Reconstruction never raises; anything missing from the feed
falls back to a neutral default.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import models

DEFAULT_NAME = "-"

# Strike zone in feet above the plate, used when the feed has no per-batter zone.
DEFAULT_STRIKE_ZONE_TOP = 3.3
DEFAULT_STRIKE_ZONE_BOTTOM = 1.5

# Vertical plate location used when a pitch has no pZ coordinate.
DEFAULT_PLATE_Z = 2.0


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

class PitchEventType(str, Enum):
    PITCH = "pitch"
    RUNNING = "running"
    OTHER = "other"  # pickoff attempt, mound visit, pinch hitter, etc.


@dataclass(frozen=True)
class Count:
    balls: int = 0
    strikes: int = 0
    outs: int = 0


@dataclass(frozen=True)
class Runners:
    first: bool = False
    second: bool = False
    third: bool = False

    def __str__(self) -> str:
        text = ""
        if self.first:
            text += "1st "
        if self.second:
            text += "2nd "
        if self.third:
            text += "3rd"
        return text


@dataclass(frozen=True)
class HitData:
    exit_velocity: float | None = None
    launch_angle: float | None = None
    distance: float | None = None

    def describe(self) -> str:
        """Format as ``exit velo: 101.2 | LA: 24.0° | distance: 389.0'``."""
        parts = []
        if self.exit_velocity is not None:
            parts.append(f"exit velo: {self.exit_velocity}")
        if self.launch_angle is not None:
            parts.append(f"LA: {self.launch_angle}°")
        if self.distance is not None:
            parts.append(f"distance: {self.distance}'")
        return " | ".join(parts)


@dataclass(frozen=True)
class Pitch:
    """A single pitch: call, type, velocity and plate location."""
    number: int = 0
    description: str = DEFAULT_NAME
    pitch_type: str = DEFAULT_NAME
    speed: float = 0.0
    location: tuple[float, float] = (0.0, 0.0)
    strike_zone_top: float = DEFAULT_STRIKE_ZONE_TOP
    strike_zone_bottom: float = DEFAULT_STRIKE_ZONE_BOTTOM
    count: Count = field(default_factory=Count)
    is_strike: bool = False
    is_ball: bool = False
    is_in_play: bool = False


@dataclass(frozen=True)
class PitchEvent:
    event_type: PitchEventType
    description: str = ""
    pitch: Pitch | None = None
    hit_data: HitData | None = None
    code: str | None = None
    is_scoring: bool = False
    away_score: int | None = None
    home_score: int | None = None


@dataclass(frozen=True)
class MatchupSnapshot:
    batter_id: int = 0
    batter_name: str = DEFAULT_NAME
    batter_side: str = DEFAULT_NAME
    pitcher_id: int = 0
    pitcher_name: str = DEFAULT_NAME
    pitcher_side: str = DEFAULT_NAME
    count: Count = field(default_factory=Count)
    runners: Runners = field(default_factory=Runners)
    away_score: int = 0
    home_score: int = 0


@dataclass(frozen=True)
class PlayResult:
    at_bat_index: int = 0
    description: str = ""
    rbi: int = 0
    away_score: int = 0
    home_score: int = 0
    count: Count = field(default_factory=Count)
    is_out: bool = False
    is_scoring_play: bool = False
    last_event_code: str | None = None


@dataclass(frozen=True)
class AtBat:
    index: int = 0
    inning: int = 0
    is_top_inning: bool = True
    events: tuple[PitchEvent, ...] = ()
    matchup: MatchupSnapshot = field(default_factory=MatchupSnapshot)
    result: PlayResult = field(default_factory=PlayResult)

    @property
    def pitches(self) -> list[Pitch]:
        return [e.pitch for e in self.events if e.pitch is not None]


# ---------------------------------------------------------------------------
# Reconstruction
# ---------------------------------------------------------------------------

def classify_event(is_pitch: bool, is_base_running_play: bool | None) -> PitchEventType:
    """A pitch wins over the base-running flag; anything else is OTHER."""
    if is_pitch:
        return PitchEventType.PITCH
    if is_base_running_play:
        return PitchEventType.RUNNING
    return PitchEventType.OTHER


def _count(count: models.Count) -> Count:
    return Count(balls=count.balls, strikes=count.strikes, outs=count.outs)


def _build_pitch(event: models.PlayEvent) -> Pitch:
    data = event.pitch_data
    if data is None:
        return Pitch()
    details = event.details
    x = data.coordinates.get("pX", 0.0)
    z = data.coordinates.get("pZ", DEFAULT_PLATE_Z)
    return Pitch(
        number=event.pitch_number or 0,
        description=details.description or "",
        pitch_type=details.pitch_type.description if details.pitch_type else "",
        speed=data.start_speed or 0.0,
        location=(x, z),
        strike_zone_top=(
            data.strike_zone_top if data.strike_zone_top is not None
            else DEFAULT_STRIKE_ZONE_TOP
        ),
        strike_zone_bottom=(
            data.strike_zone_bottom if data.strike_zone_bottom is not None
            else DEFAULT_STRIKE_ZONE_BOTTOM
        ),
        count=_count(event.count),
        is_strike=bool(details.is_strike),
        is_ball=bool(details.is_ball),
        is_in_play=bool(details.is_in_play),
    )


def build_pitch_event(event: models.PlayEvent) -> PitchEvent:
    details = event.details
    hit = event.hit_data
    hit_data = None
    if hit is not None:
        hit_data = HitData(
            exit_velocity=hit.launch_speed,
            launch_angle=hit.launch_angle,
            distance=hit.total_distance,
        )
    code = details.code
    if code is None and details.call is not None:
        code = details.call.code or None
    return PitchEvent(
        event_type=classify_event(event.is_pitch, event.is_base_running_play),
        description=details.description or "",
        pitch=_build_pitch(event) if event.is_pitch else None,
        hit_data=hit_data,
        code=code,
        is_scoring=bool(details.is_scoring_play),
        away_score=details.away_score,
        home_score=details.home_score,
    )


def _build_matchup(play: models.Play) -> MatchupSnapshot:
    matchup = play.matchup
    result = play.result
    return MatchupSnapshot(
        batter_id=matchup.batter.id,
        batter_name=matchup.batter.full_name or DEFAULT_NAME,
        batter_side=matchup.bat_side.code,
        pitcher_id=matchup.pitcher.id,
        pitcher_name=matchup.pitcher.full_name or DEFAULT_NAME,
        pitcher_side=f"{matchup.pitch_hand.code}HP",
        count=_count(play.count),
        runners=Runners(
            first=matchup.post_on_first is not None,
            second=matchup.post_on_second is not None,
            third=matchup.post_on_third is not None,
        ),
        away_score=result.away_score or 0,
        home_score=result.home_score or 0,
    )


def _build_result(play: models.Play, events: tuple[PitchEvent, ...]) -> PlayResult:
    result = play.result
    return PlayResult(
        at_bat_index=play.about.at_bat_index,
        description=result.description or "",
        rbi=result.rbi or 0,
        away_score=result.away_score or 0,
        home_score=result.home_score or 0,
        count=_count(play.count),
        is_out=bool(result.is_out),
        is_scoring_play=bool(play.about.is_scoring_play),
        last_event_code=events[-1].code if events else None,
    )


def build_at_bat(play: models.Play) -> AtBat:
    """Reconstruct an at-bat from one play of the live feed.

    Events are kept in feed order (oldest first).  The scoring flag comes
    from ``about.isScoringPlay``; runner flags are presence checks on
    ``matchup.postOnFirst/Second/Third``.
    """
    events = tuple(build_pitch_event(e) for e in play.play_events)
    return AtBat(
        index=play.about.at_bat_index,
        inning=play.about.inning,
        is_top_inning=play.about.is_top_inning,
        events=events,
        matchup=_build_matchup(play),
        result=_build_result(play, events),
    )
