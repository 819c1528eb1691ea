# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Box score of the current game: per-player lines, team totals and notes.

Team totals are copied from the feed's team aggregate stats rather than
summed from the player lines, so substitutions never double count.
"""

from __future__ import annotations

from dataclasses import dataclass

import models

MISSING_AVERAGE = "---"
MISSING_ERA = "-.--"


@dataclass(frozen=True)
class BatterLine:
    order: int
    name: str
    position: str
    at_bats: int = 0
    runs: int = 0
    hits: int = 0
    rbi: int = 0
    walks: int = 0
    strike_outs: int = 0
    home_runs: int = 0
    left_on_base: int = 0
    average: str = MISSING_AVERAGE
    is_substitute: bool = False


@dataclass(frozen=True)
class PitcherLine:
    name: str
    innings_pitched: str = "0.0"
    hits: int = 0
    runs: int = 0
    earned_runs: int = 0
    walks: int = 0
    strike_outs: int = 0
    home_runs: int = 0
    pitches: int = 0
    strikes: int = 0
    era: str = MISSING_ERA


@dataclass(frozen=True)
class TeamBoxscore:
    name: str = ""
    batters: tuple[BatterLine, ...] = ()
    pitchers: tuple[PitcherLine, ...] = ()
    batting_totals: BatterLine = BatterLine(0, "Totals", "")
    pitching_totals: PitcherLine = PitcherLine("Totals")
    notes: tuple[str, ...] = ()


@dataclass(frozen=True)
class Boxscore:
    away: TeamBoxscore = TeamBoxscore()
    home: TeamBoxscore = TeamBoxscore()
    game_notes: tuple[str, ...] = ()

    def team(self, side: str) -> TeamBoxscore:
        return self.home if side == "home" else self.away


# ---------------------------------------------------------------------------
# Construction from the feed
# ---------------------------------------------------------------------------

def last_name(full_name: str) -> str:
    parts = full_name.split()
    return parts[-1] if parts else "-"


def _format_note(note: models.LabelValue) -> str | None:
    if not note.label and not note.value:
        return None
    if not note.value:
        return note.label
    return f"{note.label}: {note.value}"


def _batting(stats: models.BattingStats, order: int, name: str, position: str,
             average: str | None = None, is_substitute: bool = False) -> BatterLine:
    return BatterLine(
        order=order,
        name=name,
        position=position,
        at_bats=stats.at_bats or 0,
        runs=stats.runs or 0,
        hits=stats.hits or 0,
        rbi=stats.rbi or 0,
        walks=stats.base_on_balls or 0,
        strike_outs=stats.strike_outs or 0,
        home_runs=stats.home_runs or 0,
        left_on_base=stats.left_on_base or 0,
        average=MISSING_AVERAGE if average is None else average,
        is_substitute=is_substitute,
    )


def _pitching(stats: models.PitchingStats, name: str, era: str | None = None) -> PitcherLine:
    return PitcherLine(
        name=name,
        innings_pitched=stats.innings_pitched or "0.0",
        hits=stats.hits or 0,
        runs=stats.runs or 0,
        earned_runs=stats.earned_runs or 0,
        walks=stats.base_on_balls or 0,
        strike_outs=stats.strike_outs or 0,
        home_runs=stats.home_runs or 0,
        pitches=stats.number_of_pitches or 0,
        strikes=stats.strikes or 0,
        era=MISSING_ERA if era is None else era,
    )


def _batting_order(player: models.BoxscorePlayer) -> int | None:
    try:
        return int(player.batting_order) if player.batting_order else None
    except ValueError:
        return None


def _team_boxscore(team: models.BoxscoreTeam) -> TeamBoxscore:
    # Lineup slots are encoded as "100", "200", ...; substitutes take "101", "102".
    ordered = []
    for player_id in team.batters:
        player = team.players.get(f"ID{player_id}")
        if player is None:
            continue
        slot = _batting_order(player)
        if slot is not None:
            ordered.append((slot, player))
    ordered.sort(key=lambda pair: pair[0])

    batters = tuple(
        _batting(
            player.stats.batting,
            order=slot // 100,
            name=last_name(player.person.full_name),
            position=player.position.abbreviation,
            average=player.season_stats.batting.avg,
            is_substitute=slot % 100 != 0,
        )
        for slot, player in ordered
    )

    pitchers = []
    for player_id in team.pitchers:
        player = team.players.get(f"ID{player_id}")
        if player is None:
            continue
        pitchers.append(_pitching(
            player.stats.pitching,
            name=last_name(player.person.full_name),
            era=player.season_stats.pitching.era,
        ))

    notes = tuple(n for n in (_format_note(note) for note in team.note) if n)
    return TeamBoxscore(
        name=team.team.name,
        batters=batters,
        pitchers=tuple(pitchers),
        batting_totals=_batting(team.team_stats.batting, 0, "Totals", "", average=""),
        pitching_totals=_pitching(team.team_stats.pitching, "Totals", era=""),
        notes=notes,
    )


def build_boxscore(feed: models.LiveFeed) -> Boxscore:
    boxscore = feed.live_data.boxscore
    game_notes = tuple(n for n in (_format_note(note) for note in boxscore.info) if n)
    if boxscore.teams is None:
        return Boxscore(game_notes=game_notes)
    return Boxscore(
        away=_team_boxscore(boxscore.teams.away),
        home=_team_boxscore(boxscore.teams.home),
        game_notes=game_notes,
    )
