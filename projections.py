# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Display rows derived from the game session.

Pure functions: each takes session data (plus the current selection where
relevant) and returns strings or rows of strings.  Rendering code turns
these into terminal widgets; nothing here knows about the terminal.

Line-producing builders are generators so callers that only need the first
screenful never format the rest of the game.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, NamedTuple

from at_bat import AtBat, PitchEventType
from at_bat_history import AtBatHistory
from boxscore import BatterLine, Boxscore, PitcherLine
from game_session import GameSession
from linescore import Linescore, LinescoreLine
from selection import AtBatSelection
from win_probability import WinProbabilityAtBat, WinProbabilitySeries

SCORING_SYMBOL = "!"
SELECTION_SYMBOL = ">"
IN_PROGRESS = "in progress..."

BATTING_HEADER = ["batter", "ab", "r", "h", "rbi", "bb", "so", "hr", "lob", "avg"]
PITCHING_HEADER = ["pitcher", "ip", "h", "r", "er", "bb", "so", "hr", "p-s", "era"]
WIN_PROBABILITY_HEADER = ["inning", "li", "wpa", "win"]


class StyledLine(NamedTuple):
    """A display line with a semantic style tag for the renderer.

    Tags: ``header``, ``scoring``, ``out``, ``in_play``, ``walk``,
    ``strikeout``, ``ball``, ``strike``, ``plain`` and ``blank``.
    """
    text: str
    style: str = "plain"
    selected: bool = False


# ---------------------------------------------------------------------------
# Line score
# ---------------------------------------------------------------------------

def linescore_header(linescore: Linescore) -> list[str]:
    """``["", "1", ..., "9", <extra innings>, "R", "H", "E"]``."""
    header = [""] + [str(i) for i in range(1, 10)]
    header.extend(str(i) for i in range(10, linescore.current_inning + 1))
    header.extend(["R", "H", "E"])
    return header


def _linescore_row(line: LinescoreLine) -> list[str]:
    row = [line.abbreviation]
    row.extend(str(runs) for runs in line.inning_runs)
    # innings not yet played
    while len(row) <= 9:
        row.append("-")
    row.extend([str(line.runs), str(line.hits), str(line.errors)])
    return row


def linescore_rows(linescore: Linescore) -> list[list[str]]:
    """Away row then home row."""
    return [_linescore_row(linescore.away), _linescore_row(linescore.home)]


# ---------------------------------------------------------------------------
# Box score
# ---------------------------------------------------------------------------

def _batter_row(line: BatterLine, name: str) -> list[str]:
    return [
        name,
        str(line.at_bats),
        str(line.runs),
        str(line.hits),
        str(line.rbi),
        str(line.walks),
        str(line.strike_outs),
        str(line.home_runs),
        str(line.left_on_base),
        line.average,
    ]


def _pitcher_row(line: PitcherLine) -> list[str]:
    return [
        line.name,
        line.innings_pitched,
        str(line.hits),
        str(line.runs),
        str(line.earned_runs),
        str(line.walks),
        str(line.strike_outs),
        str(line.home_runs),
        f"{line.pitches}-{line.strikes}",
        line.era,
    ]


def batting_rows(boxscore: Boxscore, side: str) -> list[list[str]]:
    """One row per batter in lineup order, then the team ``Totals`` row.

    The totals come from the team's aggregate stats in the feed, never from
    adding up the player rows.
    """
    team = boxscore.team(side)
    rows = []
    for line in team.batters:
        order = " " if line.is_substitute else str(line.order)
        rows.append(_batter_row(line, f"{order} {line.name} {line.position}"))
    rows.append(_batter_row(team.batting_totals, "Totals"))
    return rows


def pitching_rows(boxscore: Boxscore, side: str) -> list[list[str]]:
    team = boxscore.team(side)
    rows = [_pitcher_row(line) for line in team.pitchers]
    rows.append(_pitcher_row(team.pitching_totals))
    return rows


def boxscore_notes(boxscore: Boxscore, side: str) -> list[str]:
    return list(boxscore.team(side).notes) + list(boxscore.game_notes)


# ---------------------------------------------------------------------------
# Win probability
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WinProbabilityWindow:
    rows: list[list[str]]
    samples: list[WinProbabilityAtBat]
    selected_row: int | None


def win_probability_row(sample: WinProbabilityAtBat) -> list[str]:
    """Format one sample as ``[label, leverage, wpa, home win %]``."""
    half = "top" if sample.is_top_inning else "bot"
    label = f"{half} {sample.inning}"

    li = "0" if sample.leverage_index == 0 else f"{sample.leverage_index:.2f}"

    # -10.0 is as wide as a wpa gets, so pad everything else to line up with the sign
    added = sample.home_team_wp_added
    wpa = f"{added:4.1f}" if added <= -10.0 else f" {added:4.1f}"

    home_wp = min(max(sample.home_team_wp, 0.0), 100.0)
    wp = f"{home_wp:.0f}%" if home_wp in (0.0, 100.0) else f"{home_wp:.1f}%"
    return [label, li, wpa, wp]


def visible_range(total: int, selected_pos: int | None,
                  table_height: int) -> tuple[int, int, int | None]:
    """Compute ``(offset, end, relative_selection)`` over newest-first rows.

    *selected_pos* is the selection's position in oldest-first series
    order.  One row of *table_height* is taken by the header.
    """
    visible = max(table_height - 1, 0)
    if selected_pos is None:
        return 0, min(visible, total), None

    last = max(total - 1, 0)
    reversed_pos = max(last - selected_pos, 0)
    if reversed_pos == last:
        # oldest sample: anchor it to the bottom of the window
        offset = max(reversed_pos - max(visible - 1, 0), 0)
    elif reversed_pos >= visible:
        offset = max(reversed_pos - visible // 2, 0)
    else:
        offset = 0

    offset = min(offset, max(total - visible, 0))
    end = min(offset + visible, total)
    return offset, end, max(reversed_pos - offset, 0)


def win_probability_window(series: WinProbabilitySeries, selected_index: int | None,
                           table_height: int) -> WinProbabilityWindow:
    """The slice of the win probability table that fits in *table_height* rows.

    Rows are newest first.  A selected at-bat that is not in the series is
    treated as no selection.
    """
    samples = series.samples()
    selected_pos = None
    if selected_index is not None:
        selected_pos = series.position_of(selected_index)

    offset, end, relative = visible_range(len(samples), selected_pos, table_height)
    newest_first = samples[::-1][offset:end]
    return WinProbabilityWindow(
        rows=[win_probability_row(s) for s in newest_first],
        samples=newest_first,
        selected_row=relative,
    )


def win_probability_summary(series: WinProbabilitySeries, away: str, home: str) -> str:
    latest = series.latest()
    return f"{away} {latest.away_team_wp:.1f}% | {home} {latest.home_team_wp:.1f}%"


# ---------------------------------------------------------------------------
# At-bat detail
# ---------------------------------------------------------------------------

def scoring_span(away: str, away_score: int, home: str, home_score: int) -> str:
    return f" [{away} {away_score}, {home} {home_score}]"


def at_bat_event_lines(at_bat: AtBat, away: str = "A", home: str = "H") -> Iterator[StyledLine]:
    """Yield one line per event of *at_bat*, newest first.

    Pitches read ``" 3  Ball                | 2-1 | 95.1 | Sinker"``;
    everything else shows its description, with the new score when it
    scored a run.
    """
    for event in reversed(at_bat.events):
        if event.event_type is PitchEventType.PITCH:
            pitch = event.pitch
            if pitch is None:
                continue
            text = (
                f" {pitch.number}  {pitch.description:<20}| "
                f"{pitch.count.balls}-{pitch.count.strikes} | "
                f"{pitch.speed:^5.1f}| {pitch.pitch_type}"
            )
            if pitch.is_in_play:
                style = "in_play"
            elif pitch.is_strike:
                style = "strike"
            elif pitch.is_ball:
                style = "ball"
            else:
                style = "plain"
            yield StyledLine(text, style)
        else:
            text = f" {event.description}"
            style = "plain"
            if event.is_scoring:
                text = f" {SCORING_SYMBOL}{text}"
                style = "scoring"
                if event.away_score is not None and event.home_score is not None:
                    text += scoring_span(away, event.away_score, home, event.home_score)
            yield StyledLine(text, style)


def hit_data_line(at_bat: AtBat) -> str | None:
    """Exit velocity, launch angle and distance of the ball put in play."""
    if not at_bat.events:
        return None
    hit = at_bat.events[-1].hit_data
    return hit.describe() if hit is not None else None


def pitch_plot(at_bat: AtBat, width: int = 21, height: int = 11) -> list[str]:
    """Plot pitch locations as their pitch numbers over a text strike zone.

    The plot spans 2.5 ft either side of the middle of the plate and from the
    ground up to 1.5 ft above the top of the zone.
    """
    pitches = at_bat.pitches
    top = pitches[0].strike_zone_top if pitches else 3.3
    bottom = pitches[0].strike_zone_bottom if pitches else 1.5
    max_z = max(top + 1.5, 1.0)
    half_plate = 17 / 12 / 2  # plate is 17 inches wide

    def column(x: float) -> int:
        return round((x + 2.5) / 5.0 * (width - 1))

    def row(z: float) -> int:
        return round((max_z - z) / max_z * (height - 1))

    grid = [[" "] * width for _ in range(height)]
    left, right = column(-half_plate), column(half_plate)
    upper, lower = row(top), row(bottom)
    for c in range(left, right + 1):
        for r in (upper, lower):
            if 0 <= r < height:
                grid[r][c] = "-"
    for r in range(max(upper, 0), min(lower, height - 1) + 1):
        grid[r][left] = "|"
        grid[r][right] = "|"

    for pitch in pitches:
        x, z = pitch.location
        c = min(max(column(x), 0), width - 1)
        r = min(max(row(z), 0), height - 1)
        label = str(pitch.number % 10) if pitch.number else "*"
        grid[r][c] = label
    return ["".join(r) for r in grid]


# ---------------------------------------------------------------------------
# Inning play-by-play
# ---------------------------------------------------------------------------

def _result_style(at_bat: AtBat) -> str:
    result = at_bat.result
    if result.is_scoring_play:
        return "scoring"
    style = "plain"
    if result.is_out:
        style = "out"
    if result.last_event_code == "D":
        style = "in_play"
    if result.last_event_code == "H":
        style = "walk"
    if result.count.balls == 4:
        style = "walk"
    elif result.count.strikes == 3:
        style = "strikeout"
    return style


def _play_line(at_bat: AtBat, selected: int | None, away: str, home: str) -> StyledLine:
    result = at_bat.result
    is_selected = selected is not None and at_bat.index == selected
    if result.is_scoring_play:
        # a run can score without an RBI (wild pitch, error) and still gets a marker
        marker = SCORING_SYMBOL * max(result.rbi, 1)
        if is_selected:
            marker = f"{SELECTION_SYMBOL} {marker}"
    else:
        marker = SELECTION_SYMBOL if is_selected else "-"

    text = f"{marker} {result.description or IN_PROGRESS}"
    if result.is_out:
        outs = result.count.outs
        text += f" {outs} {'out' if outs == 1 else 'outs'}"
    if result.is_scoring_play:
        text += scoring_span(away, result.away_score, home, result.home_score)
    return StyledLine(text, _result_style(at_bat), is_selected)


def inning_play_lines(history: AtBatHistory, selected: int | None, current_index: int,
                      abbreviations: tuple[str, str] = ("A", "H")) -> Iterator[StyledLine]:
    """Yield the play-by-play for the inning of the selected at-bat.

    Both halves of that inning are listed, bottom half first and newest
    play first within each half, each half introduced by a ``## top 3`` /
    ``## bottom 3`` header.
    """
    at_bat, _ = history.get_or_fallback(selected, current_index)
    if at_bat.inning == 0:
        return

    away, home = abbreviations
    emitted = False
    for is_top in (False, True):
        plays = history.in_half_inning(at_bat.inning, is_top)
        if not plays:
            continue
        if emitted:
            yield StyledLine("", "blank")
        name = "top" if is_top else "bottom"
        yield StyledLine(f"## {name} {at_bat.inning}", "header")
        for play in reversed(plays):
            yield _play_line(play, selected, away, home)
        emitted = True


# ---------------------------------------------------------------------------
# Matchup
# ---------------------------------------------------------------------------

ON_BASE = "■"
EMPTY_BASE = "□"
OUT_MARKS = {0: "◯ ◯ ◯", 1: "● ◯ ◯", 2: "● ● ◯", 3: "● ● ●"}


@dataclass(frozen=True)
class MatchupView:
    away_name: str
    home_name: str
    away_score: int
    home_score: int
    inning: int
    is_top: bool
    is_current: bool
    pitcher: str
    batter: str
    count: str
    runners: str
    away_lines: list[str]
    home_lines: list[str]
    diamond: list[str]
    on_deck: str | None = None
    in_hole: str | None = None


def _player_lines(session: GameSession, player_id: int, fallback_name: str,
                  side: str, is_current: bool) -> tuple[str, list[str]]:
    player = session.players.get(player_id)
    name = player.display_name if player is not None else fallback_name
    lines = [f"{name} - {side}"]
    if player is None:
        return name, lines
    # today's line is only accurate for the at-bat in progress
    if is_current and player.summary:
        lines.append(player.summary)
    if player.note:
        lines.append(player.note)
    return name, lines


def _diamond(at_bat: AtBat, is_top: bool, inning: int) -> list[str]:
    runners = at_bat.matchup.runners
    second = ON_BASE if runners.second else EMPTY_BASE
    first = ON_BASE if runners.first else EMPTY_BASE
    third = ON_BASE if runners.third else EMPTY_BASE
    arrow = "▲" if is_top else "▼"
    matchup = at_bat.matchup
    return [
        f"{matchup.away_score}    {arrow} {inning}    {matchup.home_score}",
        f"  {second}  ",
        f"{third}   {first}",
        OUT_MARKS.get(matchup.count.outs, ""),
    ]


def matchup_view(session: GameSession, selection: AtBatSelection) -> MatchupView:
    """Scoreboard and matchup for the selected (or live) at-bat.

    On-deck and in-hole batters are only known for the live at-bat, so they
    are left out when looking at an earlier one.
    """
    at_bat, is_current = selection.resolve(session.history, session.current_at_bat)
    matchup = at_bat.matchup
    inning = at_bat.inning or 1
    is_top = at_bat.is_top_inning

    pitcher, pitcher_lines = _player_lines(
        session, matchup.pitcher_id, matchup.pitcher_name, matchup.pitcher_side, is_current)
    batter, batter_lines = _player_lines(
        session, matchup.batter_id, matchup.batter_name, matchup.batter_side, is_current)

    # the away team bats in the top half
    away_lines = [session.away_team.team_name] + (batter_lines if is_top else pitcher_lines)
    home_lines = [session.home_team.team_name] + (pitcher_lines if is_top else batter_lines)

    return MatchupView(
        away_name=session.away_team.team_name,
        home_name=session.home_team.team_name,
        away_score=matchup.away_score,
        home_score=matchup.home_score,
        inning=inning,
        is_top=is_top,
        is_current=is_current,
        pitcher=pitcher,
        batter=batter,
        count=f"{matchup.count.balls}-{matchup.count.strikes}",
        runners=str(matchup.runners),
        away_lines=away_lines,
        home_lines=home_lines,
        diamond=_diamond(at_bat, is_top, inning),
        on_deck=session.format_on_deck() if is_current else None,
        in_hole=session.format_in_hole() if is_current else None,
    )


# ---------------------------------------------------------------------------
# Debug overlay
# ---------------------------------------------------------------------------

GAMEDAY_URL = "https://www.mlb.com/gameday/{game_id}"


def debug_lines(session: GameSession, selection: AtBatSelection,
                width: int, height: int) -> list[str]:
    """Diagnostics for the selected game and at-bat."""
    at_bat, is_current = selection.resolve(session.history, session.current_at_bat)
    sample = session.win_probability.get(at_bat.index)
    wp = "-" if sample is None else f"{sample.home_team_wp:.1f}% home"
    return [
        f"game id: {session.game_id}",
        f"gameday: {GAMEDAY_URL.format(game_id=session.game_id)}",
        f"status: {session.status or '-'}",
        f"terminal: {width}x{height}",
        f"at bat: {at_bat.index} ({'live' if is_current else 'selected'})",
        f"at bats loaded: {len(session.history)}",
        f"event lines: {session.history.count_events()}",
        f"win probability: {wp}",
    ]
