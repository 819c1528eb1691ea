# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0", "rich>=13.0"]
# ///
"""Rich renderables for the dashboard.

Everything here is built from :mod:`projections` and the tab states; this
module only decides layout and colours.  Text that comes from the API goes
into :class:`rich.text.Text` cells so it is never read as console markup.
It is called with the application lock held, so it must not block.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Iterable, Mapping

from rich import box
from rich.console import Group, RenderableType
from rich.layout import Layout
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

import projections
from config import AppSettings
from gameday import GamedayState
from keys import HELP_TEXT
from standings import HEADER as STANDINGS_HEADER
from teams import Team

if TYPE_CHECKING:
    from app import AppState

HEADER_SIZE = 3
STATUS_SIZE = 1
DATE_PICKER_SIZE = 5
# panel border plus table header
WIN_PROBABILITY_CHROME = 4
SCOREBOARD_WIN_PROBABILITY_ROWS = 6
STATS_OPTIONS_WIDTH = 30

STYLES = {
    "header": "bold",
    "scoring": "bold blue",
    "out": "red",
    "in_play": "blue",
    "walk": "green",
    "strikeout": "red",
    "ball": "green",
    "strike": "red",
    "plain": "",
    "blank": "",
}

TABS = [("1", "scoreboard"), ("2", "gameday"), ("3", "stats"), ("4", "standings"), ("?", "help")]


class GamedayPanel(Enum):
    INFO = "info"
    AT_BAT = "at_bat"
    BOXSCORE = "boxscore"
    WIN_PROBABILITY = "win_probability"


def styled_text(lines: Iterable[projections.StyledLine]) -> Text:
    text = Text()
    for i, line in enumerate(lines):
        if i:
            text.append("\n")
        style = STYLES.get(line.style, "")
        if line.selected:
            style = f"{style} reverse".strip()
        text.append(line.text, style=style)
    return text


def text_cells(row: Iterable[str]) -> list[Text]:
    return [Text(cell) for cell in row]


def _title(title: str | None) -> Text | None:
    return Text(title, style="italic") if title else None


def _plain_table(header: list[str], rows: list[list[str]], title: str | None = None,
                 highlight_last: bool = False) -> Table:
    table = Table(box=box.SIMPLE, title=_title(title), show_header=True, expand=True,
                  pad_edge=False)
    for i, name in enumerate(header):
        table.add_column(Text(name), justify="left" if i == 0 else "right", no_wrap=True)
    for i, row in enumerate(rows):
        style = "bold" if highlight_last and i == len(rows) - 1 else None
        table.add_row(*text_cells(row), style=style)
    return table


# ---------------------------------------------------------------------------
# Shared pieces
# ---------------------------------------------------------------------------

def tab_bar(state: AppState) -> Panel:
    text = Text()
    for key, name in TABS:
        style = "bold reverse" if state.view_tab().value == name else "dim"
        text.append(f" {key} {name} ", style=style)
        text.append(" ")
    text.append(f"  {state.date.isoformat()}", style="cyan")
    return Panel(text, box=box.ROUNDED, border_style="bright_yellow")


def status_bar(state: AppState) -> Text:
    if state.last_error:
        return Text(state.last_error, style="bold red")
    if state.loading:
        return Text("loading...", style="yellow")
    if state.view_tab().value == "gameday" and state.gameday.current_game_id():
        return Text(state.gameday.selected_at_bat_summary(), style="dim")
    return Text("")


def linescore_table(gameday: GamedayState) -> Table:
    linescore = gameday.session.linescore
    return _plain_table(
        projections.linescore_header(linescore),
        projections.linescore_rows(linescore),
    )


def win_probability_table(window: projections.WinProbabilityWindow) -> Table:
    table = Table(box=box.SIMPLE, expand=True, pad_edge=False)
    for name in projections.WIN_PROBABILITY_HEADER:
        table.add_column(name, justify="right", no_wrap=True)
    for i, row in enumerate(window.rows):
        table.add_row(*text_cells(row), style="reverse" if i == window.selected_row else None)
    return table


# ---------------------------------------------------------------------------
# Scoreboard tab
# ---------------------------------------------------------------------------

def schedule_table(state: AppState, settings: AppSettings, teams: Mapping[str, Team]) -> Table:
    table = Table(box=box.ROUNDED, expand=True, show_header=True)
    table.add_column("away", style="white")
    table.add_column("", justify="right", style="green")
    table.add_column("home", style="white")
    table.add_column("", justify="right", style="green")
    table.add_column("time", justify="right", style="cyan")
    table.add_column("status", style="yellow")

    rows = state.schedule.rows(settings.timezone, teams)
    for i, (game, row) in enumerate(zip(state.schedule.games, rows)):
        cells = text_cells(row)
        winner = game.winning_side()
        if winner == "away":
            cells[0].stylize("bold")
        elif winner == "home":
            cells[2].stylize("bold")
        table.add_row(*cells, style="reverse" if i == state.schedule.selected else None)
    return table


def scoreboard(state: AppState, settings: AppSettings, teams: Mapping[str, Team]) -> Layout:
    layout = Layout()
    if not state.schedule.games:
        message = "Loading schedule..." if state.loading or state.last_error is None else "No games"
        layout.update(Panel(Text(message, style="dim"), title="games"))
        return layout

    gameday = state.gameday
    session = gameday.session
    details: list[RenderableType] = []
    if session.game_id:
        details.append(linescore_table(gameday))
        if state.schedule.show_win_probability:
            details.append(Text(projections.win_probability_summary(
                session.win_probability,
                session.away_team.abbreviation,
                session.home_team.abbreviation,
            )))
            window = projections.win_probability_window(
                session.win_probability, None, SCOREBOARD_WIN_PROBABILITY_ROWS)
            details.append(win_probability_table(window))
    else:
        details.append(Text("Select a game with j / k", style="dim"))

    layout.split_row(
        Layout(Panel(schedule_table(state, settings, teams), title="games"), ratio=3),
        Layout(Panel(Group(*details), title="line score"), ratio=2),
    )
    return layout


# ---------------------------------------------------------------------------
# Gameday tab
# ---------------------------------------------------------------------------

def _info_panel(gameday: GamedayState, height: int) -> RenderableType:
    session = gameday.session
    view = projections.matchup_view(session, gameday.selection)

    matchup = Table.grid(expand=True, padding=(0, 2))
    matchup.add_column(ratio=2)
    matchup.add_column(justify="center", ratio=1)
    matchup.add_column(ratio=2)
    matchup.add_row(*text_cells([
        "\n".join(view.away_lines),
        "\n".join(view.diamond),
        "\n".join(view.home_lines),
    ]))

    extras = [line for line in (view.on_deck, view.in_hole) if line]
    plays = projections.inning_play_lines(
        session.history,
        gameday.selection.selected,
        session.current_at_bat,
        (session.away_team.abbreviation, session.home_team.abbreviation),
    )
    parts: list[RenderableType] = [linescore_table(gameday), matchup]
    if extras:
        parts.append(Text("  ".join(extras), style="dim"))
    parts.append(Text(f"count {view.count}  runners {view.runners.strip() or '-'}"))
    parts.append(styled_text(plays))
    return Group(*parts)


def _at_bat_panel(gameday: GamedayState, height: int) -> RenderableType:
    session = gameday.session
    at_bat, _ = gameday.selected_at_bat()
    parts: list[RenderableType] = [Text("\n".join(projections.pitch_plot(at_bat)))]
    hit = projections.hit_data_line(at_bat)
    if hit:
        parts.append(Text(hit, style="blue"))
    parts.append(styled_text(projections.at_bat_event_lines(
        at_bat, session.away_team.abbreviation, session.home_team.abbreviation)))
    return Group(*parts)


def _boxscore_panel(gameday: GamedayState, height: int, side: str = "away") -> RenderableType:
    boxscore = gameday.session.boxscore
    team = gameday.session.home_team if side == "home" else gameday.session.away_team
    parts: list[RenderableType] = [
        _plain_table(projections.BATTING_HEADER, projections.batting_rows(boxscore, side),
                     title=team.team_name, highlight_last=True),
    ]
    notes = projections.boxscore_notes(boxscore, side)
    if notes:
        parts.append(Text("\n".join(notes), style="dim"))
    parts.append(_plain_table(projections.PITCHING_HEADER,
                              projections.pitching_rows(boxscore, side), highlight_last=True))
    return Group(*parts)


def _win_probability_panel(gameday: GamedayState, height: int) -> RenderableType:
    session = gameday.session
    at_bat, is_current = gameday.selected_at_bat()
    selected = None if is_current else at_bat.index
    window = projections.win_probability_window(
        session.win_probability, selected, max(height - WIN_PROBABILITY_CHROME, 2))
    summary = projections.win_probability_summary(
        session.win_probability, session.away_team.abbreviation, session.home_team.abbreviation)
    return Group(Text(summary), win_probability_table(window))


PANEL_TITLES = {
    GamedayPanel.INFO: "info",
    GamedayPanel.AT_BAT: "at bat",
    GamedayPanel.BOXSCORE: "box score",
    GamedayPanel.WIN_PROBABILITY: "win probability",
}


def render_panel(panel: GamedayPanel, state: AppState, height: int) -> Panel:
    """Render one gameday panel by kind."""
    gameday = state.gameday
    match panel:
        case GamedayPanel.INFO:
            body = _info_panel(gameday, height)
        case GamedayPanel.AT_BAT:
            body = _at_bat_panel(gameday, height)
        case GamedayPanel.BOXSCORE:
            body = _boxscore_panel(gameday, height, state.boxscore_side)
        case GamedayPanel.WIN_PROBABILITY:
            body = _win_probability_panel(gameday, height)
    return Panel(body, title=PANEL_TITLES[panel], box=box.ROUNDED)


def enabled_panels(gameday: GamedayState) -> list[GamedayPanel]:
    toggles = gameday.panels
    flags = [
        (GamedayPanel.INFO, toggles.info),
        (GamedayPanel.AT_BAT, toggles.at_bat),
        (GamedayPanel.BOXSCORE, toggles.boxscore),
        (GamedayPanel.WIN_PROBABILITY, toggles.win_probability),
    ]
    return [panel for panel, on in flags if on]


def gameday_view(state: AppState, height: int) -> Layout:
    layout = Layout()
    if not state.gameday.current_game_id():
        message = "Loading game..." if state.loading else "No game selected"
        layout.update(Panel(Text(message, style="dim")))
        return layout
    panels = enabled_panels(state.gameday)
    if not panels:
        layout.update(Panel(Text("All panels hidden, press i / p / b / w", style="dim")))
        return layout
    layout.split_row(*(Layout(render_panel(p, state, height), name=p.value) for p in panels))
    return layout


# ---------------------------------------------------------------------------
# Stats tab
# ---------------------------------------------------------------------------

def stats_table(state: AppState) -> Table:
    stats = state.stats
    header, rows = stats.table()
    table = Table(box=box.SIMPLE, expand=True, show_header=True, pad_edge=False)
    for i, name in enumerate(header):
        label = f"{name} {stats.sort_order.value}" if name == stats.sort_column else name
        table.add_column(Text(label), justify="left" if i == 0 else "right", no_wrap=True)
    for row in rows:
        table.add_row(*text_cells(row))
    return table


def stats_options(state: AppState) -> Text:
    stats = state.stats
    text = Text()
    for i, key in enumerate(stats.keys()):
        column = stats.columns[key]
        if i:
            text.append("\n")
        mark = "[x]" if column.active else "[ ]"
        line = f"{mark} {key:<6} {column.description}".rstrip()
        text.append(line, style="reverse" if i == stats.selected else "")
    return text


def stats_view(state: AppState) -> Layout:
    stats = state.stats
    kind = "players" if stats.player else "teams"
    layout = Layout()
    if stats.columns[stats.name_column()].values:
        body: RenderableType = stats_table(state)
    else:
        body = Text("Loading stats..." if state.last_error is None else "No stats", style="dim")
    table_panel = Panel(body, title=f"{stats.group} {kind}", box=box.ROUNDED)
    if not stats.show_options:
        layout.update(table_panel)
        return layout
    layout.split_row(
        Layout(table_panel, name="table"),
        Layout(Panel(stats_options(state), title="options", box=box.ROUNDED),
               name="options", size=STATS_OPTIONS_WIDTH),
    )
    return layout


# ---------------------------------------------------------------------------
# Standings tab
# ---------------------------------------------------------------------------

def standings_view(state: AppState) -> Panel:
    standings = state.standings
    table = Table(box=box.SIMPLE, expand=True, show_header=True, pad_edge=False)
    for i, name in enumerate(STANDINGS_HEADER):
        table.add_column(name, justify="left" if i == 0 else "right", no_wrap=True)
    for i, row in enumerate(standings.rows()):
        cells = text_cells(row.cells)
        cells += [Text("")] * (len(STANDINGS_HEADER) - len(cells))
        style = "bold" if row.is_division else ""
        if i == standings.selected:
            style = f"{style} reverse".strip()
        table.add_row(*cells, style=style or None)
    return Panel(table, title="standings", box=box.ROUNDED)


# ---------------------------------------------------------------------------
# Help tab
# ---------------------------------------------------------------------------

def help_view() -> Panel:
    table = Table(box=box.SIMPLE, show_header=True)
    table.add_column("key", style="cyan", no_wrap=True)
    table.add_column("action", style="white")
    for key, action in HELP_TEXT:
        table.add_row(*text_cells([key, action]))
    return Panel(table, title="help", box=box.ROUNDED)


# ---------------------------------------------------------------------------
# Overlays
# ---------------------------------------------------------------------------

def date_picker(state: AppState) -> Panel:
    entry = state.date_input
    text = Text()
    text.append("date: ", style="bold")
    text.append(entry.text, style="" if entry.is_valid else "red")
    text.append("_", style="blink")
    if not entry.is_valid:
        text.append("  invalid date", style="bold red")
    text.append("\nYYYY-MM-DD or t for today, Left / Right step a day, Esc to cancel",
                style="dim")
    return Panel(text, title="date", box=box.ROUNDED, border_style="cyan")


def debug_panel(lines: list[str]) -> Panel:
    return Panel(Text("\n".join(lines)), title="debug", box=box.ROUNDED, border_style="magenta")


# ---------------------------------------------------------------------------
# Whole screen
# ---------------------------------------------------------------------------

def render_app(state: AppState, settings: AppSettings, teams: Mapping[str, Team],
               height: int = 40, width: int = 0) -> Layout:
    """Tab bar, the active tab and a status line; full screen hides the chrome.

    The date picker is drawn above the tab it was opened from and the
    debug panel below it.
    """
    body_height = height if state.full_screen else height - HEADER_SIZE - STATUS_SIZE
    match state.view_tab().value:
        case "gameday":
            body: RenderableType = gameday_view(state, body_height)
        case "stats":
            body = stats_view(state)
        case "standings":
            body = standings_view(state)
        case "help":
            body = help_view()
        case _:
            body = scoreboard(state, settings, teams)

    sections = [Layout(body, name="tab")]
    if state.active_tab.value == "date_picker":
        sections.insert(0, Layout(date_picker(state), name="date", size=DATE_PICKER_SIZE))
    if state.show_debug:
        gameday = state.gameday
        lines = projections.debug_lines(gameday.session, gameday.selection, width, height)
        sections.append(Layout(debug_panel(lines), name="debug", size=len(lines) + 2))
    if len(sections) > 1:
        body = Layout()
        body.split_column(*sections)

    if state.full_screen:
        return body if isinstance(body, Layout) else Layout(body)

    layout = Layout()
    layout.split_column(
        Layout(tab_bar(state), name="header", size=HEADER_SIZE),
        Layout(body, name="body"),
        Layout(status_bar(state), name="status", size=STATUS_SIZE),
    )
    return layout
