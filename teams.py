# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Static MLB team table.

Built once at startup by :func:`load_teams` and passed explicitly to the
pieces that need it (game session, schedule, config validation).  The
returned mapping is read-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Team:
    id: int
    name: str
    team_name: str
    abbreviation: str
    division: str = ""


UNKNOWN_HOME = Team(id=0, name="home", team_name="home", abbreviation="H")
UNKNOWN_AWAY = Team(id=0, name="away", team_name="away", abbreviation="A")

DIVISIONS: dict[int, str] = {
    103: "American League",
    104: "National League",
    200: "AL West",
    201: "AL East",
    202: "AL Central",
    203: "NL West",
    204: "NL East",
    205: "NL Central",
}

# (id, division id, canonical name, nickname, abbreviation) plus former names
# that still appear in historical feeds.
_TEAM_ROWS: list[tuple[int, int, str, str, str]] = [
    (108, 200, "Los Angeles Angels", "Angels", "LAA"),
    (109, 203, "Arizona Diamondbacks", "D-backs", "AZ"),
    (110, 201, "Baltimore Orioles", "Orioles", "BAL"),
    (111, 201, "Boston Red Sox", "Red Sox", "BOS"),
    (112, 205, "Chicago Cubs", "Cubs", "CHC"),
    (113, 205, "Cincinnati Reds", "Reds", "CIN"),
    (114, 202, "Cleveland Guardians", "Guardians", "CLE"),
    (115, 203, "Colorado Rockies", "Rockies", "COL"),
    (116, 202, "Detroit Tigers", "Tigers", "DET"),
    (117, 200, "Houston Astros", "Astros", "HOU"),
    (118, 202, "Kansas City Royals", "Royals", "KC"),
    (119, 203, "Los Angeles Dodgers", "Dodgers", "LAD"),
    (120, 204, "Washington Nationals", "Nationals", "WSH"),
    (121, 204, "New York Mets", "Mets", "NYM"),
    (133, 200, "Athletics", "Athletics", "ATH"),
    (134, 205, "Pittsburgh Pirates", "Pirates", "PIT"),
    (135, 203, "San Diego Padres", "Padres", "SD"),
    (136, 200, "Seattle Mariners", "Mariners", "SEA"),
    (137, 203, "San Francisco Giants", "Giants", "SF"),
    (138, 205, "St. Louis Cardinals", "Cardinals", "STL"),
    (139, 201, "Tampa Bay Rays", "Rays", "TB"),
    (140, 200, "Texas Rangers", "Rangers", "TEX"),
    (141, 201, "Toronto Blue Jays", "Blue Jays", "TOR"),
    (142, 202, "Minnesota Twins", "Twins", "MIN"),
    (143, 204, "Philadelphia Phillies", "Phillies", "PHI"),
    (144, 204, "Atlanta Braves", "Braves", "ATL"),
    (145, 202, "Chicago White Sox", "White Sox", "CWS"),
    (146, 204, "Miami Marlins", "Marlins", "MIA"),
    (147, 201, "New York Yankees", "Yankees", "NYY"),
    (158, 205, "Milwaukee Brewers", "Brewers", "MIL"),
    (159, 103, "American League All-Stars", "AL All-Stars", "AL"),
    (160, 104, "National League All-Stars", "NL All-Stars", "NL"),
]

_FORMER_NAMES: dict[str, str] = {
    "Oakland Athletics": "Athletics",
    "Cleveland Indians": "Cleveland Guardians",
    "Florida Marlins": "Miami Marlins",
    "Tampa Bay Devil Rays": "Tampa Bay Rays",
    "Anaheim Angels": "Los Angeles Angels",
}


def load_teams() -> Mapping[str, Team]:
    """Build the full-name -> :class:`Team` table.

    Former franchise names map to the current team so older feeds still
    resolve.
    """
    table: dict[str, Team] = {}
    for team_id, division_id, name, nickname, abbreviation in _TEAM_ROWS:
        table[name] = Team(
            id=team_id,
            name=name,
            team_name=nickname,
            abbreviation=abbreviation,
            division=DIVISIONS.get(division_id, ""),
        )
    for former, current in _FORMER_NAMES.items():
        table[former] = table[current]
    return MappingProxyType(table)


def lookup_team(teams: Mapping[str, Team], team: str | int) -> Team | None:
    """Resolve a full name, nickname, abbreviation, or ID to a team.

    Matching is case-insensitive.  Returns ``None`` when nothing matches.
    """
    if isinstance(team, int):
        return next((t for t in teams.values() if t.id == team), None)

    key = team.strip()
    if key in teams:
        return teams[key]
    if key.isdigit():
        return lookup_team(teams, int(key))

    lowered = key.lower()
    for candidate in teams.values():
        if lowered in (candidate.name.lower(), candidate.team_name.lower(),
                       candidate.abbreviation.lower()):
            return candidate
    return None
