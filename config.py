"""Centralized configuration: the TOML settings file, env overrides, logging.

Settings live in ``$XDG_CONFIG_HOME/mlbt/mlbt.toml`` (``~/.config/mlbt``
when unset).  ``MLBT_CONFIG`` or ``--config`` point at another file, and
``MLBT_LOG_LEVEL`` overrides the configured log level.  A commented default
file is written the first time the dashboard runs.
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from live_game_feed import DEFAULT_POLL_INTERVAL, MAX_POLL_INTERVAL, MIN_POLL_INTERVAL
from teams import Team, lookup_team

CONFIG_FILENAME = "mlbt.toml"
LOG_FILENAME = "mlbt.log"
CONFIG_ENV = "MLBT_CONFIG"
LOG_LEVEL_ENV = "MLBT_LOG_LEVEL"

DEFAULT_TIMEZONE = "America/Los_Angeles"
DEFAULT_LOG_LEVEL = "error"

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
LOG_LEVELS = {
    "off": None,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

DEFAULT_CONFIG = f"""\
# mlbt configuration
#
# Team whose games are listed first on the scoreboard, e.g. "Seattle Mariners".
# favorite_team = "Seattle Mariners"

# IANA timezone used for game start times.
timezone = "{DEFAULT_TIMEZONE}"

# off, debug, info, warning or error. Logs go to {LOG_FILENAME} next to this file.
log_level = "{DEFAULT_LOG_LEVEL}"

# Seconds between live game polls ({MIN_POLL_INTERVAL}-{MAX_POLL_INTERVAL}).
poll_interval = {DEFAULT_POLL_INTERVAL}
"""

logger = logging.getLogger("config")


class ConfigError(Exception):
    """Raised when the settings file cannot be read or is not valid TOML."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


@dataclass(frozen=True)
class AppSettings:
    favorite_team: Team | None = None
    timezone: ZoneInfo = ZoneInfo(DEFAULT_TIMEZONE)
    log_level: str = DEFAULT_LOG_LEVEL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    config_dir: Path | None = None


# ---------------------------------------------------------------------------
# Locating the file
# ---------------------------------------------------------------------------

def default_config_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "mlbt"


def resolve_config_path(explicit: str | Path | None = None) -> Path:
    """``--config`` wins over ``MLBT_CONFIG``, which wins over the default."""
    if explicit:
        return Path(explicit).expanduser()
    env = os.environ.get(CONFIG_ENV)
    if env:
        return Path(env).expanduser()
    return default_config_dir() / CONFIG_FILENAME


def write_default_config(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG, encoding="utf-8")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def clamp_poll_interval(value: Any) -> float:
    try:
        interval = float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid poll_interval %r, using %d", value, DEFAULT_POLL_INTERVAL)
        return DEFAULT_POLL_INTERVAL
    return min(max(interval, MIN_POLL_INTERVAL), MAX_POLL_INTERVAL)


def _timezone(name: Any) -> ZoneInfo:
    if not isinstance(name, str) or not name:
        return ZoneInfo(DEFAULT_TIMEZONE)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using %s", name, DEFAULT_TIMEZONE)
        return ZoneInfo(DEFAULT_TIMEZONE)


def _log_level(value: Any) -> str:
    override = os.environ.get(LOG_LEVEL_ENV)
    if override:
        value = override
    level = str(value).strip().lower() if value is not None else DEFAULT_LOG_LEVEL
    if level not in LOG_LEVELS:
        logger.warning("Unknown log level %r, using %s", value, DEFAULT_LOG_LEVEL)
        return DEFAULT_LOG_LEVEL
    return level


def parse_settings(raw: dict[str, Any], teams: Mapping[str, Team],
                   config_dir: Path | None = None) -> AppSettings:
    """Validate a decoded settings table.

    Unknown teams and timezones are logged and replaced by defaults rather
    than treated as fatal.
    """
    favorite = None
    favorite_name = raw.get("favorite_team")
    if favorite_name:
        favorite = lookup_team(teams, str(favorite_name))
        if favorite is None:
            logger.warning("Unknown favorite_team %r, ignoring", favorite_name)

    return AppSettings(
        favorite_team=favorite,
        timezone=_timezone(raw.get("timezone")),
        log_level=_log_level(raw.get("log_level", DEFAULT_LOG_LEVEL)),
        poll_interval=clamp_poll_interval(raw.get("poll_interval", DEFAULT_POLL_INTERVAL)),
        config_dir=config_dir,
    )


def load_settings(teams: Mapping[str, Team], path: str | Path | None = None,
                  create: bool = True) -> AppSettings:
    """Load settings, writing the default file first if none exists.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    config_path = resolve_config_path(path)
    if not config_path.exists():
        if not create:
            return parse_settings({}, teams, config_path.parent)
        try:
            write_default_config(config_path)
        except OSError as exc:
            logger.warning("Could not write default config %s: %s", config_path, exc)
            return parse_settings({}, teams, config_path.parent)

    try:
        with config_path.open("rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {config_path}: {exc}", path=config_path) from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read {config_path}: {exc}", path=config_path) from exc
    return parse_settings(raw, teams, config_path.parent)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def configure_logging(settings: AppSettings) -> Path | None:
    """Send logs to ``mlbt.log`` in the config directory.

    The terminal belongs to the dashboard, so nothing is logged to it.
    Returns the log file path, or ``None`` when logging is off.
    """
    level = LOG_LEVELS.get(settings.log_level)
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    if level is None:
        root.addHandler(logging.NullHandler())
        return None

    log_dir = settings.config_dir or default_config_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILENAME
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        filename=str(log_path),
        encoding="utf-8",
    )
    return log_path
