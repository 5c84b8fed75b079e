"""Configuration management for daygrid."""

import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DAYGRID_HOME = Path(os.environ.get("DAYGRID_HOME", Path.home() / "daygrid"))
CONFIG_FILE = DAYGRID_HOME / "config" / "daygrid.conf"
SESSION_FILE = DAYGRID_HOME / "config" / ".session.json"
DATA_DIR = DAYGRID_HOME / "data"

WEEKDAYS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}


@dataclass
class Config:
    """daygrid configuration."""

    api_base_url: str = "http://localhost:3000/api"
    email: str = ""
    timezone: str = ""
    week_start: str = "Sunday"
    default_color: str = "dodgerblue"
    # Month list virtualization
    total_months: int = 24
    current_month_index: int = 3
    overscan: int = 2
    month_row_height: int = 700
    refresh_minutes: int = 5
    cache_dir: str = ""

    @property
    def week_starts_on(self) -> int:
        """Python weekday number for the first column of the month grid."""
        return WEEKDAYS.get(self.week_start.strip().lower(), WEEKDAYS["sunday"])


@dataclass
class Session:
    """Auth cookie issued by the calendar API."""

    token: str = ""
    expires_at: int = 0

    def is_valid(self) -> bool:
        if not self.token:
            return False
        return not self.expires_at or time.time() < self.expires_at

    def save(self) -> None:
        """Save session to file."""
        SESSION_FILE.parent.mkdir(parents=True, exist_ok=True)
        SESSION_FILE.write_text(json.dumps({"token": self.token, "expires_at": self.expires_at}))
        SESSION_FILE.chmod(0o600)

    def clear(self) -> None:
        self.token = ""
        self.expires_at = 0
        if SESSION_FILE.exists():
            SESSION_FILE.unlink()

    @classmethod
    def load(cls) -> "Session":
        """Load session from file."""
        if not SESSION_FILE.exists():
            return cls()
        try:
            data = json.loads(SESSION_FILE.read_text())
            return cls(token=data.get("token", ""), expires_at=data.get("expires_at", 0))
        except (json.JSONDecodeError, AttributeError):
            return cls()


def _parse_int(key: str, value: str, current: int) -> int:
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer {key.upper()}={value!r}")
        return current


def _parse_timezone(value: str, current: str) -> str:
    if not value:
        return current
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown TIMEZONE {value!r}, keeping {current or 'system zone'}")
        return current
    return value


def load_config() -> Config:
    """Load configuration from daygrid.conf file."""
    config = Config()

    if not CONFIG_FILE.exists():
        return config

    for line in CONFIG_FILE.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Quoted values may carry an inline comment after the closing quote
        if value[:1] in ('"', "'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            value = value.split("#")[0].strip()

        match key:
            case "api_base_url":
                config.api_base_url = value.rstrip("/")
            case "email":
                config.email = value
            case "timezone":
                config.timezone = _parse_timezone(value, config.timezone)
            case "week_start":
                if value.lower() in WEEKDAYS:
                    config.week_start = value
                else:
                    logger.warning(f"Unknown WEEK_START {value!r}, keeping {config.week_start}")
            case "default_color":
                config.default_color = value
            case "total_months":
                config.total_months = _parse_int(key, value, config.total_months)
            case "current_month_index":
                config.current_month_index = _parse_int(key, value, config.current_month_index)
            case "overscan":
                config.overscan = _parse_int(key, value, config.overscan)
            case "month_row_height":
                config.month_row_height = _parse_int(key, value, config.month_row_height)
            case "refresh_minutes":
                config.refresh_minutes = _parse_int(key, value, config.refresh_minutes)
            case "cache_dir":
                config.cache_dir = value

    return config
