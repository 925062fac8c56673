"""Runtime configuration loaded from the environment and an optional .env file."""
import os
from dataclasses import dataclass
from datetime import tzinfo
from enum import Enum
from threading import Lock
from typing import Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv
from tzlocal import get_localzone


_ENV_LOADED = False
_ENV_LOCK = Lock()
_SETTINGS: Optional["Settings"] = None


class EndBeforeStartPolicy(Enum):
    """How the scheduler treats an end time earlier than the start time."""

    REJECT = "reject"
    ROLL_OVER = "roll_over"
    PRESERVE = "preserve"


@dataclass(frozen=True)
class Settings:
    """Dashboard settings."""

    api_base_url: str = "http://localhost:5000"
    request_timeout: float = 10.0
    timezone_name: Optional[str] = None
    end_before_start: EndBeforeStartPolicy = EndBeforeStartPolicy.REJECT
    festival_title: str = "DU Lit 2025"
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate settings after initialization."""
        if not self.api_base_url or not self.api_base_url.startswith(("http://", "https://")):
            raise ValueError(f"API base URL must start with http:// or https://: {self.api_base_url}")

        if self.request_timeout <= 0:
            raise ValueError("Request timeout must be positive")

    @property
    def timezone(self) -> tzinfo:
        """Editor timezone; the machine's local zone (with its DST rules) unless configured."""
        if self.timezone_name:
            return ZoneInfo(self.timezone_name)
        return get_localzone()


def _load_env_file() -> None:
    """Load variables from .env once per process."""
    global _ENV_LOADED

    if _ENV_LOADED:
        return

    with _ENV_LOCK:
        if _ENV_LOADED:
            return
        load_dotenv()
        _ENV_LOADED = True


def _parse_policy(raw: str) -> EndBeforeStartPolicy:
    try:
        return EndBeforeStartPolicy(raw.strip().lower())
    except ValueError as e:
        valid = [p.value for p in EndBeforeStartPolicy]
        raise ValueError(f"FESTIVAL_END_BEFORE_START must be one of {valid}, got: {raw}") from e


def load_settings() -> Settings:
    """
    Build settings from environment variables.

    Returns:
        Settings instance

    Raises:
        ValueError: If a variable holds an invalid value
    """
    _load_env_file()

    raw_timeout = os.getenv("FESTIVAL_API_TIMEOUT", "10")
    try:
        timeout = float(raw_timeout)
    except ValueError as e:
        raise ValueError(f"FESTIVAL_API_TIMEOUT must be a number, got: {raw_timeout}") from e

    return Settings(
        api_base_url=os.getenv("FESTIVAL_API_BASE_URL", "http://localhost:5000").rstrip("/"),
        request_timeout=timeout,
        timezone_name=os.getenv("FESTIVAL_TIMEZONE") or None,
        end_before_start=_parse_policy(os.getenv("FESTIVAL_END_BEFORE_START", "reject")),
        festival_title=os.getenv("FESTIVAL_TITLE", "DU Lit 2025"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def get_settings() -> Settings:
    """Return process-wide settings, loading them on first use."""
    global _SETTINGS

    if _SETTINGS is None:
        _SETTINGS = load_settings()
    return _SETTINGS


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    global _SETTINGS
    _SETTINGS = None
