"""Configuration objects and constants for media discovery."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

DEFAULT_NAVIGATION_TIMEOUT = 60.0
DEFAULT_GRACE_PERIOD = 1.5
DEFAULT_MAX_CONCURRENT_PAGES = 4
DEFAULT_TITLE = "Untitled"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)
DEFAULT_LAUNCH_ARGS: Tuple[str, ...] = (
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--autoplay-policy=no-user-gesture-required",
)

# Hosts of video/audio platforms and their CDNs; matched as substrings.
DEFAULT_PRIORITY_DOMAINS: Tuple[str, ...] = (
    "googlevideo.com",
    "youtube.com",
    "youtu.be",
    "ytimg.com",
    "fbcdn.net",
    "cdninstagram.com",
    "tiktokcdn.com",
    "tiktokv.com",
    "twimg.com",
    "vimeocdn.com",
    "akamaized.net",
    "dailymotion.com",
    "dmcdn.net",
    "sndcdn.com",
    "soundcloud.com",
    "scdn.co",
    "redd.it",
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class ProbeConfig:
    """Settings that control page loading and media capture."""

    navigation_timeout: float = DEFAULT_NAVIGATION_TIMEOUT
    grace_period: float = DEFAULT_GRACE_PERIOD
    max_concurrent_pages: int = DEFAULT_MAX_CONCURRENT_PAGES
    headless: bool = True
    user_agent: Optional[str] = DEFAULT_USER_AGENT
    launch_args: Tuple[str, ...] = DEFAULT_LAUNCH_ARGS
    priority_domains: Tuple[str, ...] = DEFAULT_PRIORITY_DOMAINS
    inspect_player_response: bool = True
    default_title: str = DEFAULT_TITLE
    extra_headers: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.navigation_timeout <= 0:
            raise ValueError("navigation_timeout must be positive")
        if self.grace_period < 0:
            raise ValueError("grace_period cannot be negative")
        if self.max_concurrent_pages < 1:
            raise ValueError("max_concurrent_pages must be at least 1")

    @classmethod
    def from_env(cls) -> "ProbeConfig":
        """Build a config from ``MEDIA_PROBE_*`` environment overrides."""
        return cls(
            navigation_timeout=_env_float(
                "MEDIA_PROBE_NAVIGATION_TIMEOUT", DEFAULT_NAVIGATION_TIMEOUT
            ),
            grace_period=_env_float("MEDIA_PROBE_GRACE_PERIOD", DEFAULT_GRACE_PERIOD),
            max_concurrent_pages=_env_int(
                "MEDIA_PROBE_MAX_CONCURRENT_PAGES", DEFAULT_MAX_CONCURRENT_PAGES
            ),
            headless=_env_bool("MEDIA_PROBE_HEADLESS", True),
            user_agent=os.getenv("MEDIA_PROBE_USER_AGENT") or DEFAULT_USER_AGENT,
            inspect_player_response=_env_bool("MEDIA_PROBE_INSPECT_PLAYER", True),
        )
