#!/usr/bin/env python3
"""
Explicit run configuration.

The pipeline only ever sees a FeedConfig; load_config() is the single
place where environment variables are read.
"""

import os
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from constants import FALSY, TRUTHY, FeedDefaults, FetchConfig
from logger_config import get_logger

logger = get_logger(__name__)

SOURCE_FORMATS = ("auto", "json", "html")


@dataclass(frozen=True)
class FeedConfig:
    source_url: Optional[str] = None
    feed_title: str = FeedDefaults.TITLE
    feed_link: str = FeedDefaults.SITE_URL
    feed_description: str = FeedDefaults.DESCRIPTION
    language: str = FeedDefaults.LANGUAGE
    limit: int = FeedDefaults.LIMIT
    only_visible: bool = True
    only_upcoming: bool = False
    exclude_complete: bool = False
    prefer_explicit_order: bool = True
    show_complete_flag: bool = False
    timezone: Optional[str] = None
    output_path: str = FeedDefaults.OUTPUT
    source_format: str = "auto"
    fetch_timeout: float = FetchConfig.TIMEOUT
    fetch_retries: int = FetchConfig.MAX_RETRIES

    def zone(self) -> Optional[tzinfo]:
        """Configured zone, or None for local process time."""
        if not self.timezone:
            return None
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone {self.timezone!r}, using local time")
            return None

    def today(self) -> date:
        tz = self.zone()
        return datetime.now(tz).date() if tz else date.today()


def env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    low = raw.strip().lower()
    if low in TRUTHY:
        return True
    if low in FALSY:
        return False
    logger.warning(f"{name}={raw!r} is not a boolean, using {default}")
    return default


def env_int(env: Mapping[str, str], name: str, default: int, minimum: int = 0) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning(f"{name}={raw!r} is not an integer, using {default}")
        return default
    return value if value >= minimum else default


def env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    try:
        value = float(raw) if raw else default
    except ValueError:
        logger.warning(f"{name}={raw!r} is not a number, using {default}")
        return default
    return value if value > 0 else default


def env_str(env: Mapping[str, str], name: str, default: Optional[str]) -> Optional[str]:
    raw = env.get(name)
    return raw.strip() if raw and raw.strip() else default


def load_config(env: Optional[Mapping[str, str]] = None) -> FeedConfig:
    """Build a FeedConfig from environment variables (os.environ by default)."""
    env = os.environ if env is None else env
    source_format = (env_str(env, "SOURCE_FORMAT", "auto") or "auto").lower()
    if source_format not in SOURCE_FORMATS:
        logger.warning(f"SOURCE_FORMAT={source_format!r} not in {SOURCE_FORMATS}, using auto")
        source_format = "auto"

    return FeedConfig(
        source_url=env_str(env, "SOURCE_URL", None),
        feed_title=env_str(env, "RSS_TITLE", FeedDefaults.TITLE),
        feed_link=env_str(env, "SITE_URL", FeedDefaults.SITE_URL),
        feed_description=env_str(env, "RSS_DESCRIPTION", FeedDefaults.DESCRIPTION),
        language=env_str(env, "RSS_LANGUAGE", FeedDefaults.LANGUAGE),
        limit=env_int(env, "RSS_LIMIT", FeedDefaults.LIMIT),
        only_visible=env_bool(env, "RSS_ONLY_VISIBLE", True),
        only_upcoming=env_bool(env, "RSS_ONLY_UPCOMING", False),
        exclude_complete=env_bool(env, "RSS_EXCLUDE_COMPLETE", False),
        prefer_explicit_order=env_bool(env, "RSS_PREFER_ORDER", True),
        show_complete_flag=env_bool(env, "RSS_SHOW_COMPLETE", False),
        timezone=env_str(env, "RSS_TIMEZONE", None),
        output_path=env_str(env, "RSS_OUTPUT", FeedDefaults.OUTPUT),
        source_format=source_format,
        fetch_timeout=env_float(env, "FETCH_TIMEOUT", FetchConfig.TIMEOUT),
        fetch_retries=env_int(env, "FETCH_RETRIES", FetchConfig.MAX_RETRIES),
    )
