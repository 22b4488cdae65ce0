#!/usr/bin/env python3
"""
Pure transform: raw records -> RSS XML.

No I/O and no environment access; the clock is injectable through `now`
and `today` so repeated runs over the same records are reproducible.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from course_items import CourseItem, map_records
from feed_builder import ChannelMeta, build_feed
from feed_config import FeedConfig
from item_selection import FilterOptions, select_items
from logger_config import get_logger, log_event

logger = get_logger(__name__)


def channel_from_config(config: FeedConfig) -> ChannelMeta:
    return ChannelMeta(
        title=config.feed_title,
        link=config.feed_link,
        description=config.feed_description,
        language=config.language,
    )


def filter_options_from_config(config: FeedConfig) -> FilterOptions:
    return FilterOptions(
        only_visible=config.only_visible,
        only_upcoming=config.only_upcoming,
        exclude_complete=config.exclude_complete,
    )


def prepare_items(records: Sequence[Dict[str, Any]], config: FeedConfig,
                  today: Optional[date] = None) -> List[CourseItem]:
    """Map, filter, sort and limit."""
    today = today or config.today()
    items = map_records(records, site_url=config.feed_link, today=today)
    selected = select_items(
        items,
        filter_options_from_config(config),
        limit=config.limit,
        prefer_explicit_order=config.prefer_explicit_order,
        today=today,
    )
    log_event(logger, "debug", "items_selected", {"mapped": len(items), "selected": len(selected)})
    return selected


def render_feed(items: Sequence[CourseItem], config: FeedConfig, now: Optional[datetime] = None) -> str:
    return build_feed(
        channel_from_config(config),
        items,
        now=now or datetime.now(timezone.utc),
        show_complete=config.show_complete_flag,
        tz=config.zone(),
    )


def run_pipeline(records: Sequence[Dict[str, Any]], config: FeedConfig,
                 now: Optional[datetime] = None, today: Optional[date] = None) -> str:
    """
    Full transform of upstream records into an RSS document.

    Args:
        records: Raw CMS records (already extracted from the payload)
        config: Run configuration
        now: Build timestamp and pubDate of undated items
        today: Reference day for year-less dates and the upcoming filter

    Returns:
        RSS 2.0 XML string
    """
    return render_feed(prepare_items(records, config, today=today), config, now=now)


def fallback_feed(config: FeedConfig, now: Optional[datetime] = None) -> str:
    """Zero-item feed written when the upstream cannot be used."""
    return render_feed([], config, now=now)
