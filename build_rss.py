#!/usr/bin/env python3
"""
Course feed: build_rss.py

Fetches the course listing from the CMS, normalizes it and writes an
RSS 2.0 feed for static publishing.

- Field names are reconciled across CMS revisions (title/Titre/name, ...).
- Start dates are read from display text ("du 08/09 au 19/09/2025").
- Visible/upcoming/complete filters, explicit order or date ordering, limit.
- On upstream failure a valid zero-item feed is still written.

Requires env: SOURCE_URL
Optional: SITE_URL, RSS_TITLE, RSS_DESCRIPTION, RSS_LANGUAGE, RSS_LIMIT,
RSS_OUTPUT, RSS_ONLY_VISIBLE, RSS_ONLY_UPCOMING, RSS_EXCLUDE_COMPLETE,
RSS_PREFER_ORDER, RSS_SHOW_COMPLETE, RSS_TIMEZONE, SOURCE_FORMAT,
FETCH_TIMEOUT, FETCH_RETRIES
"""

import os
import sys
from datetime import datetime, timezone
from typing import Optional

from dotenv import load_dotenv

from exceptions import FeedBuildError
from feed_config import FeedConfig, load_config
from feed_pipeline import fallback_feed, run_pipeline
from logger_config import get_logger, log_event
from source_fetcher import fetch_records

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_UPSTREAM_FAILURE = 1
EXIT_MISSING_SOURCE = 2


def write_feed(xml: str, path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(xml)


def build(config: FeedConfig, now: Optional[datetime] = None) -> int:
    """Fetch, transform and write; returns the process exit code."""
    if not config.source_url:
        logger.error("SOURCE_URL is not set (Settings → Secrets → Actions).")
        return EXIT_MISSING_SOURCE

    now = now or datetime.now(timezone.utc)
    try:
        records = fetch_records(
            config.source_url,
            source_format=config.source_format,
            timeout=config.fetch_timeout,
            retries=config.fetch_retries,
        )
    except FeedBuildError as e:
        logger.error(f"Build failed: {e}")
        write_feed(fallback_feed(config, now=now), config.output_path)
        log_event(logger, "warning", "fallback_feed_written", {"path": config.output_path})
        return EXIT_UPSTREAM_FAILURE

    if not records:
        logger.warning("No course received from the source, writing a minimal feed.")

    xml = run_pipeline(records, config, now=now)
    write_feed(xml, config.output_path)
    log_event(logger, "info", "feed_written", {"path": config.output_path, "records": len(records)})
    return EXIT_OK


def main() -> int:
    load_dotenv()
    return build(load_config())


if __name__ == "__main__":
    sys.exit(main())
