#!/usr/bin/env python3
"""Retrieve raw course records from the CMS endpoint (JSON or HTML)."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, List, Optional

import requests

from constants import FetchConfig
from course_items import extract_records
from exceptions import MalformedSourcePayload, SourceFetchError
from html_scraper import scrape_records
from logger_config import get_logger

logger = get_logger(__name__)

SESSION = requests.Session()
SESSION.headers.update({"User-Agent": FetchConfig.USER_AGENT})


def backoff_delay(attempt: int, cap: float = FetchConfig.RETRY_MAX_WAIT) -> float:
    return min(2 ** attempt, cap)


def status_of(error: requests.HTTPError, response: Optional[requests.Response]) -> Optional[int]:
    if error.response is not None:
        return error.response.status_code
    return response.status_code if response is not None else None


def is_retryable(status: Optional[int]) -> bool:
    """Server errors and rate limiting are worth another attempt; other 4xx are not."""
    return status is None or status >= 500 or status == 429


def fetch_response(url: str, timeout: float = FetchConfig.TIMEOUT, retries: int = FetchConfig.MAX_RETRIES,
                   session: Optional[requests.Session] = None,
                   sleep: Callable[[float], None] = time.sleep) -> requests.Response:
    """
    GET the source URL, retrying with capped exponential backoff.

    Raises:
        SourceFetchError: once every attempt has failed
    """
    session = session or SESSION
    last_exception: Optional[Exception] = None

    for attempt in range(retries + 1):
        response = None
        try:
            response = session.get(url, timeout=timeout)
            response.raise_for_status()
            return response
        except requests.HTTPError as e:
            status = status_of(e, response)
            if not is_retryable(status):
                raise SourceFetchError(f"GET {url} returned HTTP {status}: {e}") from e
            last_exception = e
        except requests.RequestException as e:
            last_exception = e

        if attempt < retries:
            wait = backoff_delay(attempt)
            logger.warning(f"Fetch failed ({last_exception}), retrying in {wait}s "
                           f"(attempt {attempt + 1}/{retries + 1})")
            sleep(wait)

    raise SourceFetchError(f"GET {url} failed after {retries + 1} attempt(s): {last_exception}") from last_exception


def is_html(response: requests.Response) -> bool:
    return "html" in (response.headers.get("Content-Type") or "").lower()


def records_from_response(response: requests.Response, source_format: str = "auto") -> List[Dict[str, Any]]:
    """Decode a response into raw records according to source_format (auto/json/html)."""
    if source_format == "html" or (source_format == "auto" and is_html(response)):
        return scrape_records(response.text, base_url=response.url or "")
    try:
        payload = response.json()
    except ValueError as e:
        raise MalformedSourcePayload(f"response is not valid JSON: {e}") from e
    return extract_records(payload)


def fetch_records(url: str, source_format: str = "auto", timeout: float = FetchConfig.TIMEOUT,
                  retries: int = FetchConfig.MAX_RETRIES, session: Optional[requests.Session] = None,
                  sleep: Callable[[float], None] = time.sleep) -> List[Dict[str, Any]]:
    logger.info(f"Fetch: {url}")
    response = fetch_response(url, timeout=timeout, retries=retries, session=session, sleep=sleep)
    records = records_from_response(response, source_format=source_format)
    logger.info(f"Received {len(records)} record(s)")
    return records
