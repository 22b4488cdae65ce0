#!/usr/bin/env python3
"""
Best-effort extraction of course records from a rendered HTML page.

Used when the CMS only exposes a page instead of a JSON endpoint. Output
has the same raw-record shape the JSON endpoint returns, so the regular
field mapping applies.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from logger_config import get_logger

logger = get_logger(__name__)

BLOCK_SELECTORS = ("[data-course]", ".course", ".formation", "article")
HEADING_TAGS = ["h1", "h2", "h3", "h4"]


def clean_text(text: Optional[str]) -> str:
    return " ".join((text or "").split())


def find_blocks(soup: BeautifulSoup) -> List[Any]:
    """Return the first selector's matches that yields anything."""
    for selector in BLOCK_SELECTORS:
        blocks = soup.select(selector)
        if blocks:
            logger.debug(f"Using selector {selector!r}: {len(blocks)} block(s)")
            return blocks
    return []


def block_to_record(block: Any, base_url: str) -> Optional[Dict[str, Any]]:
    heading = block.find(HEADING_TAGS)
    anchor = block.find("a", href=True)
    title = clean_text(heading.get_text()) if heading else ""
    if not title and anchor:
        title = clean_text(anchor.get_text())
    if not title:
        return None

    record: Dict[str, Any] = {"title": title}
    if anchor:
        record["link"] = urljoin(base_url, anchor["href"])
    img = block.find("img")
    if img:
        src = img.get("src") or img.get("data-src")
        if src:
            record["image"] = urljoin(base_url, src)
    text = clean_text(block.get_text(" "))
    if text:
        record["lieuEtDate"] = text
    return record


def scrape_records(html_text: str, base_url: str = "") -> List[Dict[str, Any]]:
    """
    Turn a listing page into raw records.

    Args:
        html_text: Page markup
        base_url: URL the page was fetched from, for resolving relative links

    Returns:
        List of raw records (possibly empty)
    """
    soup = BeautifulSoup(html_text or "", "html.parser")
    records = []
    for block in find_blocks(soup):
        record = block_to_record(block, base_url)
        if record:
            records.append(record)
    if not records:
        logger.warning("No course blocks found in HTML page")
    return records
