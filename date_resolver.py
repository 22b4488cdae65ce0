#!/usr/bin/env python3
"""
Start-date extraction for course listings.

CMS entries usually carry their dates as display text ("du 08/09 au
19/09/2025", "19/09", ...). resolve_start_date() turns that text into a
single YYYY-MM-DD string, falling back to a structured date field.
Day/month values are not validated against the calendar: "31/02/2025"
resolves to "2025-02-31".
"""

import re
from datetime import date
from typing import Any, Optional

RANGE_RX = re.compile(r"du\s+(\d{1,2})[/.](\d{1,2})\s+au\s+(\d{1,2})[/.](\d{1,2})[/.](\d{4})", re.I)
ISO_RX = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b")
DMY_RX = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b")
DM_RX = re.compile(r"\b(\d{1,2})/(\d{1,2})\b")
ISO_PREFIX_RX = re.compile(r"^\d{4}-\d{2}-\d{2}")


def iso(year, month, day) -> str:
    return f"{int(year):04d}-{int(month):02d}-{int(day):02d}"


def date_from_text(text: Any, today: Optional[date] = None) -> Optional[str]:
    """Return the first start date found in free-form text, or None."""
    if text is None:
        return None
    s = str(text)
    if not s.strip():
        return None

    # "du 08/09 au 19/09/2025" -> first day/month with the trailing year
    m = RANGE_RX.search(s)
    if m:
        d1, mo1, _, _, y = m.groups()
        return iso(y, mo1, d1)

    m = ISO_RX.search(s)
    if m:
        return m.group(0)

    m = DMY_RX.search(s)
    if m:
        d, mo, y = m.groups()
        return iso(y, mo, d)

    # no year given: current calendar year
    m = DM_RX.search(s)
    if m:
        d, mo = m.groups()
        year = (today or date.today()).year
        return iso(year, mo, d)

    return None


def date_from_field(value: Any) -> Optional[str]:
    """
    Accept a structured date value verbatim when it starts with YYYY-MM-DD.

    Wix date fields arrive either as strings or as {"$date": "..."} objects.
    """
    if isinstance(value, dict):
        value = value.get("$date")
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value if ISO_PREFIX_RX.match(value) else None


def resolve_start_date(text: Any = None, structured: Any = None, today: Optional[date] = None) -> Optional[str]:
    """
    Resolve a course start date.

    Textual patterns win over the structured field; the structured field is
    only consulted when the text yields nothing.

    Args:
        text: Display text such as "du 08/09 au 19/09/2025"
        structured: A dateStart-like record value
        today: Reference day for year-less dates (defaults to date.today())

    Returns:
        "YYYY-MM-DD" (or the verbatim structured value), else None
    """
    return date_from_text(text, today=today) or date_from_field(structured)


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse the leading YYYY-MM-DD of a resolved start date; None if not a real calendar date."""
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None
