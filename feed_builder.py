#!/usr/bin/env python3
"""
RSS 2.0 document assembly.

build_feed() takes channel metadata and already selected CourseItems and
returns the pretty-printed XML string. Item descriptions are written as
CDATA so that embedded markup is not escaped a second time.
"""

import uuid
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from email.utils import format_datetime
from typing import Dict, Optional, Sequence

from constants import FeedDefaults
from course_items import CourseItem, xml_safe
from date_resolver import parse_iso_date
from description import render_item_description

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


@dataclass(frozen=True)
class ChannelMeta:
    title: str = FeedDefaults.TITLE
    link: str = FeedDefaults.SITE_URL
    description: str = FeedDefaults.DESCRIPTION
    language: str = FeedDefaults.LANGUAGE

    def with_defaults(self) -> "ChannelMeta":
        """Blank values fall back to the documented defaults."""
        return ChannelMeta(
            title=(self.title or "").strip() or FeedDefaults.TITLE,
            link=(self.link or "").strip() or FeedDefaults.SITE_URL,
            description=(self.description or "").strip() or FeedDefaults.DESCRIPTION,
            language=(self.language or "").strip() or FeedDefaults.LANGUAGE,
        )


def rss_date(dt: datetime) -> str:
    """RFC 2822 date, e.g. 'Mon, 08 Sep 2025 00:00:00 +0000'."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_datetime(dt)


def pub_date_for(item: CourseItem, now: datetime, tz: Optional[tzinfo] = None) -> str:
    """Midnight of the start date; `now` when the item has no usable date."""
    day = parse_iso_date(item.date_start)
    if day is None:
        return rss_date(now)
    return rss_date(datetime(day.year, day.month, day.day, tzinfo=tz or timezone.utc))


def wrap_cdata(text: str) -> str:
    # "]]>" cannot appear inside a CDATA section; split it across two
    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def build_feed(channel: ChannelMeta, items: Sequence[CourseItem], now: Optional[datetime] = None,
               show_complete: bool = False, tz: Optional[tzinfo] = None) -> str:
    """
    Render a complete RSS 2.0 document.

    Args:
        channel: Channel metadata (blank fields replaced by defaults)
        items: Items in final order; may be empty
        now: Build timestamp, also the pubDate of undated items
        show_complete: Add the completeness row to synthesized descriptions
        tz: Timezone for start-date pubDates (UTC when None)

    Returns:
        UTF-8 XML text with declaration
    """
    now = now or datetime.now(timezone.utc)
    channel = channel.with_defaults()

    rss = ET.Element("rss", attrib={"version": "2.0"})
    ch = ET.SubElement(rss, "channel")
    ET.SubElement(ch, "title").text = xml_safe(channel.title)
    ET.SubElement(ch, "link").text = xml_safe(channel.link)
    ET.SubElement(ch, "description").text = xml_safe(channel.description)
    ET.SubElement(ch, "language").text = xml_safe(channel.language)
    ET.SubElement(ch, "lastBuildDate").text = rss_date(now)

    token = uuid.uuid4().hex
    bodies: Dict[str, str] = {}
    for idx, it in enumerate(items):
        node = ET.SubElement(ch, "item")
        ET.SubElement(node, "title").text = xml_safe(it.title)
        ET.SubElement(node, "link").text = xml_safe(it.link)
        ET.SubElement(node, "guid").text = xml_safe(it.guid)
        ET.SubElement(node, "pubDate").text = pub_date_for(it, now, tz)

        marker = f"@@{token}:{idx}@@"
        ET.SubElement(node, "description").text = marker
        bodies[marker] = xml_safe(render_item_description(it, show_complete=show_complete))

        if it.image:
            ET.SubElement(node, "enclosure", attrib={"url": xml_safe(it.image), "type": it.image_type})
        for tag in it.tags:
            ET.SubElement(node, "category").text = xml_safe(tag)

    ET.indent(rss, space="  ")
    xml = ET.tostring(rss, encoding="unicode")
    for marker, body in bodies.items():
        xml = xml.replace(marker, wrap_cdata(body), 1)
    return f"{XML_DECLARATION}\n{xml}\n"
