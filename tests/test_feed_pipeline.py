#!/usr/bin/env python3
"""
End-to-end tests of the pure records -> XML pipeline.
"""

import os
import sys
import xml.etree.ElementTree as ET
from datetime import date, datetime, timezone

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from feed_config import FeedConfig
from feed_pipeline import fallback_feed, prepare_items, run_pipeline

NOW = datetime(2025, 9, 1, 6, 0, tzinfo=timezone.utc)
TODAY = date(2025, 9, 1)

FIXTURE = [
    {"title": "Module B", "lien": "https://site.example/b", "dates": "du 08/09 au 19/09/2025",
     "prix": "900 €", "nbJours": "10 jours"},
    {"Titre": "Module A", "url": "https://site.example/a", "order": 1,
     "image": "wix:image://v1/abc~mv2.png/A.png#originWidth=1"},
    {"name": "Caché", "link": "https://site.example/hidden", "visible": False, "order": 0},
    {"title": "Passé", "link": "https://site.example/past", "dateStart": "2025-01-15"},
    {"title": "Sans date", "rssHtml": "<p>Sur demande</p>", "tags": ["Dos", "Yoga"]},
]


def titles(xml):
    root = ET.fromstring(xml.encode("utf-8"))
    return [it.findtext("title") for it in root.find("channel").findall("item")]


class TestRunPipeline:
    """Test the full transform on a fixed fixture."""

    def test_reproducible_output(self):
        config = FeedConfig(feed_link="https://site.example")
        first = run_pipeline(FIXTURE, config, now=NOW, today=TODAY)
        second = run_pipeline(FIXTURE, config, now=NOW, today=TODAY)
        assert first == second

    def test_explicit_order_then_unordered_in_input_order(self):
        config = FeedConfig(feed_link="https://site.example", limit=0)
        xml = run_pipeline(FIXTURE, config, now=NOW, today=TODAY)
        assert titles(xml) == ["Module A", "Module B", "Passé", "Sans date"]

    def test_date_order_when_explicit_order_not_preferred(self):
        config = FeedConfig(feed_link="https://site.example", limit=0, prefer_explicit_order=False)
        xml = run_pipeline(FIXTURE, config, now=NOW, today=TODAY)
        assert titles(xml) == ["Passé", "Module B", "Module A", "Sans date"]

    def test_upcoming_and_limit(self):
        config = FeedConfig(feed_link="https://site.example", limit=2, only_upcoming=True)
        xml = run_pipeline(FIXTURE, config, now=NOW, today=TODAY)
        assert titles(xml) == ["Module A", "Module B"]

    def test_hidden_items_kept_when_visibility_filter_off(self):
        config = FeedConfig(feed_link="https://site.example", limit=0, only_visible=False)
        assert titles(run_pipeline(FIXTURE, config, now=NOW, today=TODAY))[0] == "Caché"

    def test_item_details(self):
        config = FeedConfig(feed_link="https://site.example", limit=0)
        xml = run_pipeline(FIXTURE, config, now=NOW, today=TODAY)
        items = ET.fromstring(xml.encode("utf-8")).find("channel").findall("item")
        by_title = {it.findtext("title"): it for it in items}

        a = by_title["Module A"]
        assert a.find("enclosure").get("url") == "https://static.wixstatic.com/media/abc~mv2.png"
        assert a.find("enclosure").get("type") == "image/png"
        assert a.findtext("pubDate") == "Mon, 01 Sep 2025 06:00:00 +0000"

        b = by_title["Module B"]
        assert b.findtext("guid") == "https://site.example/b"
        assert b.findtext("pubDate") == "Mon, 08 Sep 2025 00:00:00 +0000"
        assert "900 €" in b.findtext("description")

        undated = by_title["Sans date"]
        assert undated.findtext("link") == "https://site.example"
        assert undated.findtext("description") == "<p>Sur demande</p>"
        assert [c.text for c in undated.findall("category")] == ["Dos", "Yoga"]

    def test_prepare_items_returns_course_items(self):
        items = prepare_items(FIXTURE, FeedConfig(limit=1), today=TODAY)
        assert [it.title for it in items] == ["Module A"]

    def test_channel_from_config(self):
        config = FeedConfig(feed_title="Mes formations", feed_description="Desc", language="en-GB")
        ch = ET.fromstring(run_pipeline([], config, now=NOW).encode("utf-8")).find("channel")
        assert ch.findtext("title") == "Mes formations"
        assert ch.findtext("description") == "Desc"
        assert ch.findtext("language") == "en-GB"


class TestFallbackFeed:

    def test_zero_items(self):
        xml = fallback_feed(FeedConfig(), now=NOW)
        ch = ET.fromstring(xml.encode("utf-8")).find("channel")
        assert ch.findall("item") == []
        assert ch.findtext("title")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
