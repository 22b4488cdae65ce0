#!/usr/bin/env python3
"""
Health check for the generated course feed.
Validates the written RSS file and reports any issues.

Usage: python health_check.py [path/to/rss.xml]
"""

import os
import sys
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Tuple

import feedparser

from constants import FeedDefaults, HealthLimits
from logger_config import get_logger

logger = get_logger(__name__)


class HealthCheck:
    """Feed validation."""

    def __init__(self):
        self.checks: List[Tuple[str, bool, str]] = []

    def add_result(self, check_name: str, passed: bool, message: str = "") -> None:
        """Add a check result."""
        self.checks.append((check_name, passed, message))
        status = "✓ PASS" if passed else "✗ FAIL"
        log_method = logger.info if passed else logger.error
        log_method(f"{status}: {check_name} - {message}")

    def check_file_exists(self, file_path: str) -> bool:
        exists = os.path.exists(file_path)
        self.add_result("Feed file", exists, file_path if exists else f"{file_path} not found")
        return exists

    def load_channel(self, rss_path: str) -> Optional[ET.Element]:
        try:
            root = ET.parse(rss_path).getroot()
        except ET.ParseError as e:
            self.add_result("RSS Structure", False, f"XML parse error: {e}")
            return None
        if root.tag != "rss" or root.get("version") != "2.0":
            self.add_result("RSS Structure", False, f"Root is <{root.tag} version={root.get('version')}>")
            return None
        channel = root.find("channel")
        if channel is None:
            self.add_result("RSS Structure", False, "Missing channel element")
        return channel

    def check_rss_valid(self, rss_path: str) -> bool:
        """Validate the feed is well-formed RSS 2.0 with the channel basics."""
        channel = self.load_channel(rss_path)
        if channel is None:
            return False

        required = ["title", "link", "description"]
        missing = [elem for elem in required if channel.find(elem) is None]
        if missing:
            self.add_result("RSS Structure", False, f"Missing elements: {missing}")
            return False

        self.add_result("RSS Structure", True, "Valid RSS 2.0 feed")
        return True

    def check_items(self, rss_path: str) -> bool:
        """Every item needs title, link and a guid equal to its link."""
        channel = self.load_channel(rss_path)
        if channel is None:
            return False
        items = channel.findall("item")
        bad = []
        for idx, item in enumerate(items):
            link = (item.findtext("link") or "").strip()
            guid = (item.findtext("guid") or "").strip()
            if not (item.findtext("title") or "").strip() or not link or guid != link:
                bad.append(idx)
        if bad:
            self.add_result("Items", False, f"Invalid item(s) at positions {bad}")
            return False
        # an empty feed is the documented fallback: valid, but worth a warning
        if not items:
            logger.warning("Feed contains no items")
        self.add_result("Items", True, f"{len(items)} item(s)")
        return True

    def check_feedparser(self, rss_path: str) -> bool:
        """Cross-check with feedparser, as feed readers will."""
        parsed = feedparser.parse(rss_path)
        if parsed.bozo:
            self.add_result("Feed reader parse", False, f"{parsed.bozo_exception}")
            return False
        version = parsed.get("version", "")
        ok = version == "rss20"
        self.add_result("Feed reader parse", ok, f"version={version or 'unknown'}")
        return ok

    def check_file_size(self, file_path: str, max_mb: float) -> bool:
        """Check if file size is within acceptable limits."""
        size_mb = os.path.getsize(file_path) / (1024 * 1024)
        ok = size_mb <= max_mb
        self.add_result("File Size", ok, f"{size_mb:.2f}MB (limit: {max_mb}MB)")
        return ok

    def run_all_checks(self, rss_path: str = FeedDefaults.OUTPUT) -> bool:
        """Run all health checks."""
        logger.info("Starting health checks...")

        if self.check_file_exists(rss_path):
            self.check_rss_valid(rss_path)
            self.check_items(rss_path)
            self.check_feedparser(rss_path)
            self.check_file_size(rss_path, max_mb=HealthLimits.MAX_FEED_MB)

        summary = self.get_summary()
        logger.info(f"Health Check Summary: {summary['passed']}/{summary['total']} passed, {summary['failed']} failed")

        if summary["failed"] > 0:
            logger.error("Failed checks:")
            for name, result, message in self.checks:
                if not result:
                    logger.error(f"  - {name}: {message}")

        return summary["failed"] == 0

    def get_summary(self) -> Dict:
        """Get summary statistics."""
        total = len(self.checks)
        passed = sum(1 for _, result, _ in self.checks if result)

        return {
            "total": total,
            "passed": passed,
            "failed": total - passed,
            "success_rate": (passed / total * 100) if total > 0 else 0
        }


def main(argv: Optional[List[str]] = None) -> int:
    """Run health checks and return the exit code."""
    argv = sys.argv[1:] if argv is None else argv
    rss_path = argv[0] if argv else os.getenv("RSS_OUTPUT", FeedDefaults.OUTPUT)

    health = HealthCheck()
    success = health.run_all_checks(rss_path)

    summary = health.get_summary()
    print(f"\n{'='*50}")
    print(f"Health Check Results: {summary['passed']}/{summary['total']} passed")
    print(f"Success Rate: {summary['success_rate']:.1f}%")
    print(f"{'='*50}")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
