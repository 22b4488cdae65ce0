#!/usr/bin/env python3
"""
Filtering, ordering and truncation of normalized course items.
All functions return new lists; items themselves are never modified.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Sequence

from course_items import CourseItem

# Absent sort keys sort after every real value
ORDER_SENTINEL = float("inf")
DATE_SENTINEL = "9999-99-99"


@dataclass(frozen=True)
class FilterOptions:
    only_visible: bool = False
    only_upcoming: bool = False
    exclude_complete: bool = False


def is_past(item: CourseItem, today: date) -> bool:
    """True when the item has a start date strictly before today."""
    if not item.date_start:
        return False
    # string comparison keeps calendar-invalid dates ("2025-02-31") comparable
    return item.date_start[:10] < today.isoformat()


def keep(item: CourseItem, options: FilterOptions, today: date) -> bool:
    if options.only_visible and item.visible is False:
        return False
    if options.exclude_complete and item.complet is True:
        return False
    if options.only_upcoming and is_past(item, today):
        return False
    return True


def filter_items(items: Iterable[CourseItem], options: FilterOptions,
                 today: Optional[date] = None) -> List[CourseItem]:
    """
    Keep the items that satisfy every active predicate.

    Items without a start date survive the upcoming filter since they
    cannot be judged.
    """
    today = today or date.today()
    return [it for it in items if keep(it, options, today)]


def order_key(item: CourseItem) -> float:
    return item.order if item.order is not None else ORDER_SENTINEL


def date_key(item: CourseItem) -> str:
    return item.date_start[:10] if item.date_start else DATE_SENTINEL


def sort_items(items: Sequence[CourseItem], prefer_explicit_order: bool = True) -> List[CourseItem]:
    """
    Stable ordering of the filtered items.

    With prefer_explicit_order and at least one item carrying an order,
    sort by order (unordered items last); otherwise by start date
    (undated items last). Ties keep input order.
    """
    if prefer_explicit_order and any(it.order is not None for it in items):
        return sorted(items, key=order_key)
    return sorted(items, key=date_key)


def apply_limit(items: Sequence[CourseItem], limit: Optional[int]) -> List[CourseItem]:
    """Keep the first `limit` items; 0 or None means unlimited."""
    if not limit or limit < 0:
        return list(items)
    return list(items[:limit])


def select_items(items: Sequence[CourseItem], options: FilterOptions, limit: Optional[int] = None,
                 prefer_explicit_order: bool = True, today: Optional[date] = None) -> List[CourseItem]:
    """filter -> sort -> limit"""
    kept = filter_items(items, options, today=today)
    return apply_limit(sort_items(kept, prefer_explicit_order=prefer_explicit_order), limit)
