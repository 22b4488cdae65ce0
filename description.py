#!/usr/bin/env python3
"""
Item body rendering.

A description is either Verbatim (caller-supplied HTML, emitted as-is and
never escaped) or Synthesized (a small attribute table whose values are
always escaped). description_for() picks the variant; render_description()
turns it into markup.
"""

import html
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from constants import DescriptionLabels
from course_items import CourseItem

ROW_TEMPLATE = (
    '<tr><th style="text-align:left;padding:4px 8px;">{label}</th>'
    '<td style="padding:4px 8px;">{value}</td></tr>'
)


@dataclass(frozen=True)
class Verbatim:
    html: str


@dataclass(frozen=True)
class Synthesized:
    rows: Tuple[Tuple[str, str], ...]


Description = Union[Verbatim, Synthesized]


def escape_text(value: str) -> str:
    return html.escape(str(value), quote=False)


def present(value: Optional[str]) -> bool:
    return value is not None and bool(str(value).strip())


def description_for(item: CourseItem, show_complete: bool = False) -> Description:
    if present(item.raw_description_html):
        return Verbatim(item.raw_description_html)

    candidates = [
        (DescriptionLabels.LIEU_ET_DATE, item.lieu_et_date),
        (DescriptionLabels.NB_JOURS, item.nb_jours),
        (DescriptionLabels.PRIX, item.prix),
    ]
    if show_complete:
        candidates.append(
            (DescriptionLabels.COMPLET, DescriptionLabels.YES if item.complet else DescriptionLabels.NO)
        )
    return Synthesized(tuple((label, str(v)) for label, v in candidates if present(v)))


def render_description(desc: Description) -> str:
    if isinstance(desc, Verbatim):
        return desc.html
    if not desc.rows:
        return ""
    trs = "\n".join(
        ROW_TEMPLATE.format(label=escape_text(label), value=escape_text(value))
        for label, value in desc.rows
    )
    return f"<table>{trs}</table>"


def render_item_description(item: CourseItem, show_complete: bool = False) -> str:
    return render_description(description_for(item, show_complete=show_complete))
