#!/usr/bin/env python3
"""
Canonical course items and the mapping from raw CMS records.

Upstream records do not share a stable schema: the same logical field can
arrive as "title", "Titre" or "name". FIELD_TABLE lists, per canonical
field, the accepted keys in priority order, the default and a coercion
function. map_record() walks that table; nothing here raises for a
missing field.
"""

import math
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlparse

from constants import FALSY, TRUTHY, FeedDefaults, FieldAliases, MediaHost, MimeTypes, Placeholders
from date_resolver import resolve_start_date
from exceptions import MalformedSourcePayload
from logger_config import get_logger

logger = get_logger(__name__)

OPAQUE_IMAGE_RX = re.compile(MediaHost.OPAQUE_IMAGE_PATTERN)
# characters outside the XML 1.0 Char production
XML_ILLEGAL_RX = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff\ud800-\udfff]")


@dataclass(frozen=True)
class CourseItem:
    """A course listing after field mapping. Never mutated once built."""

    title: str
    link: str
    image: Optional[str] = None
    date_start: Optional[str] = None
    lieu_et_date: Optional[str] = None
    nb_jours: Optional[str] = None
    prix: Optional[str] = None
    complet: bool = False
    visible: bool = True
    order: Optional[float] = None
    raw_description_html: Optional[str] = None
    tags: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def guid(self) -> str:
        return self.link

    @property
    def image_type(self) -> Optional[str]:
        return guess_mime_type(self.image) if self.image else None


# ---------- Value helpers ----------
def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def first_present(record: Dict[str, Any], keys: Iterable[str]) -> Any:
    """Return the first present, non-empty value among keys, else None."""
    for key in keys:
        value = record.get(key)
        if not is_blank(value):
            return value
    return None


def xml_safe(text: str) -> str:
    return XML_ILLEGAL_RX.sub("", text)


def as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, bool):
        return "oui" if value else "non"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = xml_safe(str(value)).strip()
    return text or None


def as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        low = value.strip().lower()
        if low in TRUTHY:
            return True
        if low in FALSY:
            return False
    return None


def as_number(value: Any) -> Optional[float]:
    """Finite numbers only; NaN and infinities cannot be compared as an order."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(",", "."))
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def as_html(value: Any) -> Optional[str]:
    """Caller markup is kept as-is apart from characters XML cannot carry; blank counts as absent."""
    if not isinstance(value, str) or not value.strip():
        return None
    return xml_safe(value)


def coerce_tag_list(obj: Any) -> Tuple[str, ...]:
    """Accept list/dict/string tag values; return de-duplicated, order-preserving tags."""
    if isinstance(obj, list):
        cand = obj
    elif isinstance(obj, dict):
        cand = list(obj.values())
    elif isinstance(obj, str):
        cand = obj.split(",")
    else:
        cand = []
    out = []
    for x in cand:
        if isinstance(x, dict):
            x = x.get("name") or x.get("title") or x.get("label")
        if isinstance(x, str):
            s = x.strip()
            if s:
                out.append(s)
    seen = set()
    clean = []
    for s in out:
        if s not in seen:
            seen.add(s)
            clean.append(s)
    return tuple(clean)


# ---------- Images ----------
def normalize_image_url(url: Any) -> Optional[str]:
    """
    Rewrite an opaque CMS image reference to a public media URL.

    wix:image://v1/3d487b_xxx~mv2.avif/Name.avif#originWidth=...
    -> https://static.wixstatic.com/media/3d487b_xxx~mv2.avif

    Anything else is passed through unchanged; non-strings yield None.
    """
    if not isinstance(url, str) or not url.strip():
        return None
    url = url.strip()
    m = OPAQUE_IMAGE_RX.match(url)
    if m:
        return MediaHost.MEDIA_URL_TEMPLATE.format(media_id=m.group(1))
    if url.startswith("//"):
        return "https:" + url
    return url


def guess_mime_type(url: Optional[str]) -> str:
    """Infer an enclosure MIME type from the URL's extension."""
    if not url:
        return MimeTypes.DEFAULT
    path = urlparse(url).path
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return MimeTypes.DEFAULT
    ext = name.rsplit(".", 1)[-1].lower()
    return MimeTypes.BY_EXTENSION.get(ext, MimeTypes.DEFAULT)


# ---------- Field table ----------
@dataclass(frozen=True)
class FieldSpec:
    name: str
    keys: Tuple[str, ...]
    coerce: Callable[[Any], Any]
    default: Any = None


FIELD_TABLE: Tuple[FieldSpec, ...] = (
    FieldSpec("title", FieldAliases.TITLE, as_text, Placeholders.TITLE),
    FieldSpec("link", FieldAliases.LINK, as_text),  # default: site URL, set per call
    FieldSpec("image", FieldAliases.IMAGE, normalize_image_url),
    FieldSpec("lieu_et_date", FieldAliases.LIEU_ET_DATE, as_text),
    FieldSpec("nb_jours", FieldAliases.NB_JOURS, as_text),
    FieldSpec("prix", FieldAliases.PRIX, as_text),
    FieldSpec("complet", FieldAliases.COMPLET, as_bool, False),
    FieldSpec("visible", FieldAliases.VISIBLE, as_bool, True),
    FieldSpec("order", FieldAliases.ORDER, as_number),
    FieldSpec("raw_description_html", FieldAliases.RAW_DESCRIPTION_HTML, as_html),
    FieldSpec("tags", FieldAliases.TAGS, coerce_tag_list, ()),
)


def map_record(record: Dict[str, Any], site_url: str = FeedDefaults.SITE_URL,
               today: Optional[date] = None) -> CourseItem:
    """
    Map one raw record onto a CourseItem.

    Args:
        record: Upstream mapping with arbitrary key names
        site_url: Fallback link when the record has none
        today: Reference day for year-less dates

    Returns:
        CourseItem with title and link always populated
    """
    values: Dict[str, Any] = {}
    for spec in FIELD_TABLE:
        raw = first_present(record, spec.keys)
        value = spec.coerce(raw) if raw is not None else None
        values[spec.name] = spec.default if value is None else value

    if not values["link"]:
        values["link"] = site_url or FeedDefaults.SITE_URL

    values["date_start"] = resolve_start_date(
        values["lieu_et_date"],
        first_present(record, FieldAliases.DATE_START),
        today=today,
    )
    return CourseItem(**values)


def map_records(records: Iterable[Dict[str, Any]], site_url: str = FeedDefaults.SITE_URL,
                today: Optional[date] = None) -> List[CourseItem]:
    return [map_record(r, site_url=site_url, today=today) for r in records]


def extract_records(payload: Any) -> List[Dict[str, Any]]:
    """
    Pull the record array out of a decoded JSON payload.

    Accepts a bare array or an object with an "items"/"data" array.
    Non-object entries are skipped.

    Raises:
        MalformedSourcePayload: if no record array can be found
    """
    if isinstance(payload, list):
        candidates = payload
    elif isinstance(payload, dict):
        candidates = None
        for key in FieldAliases.PAYLOAD_ARRAYS:
            if isinstance(payload.get(key), list):
                candidates = payload[key]
                break
        if candidates is None:
            raise MalformedSourcePayload(
                f"payload object has no array under {list(FieldAliases.PAYLOAD_ARRAYS)} "
                f"(keys: {sorted(payload.keys())[:10]})"
            )
    else:
        raise MalformedSourcePayload(f"expected a JSON array or object, got {type(payload).__name__}")

    records = []
    for idx, entry in enumerate(candidates):
        if isinstance(entry, dict):
            records.append(entry)
        else:
            logger.debug(f"Skipping non-object record #{idx}: {type(entry).__name__}")
    return records
