#!/usr/bin/env python3
"""
Constants and configuration defaults for the course feed builder.
Centralizes magic values and documents each one.
"""

# ========== Feed Defaults ==========

class FeedDefaults:
    """Channel-level defaults used when configuration leaves a value unset."""

    SITE_URL = "https://www.tissual-balancing.com"
    TITLE = "Tissual Balancing® – Formations"
    DESCRIPTION = "Flux des formations (CMS)."
    LANGUAGE = "fr-FR"
    LIMIT = 10  # 0 means unlimited
    OUTPUT = "docs/rss.xml"


# ========== Item Placeholders ==========

class Placeholders:
    """Values substituted for missing required item fields."""

    TITLE = "Formation"


# ========== Vendor Media ==========

class MediaHost:
    """Rewriting of opaque CMS image references to public URLs."""

    # wix:image://v1/3d487b_xxx~mv2.avif/Name.avif#originWidth=...
    OPAQUE_IMAGE_PATTERN = r"^wix:image://v\d+/([^/]+)/"
    MEDIA_URL_TEMPLATE = "https://static.wixstatic.com/media/{media_id}"


class MimeTypes:
    """Enclosure MIME types inferred from file extensions."""

    DEFAULT = "image/*"
    BY_EXTENSION = {
        "jpg": "image/jpeg",
        "jpeg": "image/jpeg",
        "png": "image/png",
        "gif": "image/gif",
        "webp": "image/webp",
        "avif": "image/avif",
        "svg": "image/svg+xml",
        "bmp": "image/bmp",
        "tif": "image/tiff",
        "tiff": "image/tiff",
    }


# ========== Field Aliases ==========

class FieldAliases:
    """Accepted upstream key names per canonical item field, in priority order."""

    TITLE = ("title", "Titre", "titre", "name")
    LINK = ("link", "url", "href", "lien")
    IMAGE = ("image", "nouveauChamp", "img", "photo")
    LIEU_ET_DATE = ("lieuEtDate", "dates", "lieu")
    NB_JOURS = ("nbJours", "nbDeJoursheures", "duree")
    PRIX = ("prix", "price", "tarif")
    COMPLET = ("complet", "full", "isFull")
    VISIBLE = ("visible", "published", "isVisible")
    ORDER = ("order", "ordre", "position", "rank")
    RAW_DESCRIPTION_HTML = ("rssHtml", "descriptionHtml", "html")
    TAGS = ("tags", "categories", "categorie")
    DATE_START = ("dateStart", "date_start", "startDate", "dateDebut")

    # Keys of a JSON object payload that may hold the record array
    PAYLOAD_ARRAYS = ("items", "data")


# ========== Description Table ==========

class DescriptionLabels:
    """Row labels of the synthesized attribute table."""

    LIEU_ET_DATE = "Lieu & dates"
    NB_JOURS = "Durée"
    PRIX = "Prix"
    COMPLET = "Complet"
    YES = "oui"
    NO = "non"


# ========== Fetch Configuration ==========

class FetchConfig:
    """Upstream retrieval settings."""

    USER_AGENT = "course-feed/1.0 (+rss builder)"
    TIMEOUT = 20  # seconds
    MAX_RETRIES = 3  # attempts after the first one
    RETRY_MAX_WAIT = 30  # cap on exponential backoff (seconds)


# ========== Health Check ==========

class HealthLimits:
    """Thresholds used by health_check.py."""

    MAX_FEED_MB = 5


TRUTHY = frozenset({"1", "true", "yes", "oui", "on", "y"})
FALSY = frozenset({"0", "false", "no", "non", "off", "n", ""})
