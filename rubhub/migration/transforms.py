"""
Transform & normalize helpers for legacy rows.

All functions are pure: they only look at their arguments.
"""
import re
from datetime import date, datetime
from typing import Any, Optional, Set

_NON_SLUG_CHARS = re.compile(r"[^\w\s-]", re.ASCII)
_SLUG_SEPARATORS = re.compile(r"[\s_]+")
_REPEATED_HYPHENS = re.compile(r"-+")
_NUMBER = re.compile(r"\d+(?:\.\d+)?|\.\d+")
_HTML_TAG = re.compile(r"<[^>]*>")

ZERO_DATES = {"0000-00-00", "0000-00-00 00:00:00"}


def slugify(text: Optional[str]) -> str:
    """Lower-case, URL-safe version of text ("Deep Tissue!" -> "deep-tissue")"""
    if not text:
        return ""
    slug = str(text).lower().strip()
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _SLUG_SEPARATORS.sub("-", slug)
    slug = _REPEATED_HYPHENS.sub("-", slug)
    return slug.strip("-")


class SlugRegistry:
    """
    Slugs handed out for one entity type during one run.

    A candidate that is already taken gets the legacy id appended before the
    row is inserted, so two legacy rows never race for the same slug.
    """

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.seen: Set[str] = set()

    def assign(self, text: Optional[str], legacy_id: Any) -> str:
        slug = slugify(text) or f"{self.prefix}-{legacy_id}"
        while slug in self.seen:
            slug = f"{slug}-{legacy_id}"
        self.seen.add(slug)
        return slug

    def __contains__(self, slug: str) -> bool:
        return slug in self.seen

    def __len__(self) -> int:
        return len(self.seen)


def parse_price(price: Any) -> Optional[float]:
    """First number in a legacy price string ("$1,200 / hr" -> 1200.0)"""
    if price is None:
        return None
    if isinstance(price, (int, float)) and not isinstance(price, bool):
        return float(price)
    cleaned = str(price).replace("$", "").replace(",", "")
    match = _NUMBER.search(cleaned)
    if not match:
        return None
    return float(match.group(0))


def yes_no_to_bool(value: Any) -> bool:
    # Only the literal "Yes" is true
    return value == "Yes"


def is_valid_date(value: Any) -> bool:
    """False for missing values and the legacy zero-date sentinel"""
    if value is None or value == "":
        return False
    text = str(value)
    return text not in ZERO_DATES and not text.startswith("0000")


def to_datetime(value: Any) -> Optional[datetime]:
    """Convert a legacy date/datetime value, or None if it is not a real date"""
    if not is_valid_date(value):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        return None


def strip_html(value: Any) -> Optional[str]:
    """Remove tag markup; blank results become None"""
    if value is None:
        return None
    text = _HTML_TAG.sub("", str(value)).strip()
    return text or None


def clean_text(value: Any) -> Optional[str]:
    """Trimmed string, or None when empty"""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
