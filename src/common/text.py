"""Text helpers for feed content."""

import re
import unicodedata

ELLIPSIS = "…"


def strip_html(value: str | None) -> str:
    """Strip HTML tags and collapse whitespace."""
    if not value:
        return ""
    text = re.sub(r"<[^>]+>", " ", value)
    return re.sub(r"\s+", " ", text).strip()


def truncate_text(value: str, max_length: int) -> str:
    """Truncate to max_length characters, ending with an ellipsis when cut."""
    if len(value) <= max_length:
        return value
    return f"{value[:max_length - 1].strip()}{ELLIPSIS}"


def slugify(value: str | None) -> str:
    """Build a lowercase, hyphen separated slug with accents folded to ASCII."""
    if not value:
        return ""
    normalized = unicodedata.normalize("NFD", value.lower())
    # Drop combining marks left behind by the decomposition
    normalized = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    slug = re.sub(r"[^a-z0-9]+", "-", normalized)
    return slug.strip("-")
