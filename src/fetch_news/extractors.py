"""Field extractors for feed entries.

Feeds disagree about where the body and the lead image live, so each field
has an ordered list of extractors. ``common.utils.first_non_empty`` walks a
list and returns the first non-empty value.

Entries are feedparser ``FeedParserDict`` objects or plain dicts.
"""

import re
from typing import Any, Optional

IMG_SRC_PATTERN = re.compile(r"""<img[^>]+src=["']([^"']+)["']""", re.IGNORECASE)


def _as_list(value: Any) -> list:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _first_value(items: Any, *keys: str) -> Optional[str]:
    """Return the first non-empty value for any of keys across items."""
    for item in _as_list(items):
        if isinstance(item, str):
            if item.strip():
                return item.strip()
            continue
        if not isinstance(item, dict):
            continue
        for key in keys:
            value = item.get(key)
            if value and str(value).strip():
                return str(value).strip()
    return None


# Content


def content_encoded(entry: Any) -> Optional[str]:
    """``content:encoded``; feedparser exposes it as ``content[].value``."""
    raw = entry.get("content:encoded") or entry.get("content_encoded")
    if raw:
        return raw
    return _first_value(entry.get("content"), "value")


def summary(entry: Any) -> Optional[str]:
    return entry.get("summary")


def description(entry: Any) -> Optional[str]:
    return entry.get("description")


CONTENT_EXTRACTORS = [content_encoded, summary, description]
SUMMARY_EXTRACTORS = [summary, description, content_encoded]


# Images


def enclosure_image(entry: Any) -> Optional[str]:
    url = _first_value(entry.get("enclosures"), "href", "url")
    if url:
        return url
    enclosure_links = [
        link for link in _as_list(entry.get("links"))
        if isinstance(link, dict) and link.get("rel") == "enclosure"
    ]
    return _first_value(enclosure_links, "href", "url")


def media_content_image(entry: Any) -> Optional[str]:
    return _first_value(entry.get("media_content"), "url")


def media_thumbnail_image(entry: Any) -> Optional[str]:
    return _first_value(entry.get("media_thumbnail"), "url")


def inline_image(content: Optional[str]) -> Optional[str]:
    """First ``<img src>`` found in HTML content."""
    if not content:
        return None
    match = IMG_SRC_PATTERN.search(content)
    return match.group(1) if match else None


IMAGE_EXTRACTORS = [enclosure_image, media_content_image, media_thumbnail_image]


# Tags


def entry_tags(entry: Any) -> list[str]:
    """Tag terms from feedparser ``tags`` or a comma separated ``categories`` string."""
    raw = entry.get("tags") or entry.get("categories")
    if not raw:
        return []
    if isinstance(raw, str):
        parts = raw.split(",")
    else:
        parts = []
        for tag in raw:
            if isinstance(tag, dict):
                parts.append(tag.get("term") or "")
            elif isinstance(tag, (list, tuple)):
                # feedparser ``categories`` are (scheme, term) pairs
                parts.append(tag[-1] or "")
            else:
                parts.append(str(tag or ""))
    return [part.strip() for part in parts if part and part.strip()]
