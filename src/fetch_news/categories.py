"""Keyword based article categories."""

DEFAULT_CATEGORY = "Industry News"

# Checked in order; the first bucket with a matching keyword wins.
CATEGORY_KEYWORDS = [
    ("Tutorials", ("tutorial", "how to", "guide", "walkthrough")),
    ("Product Updates", ("release", "update", "feature", "launch")),
    ("Research", ("research", "study", "paper", "science")),
    ("AI Tools", ("tool", "platform", "app", "software")),
]


def determine_category(feed_title: str | None, tags: list[str], text: str) -> str:
    """Classify an article from its feed title, tags and text."""
    haystack = f"{feed_title or ''} {' '.join(tags)} {text}".lower()

    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in haystack for keyword in keywords):
            return category

    return DEFAULT_CATEGORY
