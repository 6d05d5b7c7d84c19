"""Common utility functions."""

from typing import Any, Callable, Iterable, Optional


def first_non_empty(extractors: Iterable[Callable[[Any], Any]], obj: Any) -> Optional[Any]:
    """Run extractors in order and return the first truthy result."""
    for extractor in extractors:
        value = extractor(obj)
        if value:
            return value
    return None
