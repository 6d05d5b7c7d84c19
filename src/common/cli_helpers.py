"""Common CLI helper utilities."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable


def setup_logging(level: str | int = logging.INFO) -> None:
    """Configure standard logging format for CLI tools."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def write_jsonl(records: Iterable[dict[str, Any]], filepath: Path) -> int:
    """Write records to a JSONL file, creating the parent directory.

    Returns:
        Number of records written.
    """
    filepath.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with filepath.open("w") as f:
        for record in records:
            f.write(json.dumps(record, default=str, ensure_ascii=False) + "\n")
            count += 1
    return count
