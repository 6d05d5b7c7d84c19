"""Resolve NEWS_FETCH_INTERVAL values into cron expressions."""

import logging
import re
from datetime import datetime
from typing import Optional

from croniter import croniter

logger = logging.getLogger(__name__)

DEFAULT_CRON_EXPRESSION = "0 */6 * * *"
DISABLE_VALUES = {"off", "disabled", "none", "false", "0"}

DURATION_PATTERN = re.compile(
    r"^(\d+)\s*(ms|s|sec|secs|second|seconds|m|min|mins|minute|minutes"
    r"|h|hr|hrs|hour|hours|d|day|days)$",
    re.IGNORECASE,
)


def _days_cron(days: int) -> str:
    return "0 0 * * *" if days == 1 else f"0 0 */{days} * *"


def resolve_cron_expression(value: Optional[str]) -> Optional[str]:
    """
    Turn a human supplied interval into a cron expression.

    Accepts cron expressions (5 or 6 fields), ``@`` shorthands such as
    ``@hourly``, durations such as ``30m``, ``2h`` or ``1d``, and a disable
    keyword. Anything unparseable falls back to every 6 hours.

    Returns:
        Cron expression, or None when scheduling is disabled
    """
    if value is None:
        return DEFAULT_CRON_EXPRESSION

    trimmed = str(value).strip()
    if not trimmed:
        return DEFAULT_CRON_EXPRESSION

    if trimmed.lower() in DISABLE_VALUES:
        logger.warning(
            "NEWS_FETCH_INTERVAL set to \"%s\"; scheduled news sync will be disabled.",
            trimmed,
        )
        return None

    if trimmed.startswith("@"):
        return trimmed

    if len(trimmed.split()) in (5, 6):
        return trimmed

    match = DURATION_PATTERN.match(trimmed)
    if not match:
        logger.warning(
            "Unable to parse NEWS_FETCH_INTERVAL value \"%s\". Falling back to default schedule \"%s\".",
            trimmed,
            DEFAULT_CRON_EXPRESSION,
        )
        return DEFAULT_CRON_EXPRESSION

    amount = int(match.group(1))
    if amount <= 0:
        logger.warning(
            "NEWS_FETCH_INTERVAL must be greater than zero. Using default schedule \"%s\".",
            DEFAULT_CRON_EXPRESSION,
        )
        return DEFAULT_CRON_EXPRESSION

    unit = match.group(2).lower()

    if unit.startswith("m") and unit != "ms":
        return "* * * * *" if amount == 1 else f"*/{amount} * * * *"

    if unit.startswith("h"):
        if amount % 24 == 0:
            return _days_cron(amount // 24)
        return "0 * * * *" if amount == 1 else f"0 */{amount} * * *"

    if unit.startswith("d"):
        return _days_cron(amount)

    logger.warning(
        "NEWS_FETCH_INTERVAL unit \"%s\" is unsupported. Using default schedule \"%s\".",
        unit,
        DEFAULT_CRON_EXPRESSION,
    )
    return DEFAULT_CRON_EXPRESSION


def next_fire_time(expression: str, after: datetime) -> datetime:
    """Next time after ``after`` matched by a cron expression.

    Six-field expressions carry seconds as the first field. Raises ValueError
    for invalid expressions.
    """
    if len(expression.split()) == 6:
        cron = croniter(expression, after, second_at_beginning=True)
    else:
        cron = croniter(expression, after)
    return cron.get_next(datetime)
