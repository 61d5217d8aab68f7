"""Display formatting for amounts and calendar dates."""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "OMR"
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def format_currency(amount: float, currency: str | None = DEFAULT_CURRENCY) -> str:
    """Render ``amount`` with two decimals, thousands separators, and a code prefix.

    An empty or missing code falls back to ``OMR``.
    """

    return f"{currency or DEFAULT_CURRENCY} {float(amount or 0):,.2f}"


def parse_calendar_date(value: Any) -> date | None:
    """Parse the ``YYYY-MM-DD`` prefix of a stored date string.

    Anything that is not a non-empty string yields ``None``.
    """

    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def format_date(value: Any) -> str:
    """Render a stored calendar date as ``March 15, 2024``.

    Date-only strings are never converted through a timezone, so the rendered
    day always matches the stored one.
    """

    if not value:
        return "N/A"
    parsed = parse_calendar_date(value)
    if parsed is None:
        logger.debug("Unrecognized date value %r", value)
        return str(value)
    # English month names regardless of the process locale.
    return f"{MONTH_NAMES[parsed.month - 1]} {parsed.day}, {parsed.year}"
