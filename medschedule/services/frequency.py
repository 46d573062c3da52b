"""
Frequency normalization.

Stored frequencies arrive either as a number of hours or as free text typed
by a user ("cada 6 horas", "every 8h"). Everything is reduced to a positive
whole number of hours; anything unusable falls back to the configured default.
"""

import math
import re

import structlog

from medschedule.config import get_config

logger = structlog.get_logger(__name__)

# Longer digit runs are noise, not an hour count
_FIRST_INTEGER = re.compile(r"(?<!\d)(\d{1,6})(?!\d)", re.ASCII)


def parse_frequency_hours(frequency: str | int | float | None, default: int | None = None) -> int:
    """
    Normalize a frequency value into an hour interval.

    Args:
        frequency: Numeric hours, or text containing the number of hours.
        default: Fallback interval; the configured default when omitted.

    Returns:
        int: An interval of at least one hour. Never raises.
    """
    fallback = default if default is not None else get_config().scheduling.default_frequency_hours
    hours: int | None = None

    # bool is an int subclass; a checkbox value is not an interval
    if isinstance(frequency, bool):
        hours = None
    elif isinstance(frequency, int | float):
        if math.isfinite(frequency):
            hours = int(frequency)
    elif isinstance(frequency, str):
        match = _FIRST_INTEGER.search(frequency)
        if match:
            hours = int(match.group(1))

    if hours is None or hours <= 0:
        logger.debug("frequency_defaulted", raw=repr(frequency), default_hours=fallback)
        return fallback
    return hours
