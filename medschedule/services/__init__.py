"""
Scheduling services.

This package contains the pure functions behind the medication views:
frequency parsing, expiration classification, dose generation and the
week/timeline calendar shapes.
"""

from .calendar import (
    build_week,
    group_by_time,
    medications_at_time,
    next_week,
    previous_week,
    week_start,
)
from .expiration import (
    annotate_medication,
    annotate_medications,
    classify_expiration,
    expiring_within,
    group_by_status,
    medication_stats,
)
from .frequency import parse_frequency_hours
from .schedule import (
    generate_occurrences,
    is_valid_on,
    occurrences_between,
    occurrences_for_date,
    parse_start_time,
)

__all__ = [
    "parse_frequency_hours",
    "classify_expiration",
    "annotate_medication",
    "annotate_medications",
    "group_by_status",
    "medication_stats",
    "expiring_within",
    "is_valid_on",
    "parse_start_time",
    "generate_occurrences",
    "occurrences_for_date",
    "occurrences_between",
    "week_start",
    "previous_week",
    "next_week",
    "build_week",
    "group_by_time",
    "medications_at_time",
]
