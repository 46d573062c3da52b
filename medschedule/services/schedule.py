"""
Dose occurrence generation.

Every day of a medication's validity window restarts at its start time and
repeats every `frequency_hours` until midnight. For intervals shorter than a
day, the dose that would land past midnight is carried to the next day as a
single rollover occurrence whenever the next day is still inside the window.
It is dropped only when it would repeat one of the next day's own doses.

This module is the only place that knows about rollover; both the week grid
and the day timeline read occurrences through `occurrences_for_date`.
"""

import re
from collections.abc import Sequence
from datetime import date, timedelta

import structlog

from medschedule.config import get_config
from medschedule.domain.models import AnnotatedMedication, DoseOccurrence, Medication
from medschedule.services.frequency import parse_frequency_hours

logger = structlog.get_logger(__name__)

ONE_DAY = timedelta(days=1)

_START_TIME = re.compile(r"^(\d{1,2}):(\d{2})", re.ASCII)


def is_valid_on(medication: Medication, day: date) -> bool:
    """True when `day` lies inside the inclusive [start_date, end_date] window."""
    if medication.start_date is not None and day < medication.start_date:
        return False
    if medication.end_date is not None and day > medication.end_date:
        return False
    return True


def parse_start_time(value: str | None, default: str | None = None) -> tuple[int, int]:
    """Split an "HH:mm" string into (hour, minute), falling back to the default time."""
    fallback = default or get_config().scheduling.default_start_time

    for candidate in (value, fallback):
        if not candidate:
            continue
        match = _START_TIME.match(candidate.strip())
        if not match:
            continue
        hour, minute = int(match.group(1)), int(match.group(2))
        if 0 <= hour < 24 and 0 <= minute < 60:
            if candidate is not value:
                logger.debug("start_time_defaulted", raw=value, default=fallback)
            return hour, minute

    return 8, 0


def format_time(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def frequency_of(medication: Medication) -> int:
    if isinstance(medication, AnnotatedMedication):
        return medication.frequency_hours
    return parse_frequency_hours(medication.frequency_raw)


def generate_occurrences(medication: Medication, day: date) -> list[DoseOccurrence]:
    """
    Produce the doses generated by `medication` on `day`.

    The caller is expected to have checked `is_valid_on(medication, day)`.
    The result holds the day's own doses in increasing time order, followed
    by at most one rollover dose dated `day + 1`.
    """
    hour, minute = parse_start_time(medication.start_time)
    frequency = frequency_of(medication)

    def _occurrence(on: date, at_hour: int) -> DoseOccurrence:
        return DoseOccurrence(
            date=on,
            time=format_time(at_hour, minute),
            medication_id=medication.id,
            medication_name=medication.name,
        )

    occurrences: list[DoseOccurrence] = []
    running = hour
    while running < 24:
        occurrences.append(_occurrence(day, running))
        running += frequency

    rollover_hour = running - 24
    next_day = day + ONE_DAY
    own_next_day = range(hour, 24, frequency)
    if frequency < 24 and rollover_hour not in own_next_day and is_valid_on(medication, next_day):
        occurrences.append(_occurrence(next_day, rollover_hour))

    return occurrences


def indexed_occurrences_for_date(
    medications: Sequence[Medication], day: date
) -> list[tuple[int, DoseOccurrence]]:
    """
    Every dose attributed to `day`, paired with its medication's list index.

    Includes rollover doses generated by the previous day. Sorted by time,
    ties kept in medication input order.
    """
    previous_day = day - ONE_DAY
    collected: list[tuple[int, DoseOccurrence]] = []

    for index, medication in enumerate(medications):
        for source_day in (previous_day, day):
            if not is_valid_on(medication, source_day):
                continue
            collected.extend(
                (index, occurrence)
                for occurrence in generate_occurrences(medication, source_day)
                if occurrence.date == day
            )

    collected.sort(key=lambda item: (item[1].time, item[0]))
    return collected


def occurrences_for_date(medications: Sequence[Medication], day: date) -> list[DoseOccurrence]:
    """Every dose attributed to `day` across all medications, in time order."""
    return [occurrence for _, occurrence in indexed_occurrences_for_date(medications, day)]


def occurrences_between(
    medications: Sequence[Medication], start: date, end: date
) -> list[DoseOccurrence]:
    """Doses for every date in the inclusive range, grouped by date in order."""
    occurrences: list[DoseOccurrence] = []
    day = start
    while day <= end:
        occurrences.extend(occurrences_for_date(medications, day))
        day += ONE_DAY

    logger.debug(
        "occurrences_between_computed",
        start=start.isoformat(),
        end=end.isoformat(),
        medications=len(medications),
        occurrences=len(occurrences),
    )
    return occurrences
