"""
Calendar shaping for the two schedule views.

- Week strip: seven Monday-first days, each carrying its doses.
- Day timeline: one date's doses grouped by time of day.

Both read occurrences from `medschedule.services.schedule`, so rollover doses
show up on the day they are actually taken.
"""

from collections.abc import Sequence
from datetime import date, timedelta

import structlog

from medschedule.domain.models import (
    AnnotatedMedication,
    CalendarDay,
    Medication,
    TimedMedication,
    TimeGroup,
)
from medschedule.services.expiration import annotate_medication
from medschedule.services.schedule import indexed_occurrences_for_date, occurrences_for_date

logger = structlog.get_logger(__name__)

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
WEEK = timedelta(days=7)


def week_start(day: date) -> date:
    """Monday of the week containing `day` (Sunday belongs to the week before)."""
    return day - timedelta(days=day.weekday())


def previous_week(reference_date: date) -> date:
    return reference_date - WEEK


def next_week(reference_date: date) -> date:
    return reference_date + WEEK


def build_week(
    reference_date: date,
    medications: Sequence[Medication],
    today: date | None = None,
) -> list[CalendarDay]:
    """
    Build the week strip around `reference_date`.

    Args:
        reference_date: Any date in the week to show; also decides which
            month counts as current.
        medications: Medications to schedule, in display order.
        today: Date highlighted as today; the system date when omitted.

    Returns:
        list[CalendarDay]: Exactly seven consecutive days starting on a Monday.
    """
    today = today or date.today()
    monday = week_start(reference_date)

    days: list[CalendarDay] = []
    for offset in range(7):
        day = monday + timedelta(days=offset)
        days.append(
            CalendarDay(
                date=day,
                day_number=day.day,
                day_name=DAY_NAMES[day.weekday()],
                is_today=day == today,
                is_current_month=(day.year, day.month)
                == (reference_date.year, reference_date.month),
                doses=occurrences_for_date(medications, day),
            )
        )

    logger.info(
        "week_built",
        week_start=monday.isoformat(),
        medications=len(medications),
        doses=sum(len(d.doses) for d in days),
    )
    return days


def group_by_time(
    target_date: date,
    medications: Sequence[Medication],
    today: date | None = None,
) -> list[TimeGroup]:
    """
    Group the doses of `target_date` by time of day.

    Groups are ordered by their "HH:mm" key; inside a group medications keep
    their input order.
    """
    today = today or date.today()
    annotated: dict[int, AnnotatedMedication] = {}
    by_time: dict[str, list[TimedMedication]] = {}

    for index, occurrence in indexed_occurrences_for_date(medications, target_date):
        if index not in annotated:
            source = medications[index]
            # Already annotated input produced these slots; keep its frequency as-is
            if isinstance(source, AnnotatedMedication):
                annotated[index] = source
            else:
                annotated[index] = annotate_medication(source, today)
        medication = annotated[index]

        by_time.setdefault(occurrence.time, []).append(
            TimedMedication(
                **medication.model_dump(exclude={"display_name", "display_time"}),
                display_time=occurrence.time,
            )
        )

    groups = [TimeGroup(time=time, medications=meds) for time, meds in sorted(by_time.items())]
    logger.debug(
        "time_groups_built",
        date=target_date.isoformat(),
        groups=len(groups),
        doses=sum(len(g.medications) for g in groups),
    )
    return groups


def medications_at_time(
    target_date: date,
    medications: Sequence[Medication],
    time: str,
    today: date | None = None,
) -> TimeGroup | None:
    """The group due at exactly `time` on `target_date`, if any."""
    for group in group_by_time(target_date, medications, today):
        if group.time == time:
            return group
    return None
