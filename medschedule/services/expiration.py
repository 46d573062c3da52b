"""
Expiration classification for medication list and card views.

All comparisons are done on calendar dates, so a medication ending later
today is treated the same as one that ended this morning.
"""

from collections.abc import Iterable
from datetime import date

import structlog

from medschedule.config import get_config
from medschedule.domain.models import (
    AnnotatedMedication,
    ExpirationStatus,
    Medication,
    MedicationGroup,
    MedicationStats,
)
from medschedule.services.frequency import parse_frequency_hours

logger = structlog.get_logger(__name__)

_GROUP_ORDER = (ExpirationStatus.ACTIVE, ExpirationStatus.EXPIRING_SOON, ExpirationStatus.EXPIRED)


def classify_expiration(
    medication: Medication,
    today: date | None = None,
    expiring_soon_days: int | None = None,
) -> tuple[ExpirationStatus, int | None]:
    """
    Classify a medication against its end date.

    Returns:
        tuple: The status and the whole days left until `end_date`. Days are
        None when there is no end date, and also when the end date is today,
        so that an expired medication never reports a count inside the
        expiring-soon window.
    """
    today = today or date.today()
    threshold = (
        expiring_soon_days
        if expiring_soon_days is not None
        else get_config().scheduling.expiring_soon_days
    )

    if medication.end_date is None:
        return ExpirationStatus.ACTIVE, None

    days = (medication.end_date - today).days
    if medication.end_date > today:
        status = (
            ExpirationStatus.EXPIRING_SOON if 0 <= days <= threshold else ExpirationStatus.ACTIVE
        )
        return status, days
    return ExpirationStatus.EXPIRED, days or None


def annotate_medication(medication: Medication, today: date | None = None) -> AnnotatedMedication:
    """Attach frequency and expiration fields to a medication record."""
    status, days = classify_expiration(medication, today)
    return AnnotatedMedication(
        # Re-annotating drops previously derived fields
        **medication.model_dump(include=set(Medication.model_fields)),
        frequency_hours=parse_frequency_hours(medication.frequency_raw),
        is_active=status is not ExpirationStatus.EXPIRED,
        is_expired=status is ExpirationStatus.EXPIRED,
        expiration_status=status,
        days_until_expiration=days,
    )


def annotate_medications(
    medications: Iterable[Medication], today: date | None = None
) -> list[AnnotatedMedication]:
    today = today or date.today()
    return [annotate_medication(m, today) for m in medications]


def group_by_status(medications: Iterable[AnnotatedMedication]) -> list[MedicationGroup]:
    """Bucket medications by status, dropping empty buckets."""
    buckets: dict[ExpirationStatus, list[AnnotatedMedication]] = {s: [] for s in _GROUP_ORDER}
    for medication in medications:
        buckets[medication.expiration_status].append(medication)

    return [
        MedicationGroup(category=status, medications=buckets[status])
        for status in _GROUP_ORDER
        if buckets[status]
    ]


def medication_stats(medications: Iterable[AnnotatedMedication]) -> MedicationStats:
    medications = list(medications)
    return MedicationStats(
        total=len(medications),
        active=sum(1 for m in medications if m.is_active),
        expired=sum(1 for m in medications if m.is_expired),
        expiring_soon=sum(
            1 for m in medications if m.expiration_status is ExpirationStatus.EXPIRING_SOON
        ),
    )


def expiring_within(
    medications: Iterable[AnnotatedMedication], days: int
) -> list[AnnotatedMedication]:
    """Medications whose end date falls 1..`days` days from the annotation date."""
    selected = [
        m
        for m in medications
        if m.days_until_expiration is not None and 0 < m.days_until_expiration <= days
    ]
    logger.debug("expiring_within_selected", days=days, count=len(selected))
    return selected
