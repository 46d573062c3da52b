"""
Tests for expiration classification in `medschedule/services/expiration.py`.
"""

from datetime import date, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from medschedule.domain.models import AnnotatedMedication, ExpirationStatus, Medication
from medschedule.services.expiration import (
    annotate_medication,
    annotate_medications,
    classify_expiration,
    expiring_within,
    group_by_status,
    medication_stats,
)

TODAY = date(2024, 3, 10)


def _medication(end_offset: int | None = None, **overrides: object) -> Medication:
    fields: dict[str, object] = {
        "id": "med-1",
        "name": "Ibuprofeno",
        "dosage_mg": 400,
        "frequency_raw": "cada 8 horas",
        "start_time": "08:00",
        "start_date": TODAY - timedelta(days=30),
        "end_date": None if end_offset is None else TODAY + timedelta(days=end_offset),
    }
    fields.update(overrides)
    return Medication(**fields)  # type: ignore[arg-type]


class TestClassifyExpiration:
    def test_no_end_date_is_permanently_active(self) -> None:
        assert classify_expiration(_medication(), TODAY, 7) == (ExpirationStatus.ACTIVE, None)

    @pytest.mark.parametrize("offset", [1, 3, 7])
    def test_end_within_a_week_is_expiring_soon(self, offset: int) -> None:
        status, days = classify_expiration(_medication(offset), TODAY, 7)
        assert status is ExpirationStatus.EXPIRING_SOON
        assert days == offset

    def test_end_beyond_the_window_is_active(self) -> None:
        assert classify_expiration(_medication(8), TODAY, 7) == (ExpirationStatus.ACTIVE, 8)

    def test_end_today_is_expired_without_day_count(self) -> None:
        assert classify_expiration(_medication(0), TODAY, 7) == (ExpirationStatus.EXPIRED, None)

    def test_end_in_the_past_reports_negative_days(self) -> None:
        assert classify_expiration(_medication(-2), TODAY, 7) == (ExpirationStatus.EXPIRED, -2)

    def test_threshold_is_configurable(self) -> None:
        status, _ = classify_expiration(_medication(10), TODAY, expiring_soon_days=14)
        assert status is ExpirationStatus.EXPIRING_SOON


@given(end_offset=st.one_of(st.none(), st.integers(min_value=-400, max_value=400)))
def test_classification_is_exhaustive_and_exclusive(end_offset: int | None) -> None:
    """Property-based test: one status per medication, expiring-soon iff 0..7 days left."""
    annotated = annotate_medication(_medication(end_offset), TODAY)

    flags = [
        annotated.expiration_status is ExpirationStatus.ACTIVE,
        annotated.expiration_status is ExpirationStatus.EXPIRING_SOON,
        annotated.expiration_status is ExpirationStatus.EXPIRED,
    ]
    assert sum(flags) == 1
    assert annotated.is_active != annotated.is_expired

    days = annotated.days_until_expiration
    in_window = days is not None and 0 <= days <= 7
    assert (annotated.expiration_status is ExpirationStatus.EXPIRING_SOON) == in_window


class TestAnnotateMedication:
    def test_derived_fields_are_attached(self) -> None:
        annotated = annotate_medication(_medication(3), TODAY)

        assert isinstance(annotated, AnnotatedMedication)
        assert annotated.frequency_hours == 8
        assert annotated.is_active is True
        assert annotated.is_expired is False
        assert annotated.days_until_expiration == 3
        assert annotated.display_name == "Ibuprofeno - 400mg"

    def test_source_record_is_unchanged(self) -> None:
        medication = _medication(3)
        annotate_medication(medication, TODAY)
        assert not isinstance(medication, AnnotatedMedication)
        assert medication.frequency_raw == "cada 8 horas"

    def test_reannotating_uses_the_new_today(self) -> None:
        first = annotate_medication(_medication(3), TODAY)
        later = annotate_medication(first, TODAY + timedelta(days=5))

        assert later.expiration_status is ExpirationStatus.EXPIRED
        assert later.days_until_expiration == -2

    def test_annotated_medication_is_immutable(self) -> None:
        annotated = annotate_medication(_medication(), TODAY)
        with pytest.raises(ValueError, match="frozen"):
            annotated.name = "Other"  # type: ignore[misc]

    def test_fractional_dosage_is_kept_in_display_name(self) -> None:
        annotated = annotate_medication(_medication(dosage_mg=2.5), TODAY)
        assert annotated.display_name == "Ibuprofeno - 2.5mg"


class TestStatusQueries:
    @pytest.fixture
    def annotated(self) -> list[AnnotatedMedication]:
        return annotate_medications(
            [
                _medication(None, id="a", name="A"),
                _medication(2, id="b", name="B"),
                _medication(-1, id="c", name="C"),
                _medication(5, id="d", name="D"),
                _medication(30, id="e", name="E"),
            ],
            TODAY,
        )

    def test_group_by_status_keeps_fixed_order(self, annotated: list[AnnotatedMedication]) -> None:
        groups = group_by_status(annotated)

        assert [g.category for g in groups] == [
            ExpirationStatus.ACTIVE,
            ExpirationStatus.EXPIRING_SOON,
            ExpirationStatus.EXPIRED,
        ]
        assert [m.id for m in groups[0].medications] == ["a", "e"]
        assert [m.id for m in groups[1].medications] == ["b", "d"]
        assert groups[2].count == 1

    def test_group_by_status_drops_empty_groups(self) -> None:
        groups = group_by_status(annotate_medications([_medication()], TODAY))
        assert [g.category for g in groups] == [ExpirationStatus.ACTIVE]

    def test_medication_stats(self, annotated: list[AnnotatedMedication]) -> None:
        stats = medication_stats(annotated)

        assert stats.total == 5
        assert stats.active == 4
        assert stats.expired == 1
        assert stats.expiring_soon == 2
        assert stats.is_empty is False
        assert medication_stats([]).is_empty is True

    def test_expiring_within(self, annotated: list[AnnotatedMedication]) -> None:
        assert [m.id for m in expiring_within(annotated, 3)] == ["b"]
        assert [m.id for m in expiring_within(annotated, 30)] == ["b", "d", "e"]
