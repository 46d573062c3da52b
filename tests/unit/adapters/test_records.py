"""
Tests for the medication API record adapter and the Result type it returns.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from adapters.api.records import parse_medication_record, parse_medication_records
from medschedule.domain.models import Medication
from medschedule.result import Result
from medschedule.services.schedule import generate_occurrences


class TestResult:
    """Test the Result type for expected failures."""

    def test_result_ok_creates_successful_result(self) -> None:
        result: Result[str, Exception] = Result.ok("success")
        assert result.is_ok()
        assert not result.is_err()
        assert result.unwrap() == "success"

    def test_result_error_creates_failed_result(self) -> None:
        result: Result[str, ValueError] = Result.err(ValueError("bad record"))
        assert result.is_err()
        assert not result.is_ok()
        assert str(result.unwrap_err()) == "bad record"

    def test_unwrap_raises_on_error_result(self) -> None:
        result: Result[str, ValueError] = Result.err(ValueError("bad record"))
        with pytest.raises(ValueError, match="bad record"):
            result.unwrap()

    def test_unwrap_err_on_ok_value_raises(self) -> None:
        with pytest.raises(ValueError, match="unwrap_err"):
            Result.ok(1).unwrap_err()

    def test_repr_names_the_side(self) -> None:
        assert repr(Result.ok(3)) == "Result.ok(3)"
        assert repr(Result.err(ValueError("x"))) == "Result.err(ValueError('x'))"

    def test_result_requires_exactly_one_side(self) -> None:
        with pytest.raises(ValueError):
            Result()
        with pytest.raises(ValueError):
            Result(value=1, error=ValueError("x"))


class TestParseMedicationRecord:
    def test_backend_payload_is_mapped(self) -> None:
        result = parse_medication_record(
            {
                "id": 7,
                "nombre": "Ibuprofeno",
                "cantidadMg": 400,
                "horaInicio": "07:30",
                "fechaInicio": "2024-01-01",
                "fechaFin": "2024-01-10",
                "color": "#ff0000",
                "frecuencia": 8,
                "remainingDays": 3,
            }
        )

        medication = result.unwrap()
        assert isinstance(medication, Medication)
        assert medication.id == "7"
        assert medication.name == "Ibuprofeno"
        assert medication.dosage_mg == 400
        assert medication.start_time == "07:30"
        assert medication.start_date == date(2024, 1, 1)
        assert medication.end_date == date(2024, 1, 10)
        assert medication.color_tag == "#ff0000"
        assert medication.frequency_raw == 8

    def test_english_payload_with_timestamps_and_text_frequency(self) -> None:
        result = parse_medication_record(
            {
                "id": "amox",
                "name": "Amoxicillin",
                "dosageMg": 500,
                "frequency": "cada 6 horas",
                "startTime": "",
                "startDate": "2024-01-01T00:00:00.000Z",
                "endDate": "",
                "consumed": True,
            }
        )

        medication = result.unwrap()
        assert medication.start_date == date(2024, 1, 1)
        assert medication.end_date is None
        assert medication.start_time is None
        assert medication.frequency_raw == "cada 6 horas"
        assert medication.consumed is True

    def test_parsed_record_feeds_the_scheduler(self) -> None:
        medication = parse_medication_record(
            {"id": 1, "nombre": "X", "frecuencia": "cada 12 horas", "horaInicio": "09:00"}
        ).unwrap()

        times = [o.time for o in generate_occurrences(medication, date(2024, 1, 1))]
        assert times == ["09:00", "21:00"]

    def test_invalid_date_is_rejected(self) -> None:
        result = parse_medication_record({"id": 1, "nombre": "X", "fechaInicio": "31/02/2024"})

        assert result.is_err()
        assert isinstance(result.unwrap_err(), ValidationError)
        assert "invalid calendar date" in str(result.unwrap_err())

    def test_end_before_start_is_rejected(self) -> None:
        result = parse_medication_record(
            {"id": 1, "nombre": "X", "fechaInicio": "2024-02-01", "fechaFin": "2024-01-01"}
        )

        assert result.is_err()
        assert "before start date" in str(result.unwrap_err())

    @pytest.mark.parametrize("payload", [{"nombre": "No id"}, {"id": 1}, {"id": 1, "name": ""}])
    def test_missing_required_fields(self, payload: dict) -> None:
        assert parse_medication_record(payload).is_err()


def test_parse_medication_records_skips_bad_rows_in_order() -> None:
    medications = parse_medication_records(
        [
            {"id": 1, "nombre": "First"},
            {"id": 2, "nombre": "Broken", "fechaFin": "not-a-date"},
            {"id": 3, "nombre": "Third"},
        ]
    )

    assert [m.id for m in medications] == ["1", "3"]
