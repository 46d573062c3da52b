"""
Medication records as served by the medication API.

The API has served two payload shapes over time: English field names and the
legacy Spanish backend names (`nombre`, `cantidadMg`, `frecuencia`,
`horaInicio`, `fechaInicio`, `fechaFin`, `color`). Both are accepted here and
mapped onto the core `Medication` model.

This is the boundary where malformed records are rejected. Unparsable dates
never reach the scheduling core; they come back as `Result.err` and the batch
helper logs and skips them.
"""

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from medschedule.domain.models import Medication
from medschedule.result import Result

logger = structlog.get_logger(__name__)


class MedicationRecord(BaseModel):
    """Raw medication payload with lenient field names."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("id", "medicationId"))
    name: str = Field(min_length=1, validation_alias=AliasChoices("name", "nombre"))
    dosage_mg: float = Field(
        default=0, ge=0, validation_alias=AliasChoices("dosage_mg", "dosageMg", "cantidadMg")
    )
    frequency_raw: str | int | float | None = Field(
        default=None,
        validation_alias=AliasChoices("frequency_raw", "frequency", "frecuencia"),
    )
    start_time: str | None = Field(
        default=None, validation_alias=AliasChoices("start_time", "startTime", "horaInicio")
    )
    start_date: date | None = Field(
        default=None, validation_alias=AliasChoices("start_date", "startDate", "fechaInicio")
    )
    end_date: date | None = Field(
        default=None, validation_alias=AliasChoices("end_date", "endDate", "fechaFin")
    )
    color_tag: str | None = Field(
        default=None, validation_alias=AliasChoices("color_tag", "colorTag", "color")
    )
    consumed: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        # Backend ids are numeric; the core treats them as opaque strings
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_calendar_date(cls, v: Any) -> Any:
        """Accept "yyyy-MM-dd", full ISO timestamps and blanks."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str):
            text = v.strip()
            try:
                return date.fromisoformat(text[:10])
            except ValueError as e:
                raise ValueError(f"invalid calendar date: {text!r}") from e
        return v

    @field_validator("start_time", mode="before")
    @classmethod
    def blank_time_is_missing(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_medication(self) -> Medication:
        return Medication(**self.model_dump())


def parse_medication_record(payload: Mapping[str, Any]) -> Result[Medication, ValueError]:
    """
    Validate one API payload.

    Returns:
        Result[Medication, ValueError]: The medication, or the validation error
        (pydantic's `ValidationError` is a `ValueError`).
    """
    try:
        record = MedicationRecord.model_validate(dict(payload))
    except ValidationError as e:
        return Result.err(e)

    if record.start_date and record.end_date and record.end_date < record.start_date:
        return Result.err(
            ValueError(
                f"end date {record.end_date.isoformat()} is before start date "
                f"{record.start_date.isoformat()}"
            )
        )
    return Result.ok(record.to_medication())


def parse_medication_records(payloads: Iterable[Mapping[str, Any]]) -> list[Medication]:
    """Validate a batch, keeping good records in order and logging the rest."""
    medications: list[Medication] = []
    skipped = 0

    for position, payload in enumerate(payloads):
        result = parse_medication_record(payload)
        if result.is_ok():
            medications.append(result.unwrap())
        else:
            skipped += 1
            logger.warning(
                "medication_record_rejected",
                position=position,
                record_id=payload.get("id"),
                error=str(result.unwrap_err()),
            )

    logger.info("medication_records_parsed", accepted=len(medications), skipped=skipped)
    return medications
