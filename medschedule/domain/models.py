"""
Domain models for medication scheduling.

Medication records come from an external store and are never mutated here;
everything else is derived per computation and thrown away after rendering.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class ExpirationStatus(str, Enum):
    """Where a medication sits relative to its end date."""

    ACTIVE = "active"
    EXPIRING_SOON = "expiring-soon"
    EXPIRED = "expired"


class Medication(BaseModel):
    """Medication record as supplied by the medication store."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    dosage_mg: float = Field(default=0, ge=0)
    frequency_raw: str | int | float | None = Field(
        default=None, description="Repeat interval, numeric hours or free text"
    )
    start_time: str | None = Field(default=None, description="First dose of the day, HH:mm")
    start_date: date | None = None
    end_date: date | None = None
    color_tag: str | None = None
    consumed: bool = False


class AnnotatedMedication(Medication):
    """Medication plus the fields derived for list and calendar views."""

    frequency_hours: int = Field(ge=1)
    is_active: bool
    is_expired: bool
    expiration_status: ExpirationStatus
    days_until_expiration: int | None = None

    @computed_field(return_type=str)
    def display_name(self) -> str:
        dosage = int(self.dosage_mg) if float(self.dosage_mg).is_integer() else self.dosage_mg
        return f"{self.name} - {dosage}mg"


class DoseOccurrence(BaseModel):
    """A single scheduled dose: one medication, one date, one time of day."""

    model_config = ConfigDict(frozen=True)

    date: date
    time: str = Field(pattern=TIME_PATTERN)
    medication_id: str
    medication_name: str


class CalendarDay(BaseModel):
    """One cell of the week strip."""

    model_config = ConfigDict(frozen=True)

    date: date
    day_number: int = Field(ge=1, le=31)
    day_name: str
    is_today: bool
    is_current_month: bool
    doses: list[DoseOccurrence] = Field(default_factory=list)


class TimedMedication(AnnotatedMedication):
    """Annotated medication pinned to the time it is shown at in a timeline."""

    display_time: str = Field(pattern=TIME_PATTERN)


class TimeGroup(BaseModel):
    """All medications due at the same time of day."""

    model_config = ConfigDict(frozen=True)

    time: str = Field(pattern=TIME_PATTERN)
    medications: list[TimedMedication]


class MedicationGroup(BaseModel):
    """Medications sharing one expiration status."""

    model_config = ConfigDict(frozen=True)

    category: ExpirationStatus
    medications: list[AnnotatedMedication]

    @computed_field(return_type=int)
    def count(self) -> int:
        return len(self.medications)


class MedicationStats(BaseModel):
    """Dashboard counters over an annotated medication list."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(ge=0)
    active: int = Field(ge=0)
    expired: int = Field(ge=0)
    expiring_soon: int = Field(ge=0)

    @computed_field(return_type=bool)
    def is_empty(self) -> bool:
        return self.total == 0
