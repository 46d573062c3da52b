"""
Schedule walkthrough for a sample medication list.

This script shows:
1. Configuration loading
2. Parsing API payloads (including a rejected record)
3. Expiration badges and status groups
4. The week strip with rollover doses
5. The day timeline grouped by time

Run with: uv run python demo_schedule.py
"""

from datetime import date, timedelta

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from adapters.api.records import parse_medication_records
from medschedule.config import get_config
from medschedule.log import configure_logging
from medschedule.services import (
    annotate_medications,
    build_week,
    group_by_status,
    group_by_time,
    medication_stats,
)

console = Console()


def sample_payloads(today: date) -> list[dict]:
    return [
        {
            "id": 1,
            "nombre": "Ibuprofeno",
            "cantidadMg": 400,
            "frecuencia": "cada 8 horas",
            "horaInicio": "07:30",
            "fechaInicio": (today - timedelta(days=10)).isoformat(),
            "fechaFin": (today + timedelta(days=3)).isoformat(),
            "color": "#e57373",
        },
        {
            "id": "amox",
            "name": "Amoxicillin",
            "dosageMg": 500,
            "frequency": 6,
            "startTime": "22:00",
            "startDate": (today - timedelta(days=2)).isoformat(),
            "endDate": (today + timedelta(days=20)).isoformat(),
            "colorTag": "#64b5f6",
        },
        {
            "id": 3,
            "nombre": "Vitamina D",
            "cantidadMg": 25,
            "frecuencia": 24,
            "horaInicio": "09:00",
            "fechaInicio": (today - timedelta(days=60)).isoformat(),
        },
        {
            "id": 4,
            "nombre": "Omeprazol",
            "cantidadMg": 20,
            "frecuencia": 12,
            "horaInicio": "08:00",
            "fechaInicio": (today - timedelta(days=30)).isoformat(),
            "fechaFin": (today - timedelta(days=1)).isoformat(),
        },
        {"id": 5, "nombre": "Broken", "fechaInicio": "31/02/2024"},
    ]


def main() -> None:
    config = get_config()
    configure_logging(config.logging)
    today = date.today()

    console.print(
        Panel(
            f"Environment: {config.environment}\n"
            f"Default frequency: {config.scheduling.default_frequency_hours}h\n"
            f"Default start time: {config.scheduling.default_start_time}\n"
            f"Expiring soon window: {config.scheduling.expiring_soon_days} days",
            title="Configuration",
        )
    )

    medications = parse_medication_records(sample_payloads(today))
    annotated = annotate_medications(medications, today)

    status_table = Table(title="Medications")
    status_table.add_column("Name")
    status_table.add_column("Every")
    status_table.add_column("Status")
    status_table.add_column("Days left")
    for med in annotated:
        status_table.add_row(
            med.display_name,
            f"{med.frequency_hours}h",
            med.expiration_status.value,
            "-" if med.days_until_expiration is None else str(med.days_until_expiration),
        )
    console.print(status_table)

    stats = medication_stats(annotated)
    groups = ", ".join(f"{g.category.value}={g.count}" for g in group_by_status(annotated))
    console.print(f"Total {stats.total} | active {stats.active} | expired {stats.expired} | {groups}")

    week_table = Table(title="This week")
    week_table.add_column("Day")
    week_table.add_column("Doses")
    for day in build_week(today, medications, today=today):
        label = f"{day.day_name} {day.day_number}" + (" (today)" if day.is_today else "")
        doses = "\n".join(f"{d.time} {d.medication_name}" for d in day.doses) or "-"
        week_table.add_row(label, doses)
    console.print(week_table)

    timeline = Table(title=f"Timeline {today.isoformat()}")
    timeline.add_column("Time")
    timeline.add_column("Medications")
    for group in group_by_time(today, medications, today=today):
        timeline.add_row(group.time, ", ".join(m.display_name for m in group.medications))
    console.print(timeline)


if __name__ == "__main__":
    main()
