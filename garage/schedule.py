"""Past history, upcoming appointments and due-soon alerts."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from .calculations import as_reference
from .maintenance import MaintenanceRecord
from .vehicle import Vehicle


@dataclass
class ScheduleLine:
    """One formatted maintenance record, keyed by its id for removal."""

    record_id: str
    text: str


def format_cost(cost: float) -> str:
    """Format cost for display."""
    return f"${cost:,.2f}"


def format_record(record: MaintenanceRecord, now: Optional[datetime] = None) -> str:
    """'Oil change on 2025-01-15 - $45.00 (synthetic)'."""
    when = record.timestamp.astimezone(as_reference(now).tzinfo)
    text = f"{record.service_type} on {when:%Y-%m-%d} - {format_cost(record.cost)}"
    if record.description:
        text += f" ({record.description})"
    return text


def format_appointment(
    record: MaintenanceRecord, now: Optional[datetime] = None
) -> str:
    """'Oil change scheduled for 2025-01-15 14:30 - Notes: bring receipt'."""
    when = record.timestamp.astimezone(as_reference(now).tzinfo)
    text = f"{record.service_type} scheduled for {when:%Y-%m-%d %H:%M}"
    if record.description:
        text += f" - Notes: {record.description}"
    return text


def past_records(vehicle: Vehicle, now: Optional[datetime] = None) -> List[MaintenanceRecord]:
    """Records at or before ``now``, newest first."""
    now = as_reference(now)
    return [m for m in vehicle.maintenance_history if not m.is_future(now)]


def future_records(
    vehicle: Vehicle, now: Optional[datetime] = None
) -> List[MaintenanceRecord]:
    """Records after ``now``, next appointment first."""
    now = as_reference(now)
    upcoming = [m for m in vehicle.maintenance_history if m.is_future(now)]
    return sorted(upcoming, key=lambda m: m.timestamp)


def past_history(vehicle: Vehicle, now: Optional[datetime] = None) -> List[ScheduleLine]:
    """Formatted service history, newest first."""
    now = as_reference(now)
    return [ScheduleLine(m.id, format_record(m, now)) for m in past_records(vehicle, now)]


def future_appointments(
    vehicle: Vehicle, now: Optional[datetime] = None
) -> List[ScheduleLine]:
    """Formatted appointments, next one first."""
    now = as_reference(now)
    return [
        ScheduleLine(m.id, format_appointment(m, now))
        for m in future_records(vehicle, now)
    ]


def due_soon_alerts(
    vehicles: Iterable[Vehicle], now: Optional[datetime] = None
) -> List[str]:
    """
    Alerts for appointments falling on today's or tomorrow's date.

    Dates are compared in ``now``'s timezone with the time of day stripped.
    Appointments earlier today that already passed are not future records and
    produce no alert.
    """
    now = as_reference(now)
    today = now.date()
    tomorrow = (now + timedelta(days=1)).date()

    alerts = []
    for vehicle in vehicles:
        for record in future_records(vehicle, now):
            when = record.timestamp.astimezone(now.tzinfo)
            if when.date() == today:
                label = "TODAY"
            elif when.date() == tomorrow:
                label = "TOMORROW"
            else:
                continue
            alerts.append(
                f"{label}: {vehicle.name} - {record.service_type} at {when:%H:%M}"
            )
    return alerts
