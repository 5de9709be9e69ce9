#!/usr/bin/env python3
"""
Unified CLI for the garage.

Commands:
  list     - Show every vehicle and its current state
  add      - Add a car, sports car or truck
  remove   - Remove a vehicle
  show     - Show one vehicle with its history and appointments
  op       - Run an operation (turn-on, accelerate, load, ...) on a vehicle
  log      - Add a maintenance record or appointment
  unlog    - Remove a maintenance record
  history  - View past services and upcoming appointments
  alerts   - List appointments due today or tomorrow
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from garage import (
    Garage,
    MaintenanceRecord,
    StorageError,
    ValidationError,
    Vehicle,
    VehicleKind,
    YamlGarageStore,
    future_appointments,
    past_history,
)
from garage.calculations import parse_local_timestamp
from garage.config import LOG_FORMAT, Settings
from garage.repository import OPERATIONS, OPERATIONS_WITH_ARGUMENT
from garage.result import OperationResult

# =============================================================================
# Formatting helpers
# =============================================================================


def format_speed(speed: float) -> str:
    """Format speed for display."""
    return f"{speed:.1f} km/h"


def format_load(vehicle: Vehicle) -> str:
    """Format truck load as 'current / capacity kg', or '-' for other variants."""
    if vehicle.capacity is None:
        return "-"
    return f"{vehicle.current_load:,.0f} / {vehicle.capacity:,.0f} kg"


def format_ignition(vehicle: Vehicle) -> str:
    """Ignition state, with the turbo flag for sports cars."""
    state = "on" if vehicle.ignition_on else "off"
    if vehicle.kind == VehicleKind.SPORTS_CAR and vehicle.turbo_on:
        state += " (turbo)"
    return state


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if not text:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def make_garage_table(vehicles: List[Vehicle]) -> List[List[str]]:
    """Convert vehicles to table rows."""
    rows = []
    for vehicle in vehicles:
        rows.append(
            [
                vehicle.id,
                vehicle.kind.display_name,
                truncate(vehicle.model, 20),
                vehicle.color,
                format_ignition(vehicle),
                format_speed(vehicle.speed),
                format_load(vehicle),
            ]
        )
    return rows


def operation_name(label: str) -> str:
    """Map a CLI label like 'turn-on' to the operation name 'turn_on'."""
    return label.replace("-", "_")


def report(result: OperationResult) -> int:
    """Print an operation result and return the exit code."""
    print(result.message if result.ok else f"Error: {result.message}")
    return 0 if result.ok else 1


# =============================================================================
# Commands
# =============================================================================


def cmd_list(args, garage: Garage, store: YamlGarageStore) -> int:
    """Show every vehicle in the garage."""
    if not len(garage):
        print("No vehicles in the garage.")
        return 0

    headers = ["Id", "Type", "Model", "Color", "Ignition", "Speed", "Load"]
    print(tabulate(make_garage_table(garage.vehicles), headers=headers, tablefmt="simple"))
    return 0


def cmd_add(args, garage: Garage, store: YamlGarageStore) -> int:
    """Add a vehicle."""
    try:
        kind = VehicleKind.from_label(args.type)
        vehicle = Vehicle.create(kind, args.model, args.color, capacity=args.capacity)
    except ValidationError as e:
        print(f"Error: {e}")
        return 1

    garage.add(vehicle)
    if not garage.save(store):
        print(f"Error: could not save {store.path}")
        return 1
    print(f"{vehicle.name} ({vehicle.color}) added with id {vehicle.id}")
    return 0


def cmd_remove(args, garage: Garage, store: YamlGarageStore) -> int:
    """Remove a vehicle."""
    result = garage.remove(args.vehicle_id)
    if result.ok and not garage.save(store):
        print(f"Error: could not save {store.path}")
        return 1
    return report(result)


def print_schedule(vehicle: Vehicle) -> None:
    """Print past history and upcoming appointments for a vehicle."""
    history = past_history(vehicle)
    upcoming = future_appointments(vehicle)

    print("History:")
    if not history:
        print("  No history.")
    for line in history:
        print(f"  [{line.record_id}] {line.text}")
    print()

    print("Appointments:")
    if not upcoming:
        print("  No appointments.")
    for line in upcoming:
        print(f"  [{line.record_id}] {line.text}")


def cmd_show(args, garage: Garage, store: YamlGarageStore) -> int:
    """Show one vehicle."""
    vehicle = garage.find(args.vehicle_id)
    if vehicle is None:
        print(f"Error: Vehicle '{args.vehicle_id}' not found.")
        return 1

    print(f"Vehicle:  {vehicle.name}")
    print(f"Color:    {vehicle.color}")
    print(f"Ignition: {format_ignition(vehicle)}")
    print(f"Speed:    {format_speed(vehicle.speed)}")
    if vehicle.capacity is not None:
        print(f"Load:     {format_load(vehicle)}")
    print()
    print_schedule(vehicle)
    return 0


def cmd_op(args, garage: Garage, store: YamlGarageStore) -> int:
    """Run one operation on a vehicle."""
    operation = operation_name(args.operation)
    params = []
    if operation in OPERATIONS_WITH_ARGUMENT:
        if args.quantity is None:
            print(f"Error: '{args.operation}' needs a quantity")
            return 1
        params.append(args.quantity)

    result = garage.perform(args.vehicle_id, operation, *params)
    if result.ok and not garage.save(store):
        print(f"Error: could not save {store.path}")
        return 1
    return report(result)


def cmd_log(args, garage: Garage, store: YamlGarageStore) -> int:
    """Add a maintenance record or appointment."""
    vehicle = garage.find(args.vehicle_id)
    if vehicle is None:
        print(f"Error: Vehicle '{args.vehicle_id}' not found.")
        return 1

    entry_date = args.date or date.today().isoformat()
    timestamp = parse_local_timestamp(entry_date, args.time)
    try:
        if timestamp is None:
            raise ValidationError(f"Invalid date/time: {entry_date} {args.time or ''}")
        record = MaintenanceRecord(timestamp, args.service_type, args.cost, args.description)
    except ValidationError as e:
        print(f"Error: {e}")
        return 1

    # Show what will be added
    print(f"Adding maintenance to {vehicle.name}:")
    print(f"  Service: {record.service_type}")
    print(f"  When:    {record.timestamp.astimezone():%Y-%m-%d %H:%M}")
    print(f"  Cost:    ${record.cost:,.2f}")
    if record.description:
        print(f"  Notes:   {record.description}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    vehicle.add_maintenance(record)
    if not garage.save(store):
        print(f"Error: could not save {store.path}")
        return 1
    print(f"Record saved with id {record.id}.")
    return 0


def cmd_unlog(args, garage: Garage, store: YamlGarageStore) -> int:
    """Remove a maintenance record."""
    result = garage.perform(args.vehicle_id, "remove_maintenance", args.record_id)
    if result.ok and not garage.save(store):
        print(f"Error: could not save {store.path}")
        return 1
    return report(result)


def cmd_history(args, garage: Garage, store: YamlGarageStore) -> int:
    """View past services and upcoming appointments."""
    vehicle = garage.find(args.vehicle_id)
    if vehicle is None:
        print(f"Error: Vehicle '{args.vehicle_id}' not found.")
        return 1

    records = vehicle.maintenance_history
    total_cost = sum(m.cost for m in records)
    print(f"Vehicle: {vehicle.name}")
    print(f"Total records: {len(records)}")
    if total_cost > 0:
        print(f"Total cost: ${total_cost:,.2f}")
    print()
    print_schedule(vehicle)
    return 0


def cmd_alerts(args, garage: Garage, store: YamlGarageStore) -> int:
    """List appointments due today or tomorrow."""
    alerts = garage.due_soon_alerts()
    if not alerts:
        print("No appointments today or tomorrow.")
        return 0
    print("Appointment reminders:")
    for alert in alerts:
        print(f"  {alert}")
    return 0


COMMANDS = {
    "list": cmd_list,
    "add": cmd_add,
    "remove": cmd_remove,
    "show": cmd_show,
    "op": cmd_op,
    "log": cmd_log,
    "unlog": cmd_unlog,
    "history": cmd_history,
    "alerts": cmd_alerts,
}


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Garage tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s garage.yaml list
  %(prog)s garage.yaml add truck "Volvo FH" white --capacity 1000
  %(prog)s garage.yaml op v-1718000000000-a1b2c3 turn-on
  %(prog)s garage.yaml op v-1718000000000-a1b2c3 load 600
  %(prog)s garage.yaml log v-1718000000000-a1b2c3 "Oil change" \\
      --cost 45 --date 2025-01-15 --time 14:30
  %(prog)s garage.yaml alerts
""",
    )
    parser.add_argument(
        "garage_file",
        type=Path,
        help="Path to garage YAML file",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="Show every vehicle and its current state")

    add_parser = subparsers.add_parser("add", help="Add a vehicle")
    add_parser.add_argument(
        "type", type=str, help="Vehicle type: car, sports-car or truck"
    )
    add_parser.add_argument("model", type=str, help="Model name")
    add_parser.add_argument("color", type=str, help="Color")
    add_parser.add_argument(
        "--capacity", type=float, help="Load capacity in kg (trucks only)"
    )

    remove_parser = subparsers.add_parser("remove", help="Remove a vehicle")
    remove_parser.add_argument("vehicle_id", type=str)

    show_parser = subparsers.add_parser("show", help="Show one vehicle")
    show_parser.add_argument("vehicle_id", type=str)

    op_parser = subparsers.add_parser("op", help="Run an operation on a vehicle")
    op_parser.add_argument("vehicle_id", type=str)
    op_parser.add_argument(
        "operation",
        choices=[op.replace("_", "-") for op in OPERATIONS if op != "remove_maintenance"],
    )
    op_parser.add_argument(
        "quantity", type=str, nargs="?", help="Quantity in kg (load/unload)"
    )

    log_parser = subparsers.add_parser(
        "log", help="Add a maintenance record or appointment"
    )
    log_parser.add_argument("vehicle_id", type=str)
    log_parser.add_argument("service_type", type=str, help="e.g. 'Oil change'")
    log_parser.add_argument("--cost", type=str, required=True, help="Cost of service")
    log_parser.add_argument(
        "--date", type=str, help="Date in YYYY-MM-DD format (default: today)"
    )
    log_parser.add_argument(
        "--time", type=str, help="Local time of day in HH:MM format (default: 00:00)"
    )
    log_parser.add_argument("--description", type=str, help="Notes about the service")
    log_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    unlog_parser = subparsers.add_parser("unlog", help="Remove a maintenance record")
    unlog_parser.add_argument("vehicle_id", type=str)
    unlog_parser.add_argument("record_id", type=str)

    history_parser = subparsers.add_parser(
        "history", help="View past services and upcoming appointments"
    )
    history_parser.add_argument("vehicle_id", type=str)

    subparsers.add_parser("alerts", help="List appointments due today or tomorrow")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    store = YamlGarageStore(args.garage_file)
    try:
        garage = Garage.load(store)
    except StorageError as e:
        print(f"Error: {e}")
        return 1

    return COMMANDS[args.command](args, garage, store)


if __name__ == "__main__":
    sys.exit(main() or 0)
