#!/usr/bin/env python3
"""Check garage files: schema first, then ids and timestamps."""
import sys
from pathlib import Path

import yaml
from jsonschema import Draft7Validator

from garage.calculations import parse_timestamp


def load_schema() -> dict:
    """Load the JSON schema shipped with the garage package."""
    schema_path = Path(__file__).parent / "garage" / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def schema_errors(data, schema: dict) -> list[str]:
    """Every schema violation, each with its location in the file."""
    errors = []
    validator = Draft7Validator(schema)
    for error in sorted(validator.iter_errors(data), key=lambda e: list(e.path)):
        location = ".".join(str(p) for p in error.path) or "<root>"
        errors.append(f"Schema validation error at {location}: {error.message}")
    return errors


def record_errors(vehicles: list) -> list[str]:
    """Problems the schema can't express: repeated ids and unreadable dates."""
    errors = []
    seen_vehicles = set()
    for index, vehicle in enumerate(vehicles):
        vehicle_id = vehicle["id"]
        if vehicle_id in seen_vehicles:
            errors.append(f"Duplicate vehicle id {vehicle_id!r} at vehicles.{index}")
        seen_vehicles.add(vehicle_id)

        seen_records = set()
        for position, record in enumerate(vehicle.get("maintenanceHistory", [])):
            where = f"vehicles.{index}.maintenanceHistory.{position}"
            if record["id"] in seen_records:
                errors.append(f"Duplicate maintenance id {record['id']!r} at {where}")
            seen_records.add(record["id"])
            if parse_timestamp(record["timestamp"]) is None:
                errors.append(f"Unreadable timestamp {record['timestamp']!r} at {where}")
    return errors


def validate_garage_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single garage YAML file. Returns list of errors."""
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return [f"YAML parse error: {e}"]
    except OSError as e:
        return [f"Error: {e}"]

    errors = schema_errors(data, schema)
    if errors:
        return errors
    return record_errors(data["vehicles"])


def main(argv=None):
    """Validate each garage file given on the command line."""
    paths = [Path(p) for p in (sys.argv[1:] if argv is None else argv)]
    if not paths:
        print("Usage: validate_garage.py GARAGE_FILE [GARAGE_FILE ...]")
        return 1

    schema = load_schema()
    failed = 0
    for filepath in paths:
        errors = validate_garage_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            failed += 1
        else:
            print(f"OK: {filepath.name}")

    if len(paths) > 1:
        print(f"{len(paths) - failed} of {len(paths)} files valid")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
