"""Conversion between Vehicle objects and flat, tagged plain records."""

import hashlib
import json
import logging
from typing import Any, Dict, Optional

from .calculations import coerce_number
from .errors import ValidationError
from .maintenance import MaintenanceRecord
from .vehicle import SportsCarState, TruckState, Vehicle, VehicleKind

logger = logging.getLogger(__name__)

DEFAULT_TRUCK_CAPACITY = 10000


def stored_id(dct: Dict[str, Any], prefix: str, position: int = 0) -> str:
    """
    Id of a stored record.

    Records saved without an id get one derived from their content and
    position, so reading the same file twice gives the same id. The next
    save writes it out.
    """
    value = dct.get("id")
    if value is not None and str(value).strip():
        return str(value).strip()
    content = json.dumps(dct, sort_keys=True, default=str)
    digest = hashlib.sha1(f"{position}:{content}".encode("utf-8")).hexdigest()[:12]
    derived = f"{prefix}-{digest}"
    logger.warning("Stored record has no id, using %s", derived)
    return derived


def maintenance_to_plain(record: MaintenanceRecord) -> Dict[str, Any]:
    """Serialize a MaintenanceRecord to a dict (camelCase keys)."""
    return {
        "id": record.id,
        "timestamp": record.timestamp.isoformat(),
        "serviceType": record.service_type,
        "cost": record.cost,
        "description": record.description,
    }


def maintenance_from_plain(
    dct: Dict[str, Any], position: int = 0
) -> Optional[MaintenanceRecord]:
    """Rebuild a MaintenanceRecord, or return None if the data is invalid."""
    if not isinstance(dct, dict):
        logger.warning("Dropping maintenance record that is not a mapping: %r", dct)
        return None
    try:
        return MaintenanceRecord(
            dct.get("timestamp"),
            dct.get("serviceType"),
            dct.get("cost"),
            dct.get("description"),
            record_id=stored_id(dct, "m", position),
        )
    except ValidationError as e:
        logger.warning("Dropping invalid maintenance record %s: %s", dct.get("id"), e)
        return None


def to_plain_object(vehicle: Vehicle) -> Dict[str, Any]:
    """Serialize a Vehicle to a flat dict tagged with ``vehicleType``."""
    d: Dict[str, Any] = {
        "vehicleType": vehicle.kind.value,
        "id": vehicle.id,
        "model": vehicle.model,
        "color": vehicle.color,
        "ignitionOn": vehicle.ignition_on,
        "speed": vehicle.speed,
    }
    if isinstance(vehicle.payload, SportsCarState):
        d["turboOn"] = vehicle.payload.turbo_on
    elif isinstance(vehicle.payload, TruckState):
        d["capacity"] = vehicle.payload.capacity
        d["currentLoad"] = vehicle.payload.current_load
    d["maintenanceHistory"] = [
        maintenance_to_plain(m) for m in vehicle.maintenance_history
    ]
    return d


def _build_vehicle(dct: Dict[str, Any], position: int) -> Vehicle:
    tag = dct.get("vehicleType")
    try:
        kind = VehicleKind(tag)
    except ValueError:
        raise ValidationError(f"Unknown vehicle type: {tag!r}") from None

    model = dct.get("model")
    color = dct.get("color")
    vehicle_id = stored_id(dct, "v", position)
    if kind == VehicleKind.CAR:
        return Vehicle.car(model, color, vehicle_id)
    elif kind == VehicleKind.SPORTS_CAR:
        return Vehicle.sports_car(model, color, vehicle_id)
    elif kind == VehicleKind.TRUCK:
        capacity = coerce_number(dct.get("capacity"))
        if capacity <= 0:
            logger.warning(
                "Truck %s has no valid capacity, using default %s",
                vehicle_id,
                DEFAULT_TRUCK_CAPACITY,
            )
            capacity = DEFAULT_TRUCK_CAPACITY
        return Vehicle.truck(model, color, capacity, vehicle_id)
    raise ValidationError(f"Unhandled vehicle type: {tag!r}")


def from_plain_object(dct: Dict[str, Any], position: int = 0) -> Optional[Vehicle]:
    """
    Rebuild a Vehicle from a plain record.

    Returns None (and logs) when the tag is unknown or the vehicle can't be
    constructed. Invalid maintenance records are dropped individually.
    ``position`` is the record's index in its file and only matters for
    records stored without an id.
    """
    if not isinstance(dct, dict):
        logger.error("Skipping vehicle record that is not a mapping: %r", dct)
        return None
    try:
        vehicle = _build_vehicle(dct, position)
    except ValidationError as e:
        logger.error(
            "Could not rebuild vehicle %s (type %s): %s",
            dct.get("model") or "<unknown model>",
            dct.get("vehicleType"),
            e,
        )
        return None

    vehicle.restore_state(
        ignition_on=dct.get("ignitionOn") is True,
        speed=dct.get("speed"),
        turbo_on=dct.get("turboOn") is True,
        current_load=dct.get("currentLoad"),
    )

    history = dct.get("maintenanceHistory")
    if isinstance(history, list):
        for index, item in enumerate(history):
            record = maintenance_from_plain(item, index)
            if record is not None:
                vehicle.add_maintenance(record)
    elif history is not None:
        logger.warning("Ignoring malformed maintenance history for %s", vehicle.id)
    return vehicle
