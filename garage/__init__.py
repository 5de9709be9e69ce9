"""
Garage tracking models.

This package provides the domain model for a small vehicle fleet:
- Vehicle: Tagged vehicle type (Car, SportsCar, Truck) with ignition/speed state
- MaintenanceRecord: Past services and scheduled appointments
- OperationResult / Reason: Outcome of operations that may be refused
- Codec: Conversion to and from flat, tagged plain records
- Garage: Ordered vehicle collection with YAML persistence
- Schedule: Past history, upcoming appointments and due-soon alerts
"""

from .errors import ValidationError, DuplicateVehicleError, StorageError
from .reason import Reason
from .result import OperationResult
from .maintenance import MaintenanceRecord
from .vehicle import Vehicle, VehicleKind, SportsCarState, TruckState
from .codec import DEFAULT_TRUCK_CAPACITY, to_plain_object, from_plain_object
from .schedule import past_history, future_appointments, due_soon_alerts
from .signals import SignalPlayer, LoggingSignalPlayer, play_cue
from .storage import YamlGarageStore
from .repository import Garage, OPERATIONS

__all__ = [
    "ValidationError",
    "DuplicateVehicleError",
    "StorageError",
    "Reason",
    "OperationResult",
    "MaintenanceRecord",
    "Vehicle",
    "VehicleKind",
    "SportsCarState",
    "TruckState",
    "DEFAULT_TRUCK_CAPACITY",
    "to_plain_object",
    "from_plain_object",
    "past_history",
    "future_appointments",
    "due_soon_alerts",
    "SignalPlayer",
    "LoggingSignalPlayer",
    "play_cue",
    "YamlGarageStore",
    "Garage",
    "OPERATIONS",
]
