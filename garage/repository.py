"""Garage - the ordered collection of vehicles and its persistence."""

import logging
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from .codec import from_plain_object, to_plain_object
from .errors import DuplicateVehicleError
from .reason import Reason
from .result import OperationResult
from .schedule import due_soon_alerts
from .signals import LoggingSignalPlayer, SignalPlayer, play_cue
from .storage import YamlGarageStore
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

# Operations a trigger (CLI, web request) may run by name.
OPERATIONS = (
    "turn_on",
    "turn_off",
    "accelerate",
    "brake",
    "honk",
    "activate_turbo",
    "deactivate_turbo",
    "load",
    "unload",
    "remove_maintenance",
)

# Operations that take one argument.
OPERATIONS_WITH_ARGUMENT = ("load", "unload", "remove_maintenance")


class Garage:
    """Vehicles in insertion order, looked up by id."""

    def __init__(
        self,
        vehicles: Optional[List[Vehicle]] = None,
        signals: Optional[SignalPlayer] = None,
    ):
        self._vehicles: List[Vehicle] = []
        self.signals = signals or LoggingSignalPlayer()
        for vehicle in vehicles or []:
            self.add(vehicle)

    def __iter__(self) -> Iterator[Vehicle]:
        return iter(list(self._vehicles))

    def __len__(self) -> int:
        return len(self._vehicles)

    @property
    def vehicles(self) -> List[Vehicle]:
        return list(self._vehicles)

    def find(self, vehicle_id: str) -> Optional[Vehicle]:
        """Find a vehicle by id."""
        for vehicle in self._vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        return None

    def add(self, vehicle: Vehicle) -> Vehicle:
        if self.find(vehicle.id) is not None:
            raise DuplicateVehicleError(f"Vehicle '{vehicle.id}' is already in the garage")
        self._vehicles.append(vehicle)
        return vehicle

    def remove(self, vehicle_id: str) -> OperationResult:
        vehicle = self.find(vehicle_id)
        if vehicle is None:
            return _not_found(vehicle_id)
        self._vehicles.remove(vehicle)
        return OperationResult.success(f"{vehicle.name} removed.")

    def perform(self, vehicle_id: str, operation: str, *args: Any) -> OperationResult:
        """
        Run a named operation on one vehicle and play its cue.

        Raises ValueError for operation names outside OPERATIONS; an unknown
        vehicle id is reported as NOT_FOUND.
        """
        if operation not in OPERATIONS:
            raise ValueError(f"Unknown operation: {operation}")
        vehicle = self.find(vehicle_id)
        if vehicle is None:
            return _not_found(vehicle_id)

        result = getattr(vehicle, operation)(*args)
        if result.ok and result.cue:
            play_cue(self.signals, vehicle.kind, result.cue)
        return result

    def due_soon_alerts(self, now: Optional[datetime] = None) -> List[str]:
        return due_soon_alerts(self._vehicles, now)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def to_records(self) -> List[Dict[str, Any]]:
        return [to_plain_object(v) for v in self._vehicles]

    @classmethod
    def from_records(
        cls, records: List[Dict[str, Any]], signals: Optional[SignalPlayer] = None
    ) -> "Garage":
        """
        Rebuild a garage from plain records.

        Vehicles that fail to rebuild, or repeat an id already loaded, are
        skipped so the rest of the garage still loads.
        """
        garage = cls(signals=signals)
        for position, dct in enumerate(records):
            vehicle = from_plain_object(dct, position)
            if vehicle is None:
                continue
            try:
                garage.add(vehicle)
            except DuplicateVehicleError as e:
                logger.error("Skipping vehicle: %s", e)
        skipped = len(records) - len(garage)
        if skipped:
            logger.warning("Loaded %d vehicles, skipped %d", len(garage), skipped)
        return garage

    @classmethod
    def load(
        cls, store: YamlGarageStore, signals: Optional[SignalPlayer] = None
    ) -> "Garage":
        return cls.from_records(store.load_all(), signals)

    def save(self, store: YamlGarageStore) -> bool:
        """Write the full snapshot. Returns the store's success flag."""
        return store.save_all(self.to_records())


def _not_found(vehicle_id: str) -> OperationResult:
    return OperationResult.failure(Reason.NOT_FOUND, f"Vehicle '{vehicle_id}' not found.")
