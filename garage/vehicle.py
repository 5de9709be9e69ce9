"""Vehicle class - one tagged type covering every variant in the garage."""

import logging
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

from .calculations import coerce_number, truck_speed_gain, truck_speed_loss
from .errors import ValidationError
from .maintenance import MaintenanceRecord
from .reason import Reason
from .result import OperationResult

logger = logging.getLogger(__name__)


class VehicleKind(Enum):
    """Variant tag. The values are persisted and must never change."""

    CAR = "Carro"
    SPORTS_CAR = "CarroEsportivo"
    TRUCK = "Caminhao"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def slug(self) -> str:
        return _SLUGS[self]

    @classmethod
    def from_label(cls, label: str) -> "VehicleKind":
        """Look up a kind by tag, slug or enum name (case-insensitive)."""
        wanted = label.strip().lower().replace("_", "-")
        for kind in cls:
            if wanted in (kind.value.lower(), kind.slug, kind.name.lower().replace("_", "-")):
                return kind
        raise ValidationError(f"Unknown vehicle type: {label!r}")


_DISPLAY_NAMES = {
    VehicleKind.CAR: "Car",
    VehicleKind.SPORTS_CAR: "Sports Car",
    VehicleKind.TRUCK: "Truck",
}

_SLUGS = {
    VehicleKind.CAR: "car",
    VehicleKind.SPORTS_CAR: "sports-car",
    VehicleKind.TRUCK: "truck",
}

CAR_SPEED_STEP = 10
SPORTS_SPEED_STEP = 15
SPORTS_TURBO_SPEED_STEP = 30
BRAKE_SPEED_STEP = 10


@dataclass
class SportsCarState:
    """Variant payload for sports cars."""

    turbo_on: bool = False


@dataclass
class TruckState:
    """Variant payload for trucks."""

    capacity: float
    current_load: float = 0.0


Payload = Union[SportsCarState, TruckState, None]


def new_vehicle_id() -> str:
    """Generate a vehicle id like ``v-1718000000000-a1b2c3``."""
    return f"v-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


def _require_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Vehicle {field} must be a non-empty string")
    return value.strip()


def _validate_capacity(capacity: Any) -> float:
    value = coerce_number(capacity, default=0)
    if isinstance(capacity, bool) or value <= 0:
        raise ValidationError(f"Truck capacity must be a positive number, got {capacity!r}")
    return value


def _parse_quantity(quantity: Any) -> Optional[float]:
    """Positive float, or None for anything else."""
    if isinstance(quantity, bool):
        return None
    value = coerce_number(quantity, default=0)
    return value if value > 0 else None


class Vehicle:
    """
    A vehicle in the garage.

    The shared core (id, model, color, ignition, speed, maintenance history)
    lives on the instance; variant data lives in ``payload``. Behavior that
    differs per variant dispatches on ``kind``.
    """

    def __init__(
        self,
        kind: VehicleKind,
        model: str,
        color: str,
        payload: Payload = None,
        vehicle_id: Optional[str] = None,
    ):
        if not isinstance(kind, VehicleKind):
            raise ValidationError(f"Unknown vehicle kind: {kind!r}")
        self.kind = kind
        self.id = vehicle_id or new_vehicle_id()
        self.model = _require_text(model, "model")
        self.color = _require_text(color, "color")

        if kind == VehicleKind.SPORTS_CAR:
            payload = payload or SportsCarState()
            if not isinstance(payload, SportsCarState):
                raise ValidationError("Sports car payload must be SportsCarState")
        elif kind == VehicleKind.TRUCK:
            if not isinstance(payload, TruckState):
                raise ValidationError("Truck payload must be TruckState")
            payload = TruckState(capacity=_validate_capacity(payload.capacity))
        elif payload is not None:
            raise ValidationError("Car takes no variant payload")
        self.payload = payload

        self._ignition_on = False
        self._speed = 0.0
        self._history = []

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def car(cls, model: str, color: str, vehicle_id: Optional[str] = None) -> "Vehicle":
        return cls(VehicleKind.CAR, model, color, vehicle_id=vehicle_id)

    @classmethod
    def sports_car(
        cls, model: str, color: str, vehicle_id: Optional[str] = None
    ) -> "Vehicle":
        return cls(VehicleKind.SPORTS_CAR, model, color, SportsCarState(), vehicle_id)

    @classmethod
    def truck(
        cls,
        model: str,
        color: str,
        capacity: Union[float, str],
        vehicle_id: Optional[str] = None,
    ) -> "Vehicle":
        return cls(
            VehicleKind.TRUCK,
            model,
            color,
            TruckState(capacity=_validate_capacity(capacity)),
            vehicle_id,
        )

    @classmethod
    def create(
        cls,
        kind: VehicleKind,
        model: str,
        color: str,
        capacity: Optional[Union[float, str]] = None,
        vehicle_id: Optional[str] = None,
    ) -> "Vehicle":
        """Build any variant from its tag."""
        if kind == VehicleKind.CAR:
            return cls.car(model, color, vehicle_id)
        elif kind == VehicleKind.SPORTS_CAR:
            return cls.sports_car(model, color, vehicle_id)
        elif kind == VehicleKind.TRUCK:
            return cls.truck(model, color, capacity, vehicle_id)
        raise ValidationError(f"Unknown vehicle kind: {kind!r}")

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        """Human-readable name, e.g. 'Truck Volvo FH'."""
        return f"{self.kind.display_name} {self.model}"

    @property
    def ignition_on(self) -> bool:
        return self._ignition_on

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def turbo_on(self) -> bool:
        """Always False for variants without a turbo."""
        if isinstance(self.payload, SportsCarState):
            return self.payload.turbo_on
        return False

    @property
    def capacity(self) -> Optional[float]:
        if isinstance(self.payload, TruckState):
            return self.payload.capacity
        return None

    @property
    def current_load(self) -> Optional[float]:
        if isinstance(self.payload, TruckState):
            return self.payload.current_load
        return None

    @property
    def maintenance_history(self) -> Tuple[MaintenanceRecord, ...]:
        """Records sorted newest first."""
        return tuple(self._history)

    def restore_state(
        self,
        ignition_on: bool = False,
        speed: Any = 0,
        turbo_on: bool = False,
        current_load: Any = 0,
    ) -> None:
        """
        Restore persisted operational state.

        Values are coerced into the valid range rather than rejected:
        negative speed becomes 0 and load is clamped to [0, capacity]. With the
        ignition off the vehicle is stopped and the turbo is off.
        """
        self._ignition_on = bool(ignition_on)
        self._speed = max(0.0, coerce_number(speed)) if self._ignition_on else 0.0
        if isinstance(self.payload, SportsCarState):
            self.payload.turbo_on = bool(turbo_on) and self._ignition_on
        if isinstance(self.payload, TruckState):
            load = coerce_number(current_load)
            clamped = min(max(load, 0.0), self.payload.capacity)
            if clamped != load:
                logger.warning(
                    "Clamped load of %s from %s to %s", self.id, load, clamped
                )
            self.payload.current_load = clamped

    # -------------------------------------------------------------------------
    # Ignition
    # -------------------------------------------------------------------------

    def turn_on(self) -> OperationResult:
        if self._ignition_on:
            return OperationResult.success(f"{self.name} is already on.")
        self._ignition_on = True
        logger.info("%s turned on", self.name)
        return OperationResult.success(f"{self.name} turned on.", cue="ignitionStart")

    def turn_off(self) -> OperationResult:
        if not self._ignition_on:
            return OperationResult.success(f"{self.name} is already off.")
        self._ignition_on = False
        self._speed = 0.0
        if isinstance(self.payload, SportsCarState):
            self.payload.turbo_on = False
        logger.info("%s turned off", self.name)
        return OperationResult.success(f"{self.name} turned off.")

    def _must_be_on(self, action: str) -> OperationResult:
        return OperationResult.failure(
            Reason.IGNITION_OFF,
            f"The {self.kind.display_name.lower()} must be on to {action}.",
        )

    def _unsupported(self, action: str) -> OperationResult:
        return OperationResult.failure(
            Reason.UNSUPPORTED,
            f"A {self.kind.display_name.lower()} cannot {action}.",
        )

    # -------------------------------------------------------------------------
    # Driving
    # -------------------------------------------------------------------------

    def _speed_gain(self) -> float:
        if self.kind == VehicleKind.CAR:
            return CAR_SPEED_STEP
        elif self.kind == VehicleKind.SPORTS_CAR:
            return SPORTS_TURBO_SPEED_STEP if self.turbo_on else SPORTS_SPEED_STEP
        elif self.kind == VehicleKind.TRUCK:
            return truck_speed_gain(self.payload.current_load, self.payload.capacity)
        raise ValueError(f"Unhandled vehicle kind: {self.kind}")

    def _speed_loss(self) -> float:
        if self.kind in (VehicleKind.CAR, VehicleKind.SPORTS_CAR):
            return BRAKE_SPEED_STEP
        elif self.kind == VehicleKind.TRUCK:
            return truck_speed_loss(self.payload.current_load, self.payload.capacity)
        raise ValueError(f"Unhandled vehicle kind: {self.kind}")

    def accelerate(self) -> OperationResult:
        if not self._ignition_on:
            return self._must_be_on("accelerate")
        self._speed += self._speed_gain()
        return OperationResult.success(
            f"{self.name} accelerated to {self._speed:.1f} km/h.", cue="accelerate"
        )

    def brake(self) -> OperationResult:
        if not self._ignition_on:
            return self._must_be_on("brake")
        self._speed = max(0.0, self._speed - self._speed_loss())
        return OperationResult.success(f"{self.name} slowed to {self._speed:.1f} km/h.")

    def honk(self) -> OperationResult:
        return OperationResult.success(f"{self.name} honked.", cue=f"horn-{self.kind.slug}")

    # -------------------------------------------------------------------------
    # Sports car
    # -------------------------------------------------------------------------

    def activate_turbo(self) -> OperationResult:
        if not isinstance(self.payload, SportsCarState):
            return self._unsupported("activate a turbo")
        if not self._ignition_on:
            return self._must_be_on("activate the turbo")
        if self.payload.turbo_on:
            return OperationResult.failure(
                Reason.TURBO_ALREADY_ACTIVE, "The turbo is already active."
            )
        self.payload.turbo_on = True
        return OperationResult.success("Turbo activated.", cue="turbo")

    def deactivate_turbo(self) -> OperationResult:
        if not isinstance(self.payload, SportsCarState):
            return self._unsupported("deactivate a turbo")
        self.payload.turbo_on = False
        return OperationResult.success("Turbo deactivated.")

    # -------------------------------------------------------------------------
    # Truck
    # -------------------------------------------------------------------------

    def load(self, quantity: Any) -> OperationResult:
        if not isinstance(self.payload, TruckState):
            return self._unsupported("carry cargo")
        amount = _parse_quantity(quantity)
        if amount is None:
            return OperationResult.failure(
                Reason.INVALID_QUANTITY, "Quantity to load must be a positive number."
            )
        truck = self.payload
        if truck.current_load + amount > truck.capacity:
            return OperationResult.failure(
                Reason.CAPACITY_EXCEEDED,
                f"Cannot load {amount:g} kg. Maximum capacity of {truck.capacity:g} kg "
                f"exceeded (current load {truck.current_load:g} kg).",
            )
        truck.current_load += amount
        return OperationResult.success(
            f"Loaded {amount:g} kg. Current load: {truck.current_load:g} kg."
        )

    def unload(self, quantity: Any) -> OperationResult:
        if not isinstance(self.payload, TruckState):
            return self._unsupported("carry cargo")
        amount = _parse_quantity(quantity)
        if amount is None:
            return OperationResult.failure(
                Reason.INVALID_QUANTITY, "Quantity to unload must be a positive number."
            )
        truck = self.payload
        if truck.current_load - amount < 0:
            return OperationResult.failure(
                Reason.INSUFFICIENT_LOAD,
                f"Cannot unload {amount:g} kg. Current load is only "
                f"{truck.current_load:g} kg.",
            )
        truck.current_load -= amount
        return OperationResult.success(
            f"Unloaded {amount:g} kg. Current load: {truck.current_load:g} kg."
        )

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def _sort_history(self) -> None:
        self._history.sort(key=lambda m: m.timestamp, reverse=True)

    def add_maintenance(self, record: MaintenanceRecord) -> OperationResult:
        """Add a record and keep the history sorted newest first."""
        if not isinstance(record, MaintenanceRecord):
            return OperationResult.failure(
                Reason.INVALID_RECORD, "Only maintenance records can be added."
            )
        self._history.append(record)
        self._sort_history()
        return OperationResult.success(f"Added {record.service_type} to {self.name}.")

    def remove_maintenance(self, record_id: str) -> OperationResult:
        for index, record in enumerate(self._history):
            if record.id == record_id:
                del self._history[index]
                return OperationResult.success(
                    f"Removed {record.service_type} from {self.name}."
                )
        return OperationResult.failure(
            Reason.NOT_FOUND, f"Maintenance record '{record_id}' not found."
        )

    def get_maintenance(self, record_id: str) -> Optional[MaintenanceRecord]:
        """Find a maintenance record by id."""
        for record in self._history:
            if record.id == record_id:
                return record
        return None

    def __repr__(self) -> str:
        return f"Vehicle(kind={self.kind.name}, id={self.id!r}, model={self.model!r})"
