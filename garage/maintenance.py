"""MaintenanceRecord class for service events."""

import time
import uuid
from datetime import date, datetime
from typing import Optional, Union

from .calculations import coerce_number, parse_timestamp
from .errors import ValidationError


def new_record_id() -> str:
    """Generate a record id like ``m-1718000000000-a1b2c3``."""
    return f"m-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


class MaintenanceRecord:
    """A past service or a scheduled appointment. Read-only once created."""

    __slots__ = ("_id", "_timestamp", "_service_type", "_cost", "_description")

    def __init__(
        self,
        timestamp: Union[str, date, datetime],
        service_type: str,
        cost: Union[float, str],
        description: Optional[str] = None,
        record_id: Optional[str] = None,
    ):
        parsed = parse_timestamp(timestamp)
        if parsed is None:
            raise ValidationError(f"Invalid maintenance timestamp: {timestamp!r}")
        if not isinstance(service_type, str) or not service_type.strip():
            raise ValidationError("Service type must be a non-empty string")
        cost_value = coerce_number(cost, default=-1)
        if isinstance(cost, bool) or cost_value < 0:
            raise ValidationError(f"Invalid maintenance cost: {cost!r}")
        if description is not None and not isinstance(description, str):
            raise ValidationError(f"Invalid maintenance description: {description!r}")

        self._id = record_id or new_record_id()
        self._timestamp = parsed
        self._service_type = service_type.strip()
        self._cost = cost_value
        self._description = (description or "").strip()

    @property
    def id(self) -> str:
        return self._id

    @property
    def timestamp(self) -> datetime:
        """Aware UTC datetime."""
        return self._timestamp

    @property
    def service_type(self) -> str:
        return self._service_type

    @property
    def cost(self) -> float:
        return self._cost

    @property
    def description(self) -> str:
        return self._description

    def is_future(self, now: datetime) -> bool:
        """True when the record is scheduled strictly after ``now``."""
        return self._timestamp > now

    def __repr__(self) -> str:
        return (
            f"MaintenanceRecord(id={self._id!r}, "
            f"timestamp={self._timestamp.isoformat()!r}, "
            f"service_type={self._service_type!r}, cost={self._cost!r})"
        )
