"""Reason enum for operations that could not be carried out."""

from enum import Enum


class Reason(Enum):
    """Why an operation was refused. The vehicle state is left unchanged."""

    IGNITION_OFF = "ignition_off"
    TURBO_ALREADY_ACTIVE = "turbo_already_active"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    INSUFFICIENT_LOAD = "insufficient_load"
    INVALID_QUANTITY = "invalid_quantity"
    INVALID_RECORD = "invalid_record"
    NOT_FOUND = "not_found"
    UNSUPPORTED = "unsupported"  # Operation doesn't exist for this variant
