"""Exception types raised by the garage domain model."""


class ValidationError(ValueError):
    """Invalid input when constructing a vehicle or maintenance record."""


class DuplicateVehicleError(ValueError):
    """A vehicle with the same id is already in the garage."""


class StorageError(Exception):
    """The garage file could not be read or parsed."""
