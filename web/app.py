"""Flask JSON API for the garage."""

import logging
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request

from garage import (
    Garage,
    MaintenanceRecord,
    OPERATIONS,
    Reason,
    StorageError,
    ValidationError,
    Vehicle,
    VehicleKind,
    YamlGarageStore,
    future_appointments,
    past_history,
    to_plain_object,
)
from garage.calculations import parse_local_timestamp
from garage.config import LOG_FORMAT, Settings
from garage.repository import OPERATIONS_WITH_ARGUMENT
from garage.result import OperationResult

settings = Settings.from_env()
logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = settings.secret_key
app.config["GARAGE_FILE"] = settings.garage_file


def get_store() -> YamlGarageStore:
    """Store for the configured garage file."""
    return YamlGarageStore(app.config["GARAGE_FILE"])


def load_garage() -> Tuple[Garage, YamlGarageStore]:
    store = get_store()
    return Garage.load(store), store


def error(message: str, status: int, reason: Reason = None):
    """JSON error response."""
    body: Dict[str, Any] = {"error": message}
    if reason is not None:
        body["reason"] = reason.value
    return jsonify(body), status


def result_response(result: OperationResult, vehicle: Vehicle = None):
    """Map an OperationResult to a JSON response."""
    if not result.ok:
        status = 404 if result.reason == Reason.NOT_FOUND else 409
        return error(result.message, status, result.reason)
    body: Dict[str, Any] = {"message": result.message}
    if vehicle is not None:
        body["vehicle"] = to_plain_object(vehicle)
    return jsonify(body)


def json_body() -> Optional[Dict[str, Any]]:
    """Request JSON as a dict. Empty without a body, None for non-objects."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def save_failed():
    return error("Could not save the garage.", 500)


@app.errorhandler(StorageError)
def handle_storage_error(e):
    logger.error("Storage error: %s", e)
    return error(str(e), 500)


@app.errorhandler(404)
def handle_not_found(e):
    return error("Route not found.", 404)


@app.route("/api/vehicles", methods=["GET"])
def list_vehicles():
    """Every vehicle in the garage."""
    garage, _ = load_garage()
    return jsonify(garage.to_records())


@app.route("/api/vehicles", methods=["POST"])
def add_vehicle():
    """Create a vehicle from JSON: vehicleType, model, color, capacity."""
    data = json_body()
    if data is None:
        return error("Request body must be a JSON object.", 400)
    try:
        kind = VehicleKind.from_label(str(data.get("vehicleType", "")))
        vehicle = Vehicle.create(
            kind, data.get("model"), data.get("color"), capacity=data.get("capacity")
        )
    except ValidationError as e:
        return error(str(e), 400)

    garage, store = load_garage()
    garage.add(vehicle)
    if not garage.save(store):
        return save_failed()
    return jsonify(to_plain_object(vehicle)), 201


@app.route("/api/vehicles/<vehicle_id>", methods=["GET"])
def get_vehicle(vehicle_id: str):
    garage, _ = load_garage()
    vehicle = garage.find(vehicle_id)
    if vehicle is None:
        return error(f"Vehicle '{vehicle_id}' not found.", 404, Reason.NOT_FOUND)
    return jsonify(to_plain_object(vehicle))


@app.route("/api/vehicles/<vehicle_id>", methods=["DELETE"])
def delete_vehicle(vehicle_id: str):
    garage, store = load_garage()
    result = garage.remove(vehicle_id)
    if result.ok and not garage.save(store):
        return save_failed()
    return result_response(result)


@app.route("/api/vehicles/<vehicle_id>/operations/<operation>", methods=["POST"])
def run_operation(vehicle_id: str, operation: str):
    """Run one operation; load/unload read ``quantity`` from the JSON body."""
    operation = operation.replace("-", "_")
    if operation not in OPERATIONS or operation == "remove_maintenance":
        return error(f"Unknown operation: {operation}", 400)

    params = []
    if operation in OPERATIONS_WITH_ARGUMENT:
        data = json_body()
        if data is None:
            return error("Request body must be a JSON object.", 400)
        params.append(data.get("quantity"))

    garage, store = load_garage()
    result = garage.perform(vehicle_id, operation, *params)
    if result.ok and not garage.save(store):
        return save_failed()
    return result_response(result, garage.find(vehicle_id))


@app.route("/api/vehicles/<vehicle_id>/maintenance", methods=["POST"])
def add_maintenance(vehicle_id: str):
    """Add a record from JSON: date, time, serviceType, cost, description."""
    data = json_body()
    if data is None:
        return error("Request body must be a JSON object.", 400)
    garage, store = load_garage()
    vehicle = garage.find(vehicle_id)
    if vehicle is None:
        return error(f"Vehicle '{vehicle_id}' not found.", 404, Reason.NOT_FOUND)

    clock = data.get("time")
    timestamp = parse_local_timestamp(
        str(data.get("date") or ""), str(clock) if clock else None
    )
    if timestamp is None:
        return error("A valid date is required.", 400)
    try:
        record = MaintenanceRecord(
            timestamp, data.get("serviceType"), data.get("cost"), data.get("description")
        )
    except ValidationError as e:
        return error(str(e), 400)

    vehicle.add_maintenance(record)
    if not garage.save(store):
        return save_failed()
    return jsonify(to_plain_object(vehicle)), 201


@app.route(
    "/api/vehicles/<vehicle_id>/maintenance/<record_id>", methods=["DELETE"]
)
def delete_maintenance(vehicle_id: str, record_id: str):
    garage, store = load_garage()
    result = garage.perform(vehicle_id, "remove_maintenance", record_id)
    if result.ok and not garage.save(store):
        return save_failed()
    return result_response(result, garage.find(vehicle_id))


@app.route("/api/vehicles/<vehicle_id>/schedule", methods=["GET"])
def vehicle_schedule(vehicle_id: str):
    """Past history (newest first) and appointments (next first)."""
    garage, _ = load_garage()
    vehicle = garage.find(vehicle_id)
    if vehicle is None:
        return error(f"Vehicle '{vehicle_id}' not found.", 404, Reason.NOT_FOUND)
    return jsonify(
        {
            "history": [
                {"id": line.record_id, "text": line.text}
                for line in past_history(vehicle)
            ],
            "appointments": [
                {"id": line.record_id, "text": line.text}
                for line in future_appointments(vehicle)
            ],
        }
    )


@app.route("/api/alerts", methods=["GET"])
def alerts():
    """Appointments due today or tomorrow across the garage."""
    garage, _ = load_garage()
    return jsonify({"alerts": garage.due_soon_alerts()})


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
