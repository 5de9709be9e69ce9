#!/usr/bin/env python3
"""Tests for the Garage repository."""

from datetime import datetime, timedelta, timezone

import pytest

from garage import (
    DuplicateVehicleError,
    Garage,
    MaintenanceRecord,
    Reason,
    SignalPlayer,
    Vehicle,
    YamlGarageStore,
    to_plain_object,
)


class RecordingSignalPlayer(SignalPlayer):
    """Collects every cue it is asked to play."""

    def __init__(self):
        self.played = []

    def play(self, kind, event):
        self.played.append((kind, event))


class BrokenSignalPlayer(SignalPlayer):
    def play(self, kind, event):
        raise RuntimeError("speaker unplugged")


@pytest.fixture
def garage():
    return Garage(
        [
            Vehicle.car("Civic", "red", vehicle_id="car"),
            Vehicle.sports_car("911", "yellow", vehicle_id="sports"),
            Vehicle.truck("FH", "white", 1000, vehicle_id="truck"),
        ],
        signals=RecordingSignalPlayer(),
    )


class TestGarageCollection:
    """Tests for add/remove/find."""

    def test_keeps_insertion_order(self, garage):
        assert [v.id for v in garage] == ["car", "sports", "truck"]
        assert len(garage) == 3

    def test_find(self, garage):
        assert garage.find("truck").model == "FH"
        assert garage.find("missing") is None

    def test_add_duplicate_raises(self, garage):
        with pytest.raises(DuplicateVehicleError):
            garage.add(Vehicle.car("Other", "blue", vehicle_id="car"))
        assert len(garage) == 3

    def test_remove(self, garage):
        result = garage.remove("sports")
        assert result.ok
        assert [v.id for v in garage] == ["car", "truck"]

    def test_remove_missing(self, garage):
        result = garage.remove("missing")
        assert result.reason == Reason.NOT_FOUND
        assert len(garage) == 3

    def test_vehicles_is_a_copy(self, garage):
        garage.vehicles.clear()
        assert len(garage) == 3


class TestPerform:
    """Tests for named operation dispatch."""

    def test_runs_operation_and_plays_cue(self, garage):
        result = garage.perform("car", "turn_on")
        assert result.ok
        assert garage.find("car").ignition_on
        assert garage.signals.played == [(garage.find("car").kind, "ignitionStart")]

    def test_operation_with_argument(self, garage):
        assert garage.perform("truck", "load", 600).ok
        assert garage.find("truck").current_load == 600

    def test_failed_operation_plays_nothing(self, garage):
        result = garage.perform("car", "accelerate")
        assert result.reason == Reason.IGNITION_OFF
        assert garage.signals.played == []

    def test_unknown_vehicle(self, garage):
        assert garage.perform("missing", "turn_on").reason == Reason.NOT_FOUND

    def test_unknown_operation_raises(self, garage):
        with pytest.raises(ValueError):
            garage.perform("car", "fly")

    def test_private_methods_not_exposed(self, garage):
        with pytest.raises(ValueError):
            garage.perform("car", "_sort_history")

    def test_remove_maintenance(self, garage):
        record = MaintenanceRecord("2025-01-15", "Oil change", 10)
        garage.find("car").add_maintenance(record)
        assert garage.perform("car", "remove_maintenance", record.id).ok
        assert garage.perform("car", "remove_maintenance", record.id).reason == Reason.NOT_FOUND

    def test_signal_failure_does_not_propagate(self, caplog):
        garage = Garage([Vehicle.car("Civic", "red", vehicle_id="car")], BrokenSignalPlayer())
        result = garage.perform("car", "honk")
        assert result.ok
        assert "speaker unplugged" in caplog.text


class TestPersistence:
    """Tests for from_records / load / save."""

    def test_save_and_reload_three_variants(self, garage, tmp_path):
        """Saving then loading gives back an equal garage."""
        stamp = datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)
        for index, vehicle in enumerate(garage):
            vehicle.add_maintenance(
                MaintenanceRecord(stamp + timedelta(days=index), "Oil change", 40 + index)
            )
        garage.perform("sports", "turn_on")
        garage.perform("sports", "activate_turbo")
        garage.perform("sports", "accelerate")
        garage.perform("truck", "load", 600)

        store = YamlGarageStore(tmp_path / "garage.yaml")
        assert garage.save(store)

        reloaded = Garage.load(store)
        assert reloaded.to_records() == garage.to_records()
        assert [v.kind for v in reloaded] == [v.kind for v in garage]

    def test_from_records_skips_bad_vehicles(self):
        good = to_plain_object(Vehicle.car("Civic", "red", vehicle_id="good"))
        records = [
            {"vehicleType": "Moto", "model": "CB", "color": "red"},
            good,
            {"vehicleType": "Carro", "model": "", "color": "red"},
        ]
        garage = Garage.from_records(records)
        assert [v.id for v in garage] == ["good"]

    def test_from_records_skips_duplicate_ids(self):
        first = to_plain_object(Vehicle.car("Civic", "red", vehicle_id="same"))
        second = to_plain_object(Vehicle.car("Golf", "blue", vehicle_id="same"))
        garage = Garage.from_records([first, second])
        assert len(garage) == 1
        assert garage.find("same").model == "Civic"

    def test_bad_maintenance_field_does_not_abort_load(self, tmp_path):
        """One unreadable record is dropped; every vehicle still loads."""
        path = tmp_path / "garage.yaml"
        path.write_text(
            """
vehicles:
  - vehicleType: Carro
    id: a
    model: Civic
    color: red
  - vehicleType: Carro
    id: b
    model: Golf
    color: blue
    maintenanceHistory:
      - id: m-1
        timestamp: '2025-01-15T10:00:00+00:00'
        serviceType: Oil change
        cost: 45
        description: 2024
      - id: m-2
        timestamp: '2025-02-15T10:00:00+00:00'
        serviceType: Tires
        cost: 300
"""
        )
        garage = Garage.load(YamlGarageStore(path))
        assert [v.id for v in garage] == ["a", "b"]
        assert [m.id for m in garage.find("b").maintenance_history] == ["m-2"]

    def test_vehicle_without_id_keeps_it_across_loads(self, tmp_path):
        path = tmp_path / "garage.yaml"
        path.write_text(
            """
vehicles:
  - vehicleType: Carro
    model: Civic
    color: red
  - vehicleType: Carro
    model: Civic
    color: red
"""
        )
        store = YamlGarageStore(path)
        first = [v.id for v in Garage.load(store)]
        second = [v.id for v in Garage.load(store)]
        assert len(first) == 2
        assert first == second

        garage = Garage.load(store)
        assert garage.perform(first[0], "turn_on").ok
        assert garage.save(store)
        assert Garage.load(store).find(first[0]).ignition_on

    def test_load_missing_file_is_empty(self, tmp_path):
        garage = Garage.load(YamlGarageStore(tmp_path / "none.yaml"))
        assert len(garage) == 0

    def test_due_soon_alerts(self, garage):
        now = datetime(2025, 6, 10, 12, 0, tzinfo=timezone.utc)
        garage.find("car").add_maintenance(
            MaintenanceRecord(now + timedelta(hours=3), "Oil change", 10)
        )
        assert garage.due_soon_alerts(now) == ["TODAY: Car Civic - Oil change at 15:00"]
