#!/usr/bin/env python3
"""Tests for garagectl CLI formatting helpers and commands."""

from datetime import date, timedelta

import pytest

from garage import Garage, Vehicle, YamlGarageStore
from garagectl import (
    format_ignition,
    format_load,
    format_speed,
    main,
    make_garage_table,
    operation_name,
    truncate,
)


class TestFormatHelpers:
    """Tests for formatting helpers."""

    def test_format_speed(self):
        assert format_speed(0) == "0.0 km/h"
        assert format_speed(2.5) == "2.5 km/h"

    def test_format_load(self):
        truck = Vehicle.truck("FH", "white", 10000)
        truck.load(2500)
        assert format_load(truck) == "2,500 / 10,000 kg"
        assert format_load(Vehicle.car("Civic", "red")) == "-"

    def test_format_ignition(self):
        sports = Vehicle.sports_car("911", "yellow")
        assert format_ignition(sports) == "off"
        sports.turn_on()
        sports.activate_turbo()
        assert format_ignition(sports) == "on (turbo)"

    def test_truncate(self):
        assert truncate(None) == "-"
        assert truncate("short") == "short"
        assert truncate("hello world", max_len=8) == "hello..."

    def test_operation_name(self):
        assert operation_name("turn-on") == "turn_on"
        assert operation_name("accelerate") == "accelerate"


class TestMakeGarageTable:
    """Tests for make_garage_table."""

    def test_empty_list_returns_empty_rows(self):
        assert make_garage_table([]) == []

    def test_single_vehicle_row(self):
        truck = Vehicle.truck("FH", "white", 1000, vehicle_id="v-1")
        truck.turn_on()
        truck.accelerate()
        rows = make_garage_table([truck])
        assert rows == [["v-1", "Truck", "FH", "white", "on", "5.0 km/h", "0 / 1,000 kg"]]


class TestCommands:
    """End-to-end tests running main() against a temporary garage file."""

    @pytest.fixture
    def garage_file(self, tmp_path):
        path = tmp_path / "garage.yaml"
        garage = Garage(
            [
                Vehicle.car("Civic", "red", vehicle_id="car"),
                Vehicle.truck("FH", "white", 1000, vehicle_id="truck"),
            ]
        )
        garage.save(YamlGarageStore(path))
        return path

    def reload(self, path):
        return Garage.load(YamlGarageStore(path))

    def test_list(self, garage_file, capsys):
        assert main([str(garage_file), "list"]) == 0
        out = capsys.readouterr().out
        assert "Civic" in out
        assert "FH" in out

    def test_list_empty(self, tmp_path, capsys):
        assert main([str(tmp_path / "new.yaml"), "list"]) == 0
        assert "No vehicles" in capsys.readouterr().out

    def test_add_truck(self, tmp_path, capsys):
        path = tmp_path / "new.yaml"
        assert main([str(path), "add", "truck", "Actros", "blue", "--capacity", "5000"]) == 0
        garage = self.reload(path)
        assert len(garage) == 1
        assert garage.vehicles[0].capacity == 5000

    def test_add_truck_without_capacity_fails(self, tmp_path, capsys):
        path = tmp_path / "new.yaml"
        assert main([str(path), "add", "truck", "Actros", "blue"]) == 1
        assert "Error" in capsys.readouterr().out
        assert not path.exists()

    def test_add_unknown_type_fails(self, tmp_path):
        assert main([str(tmp_path / "new.yaml"), "add", "boat", "X", "blue"]) == 1

    def test_remove(self, garage_file):
        assert main([str(garage_file), "remove", "car"]) == 0
        assert self.reload(garage_file).find("car") is None

    def test_remove_missing(self, garage_file, capsys):
        assert main([str(garage_file), "remove", "nope"]) == 1
        assert "not found" in capsys.readouterr().out

    def test_op_sequence_persists(self, garage_file):
        assert main([str(garage_file), "op", "car", "turn-on"]) == 0
        assert main([str(garage_file), "op", "car", "accelerate"]) == 0
        assert main([str(garage_file), "op", "car", "accelerate"]) == 0
        car = self.reload(garage_file).find("car")
        assert car.ignition_on
        assert car.speed == 20

    def test_op_refused(self, garage_file, capsys):
        assert main([str(garage_file), "op", "car", "accelerate"]) == 1
        assert "must be on" in capsys.readouterr().out

    def test_op_load(self, garage_file):
        assert main([str(garage_file), "op", "truck", "load", "600"]) == 0
        assert main([str(garage_file), "op", "truck", "load", "500"]) == 1
        assert self.reload(garage_file).find("truck").current_load == 600

    def test_op_load_needs_quantity(self, garage_file, capsys):
        assert main([str(garage_file), "op", "truck", "load"]) == 1
        assert "quantity" in capsys.readouterr().out

    def test_log_and_unlog(self, garage_file, capsys):
        assert main(
            [
                str(garage_file),
                "log",
                "car",
                "Oil change",
                "--cost",
                "45",
                "--date",
                "2025-01-15",
                "--time",
                "10:30",
            ]
        ) == 0
        car = self.reload(garage_file).find("car")
        assert len(car.maintenance_history) == 1
        record_id = car.maintenance_history[0].id

        assert main([str(garage_file), "unlog", "car", record_id]) == 0
        assert self.reload(garage_file).find("car").maintenance_history == ()

    def test_log_dry_run(self, garage_file, capsys):
        assert main(
            [str(garage_file), "log", "car", "Oil change", "--cost", "45", "--dry-run"]
        ) == 0
        assert "dry run" in capsys.readouterr().out
        assert self.reload(garage_file).find("car").maintenance_history == ()

    def test_log_invalid_cost(self, garage_file, capsys):
        assert main([str(garage_file), "log", "car", "Oil change", "--cost", "-5"]) == 1
        assert "Error" in capsys.readouterr().out

    def test_log_invalid_date(self, garage_file):
        assert main(
            [str(garage_file), "log", "car", "Oil", "--cost", "5", "--date", "someday"]
        ) == 1

    def test_history_and_show(self, garage_file, capsys):
        main([str(garage_file), "log", "car", "Oil change", "--cost", "45", "--date", "2020-01-01"])
        capsys.readouterr()

        assert main([str(garage_file), "history", "car"]) == 0
        out = capsys.readouterr().out
        assert "Oil change on 2020-01-01" in out
        assert "No appointments." in out

        assert main([str(garage_file), "show", "truck"]) == 0
        assert "Load:" in capsys.readouterr().out

    def test_show_missing(self, garage_file):
        assert main([str(garage_file), "show", "nope"]) == 1

    def test_alerts(self, garage_file, capsys):
        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        main([str(garage_file), "log", "car", "Tires", "--cost", "0", "--date", tomorrow, "--time", "09:00"])
        capsys.readouterr()

        assert main([str(garage_file), "alerts"]) == 0
        assert "TOMORROW: Car Civic - Tires at 09:00" in capsys.readouterr().out

    def test_corrupt_file(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("vehicles: [unclosed\n")
        assert main([str(path), "list"]) == 1
        assert "Error" in capsys.readouterr().out
