"""Tests for the command line application."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from c172perf.main import format_result, main, parse_args
from c172perf.performance.calculator import CalcResult
from c172perf.weather.client import MetarError
from c172perf.weather.metar import SOURCE_AWC, MetarObservation

OBSERVATION = MetarObservation(
    source=SOURCE_AWC,
    station="KPAO",
    obs_time=1700000000,
    temperature_c=20.0,
    altimeter_in_hg=29.92,
    wind_dir_degrees=310.0,
    wind_speed_kt=9.0,
    raw="KPAO 141853Z 31009KT 10SM CLR 20/06 A2992",
)


@pytest.fixture
def run(tmp_path: Path):
    """Run the CLI with logs kept in a temporary directory."""

    def _run(*argv: str) -> int:
        return main(["--log-dir", str(tmp_path / "logs"), *argv])

    return _run


@pytest.fixture
def airports_dir(tmp_path: Path) -> Path:
    """Airport JSON files for KPAO at sea level."""
    directory = tmp_path / "airports"
    directory.mkdir()
    (directory / "airports.json").write_text(json.dumps({"KPAO": {"elevation_ft": 0}}))
    (directory / "runways.json").write_text(
        json.dumps({"KPAO": [{"ident": "13", "heading_degT": 130}, {"ident": "31", "heading_degT": 310}]})
    )
    return directory


class TestArguments:
    """Tests for argument parsing."""

    def test_calc_arguments(self) -> None:
        """Test calc options are parsed."""
        args = parse_args(["calc", "--pa", "1500", "--oat", "22", "--weight-kg", "980", "--dry-grass"])

        assert args.command == "calc"
        assert args.pa == 1500
        assert args.weight_kg == 980
        assert args.weight_lb is None
        assert args.dry_grass

    def test_weights_are_exclusive(self) -> None:
        """Test pounds and kilograms cannot both be given."""
        with pytest.raises(SystemExit):
            parse_args(["calc", "--weight-lb", "2000", "--weight-kg", "900"])

    def test_command_required(self) -> None:
        """Test a subcommand must be given."""
        with pytest.raises(SystemExit):
            parse_args([])


class TestFormatting:
    """Tests for terminal rendering."""

    def test_absent_values_use_placeholder(self) -> None:
        """Test absent values render as a dash, never zero."""
        text = format_result(CalcResult(None, None, 50, 56, ("note",)))

        assert "Ground roll:          — (—)" in text
        assert "liftoff 50 KIAS" in text
        assert "  * note" in text

    def test_metric_alongside_feet(self) -> None:
        """Test distances show meters too."""
        assert "1000 ft (305 m)" in format_result(CalcResult(1000, 1500, 50, 56))


class TestCalcCommand:
    """Tests for the calc subcommand against the packaged table."""

    def test_calc_json(self, run, capsys) -> None:
        """Test a table point is reproduced exactly."""
        assert run("calc", "--pa", "0", "--oat", "20", "--weight-lb", "2300", "--json") == 0

        output = capsys.readouterr().out
        result = json.loads(output)
        assert result == {
            "groundRollFt": 835,
            "toClear50Ft": 1490,
            "liftoffKIAS": 52,
            "at50ftKIAS": 59,
            "notes": [],
        }

    def test_calc_headwind(self, run, capsys) -> None:
        """Test headwind shortens the ground roll."""
        run("calc", "--pa", "0", "--oat", "20", "--weight-lb", "2300", "--wind", "9", "--json")
        assert json.loads(capsys.readouterr().out)["groundRollFt"] < 835

    def test_calc_tailwind_flag(self, run, capsys) -> None:
        """Test --tailwind turns the wind into a tailwind."""
        run("calc", "--pa", "0", "--oat", "20", "--weight-lb", "2300", "--wind", "5", "--tailwind", "--json")
        assert json.loads(capsys.readouterr().out)["groundRollFt"] > 835

    def test_calc_out_of_range_weight(self, run, capsys) -> None:
        """Test an overweight request prints placeholders and the note."""
        assert run("calc", "--weight-lb", "2500") == 0

        output = capsys.readouterr().out
        assert "—" in output
        assert "outside table range 1900-2300 lb" in output

    def test_calc_nan_pressure_altitude(self, run, capsys) -> None:
        """Test a NaN pressure altitude reports no distances instead of failing."""
        assert run("calc", "--pa", "nan", "--weight-lb", "2300", "--json") == 0

        result = json.loads(capsys.readouterr().out)
        assert result["groundRollFt"] is None
        assert result["liftoffKIAS"] == 52
        assert len(result["notes"]) == 1

    def test_calc_defaults(self, run, capsys) -> None:
        """Test defaults (950 kg, sea level, 15 C, calm) give distances."""
        assert run("calc", "--json") == 0
        result = json.loads(capsys.readouterr().out)
        assert result["groundRollFt"] is not None
        assert result["notes"] == []

    def test_calc_bad_table(self, run, tmp_path: Path, capsys) -> None:
        """Test a broken table file exits with status 1."""
        bad = tmp_path / "bad.json"
        bad.write_text("{}", encoding="utf-8")

        assert run("calc", "--table", str(bad)) == 1
        assert "Error:" in capsys.readouterr().err


class TestWeatherCommands:
    """Tests for metar and seed with a mocked client."""

    def test_metar(self, run, capsys) -> None:
        """Test the observation is printed."""
        with patch("c172perf.main.MetarClient") as client_class:
            client = client_class.from_settings.return_value
            client.fetch.return_value = [OBSERVATION]

            assert run("metar", "kpao") == 0

        output = capsys.readouterr().out
        assert "KPAO" in output
        assert "310/9 kt" in output
        assert "29.92 inHg" in output
        client.close.assert_called_once()

    def test_metar_json(self, run, capsys) -> None:
        """Test --json prints the normalized mapping."""
        with patch("c172perf.main.MetarClient") as client_class:
            client_class.from_settings.return_value.fetch.return_value = [OBSERVATION]
            run("metar", "KPAO", "--json")

        assert json.loads(capsys.readouterr().out)[0]["tempC"] == 20.0

    def test_metar_failure(self, run, capsys) -> None:
        """Test an upstream failure exits with status 1."""
        with patch("c172perf.main.MetarClient") as client_class:
            client_class.from_settings.return_value.fetch.side_effect = MetarError("Both failed")

            assert run("metar", "KPAO") == 1

        assert "Both failed" in capsys.readouterr().err

    def test_metar_empty(self, run, capsys) -> None:
        """Test no observation exits with status 1."""
        with patch("c172perf.main.MetarClient") as client_class:
            client_class.from_settings.return_value.fetch.return_value = []

            assert run("metar", "KPAO") == 1

    def test_seed_and_calculate(self, run, airports_dir: Path, capsys) -> None:
        """Test seeding from a METAR and running the calculation."""
        with patch("c172perf.main.MetarClient") as client_class:
            client_class.from_settings.return_value.fetch.return_value = [OBSERVATION]

            code = run(
                "seed", "KPAO", "--runway", "31", "--airports-dir", str(airports_dir),
                "--calculate", "--weight-lb", "2300",
            )

        output = capsys.readouterr().out
        assert code == 0
        assert "Pressure altitude: 0 ft" in output
        assert "9 kt headwind (runway 31)" in output
        assert "Ground roll:" in output

    def test_seed_uses_first_runway(self, run, airports_dir: Path, capsys) -> None:
        """Test the first listed runway is used when none is given."""
        with patch("c172perf.main.MetarClient") as client_class:
            client_class.from_settings.return_value.fetch.return_value = [OBSERVATION]
            run("seed", "KPAO", "--airports-dir", str(airports_dir))

        assert "9 kt tailwind (runway 13)" in capsys.readouterr().out

    def test_seed_missing_airport_data(self, run, tmp_path: Path, capsys) -> None:
        """Test missing airport files still seed the temperature."""
        with patch("c172perf.main.MetarClient") as client_class:
            client_class.from_settings.return_value.fetch.return_value = [OBSERVATION]

            code = run("seed", "KPAO", "--airports-dir", str(tmp_path / "none"))

        output = capsys.readouterr().out
        assert code == 0
        assert "OAT:               20 C" in output
        assert "Pressure altitude: —" in output
        assert "Wind component:    —" in output

    def test_seed_calculate_uses_dry_grass_default(self, run, airports_dir: Path, tmp_path: Path, capsys) -> None:
        """Test the settings dry grass default applies to seeded calculations."""
        config = tmp_path / "settings.yaml"
        config.write_text("defaults:\n  dry_grass: true\n", encoding="utf-8")

        with patch("c172perf.main.MetarClient") as client_class:
            client_class.from_settings.return_value.fetch.return_value = [OBSERVATION]

            code = run(
                "--config", str(config), "seed", "KPAO", "--airports-dir", str(airports_dir),
                "--calculate", "--weight-lb", "2300",
            )

        assert code == 0
        assert "dry grass" in capsys.readouterr().out


class TestBuildRunwayDbCommand:
    """Tests for the build-runway-db subcommand."""

    def test_build_from_local_files(self, run, tmp_path: Path, capsys) -> None:
        """Test local CSVs produce the JSON files."""
        source = tmp_path / "csv"
        source.mkdir()
        (source / "airports.csv").write_text('"ident","elevation_ft"\n"KPAO",7\n', encoding="utf-8")
        (source / "runways.csv").write_text(
            '"airport_ident","le_ident","le_heading_degT","he_ident","he_heading_degT"\n'
            '"KPAO","13",129.8,"31",309.8\n',
            encoding="utf-8",
        )
        out = tmp_path / "out"

        assert run("build-runway-db", "--source-dir", str(source), "--output-dir", str(out)) == 0
        assert "1 airports and 2 runway ends" in capsys.readouterr().out
        assert json.loads((out / "airports.json").read_text())["KPAO"] == {"elevation_ft": 7.0}
