"""C172M takeoff performance command line tool.

Computes ground roll and 50 ft obstacle distances from the digitized POH
table, fetches current METARs, and builds the local airport/runway database.

Typical usage:
    c172perf calc --pa 1500 --oat 22 --weight-kg 980 --wind 8
    c172perf metar EGLL
    c172perf seed KPAO --runway 31 --calculate --weight-lb 2200
    c172perf build-runway-db --source-dir downloads/
"""

import argparse
import json
import sys
from pathlib import Path

from c172perf.airports.database import AirportDatabase, AirportDataError, build_runway_db
from c172perf.aviation.units import kg_from_lb, lb_from_kg, m_from_ft
from c172perf.core.config import ConfigError, ConfigLoader, load_settings
from c172perf.core.logging_system import (
    LoggingError,
    get_logger,
    initialize_logging,
    shutdown_logging,
)
from c172perf.core.resource_path import get_config_path, get_resource_path
from c172perf.performance.calculator import CalcRequest, CalcResult, TakeoffCalculator
from c172perf.performance.conditions import ConditionSeed, seed_conditions
from c172perf.performance.table import TableError, load_table
from c172perf.weather.client import MetarClient, MetarError
from c172perf.weather.metar import MetarObservation

PLACEHOLDER = "—"


def _fmt(value: object, unit: str = "") -> str:
    if value is None:
        return PLACEHOLDER
    return f"{value} {unit}".rstrip()


def format_result(result: CalcResult) -> str:
    """Render a result for the terminal, with metric distances alongside feet."""
    lines = [
        f"Ground roll:          {_fmt(result.ground_roll_ft, 'ft')} "
        f"({_fmt(m_from_ft(result.ground_roll_ft), 'm')})",
        f"Over 50 ft obstacle:  {_fmt(result.to_clear_50ft_ft, 'ft')} "
        f"({_fmt(m_from_ft(result.to_clear_50ft_ft), 'm')})",
        f"Reference speeds:     liftoff {_fmt(result.liftoff_kias, 'KIAS')}, "
        f"at 50 ft {_fmt(result.at_50ft_kias, 'KIAS')}",
    ]
    for note in result.notes:
        lines.append(f"  * {note}")
    return "\n".join(lines)


def format_observation(obs: MetarObservation) -> str:
    """Render a normalized METAR for the terminal."""
    observed = obs.observed_at.strftime("%Y-%m-%d %H:%MZ") if obs.observed_at else PLACEHOLDER
    wind_dir = "VRB" if obs.wind_dir_degrees is None else f"{obs.wind_dir_degrees:03.0f}"
    wind = PLACEHOLDER
    if obs.wind_speed_kt is not None:
        wind = f"{wind_dir}/{obs.wind_speed_kt:g} kt"
        if obs.wind_gust_kt is not None:
            wind += f" gusting {obs.wind_gust_kt:g}"
    altimeter = PLACEHOLDER if obs.altimeter_in_hg is None else f"{obs.altimeter_in_hg:.2f} inHg"
    return "\n".join(
        [
            f"Station:     {_fmt(obs.station)} ({obs.source})",
            f"Observed:    {observed}",
            f"Temperature: {_fmt(obs.temperature_c, 'C')}",
            f"Altimeter:   {altimeter}",
            f"Wind:        {wind}",
            f"Raw:         {_fmt(obs.raw)}",
        ]
    )


def format_seed(seed: ConditionSeed) -> str:
    """Render seeded calculator inputs for the terminal."""
    wind = PLACEHOLDER
    if seed.wind_kt is not None:
        kind = "headwind" if seed.wind_kt >= 0 else "tailwind"
        wind = f"{abs(seed.wind_kt)} kt {kind} (runway {seed.runway})"
    return "\n".join(
        [
            f"OAT:               {_fmt(seed.oat_c, 'C')}",
            f"Pressure altitude: {_fmt(seed.pressure_altitude_ft, 'ft')}",
            f"Wind component:    {wind}",
        ]
    )


class PerformanceApp:
    """Command dispatcher for the c172perf tool.

    Loads settings and sets up logging once, then runs one subcommand.
    """

    def __init__(
        self,
        args: argparse.Namespace,
        settings: ConfigLoader | None = None,
        metar_client: MetarClient | None = None,
    ) -> None:
        """Initialize the application.

        Args:
            args: Parsed command line arguments.
            settings: Settings to use instead of loading config/settings.yaml.
            metar_client: Client to use instead of one built from settings.
        """
        self.args = args

        logging_config = get_config_path("logging.yaml")
        log_dir = getattr(args, "log_dir", None)
        if logging_config.exists():
            initialize_logging(str(logging_config), use_platform_dir=log_dir is None, log_dir=log_dir)
        else:
            initialize_logging(use_platform_dir=log_dir is None, log_dir=log_dir)
        self._log = get_logger("c172perf.main")

        self.settings = settings or load_settings(getattr(args, "config", None))
        self._metar_client = metar_client

    @property
    def metar_client(self) -> MetarClient:
        """METAR client, created from settings on first use."""
        if self._metar_client is None:
            self._metar_client = MetarClient.from_settings(self.settings)
        return self._metar_client

    def run(self) -> int:
        """Run the selected subcommand.

        Returns:
            Exit code (0 for success, 1 for a handled error).
        """
        handlers = {
            "calc": self.cmd_calc,
            "metar": self.cmd_metar,
            "seed": self.cmd_seed,
            "build-runway-db": self.cmd_build_runway_db,
        }
        try:
            return handlers[self.args.command]()
        except (TableError, MetarError, AirportDataError, ConfigError) as e:
            self._log.error("%s failed: %s", self.args.command, e)
            print(f"Error: {e}", file=sys.stderr)
            return 1
        finally:
            if self._metar_client is not None:
                self._metar_client.close()

    def _calculator(self) -> TakeoffCalculator:
        table_path = self.args.table or self.settings.get("performance.table")
        return TakeoffCalculator(load_table(get_resource_path(table_path)))

    def _weight_lb(self) -> float:
        if self.args.weight_lb is not None:
            return self.args.weight_lb
        if self.args.weight_kg is not None:
            return lb_from_kg(self.args.weight_kg)
        return lb_from_kg(self.settings.get("defaults.weight_kg", 950))

    def _wind_kt(self) -> float:
        wind = self.args.wind
        if wind is None:
            wind = self.settings.get("defaults.wind_kt", 0)
        return -abs(wind) if self.args.tailwind else wind

    def _print_calculation(self, request: CalcRequest, result: CalcResult) -> None:
        self._log.info(
            "Calculated PA=%g ft OAT=%g C W=%.0f lb wind=%+g kt grass=%s -> roll=%s 50ft=%s",
            request.pressure_altitude_ft,
            request.oat_c,
            request.weight_lb,
            request.wind_kt,
            request.dry_grass,
            result.ground_roll_ft,
            result.to_clear_50ft_ft,
        )
        if self.args.json:
            payload = {
                "groundRollFt": result.ground_roll_ft,
                "toClear50Ft": result.to_clear_50ft_ft,
                "liftoffKIAS": result.liftoff_kias,
                "at50ftKIAS": result.at_50ft_kias,
                "notes": list(result.notes),
            }
            print(json.dumps(payload, indent=2))
        else:
            print(
                f"PA {request.pressure_altitude_ft:g} ft, OAT {request.oat_c:g} C, "
                f"{request.weight_lb:.0f} lb ({kg_from_lb(request.weight_lb):.0f} kg), "
                f"wind {request.wind_kt:+g} kt, {'dry grass' if request.dry_grass else 'paved'}"
            )
            print(format_result(result))

    def cmd_calc(self) -> int:
        """Compute takeoff distances from explicit inputs."""
        defaults = self.settings
        pressure_altitude = self.args.pa
        if pressure_altitude is None:
            pressure_altitude = defaults.get("defaults.pressure_altitude_ft", 0)
        oat = self.args.oat
        if oat is None:
            oat = defaults.get("defaults.oat_c", 15)

        request = CalcRequest(
            pressure_altitude_ft=pressure_altitude,
            oat_c=oat,
            weight_lb=self._weight_lb(),
            wind_kt=self._wind_kt(),
            dry_grass=self.args.dry_grass or bool(defaults.get("defaults.dry_grass", False)),
        )
        result = self._calculator().calculate(request)
        self._print_calculation(request, result)
        return 0

    def cmd_metar(self) -> int:
        """Fetch and print the current METAR."""
        observations = self.metar_client.fetch(self.args.icao)
        if not observations:
            self._log.warning("No METAR available for %s", self.args.icao)
            print(f"No METAR available for {self.args.icao.upper()}")
            return 1

        if self.args.json:
            print(json.dumps([obs.to_dict() for obs in observations], indent=2))
        else:
            print("\n\n".join(format_observation(obs) for obs in observations))
        return 0

    def _airport_db(self) -> AirportDatabase:
        """Load the runway database, or an empty one when it is unavailable."""
        data_dir = self.args.airports_dir or self.settings.get("airports.data_dir")
        db = AirportDatabase()
        try:
            db.load_from_json(get_resource_path(data_dir))
        except AirportDataError as e:
            self._log.warning("Seeding without airport data: %s", e)
        return db

    def cmd_seed(self) -> int:
        """Derive calculator inputs from the METAR, optionally calculating."""
        icao = self.args.icao.upper()
        observations = self.metar_client.fetch(icao)
        if not observations:
            print(f"No METAR available for {icao}")
            return 1
        observation = observations[0]

        db = self._airport_db()
        airport = db.get_airport(icao)
        if airport is None:
            self._log.warning("Airport %s not in database, pressure altitude unavailable", icao)

        runways = db.get_runways(icao)
        runway = None
        if self.args.runway:
            runway = db.get_runway(icao, self.args.runway)
            if runway is None:
                self._log.warning("Runway %s not found at %s", self.args.runway, icao)
        elif runways:
            runway = runways[0]

        seed = seed_conditions(observation, airport, runway)
        print(format_observation(observation))
        print()
        print(format_seed(seed))

        if not self.args.calculate:
            return 0

        pressure_altitude = seed.pressure_altitude_ft
        if pressure_altitude is None:
            pressure_altitude = self.settings.get("defaults.pressure_altitude_ft", 0)
        oat = seed.oat_c
        if oat is None:
            oat = self.settings.get("defaults.oat_c", 15)
        wind = seed.wind_kt if seed.wind_kt is not None else self.settings.get("defaults.wind_kt", 0)

        request = CalcRequest(
            pressure_altitude_ft=pressure_altitude,
            oat_c=oat,
            weight_lb=self._weight_lb(),
            wind_kt=wind,
            dry_grass=self.args.dry_grass or bool(self.settings.get("defaults.dry_grass", False)),
        )
        print()
        self._print_calculation(request, self._calculator().calculate(request))
        return 0

    def cmd_build_runway_db(self) -> int:
        """Build airports.json and runways.json from OurAirports CSVs."""
        output_dir = self.args.output_dir or self.settings.get("airports.data_dir")
        db = build_runway_db(
            get_resource_path(output_dir),
            source_dir=self.args.source_dir,
            sources=self.settings.get("airports.sources", {}),
        )
        runway_count = sum(len(ends) for ends in db.runways.values())
        print(f"Wrote {db.get_airport_count()} airports and {runway_count} runway ends to {output_dir}")
        return 0


def _add_calc_options(parser: argparse.ArgumentParser) -> None:
    weight = parser.add_mutually_exclusive_group()
    weight.add_argument("--weight-lb", type=float, help="Takeoff weight in pounds")
    weight.add_argument("--weight-kg", type=float, help="Takeoff weight in kilograms")
    parser.add_argument("--dry-grass", action="store_true", help="Dry grass runway")
    parser.add_argument("--table", type=str, help="Performance table JSON (default from settings)")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="c172perf", description="Cessna 172M takeoff performance from the POH tables"
    )
    parser.add_argument("--config", type=Path, help="Settings YAML (default config/settings.yaml)")
    parser.add_argument("--log-dir", type=Path, help="Write logs here instead of the platform log dir")
    subparsers = parser.add_subparsers(dest="command", required=True)

    calc = subparsers.add_parser("calc", help="Compute takeoff distances")
    calc.add_argument("--pa", type=float, help="Pressure altitude in feet")
    calc.add_argument("--oat", type=float, help="Outside air temperature in deg C")
    calc.add_argument("--wind", type=float, help="Wind component in kt (+ headwind, - tailwind)")
    calc.add_argument("--tailwind", action="store_true", help="Treat --wind as a tailwind")
    _add_calc_options(calc)

    metar = subparsers.add_parser("metar", help="Fetch the current METAR")
    metar.add_argument("icao", help="4-letter ICAO station code")
    metar.add_argument("--json", action="store_true", help="Print observations as JSON")

    seed = subparsers.add_parser("seed", help="Derive inputs from the current METAR")
    seed.add_argument("icao", help="4-letter ICAO station code")
    seed.add_argument("--runway", type=str, help="Runway end ident (default: first listed)")
    seed.add_argument("--airports-dir", type=str, help="Directory with airports.json/runways.json")
    seed.add_argument("--calculate", action="store_true", help="Also compute distances")
    seed.set_defaults(wind=None, tailwind=False)
    _add_calc_options(seed)

    build = subparsers.add_parser("build-runway-db", help="Build the airport/runway JSON files")
    build.add_argument("--source-dir", type=Path, help="Directory with local OurAirports CSVs")
    build.add_argument("--output-dir", type=str, help="Output directory (default from settings)")

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments
    """
    return build_parser().parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).
    """
    args = parse_args(argv)
    try:
        app = PerformanceApp(args)
        return app.run()
    except (LoggingError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:  # pylint: disable=broad-exception-caught
        get_logger("c172perf.main").exception("Fatal error: %s", e)
        return 1
    finally:
        shutdown_logging()


if __name__ == "__main__":
    sys.exit(main())
