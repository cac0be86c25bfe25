"""Airport elevation and runway heading database.

This module loads the OurAirports CSV exports, keeps what takeoff planning
needs (field elevation, runway end idents and true headings) and persists it
as two compact JSON files.

Typical usage:
    db = AirportDatabase()
    db.load_from_csv("data/airports")
    db.save_json("data/airports")

    airport = db.get_airport("EGLL")
    runways = db.get_runways("EGLL")
"""

import csv
import json
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path

import requests

logger = logging.getLogger(__name__)

AIRPORTS_JSON = "airports.json"
RUNWAYS_JSON = "runways.json"


class AirportDataError(Exception):
    """Raised when airport data cannot be loaded, downloaded or written."""


@dataclass(frozen=True)
class Airport:
    """Airport information.

    Attributes:
        icao: 4-letter identifier (e.g., "KPAO")
        elevation_ft: Field elevation in feet
    """

    icao: str
    elevation_ft: float


@dataclass(frozen=True)
class RunwayEnd:
    """One usable runway direction.

    Attributes:
        ident: Runway end identifier (e.g., "31", "09L")
        heading_deg_true: True heading of the runway end (degrees)
    """

    ident: str
    heading_deg_true: float


def _parse_float(value: str | None) -> float | None:
    try:
        return float(value) if value else None
    except ValueError:
        return None


class AirportDatabase:
    """Airport elevations and runway ends keyed by ICAO code.

    Examples:
        >>> db = AirportDatabase()
        >>> db.load_from_json("data/airports")
        >>> db.get_airport("KPAO").elevation_ft
        7.0
        >>> [rw.ident for rw in db.get_runways("KPAO")]
        ['13', '31']
    """

    def __init__(self) -> None:
        """Initialize empty database."""
        self.airports: dict[str, Airport] = {}
        self.runways: dict[str, list[RunwayEnd]] = {}

    def load_from_csv(self, data_dir: str | Path) -> None:
        """Load OurAirports airports.csv and runways.csv.

        Args:
            data_dir: Directory containing airports.csv and optionally
                runways.csv.

        Raises:
            AirportDataError: If airports.csv is missing.
        """
        data_dir = Path(data_dir)

        airports_file = data_dir / "airports.csv"
        if not airports_file.exists():
            raise AirportDataError(f"Airports file not found: {airports_file}")

        logger.info("Loading airports from %s", airports_file)
        self._load_airports(airports_file)
        logger.info("Loaded %d airports", len(self.airports))

        runways_file = data_dir / "runways.csv"
        if runways_file.exists():
            logger.info("Loading runways from %s", runways_file)
            self._load_runways(runways_file)
            runway_count = sum(len(ends) for ends in self.runways.values())
            logger.info("Loaded %d runway ends for %d airports", runway_count, len(self.runways))

    def _load_airports(self, csv_path: Path) -> None:
        """Load airports keyed by 4-letter ident."""
        with open(csv_path, encoding="utf-8", newline="") as f:
            for row in csv.DictReader(f):
                ident = (row.get("ident") or "").strip().upper()
                if len(ident) != 4:
                    continue

                elevation = _parse_float(row.get("elevation_ft"))
                self.airports[ident] = Airport(
                    icao=ident,
                    elevation_ft=elevation if elevation is not None else 0.0,
                )

    def _load_runways(self, csv_path: Path) -> None:
        """Load both ends of every runway that has an ident and true heading."""
        with open(csv_path, encoding="utf-8", newline="") as f:
            for row in csv.DictReader(f):
                icao = (row.get("airport_ident") or "").strip().upper()
                if len(icao) != 4:
                    continue

                ends = self.runways.setdefault(icao, [])
                for prefix in ("le", "he"):
                    ident = (row.get(f"{prefix}_ident") or "").strip()
                    heading = _parse_float(row.get(f"{prefix}_heading_degT"))
                    if ident and heading is not None:
                        ends.append(RunwayEnd(ident=ident, heading_deg_true=heading))

    def save_json(self, output_dir: str | Path) -> tuple[Path, Path]:
        """Write airports.json and runways.json.

        Args:
            output_dir: Destination directory (created if needed).

        Returns:
            Paths of the airports and runways files.

        Raises:
            AirportDataError: If the files cannot be written.
        """
        output_dir = Path(output_dir)
        airports_path = output_dir / AIRPORTS_JSON
        runways_path = output_dir / RUNWAYS_JSON

        airports = {icao: {"elevation_ft": a.elevation_ft} for icao, a in self.airports.items()}
        runways = {
            icao: [{"ident": end.ident, "heading_degT": end.heading_deg_true} for end in ends]
            for icao, ends in self.runways.items()
        }

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            airports_path.write_text(json.dumps(airports, indent=2), encoding="utf-8")
            runways_path.write_text(json.dumps(runways, indent=2), encoding="utf-8")
        except OSError as e:
            raise AirportDataError(f"Failed to write airport data to {output_dir}: {e}") from e

        logger.info("Wrote %s and %s", airports_path, runways_path)
        return airports_path, runways_path

    def load_from_json(self, data_dir: str | Path) -> None:
        """Load the JSON files written by save_json().

        Args:
            data_dir: Directory containing airports.json and optionally
                runways.json.

        Raises:
            AirportDataError: If airports.json is missing or not valid JSON.
        """
        data_dir = Path(data_dir)
        airports_path = data_dir / AIRPORTS_JSON
        runways_path = data_dir / RUNWAYS_JSON

        try:
            airports = json.loads(airports_path.read_text(encoding="utf-8"))
            runways = (
                json.loads(runways_path.read_text(encoding="utf-8"))
                if runways_path.exists()
                else {}
            )
        except (OSError, json.JSONDecodeError) as e:
            raise AirportDataError(f"Failed to load airport data from {data_dir}: {e}") from e

        for icao, entry in airports.items():
            self.airports[icao.upper()] = Airport(
                icao=icao.upper(), elevation_ft=float(entry.get("elevation_ft") or 0.0)
            )
        for icao, ends in runways.items():
            self.runways[icao.upper()] = [
                RunwayEnd(ident=end["ident"], heading_deg_true=float(end["heading_degT"]))
                for end in ends
            ]

        logger.info("Loaded %d airports from %s", len(self.airports), airports_path)

    def get_airport(self, icao: str) -> Airport | None:
        """Get airport by ICAO code, or None."""
        return self.airports.get(icao.upper())

    def get_runways(self, icao: str) -> list[RunwayEnd]:
        """Get runway ends for an airport (empty if none found)."""
        return self.runways.get(icao.upper(), [])

    def get_runway(self, icao: str, ident: str) -> RunwayEnd | None:
        """Get one runway end by its ident (e.g. "27L"), or None."""
        wanted = ident.strip().upper()
        for end in self.get_runways(icao):
            if end.ident.upper() == wanted:
                return end
        return None

    def get_airport_count(self) -> int:
        """Get total number of airports in database."""
        return len(self.airports)


def download_with_fallback(
    urls: list[str],
    output_path: Path,
    session: requests.Session | None = None,
    timeout_s: float = 60.0,
) -> str:
    """Download a file, trying each mirror URL in turn.

    Args:
        urls: Mirror URLs in order of preference.
        output_path: Where to write the file.
        session: HTTP session to use.
        timeout_s: Per-request timeout in seconds.

    Returns:
        The URL that succeeded.

    Raises:
        AirportDataError: If every mirror fails.
    """
    session = session or requests.Session()
    last_error: Exception | None = None

    for url in urls:
        try:
            logger.info("Downloading %s", url)
            with session.get(url, headers={"Accept": "text/csv"}, timeout=timeout_s, stream=True) as response:
                response.raise_for_status()
                with open(output_path, "wb") as f:
                    for chunk in response.iter_content(chunk_size=65536):
                        f.write(chunk)
            return url
        except (requests.RequestException, OSError) as e:
            logger.warning("Download failed from %s: %s", url, e)
            last_error = e

    raise AirportDataError(f"All mirrors failed for {output_path.name}: {last_error}")


def build_runway_db(
    output_dir: str | Path,
    source_dir: str | Path | None = None,
    sources: dict[str, list[str]] | None = None,
    session: requests.Session | None = None,
) -> AirportDatabase:
    """Build airports.json and runways.json from OurAirports CSVs.

    Local CSVs in source_dir are used when present; each missing one is
    downloaded from its mirror list into a temporary directory.

    Args:
        output_dir: Directory receiving the JSON files.
        source_dir: Directory checked for airports.csv / runways.csv.
        sources: Mirror URLs keyed by "airports" and "runways".
        session: HTTP session used for downloads.

    Returns:
        The populated AirportDatabase.

    Raises:
        AirportDataError: If a needed CSV is neither local nor downloadable.
    """
    sources = sources or {}
    source_dir = Path(source_dir) if source_dir is not None else None

    with tempfile.TemporaryDirectory() as tmp:
        work_dir = Path(tmp)
        for name in ("airports", "runways"):
            filename = f"{name}.csv"
            local = source_dir / filename if source_dir is not None else None
            if local is not None and local.exists():
                logger.info("Using local %s", local)
                (work_dir / filename).write_bytes(local.read_bytes())
                continue
            urls = sources.get(name, [])
            if not urls:
                raise AirportDataError(f"No local {filename} and no download sources configured")
            download_with_fallback(urls, work_dir / filename, session=session)

        db = AirportDatabase()
        db.load_from_csv(work_dir)

    db.save_json(output_dir)
    return db
