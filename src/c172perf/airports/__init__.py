"""Airport elevations and runway headings.

This module provides the airport/runway lookup used to derive pressure
altitude and the runway wind component, built from the OurAirports data.

Typical usage:
    from c172perf.airports import AirportDatabase

    db = AirportDatabase()
    db.load_from_json("data/airports")
    runway = db.get_runway("KPAO", "31")
"""

from c172perf.airports.database import (
    Airport,
    AirportDatabase,
    AirportDataError,
    RunwayEnd,
    build_runway_db,
    download_with_fallback,
)

__all__ = [
    "Airport",
    "AirportDataError",
    "AirportDatabase",
    "RunwayEnd",
    "build_runway_db",
    "download_with_fallback",
]
