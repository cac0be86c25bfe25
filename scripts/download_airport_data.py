#!/usr/bin/env python3
"""Build the airport and runway database from OurAirports.

Downloads airports.csv and runways.csv from the OurAirports mirrors (unless
local copies are given) and writes data/airports/airports.json and
data/airports/runways.json.

Usage:
    python scripts/download_airport_data.py
    python scripts/download_airport_data.py --source-dir ~/Downloads
"""

import argparse
import sys
from pathlib import Path

from c172perf.airports.database import AirportDataError, build_runway_db
from c172perf.core.config import ConfigError, load_settings
from c172perf.core.resource_path import get_resource_path


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(description="Build airports.json and runways.json")
    parser.add_argument("--source-dir", type=Path, help="Directory with local OurAirports CSVs")
    parser.add_argument("--output-dir", type=Path, help="Output directory")
    args = parser.parse_args()

    try:
        settings = load_settings()
        output_dir = args.output_dir or get_resource_path(settings.get("airports.data_dir"))
        print(f"Output directory: {output_dir.absolute()}\n")

        db = build_runway_db(
            output_dir,
            source_dir=args.source_dir,
            sources=settings.get("airports.sources", {}),
        )
    except (AirportDataError, ConfigError) as e:
        print(f"✗ {e}")
        return 1

    runway_count = sum(len(ends) for ends in db.runways.values())
    print(f"✓ {db.get_airport_count()} airports, {runway_count} runway ends written")
    return 0


if __name__ == "__main__":
    sys.exit(main())
