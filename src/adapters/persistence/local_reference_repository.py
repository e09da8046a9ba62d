from __future__ import annotations

import csv
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from src.app.ports.output import IReferenceRepository
from src.domain.exceptions import LoadError
from src.domain.models.reference import ReferenceStore, RouteRef, TripRef

logger = logging.getLogger(__name__)


def load_table(source: str | Path, key_field: str) -> dict[str, Mapping[str, str]]:
    """Load a comma-delimited table into ``{trimmed key: full row}``.

    Rows with an empty key are skipped; a repeated key keeps the last row.
    Raises LoadError if the file is unreadable, malformed, or has no
    ``key_field`` column.
    """

    path = Path(source)
    table: dict[str, Mapping[str, str]] = {}
    try:
        # utf-8-sig: GTFS exports frequently start with a BOM.
        with path.open("r", encoding="utf-8-sig", newline="") as fp:
            reader = csv.DictReader(fp)
            fieldnames = [(name or "").strip() for name in reader.fieldnames or ()]
            if key_field not in fieldnames:
                raise LoadError(f"{path}: missing key column {key_field!r}")
            reader.fieldnames = fieldnames

            for row in reader:
                key = (row.get(key_field) or "").strip()
                if not key:
                    continue
                table[key] = {
                    k: (v or "") for k, v in row.items() if k is not None
                }
    except LoadError:
        raise
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise LoadError(f"{path}: {exc}") from exc

    return table


def _opt(row: Mapping[str, str], column: str) -> str | None:
    return (row.get(column) or "").strip() or None


@dataclass(slots=True)
class LocalReferenceRepository(IReferenceRepository):
    """Loads route and trip metadata from a directory of GTFS .txt files.

    Env vars:
      - GTFS_PATH: path to directory containing routes.txt and trips.txt
    """

    base_path: str | Path | None = None
    routes_file: str = "routes.txt"
    trips_file: str = "trips.txt"

    def _base(self) -> Path:
        value = self.base_path or os.getenv("GTFS_PATH") or "data/gtfs"
        return Path(value)

    def load_references(self) -> ReferenceStore:
        base = self._base()

        routes = {
            route_id: RouteRef(
                route_id=route_id,
                short_name=_opt(row, "route_short_name"),
                color=_opt(row, "route_color"),
                row=row,
            )
            for route_id, row in load_table(base / self.routes_file, "route_id").items()
        }

        trips = {
            trip_id: TripRef(
                trip_id=trip_id,
                headsign=_opt(row, "trip_headsign"),
                row=row,
            )
            for trip_id, row in load_table(base / self.trips_file, "trip_id").items()
        }

        logger.info(
            "Loaded GTFS references from %s: %d routes, %d trips",
            base,
            len(routes),
            len(trips),
        )
        return ReferenceStore(routes=routes, trips=trips)
