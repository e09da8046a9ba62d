from __future__ import annotations

import logging
from typing import Iterable

from src.domain.models.realtime import RawVehicleEntity, VehicleRecord
from src.domain.models.reference import ReferenceStore

logger = logging.getLogger(__name__)

UNKNOWN_ROUTE = "?"
UNKNOWN_VEHICLE_ID = "???"
DEFAULT_ROUTE_COLOR = "000000"
UNKNOWN_HEADSIGN = "Direction inconnue"

# Shown when the feed reports no vehicles, so the map always has a marker.
FALLBACK_VEHICLE = VehicleRecord(
    id="TEST",
    lat=43.6117,
    lon=3.8767,
    route_id="T1",
    route_short_name="1",
    route_color="0074c9",
    headsign="Simulation",
)


def normalize_route_id(raw: str | None) -> str:
    """Strip a namespace prefix from a realtime route id.

    Realtime feeds may qualify ids (``"TAM:Route:9-61"``) while the static
    tables use the bare key (``"9-61"``). Everything up to and including the
    last ``:`` is dropped; ids without a colon are returned trimmed.
    """

    value = (raw or "").strip() or UNKNOWN_ROUTE
    return value.rsplit(":", 1)[-1]


def join_vehicle(
    entity: RawVehicleEntity, references: ReferenceStore
) -> VehicleRecord:
    route_id = normalize_route_id(entity.route_id)
    route = references.route(route_id)

    trip_id = (entity.trip_id or "").strip() or None
    trip = references.trip(trip_id)

    return VehicleRecord(
        id=entity.vehicle_id or entity.entity_id or UNKNOWN_VEHICLE_ID,
        lat=entity.position.lat,
        lon=entity.position.lon,
        route_id=route_id,
        route_short_name=(route.short_name if route else None) or UNKNOWN_ROUTE,
        route_color=(route.color if route else None) or DEFAULT_ROUTE_COLOR,
        headsign=(trip.headsign if trip else None) or UNKNOWN_HEADSIGN,
        bearing=entity.bearing,
        speed=entity.speed,
        direction_id=entity.direction_id,
        timestamp=entity.timestamp,
    )


def join_vehicles(
    entities: Iterable[RawVehicleEntity], references: ReferenceStore
) -> tuple[VehicleRecord, ...]:
    """Join decoded entities with reference data, keeping feed order."""

    return tuple(join_vehicle(e, references) for e in entities)


def with_fallback(
    records: tuple[VehicleRecord, ...],
    fallback: VehicleRecord | None = FALLBACK_VEHICLE,
) -> tuple[VehicleRecord, ...]:
    if records or fallback is None:
        return records

    logger.warning("No vehicle in service, sending fallback record %s", fallback.id)
    return (fallback,)
