from __future__ import annotations

from dataclasses import dataclass

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class RawVehicleEntity:
    """A vehicle position as decoded from the realtime feed.

    Optional fields are ``None`` when the field is absent on the wire; a
    transmitted zero stays ``0``.
    """

    position: GeoPoint
    entity_id: str | None = None
    vehicle_id: str | None = None
    bearing: float | None = None
    speed: float | None = None
    route_id: str | None = None  # raw, may carry a "NS:Route:" prefix
    trip_id: str | None = None
    direction_id: int | None = None
    timestamp: int | None = None  # POSIX seconds


@dataclass(frozen=True, slots=True)
class VehicleRecord:
    """Display-ready vehicle: a feed entity joined with reference data."""

    id: str
    lat: float
    lon: float
    route_id: str
    route_short_name: str
    route_color: str
    headsign: str
    bearing: float | None = None
    speed: float | None = None
    direction_id: int | None = None
    timestamp: int | None = None
