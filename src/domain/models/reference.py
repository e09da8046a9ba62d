from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True, slots=True)
class RouteRef:
    route_id: str
    short_name: str | None = None
    color: str | None = None  # hex without '#'
    row: Mapping[str, str] = field(default_factory=dict, repr=False)


@dataclass(frozen=True, slots=True)
class TripRef:
    trip_id: str
    headsign: str | None = None
    row: Mapping[str, str] = field(default_factory=dict, repr=False)


@dataclass(frozen=True, slots=True)
class ReferenceStore:
    """Static route/trip metadata, loaded once and shared read-only.

    The mappings are wrapped in read-only proxies on construction so that a
    store handed to concurrent requests cannot be mutated by any of them.
    """

    routes: Mapping[str, RouteRef]
    trips: Mapping[str, TripRef]

    def __post_init__(self) -> None:
        object.__setattr__(self, "routes", MappingProxyType(dict(self.routes)))
        object.__setattr__(self, "trips", MappingProxyType(dict(self.trips)))

    def route(self, route_id: str) -> RouteRef | None:
        return self.routes.get(route_id)

    def trip(self, trip_id: str | None) -> TripRef | None:
        if trip_id is None:
            return None
        return self.trips.get(trip_id)
