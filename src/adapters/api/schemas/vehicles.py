from __future__ import annotations

from pydantic import BaseModel


class TransitRouteSchema(BaseModel):
    route_id: str
    short_name: str | None = None
    color: str | None = None


class VehicleSchema(BaseModel):
    id: str
    lat: float
    lon: float
    bearing: float | None = None
    speed: float | None = None
    route_id: str
    route_short_name: str
    route_color: str
    headsign: str
    direction_id: int | None = None
    timestamp: int | None = None
