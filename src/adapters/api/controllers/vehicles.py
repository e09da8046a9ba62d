from __future__ import annotations

from fastapi import APIRouter, Depends

from src.adapters.api.dependencies import get_vehicle_positions_service
from src.adapters.api.schemas.vehicles import TransitRouteSchema, VehicleSchema
from src.app.services.vehicle_positions_service import VehiclePositionsService

router = APIRouter(prefix="/api", tags=["vehicles"])


@router.get("/vehicles", response_model=list[VehicleSchema])
async def list_vehicles(
    service: VehiclePositionsService = Depends(get_vehicle_positions_service),
) -> list[VehicleSchema]:
    vehicles = await service.get_vehicles()
    return [
        VehicleSchema(
            id=v.id,
            lat=v.lat,
            lon=v.lon,
            bearing=v.bearing,
            speed=v.speed,
            route_id=v.route_id,
            route_short_name=v.route_short_name,
            route_color=v.route_color,
            headsign=v.headsign,
            direction_id=v.direction_id,
            timestamp=v.timestamp,
        )
        for v in vehicles
    ]


@router.get("/routes", response_model=list[TransitRouteSchema])
def list_routes(
    service: VehiclePositionsService = Depends(get_vehicle_positions_service),
) -> list[TransitRouteSchema]:
    return [
        TransitRouteSchema(route_id=r.route_id, short_name=r.short_name, color=r.color)
        for r in service.list_routes()
    ]
