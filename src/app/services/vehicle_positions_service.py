from __future__ import annotations

import logging
from dataclasses import dataclass

from src.app.ports.output import IRealtimeVehicleProvider
from src.domain.algorithms.vehicle_join import (
    FALLBACK_VEHICLE,
    join_vehicles,
    with_fallback,
)
from src.domain.models.realtime import VehicleRecord
from src.domain.models.reference import ReferenceStore, RouteRef

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class VehiclePositionsService:
    """Supports the realtime map view.

    - Returns realtime vehicles joined with static route/trip metadata.
    - Lists transit routes from the static reference tables.

    Every call to ``get_vehicles`` hits the upstream feed; FetchError and
    DecodeError from the provider propagate to the caller unchanged.
    """

    references: ReferenceStore
    vehicle_provider: IRealtimeVehicleProvider
    fallback: VehicleRecord | None = FALLBACK_VEHICLE

    async def get_vehicles(self) -> tuple[VehicleRecord, ...]:
        entities = await self.vehicle_provider.list_vehicles()
        records = with_fallback(
            join_vehicles(entities, self.references), self.fallback
        )
        logger.info("Sending %d vehicle(s)", len(records))
        return records

    def list_routes(self) -> tuple[RouteRef, ...]:
        routes = list(self.references.routes.values())
        routes.sort(key=lambda r: (r.short_name or "", r.route_id))
        return tuple(routes)
