from __future__ import annotations

from fastapi import Request

from src.adapters.config import AppConfig
from src.adapters.persistence.local_reference_repository import (
    LocalReferenceRepository,
)
from src.adapters.realtime.http_gtfs_realtime_vehicle_provider import (
    HttpGtfsRealtimeVehicleProvider,
)
from src.app.services.vehicle_positions_service import VehiclePositionsService
from src.domain.exceptions import LoadError


def build_vehicle_positions_service(config: AppConfig) -> VehiclePositionsService:
    """Load reference tables and wire the feed provider.

    Raises LoadError when the tables cannot be read or the feed is not
    configured; the application must not start serving in that case.
    """

    references = LocalReferenceRepository(base_path=config.gtfs_path).load_references()

    try:
        provider = HttpGtfsRealtimeVehicleProvider(
            url=config.feed_url,
            headers_raw=config.feed_headers,
            timeout_s=config.feed_timeout_s,
        )
    except ValueError as exc:
        raise LoadError(str(exc)) from exc

    service = VehiclePositionsService(references=references, vehicle_provider=provider)
    if not config.fallback_enabled:
        service.fallback = None
    return service


def get_vehicle_positions_service(request: Request) -> VehiclePositionsService:
    service = getattr(request.app.state, "vehicle_positions_service", None)
    if service is None:
        raise LoadError("Reference data is not loaded")
    return service
