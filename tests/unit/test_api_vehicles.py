from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import httpx
import pytest

from src.adapters.api.dependencies import get_vehicle_positions_service
from src.adapters.config import AppConfig
from src.app.services.vehicle_positions_service import VehiclePositionsService
from src.domain.exceptions import DecodeError, FetchError, LoadError
from src.domain.models import (
    GeoPoint,
    RawVehicleEntity,
    ReferenceStore,
    RouteRef,
    TripRef,
)
from src.main import create_app


@dataclass(slots=True)
class FakeVehicleProvider:
    vehicles: tuple[RawVehicleEntity, ...] = ()
    error: Exception | None = None

    async def list_vehicles(self) -> tuple[RawVehicleEntity, ...]:
        if self.error is not None:
            raise self.error
        return self.vehicles


def _config(**overrides) -> AppConfig:
    values = {
        "feed_url": "https://feed.test/VehiclePosition.pb",
        "feed_headers": "",
        "feed_timeout_s": 1.0,
        "gtfs_path": "data/gtfs",
        "fallback_enabled": True,
        "cors_allow_origins": (),
        "reveal_errors": False,
    }
    values.update(overrides)
    return AppConfig(**values)


def _service(provider: FakeVehicleProvider) -> VehiclePositionsService:
    references = ReferenceStore(
        routes={"9-61": RouteRef(route_id="9-61", short_name="9", color="ff0000")},
        trips={"T42": TripRef(trip_id="T42", headsign="Aeroport")},
    )
    return VehiclePositionsService(references=references, vehicle_provider=provider)


async def _get(app, path: str) -> httpx.Response:
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path)


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_vehicles_returns_joined_records() -> None:
    provider = FakeVehicleProvider(
        vehicles=(
            RawVehicleEntity(
                position=GeoPoint(lat=43.6, lon=3.88),
                entity_id="e1",
                vehicle_id="v1",
                route_id="NS:Route:9-61",
                trip_id="T42",
                speed=0.0,
            ),
            RawVehicleEntity(position=GeoPoint(lat=43.7, lon=3.9), entity_id="e2"),
        )
    )
    app = create_app(_config())
    app.dependency_overrides[get_vehicle_positions_service] = lambda: _service(provider)

    resp = await _get(app, "/api/vehicles")

    assert resp.status_code == 200
    first, second = resp.json()
    assert first == {
        "id": "v1",
        "lat": 43.6,
        "lon": 3.88,
        "bearing": None,
        "speed": 0.0,
        "route_id": "9-61",
        "route_short_name": "9",
        "route_color": "ff0000",
        "headsign": "Aeroport",
        "direction_id": None,
        "timestamp": None,
    }
    assert second["id"] == "e2"
    assert second["speed"] is None
    assert second["route_short_name"] == "?"
    assert second["route_color"] == "000000"
    assert second["headsign"] == "Direction inconnue"


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_vehicles_empty_feed_returns_single_fallback() -> None:
    app = create_app(_config())
    app.dependency_overrides[get_vehicle_positions_service] = lambda: _service(
        FakeVehicleProvider()
    )

    resp = await _get(app, "/api/vehicles")

    assert resp.status_code == 200
    payload = resp.json()
    assert len(payload) == 1
    assert payload[0]["id"] == "TEST"
    assert payload[0]["headsign"] == "Simulation"


@pytest.mark.unit
@pytest.mark.anyio
@pytest.mark.parametrize(
    "error",
    [FetchError("GTFS-RT feed returned HTTP 503"), DecodeError("Invalid payload")],
)
async def test_upstream_failure_returns_generic_500(error: Exception) -> None:
    app = create_app(_config())
    app.dependency_overrides[get_vehicle_positions_service] = lambda: _service(
        FakeVehicleProvider(error=error)
    )

    resp = await _get(app, "/api/vehicles")

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal Server Error"}


@pytest.mark.unit
@pytest.mark.anyio
async def test_upstream_failure_detail_revealed_when_configured() -> None:
    app = create_app(_config(reveal_errors=True))
    app.dependency_overrides[get_vehicle_positions_service] = lambda: _service(
        FakeVehicleProvider(error=FetchError("GTFS-RT feed returned HTTP 503"))
    )

    resp = await _get(app, "/api/vehicles")

    assert resp.status_code == 500
    assert "503" in resp.json()["detail"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_vehicles_unavailable_before_startup() -> None:
    # No lifespan has run, so no reference data is loaded.
    resp = await _get(create_app(_config()), "/api/vehicles")

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal Server Error"}


@pytest.mark.unit
@pytest.mark.anyio
async def test_list_routes() -> None:
    app = create_app(_config())
    app.dependency_overrides[get_vehicle_positions_service] = lambda: _service(
        FakeVehicleProvider()
    )

    resp = await _get(app, "/api/routes")

    assert resp.status_code == 200
    assert resp.json() == [{"route_id": "9-61", "short_name": "9", "color": "ff0000"}]


@pytest.mark.unit
@pytest.mark.anyio
async def test_health() -> None:
    resp = await _get(create_app(_config()), "/health")
    assert resp.json() == {"status": "ok"}


@pytest.mark.unit
@pytest.mark.anyio
async def test_startup_fails_when_reference_tables_missing(tmp_path: Path) -> None:
    app = create_app(_config(gtfs_path=str(tmp_path)))

    with pytest.raises(LoadError):
        async with app.router.lifespan_context(app):
            pass

    assert getattr(app.state, "vehicle_positions_service", None) is None


@pytest.mark.unit
@pytest.mark.anyio
async def test_startup_fails_without_feed_url(tmp_path: Path) -> None:
    (tmp_path / "routes.txt").write_text("route_id\nR1\n", encoding="utf-8")
    (tmp_path / "trips.txt").write_text("trip_id\nT1\n", encoding="utf-8")
    app = create_app(_config(gtfs_path=str(tmp_path), feed_url=""))

    with pytest.raises(LoadError):
        async with app.router.lifespan_context(app):
            pass


@pytest.mark.unit
@pytest.mark.anyio
async def test_startup_loads_references_then_serves(tmp_path: Path) -> None:
    (tmp_path / "routes.txt").write_text(
        "route_id,route_short_name,route_color\n9-61,9,ff0000\n", encoding="utf-8"
    )
    (tmp_path / "trips.txt").write_text(
        "trip_id,trip_headsign\nT42,Aeroport\n", encoding="utf-8"
    )
    app = create_app(_config(gtfs_path=str(tmp_path), fallback_enabled=False))

    async with app.router.lifespan_context(app):
        service = app.state.vehicle_positions_service
        assert set(service.references.routes) == {"9-61"}
        assert service.fallback is None

        service.vehicle_provider = FakeVehicleProvider(
            vehicles=(
                RawVehicleEntity(
                    position=GeoPoint(lat=43.6, lon=3.88),
                    route_id="TAM:Route:9-61",
                    trip_id="T42",
                ),
            )
        )
        resp = await _get(app, "/api/vehicles")

    assert resp.status_code == 200
    (vehicle,) = resp.json()
    assert vehicle["id"] == "???"
    assert vehicle["route_short_name"] == "9"
    assert vehicle["headsign"] == "Aeroport"
