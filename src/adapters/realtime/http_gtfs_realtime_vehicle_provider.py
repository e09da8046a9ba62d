from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any

import httpx
from google.protobuf.message import DecodeError as ProtobufDecodeError
from google.protobuf.message import Message
from google.transit import gtfs_realtime_pb2

from src.app.ports.output import IRealtimeVehicleProvider
from src.domain.exceptions import DecodeError, FetchError
from src.domain.models.geo import GeoPoint
from src.domain.models.realtime import RawVehicleEntity

logger = logging.getLogger(__name__)


def parse_headers(raw: str | None) -> dict[str, str]:
    """Parse ``'Key:Value;Key2:Value2'`` into a header dict."""

    raw = (raw or "").strip()
    if not raw:
        return {}
    headers: dict[str, str] = {}
    for part in raw.split(";"):
        part = part.strip()
        if not part:
            continue
        if ":" not in part:
            continue
        k, v = part.split(":", 1)
        k = k.strip()
        v = v.strip()
        if k:
            headers[k] = v
    return headers


@dataclass(slots=True)
class HttpGtfsRealtimeVehicleProvider(IRealtimeVehicleProvider):
    """Fetches and decodes a GTFS-Realtime VehiclePositions feed over HTTP.

    Env vars:
      - GTFS_RT_VEHICLE_POSITIONS_URL: URL to a GTFS-RT VehiclePositions feed
      - GTFS_RT_HEADERS: optional headers, as 'Key:Value;Key2:Value2'
      - GTFS_RT_TIMEOUT_S: request timeout, used when timeout_s is not given
        (default 10)

    Notes:
      - Every call fetches the feed again; nothing is cached between calls.
      - The feed message type is checked once, at construction.
    """

    url: str | None = None
    headers_raw: str | None = None
    timeout_s: float | None = None
    message_type: type[Message] = gtfs_realtime_pb2.FeedMessage
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.url is None:
            self.url = os.getenv("GTFS_RT_VEHICLE_POSITIONS_URL")
        if self.headers_raw is None:
            self.headers_raw = os.getenv("GTFS_RT_HEADERS")
        if self.timeout_s is None:
            self.timeout_s = float(os.getenv("GTFS_RT_TIMEOUT_S") or 10.0)

        if not self.url:
            raise ValueError("GTFS-RT vehicle positions URL is not configured")

        entity_field = self.message_type.DESCRIPTOR.fields_by_name.get("entity")
        if entity_field is None or entity_field.message_type is None:
            raise ValueError(
                f"{self.message_type.DESCRIPTOR.full_name} "
                "has no 'entity' message field"
            )

    async def fetch(self) -> bytes:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self.transport
            ) as client:
                resp = await client.get(
                    self.url, headers=parse_headers(self.headers_raw)
                )
                resp.raise_for_status()
                return resp.content
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                f"GTFS-RT feed returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(
                f"GTFS-RT feed request failed: {type(exc).__name__}: {exc}"
            ) from exc

    async def list_vehicles(self) -> tuple[RawVehicleEntity, ...]:
        content = await self.fetch()
        return decode_vehicle_positions(content, self.message_type)


def _optional(msg: Any, name: str) -> Any:
    return getattr(msg, name) if msg.HasField(name) else None


def _project_entity(ent: Any) -> RawVehicleEntity | None:
    if not ent.HasField("vehicle"):
        return None

    v = ent.vehicle
    if not v.HasField("position"):
        return None

    pos = v.position
    if not (pos.HasField("latitude") and pos.HasField("longitude")):
        return None

    try:
        position = GeoPoint(lat=float(pos.latitude), lon=float(pos.longitude))
    except ValueError as exc:
        logger.debug("Dropping entity %r: %s", ent.id, exc)
        return None

    route_id = None
    trip_id = None
    direction_id = None
    if v.HasField("trip"):
        route_id = v.trip.route_id.strip() or None
        trip_id = v.trip.trip_id or None
        direction_id = _optional(v.trip, "direction_id")

    vehicle_id = None
    if v.HasField("vehicle"):
        vehicle_id = v.vehicle.id or None

    bearing = _optional(pos, "bearing")
    speed = _optional(pos, "speed")
    timestamp = _optional(v, "timestamp")

    return RawVehicleEntity(
        position=position,
        entity_id=ent.id or None,
        vehicle_id=vehicle_id,
        bearing=float(bearing) if bearing is not None else None,
        speed=float(speed) if speed is not None else None,
        route_id=route_id,
        trip_id=trip_id,
        direction_id=int(direction_id) if direction_id is not None else None,
        timestamp=int(timestamp) if timestamp is not None else None,
    )


def decode_vehicle_positions(
    content: bytes, message_type: type[Message] = gtfs_realtime_pb2.FeedMessage
) -> tuple[RawVehicleEntity, ...]:
    """Decode a FeedMessage payload into positioned vehicles, in feed order.

    Entities without a vehicle position, or with coordinates outside the
    valid range, are dropped.
    """

    feed = message_type()
    try:
        feed.ParseFromString(content)
    except ProtobufDecodeError as exc:
        raise DecodeError(f"Invalid GTFS-RT payload: {exc}") from exc

    out: list[RawVehicleEntity] = []
    dropped = 0
    for ent in feed.entity:
        vehicle = _project_entity(ent)
        if vehicle is None:
            dropped += 1
            continue
        out.append(vehicle)

    if dropped:
        logger.debug("Skipped %d feed entities without a usable position", dropped)
    return tuple(out)
