from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models.realtime import RawVehicleEntity


class IRealtimeVehicleProvider(ABC):
    """Port for obtaining realtime vehicle positions (e.g., via GTFS-Realtime).

    Implementations raise FetchError when the feed cannot be retrieved and
    DecodeError when it cannot be parsed.
    """

    @abstractmethod
    async def list_vehicles(self) -> tuple[RawVehicleEntity, ...]:
        raise NotImplementedError
