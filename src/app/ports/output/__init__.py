from .realtime_vehicle_provider import IRealtimeVehicleProvider
from .reference_repository import IReferenceRepository

__all__ = [
    "IRealtimeVehicleProvider",
    "IReferenceRepository",
]
