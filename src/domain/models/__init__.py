from .geo import GeoPoint
from .realtime import RawVehicleEntity, VehicleRecord
from .reference import ReferenceStore, RouteRef, TripRef

__all__ = [
    "GeoPoint",
    "RawVehicleEntity",
    "ReferenceStore",
    "RouteRef",
    "TripRef",
    "VehicleRecord",
]
