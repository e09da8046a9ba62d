from .feed import DecodeError, FetchError, LoadError, VehicleFeedError

__all__ = [
    "DecodeError",
    "FetchError",
    "LoadError",
    "VehicleFeedError",
]
