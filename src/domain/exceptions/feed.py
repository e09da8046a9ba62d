class VehicleFeedError(Exception):
    """Base exception for the vehicle feed pipeline."""


class LoadError(VehicleFeedError):
    """Raised when reference data or configuration cannot be loaded."""


class FetchError(VehicleFeedError):
    """Raised when the upstream realtime feed cannot be retrieved."""


class DecodeError(VehicleFeedError):
    """Raised when the realtime payload does not match the feed schema."""
