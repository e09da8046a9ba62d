from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_FEED_URL = "https://data.montpellier3m.fr/TAM_MMM_GTFSRT/VehiclePosition.pb"


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_list(name: str, default: str = "") -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True, slots=True)
class AppConfig:
    feed_url: str
    feed_headers: str | None
    feed_timeout_s: float
    gtfs_path: str
    fallback_enabled: bool
    cors_allow_origins: tuple[str, ...]
    reveal_errors: bool

    @staticmethod
    def from_env() -> "AppConfig":
        return AppConfig(
            feed_url=os.getenv(
                "GTFS_RT_VEHICLE_POSITIONS_URL", DEFAULT_FEED_URL
            ).strip(),
            feed_headers=os.getenv("GTFS_RT_HEADERS"),
            feed_timeout_s=float(os.getenv("GTFS_RT_TIMEOUT_S") or 10.0),
            gtfs_path=os.getenv("GTFS_PATH") or "data/gtfs",
            fallback_enabled=_env_bool("VEHICLE_FALLBACK_ENABLED", True),
            cors_allow_origins=_env_list("CORS_ALLOW_ORIGINS", "*"),
            reveal_errors=_env_bool("VEHICLE_FEED_REVEAL_ERRORS", False),
        )
