"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ESTATE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Estate Sale Route Planner API"
    api_prefix: str = "/api"

    geocoder: Literal["mapbox", "google"] = Field(
        default="mapbox",
        description="Geocoding provider used to resolve sale addresses.",
    )
    mapbox_token: Optional[str] = Field(default=None, description="Mapbox access token for forward geocoding.")
    google_maps_api_key: Optional[str] = Field(default=None, description="Google Maps Geocoding API key.")
    geocode_country: str = Field(default="us", description="Country filter passed to the geocoder.")
    geocode_proximity: Optional[tuple[float, float]] = Field(
        default=(-83.6129, 42.9270),
        description="(longitude, latitude) used to bias geocoding results. Defaults to Grand Blanc, MI.",
    )
    geocode_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Deadline for geocoding every address of one route request.",
    )
    geocode_request_timeout_seconds: float = Field(default=10.0, gt=0.0)
    geocode_max_retries: int = Field(default=2, ge=0)
    geocode_backoff_seconds: float = Field(default=0.5, ge=0.0)
    geocode_max_parallel_requests: int = Field(default=8, ge=1)

    two_opt_epsilon: float = Field(
        default=1e-6,
        ge=0.0,
        description="Minimum improvement (km) for a 2-opt move to be applied.",
    )
    two_opt_include_endpoint: bool = Field(
        default=False,
        description="If True, 2-opt may also move the final stop. The starting stop is always fixed.",
    )
    two_opt_max_passes: Optional[int] = Field(
        default=None,
        ge=1,
        description="Upper bound on 2-opt passes. None runs until no improving move remains.",
    )
    maps_directions_base_url: str = "https://www.google.com/maps/dir/"

    listing_state: str = Field(default="MI", description="State abbreviation assumed for scraped listings.")
    listing_state_names: tuple[str, ...] = Field(
        default=("MI", "Michigan"),
        description="Spellings of the listing state accepted in scraped markdown.",
    )
    listing_known_cities: tuple[str, ...] = Field(
        default=(
            "Grand Blanc",
            "Burton",
            "Davison",
            "Lapeer",
            "Metamora",
            "West Bloomfield",
            "North Branch",
            "Brighton",
            "Imlay City",
            "Vassar",
            "Flint",
            "Durand",
        ),
        description="Cities searched for when a listing has no recognisable full address.",
    )

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
            "http://127.0.0.1:8080",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", "listing_state_names", "listing_known_cities", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            # Try comma-separated
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            # Single value
            if value.strip():
                return (value.strip(),)
        # Return empty tuple if value is None or empty
        return tuple()

    @field_validator("geocode_proximity", mode="before")
    @classmethod
    def _parse_proximity(cls, value: Any) -> tuple[float, float] | None:
        """Parse "lon,lat" or a JSON array into a coordinate pair."""
        if value is None or isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(float(item) for item in value)
        if isinstance(value, str):
            if not value.strip():
                return None
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(float(item) for item in parsed)
            except (json.JSONDecodeError, TypeError, ValueError):
                pass
            return tuple(float(item.strip()) for item in value.split(",") if item.strip())
        return value


settings = Settings()
