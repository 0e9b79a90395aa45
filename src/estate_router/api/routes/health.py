"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_geocoder_functions():
    """Lazy import to avoid startup failures."""
    from ...services.geocoding import build_geocoder, check_health

    return build_geocoder, check_health


@router.get("/health/geocoder", status_code=status.HTTP_200_OK)
def health_geocoder() -> dict:
    """Check that the configured geocoding provider resolves a known address."""
    try:
        build_geocoder, check_health = _get_geocoder_functions()
        status_flag = check_health(build_geocoder())
        return {"service": settings.geocoder, "healthy": status_flag}
    except Exception as e:
        return {"service": settings.geocoder, "healthy": False, "error": str(e)}
