"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_geocoder_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.geocoding.nominatim_client import check_health as geocoder_health_check
    return geocoder_health_check


@router.get("/health/geocoder", status_code=status.HTTP_200_OK)
def health_geocoder() -> dict:
    """Check geocoding service health."""
    try:
        geocoder_health_check = _get_geocoder_health_check()
        status_flag = geocoder_health_check()
        return {"service": "geocoder", "healthy": status_flag}
    except Exception as e:
        return {"service": "geocoder", "healthy": False, "error": str(e)}
