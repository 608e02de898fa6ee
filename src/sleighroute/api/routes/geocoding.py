"""Geocoding endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, status

from ...schemas.routing import GeocodeRequest, GeocodeResponse
from ...services.geocoding.nominatim_client import GeocodingError, NominatimClient

router = APIRouter(prefix="/geocode", tags=["geocoding"])


@router.post("", response_model=GeocodeResponse, status_code=status.HTTP_200_OK)
def geocode(payload: GeocodeRequest, request: Request) -> GeocodeResponse:
    """Look up coordinates for a single address, consulting the app's cache first."""
    cache = request.app.state.geocode_cache
    coordinates = cache.get(payload.address)
    if coordinates is None:
        try:
            coordinates = NominatimClient().geocode(payload.address)
        except GeocodingError as exc:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
        if coordinates is not None:
            cache.set(payload.address, coordinates)

    if coordinates is None:
        return GeocodeResponse(address=payload.address, found=False)
    return GeocodeResponse(
        address=payload.address,
        found=True,
        latitude=coordinates[0],
        longitude=coordinates[1],
    )
