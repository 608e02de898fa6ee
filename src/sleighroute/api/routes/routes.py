"""Routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, status

from ...schemas.routing import RouteOptimizationRequest, RouteOptimizationResponse
from ...services.routing.service import export_route, optimize_route

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/optimize", response_model=RouteOptimizationResponse, status_code=status.HTTP_200_OK)
def optimize(payload: RouteOptimizationRequest, request: Request) -> RouteOptimizationResponse:
    try:
        return optimize_route(payload, cache=request.app.state.geocode_cache)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize route: {str(exc)}"
        ) from exc


@router.post("/export", status_code=status.HTTP_200_OK)
def export(payload: RouteOptimizationRequest, request: Request) -> dict:
    """Optimize and return the route as a GeoJSON FeatureCollection for map display."""
    try:
        return export_route(payload, cache=request.app.state.geocode_cache)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error exporting route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to export route: {str(exc)}"
        ) from exc
