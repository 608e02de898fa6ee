"""Routing request/response schemas."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, model_validator


class StopModel(BaseModel):
    stop_id: Optional[Union[int, str]] = Field(default=None, description="Wish or customer identifier.")
    address: str = Field(..., min_length=1, description="Delivery address, also used to match stops without an id.")
    latitude: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    longitude: Optional[float] = Field(default=None, ge=-180.0, le=180.0)
    payload: Dict[str, Any] = Field(default_factory=dict, description="Opaque data returned unchanged.")


class StartReference(BaseModel):
    stop_id: Optional[Union[int, str]] = None
    address: Optional[str] = None

    @model_validator(mode="after")
    def _require_reference(self) -> "StartReference":
        if self.stop_id is None and not self.address:
            raise ValueError("start needs a stop_id or an address")
        return self


class RouteOptimizationRequest(BaseModel):
    stops: List[StopModel]
    start: Optional[StartReference] = Field(
        default=None,
        description="Stop to begin with. If omitted, several starting stops are tried and the shortest route wins.",
    )
    use_two_opt: bool = True
    geocode: bool = Field(default=False, description="Look up coordinates for stops that have none.")
    depart_from_north_pole: bool = Field(
        default=False,
        description="Measure the flight plan from the North Pole instead of the first stop.",
    )
    cargo_weight_kg: float = Field(default=0.0, ge=0.0)


class FlightLegModel(BaseModel):
    sequence: int
    stop_id: Optional[Union[int, str]]
    address: str
    distance_from_prev_km: float
    cumulative_distance_km: float
    flight_time_min: float
    co2_kg: float


class FlightPlanModel(BaseModel):
    origin: Optional[List[float]]
    total_distance_km: float
    total_flight_time_min: float
    total_co2_kg: float
    total_flight_time_label: str
    total_co2_label: str
    legs: List[FlightLegModel]


class RouteOptimizationResponse(BaseModel):
    stops: List[StopModel]
    unrouted: List[StopModel]
    total_distance_km: Optional[float]
    distance_matrix: List[List[Optional[float]]]
    complete: bool
    flight_plan: Optional[FlightPlanModel] = None
    metadata: dict


class GeocodeRequest(BaseModel):
    address: str = Field(..., min_length=1)


class GeocodeResponse(BaseModel):
    address: str
    found: bool
    latitude: Optional[float] = None
    longitude: Optional[float] = None
