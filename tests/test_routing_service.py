import pytest

from src.sleighroute.schemas.routing import RouteOptimizationRequest, StartReference, StopModel
from src.sleighroute.services.geocoding.cache import GeocodeCache
from src.sleighroute.services.routing import service as routing_service
from src.sleighroute.services.routing.optimizer import InvalidStartError


def _stop(sid, lat: float | None, lon: float | None, address: str | None = None, **payload) -> StopModel:
    return StopModel(stop_id=sid, address=address or f"Stop {sid}", latitude=lat, longitude=lon, payload=payload)


class FakeGeocoder:
    def __init__(self, results: dict) -> None:
        self.results = results
        self.calls: list[str] = []

    def geocode(self, address: str):
        self.calls.append(address)
        return self.results.get(address)


def test_optimize_route_returns_complete_plan():
    request = RouteOptimizationRequest(
        stops=[
            _stop(1, 52.52, 13.405, "Berlin, Germany", gift="Train set"),
            _stop(2, 53.5511, 9.9937, "Hamburg, Germany"),
            _stop(3, 48.1351, 11.582, "Munich, Germany"),
            _stop(4, 50.9375, 6.9603, "Cologne, Germany"),
        ]
    )

    response = routing_service.optimize_route(request)

    assert response.complete
    assert response.unrouted == []
    assert sorted(stop.stop_id for stop in response.stops) == [1, 2, 3, 4]
    assert response.total_distance_km > 0
    assert len(response.distance_matrix) == 4
    assert response.metadata["status"] == "complete"
    assert response.metadata["algorithm"] == "nearest_neighbor+2opt"
    berlin = next(stop for stop in response.stops if stop.stop_id == 1)
    assert berlin.payload == {"gift": "Train set"}

    plan = response.flight_plan
    assert plan is not None
    assert [leg.stop_id for leg in plan.legs] == [stop.stop_id for stop in response.stops]
    assert plan.total_distance_km == pytest.approx(response.total_distance_km)
    assert plan.origin is None


def test_optimize_route_from_north_pole():
    request = RouteOptimizationRequest(
        stops=[_stop(1, 0.0, 0.0), _stop(2, 0.0, 1.0)],
        depart_from_north_pole=True,
    )

    response = routing_service.optimize_route(request)

    assert response.flight_plan.origin == [90.0, 0.0]
    assert response.flight_plan.total_distance_km > response.total_distance_km


def test_missing_coordinates_reported_as_unrouted():
    request = RouteOptimizationRequest(
        stops=[_stop(1, 0.0, 0.0), _stop(2, None, None), _stop(3, 0.0, 1.0)],
        start=StartReference(stop_id=1),
    )

    response = routing_service.optimize_route(request)

    assert not response.complete
    assert [stop.stop_id for stop in response.unrouted] == [2]
    assert response.distance_matrix[0][1] is None
    assert response.distance_matrix[1][1] == 0
    assert response.metadata["status"] == "partial"


def test_geocodes_missing_coordinates(monkeypatch: pytest.MonkeyPatch):
    geocoder = FakeGeocoder({"Hamburg, Germany": (53.5511, 9.9937)})
    monkeypatch.setattr(routing_service, "NominatimClient", lambda: geocoder)
    cache = GeocodeCache()
    request = RouteOptimizationRequest(
        stops=[_stop(1, 52.52, 13.405, "Berlin, Germany"), _stop(2, None, None, "Hamburg, Germany")],
        geocode=True,
    )

    response = routing_service.optimize_route(request, cache=cache)

    assert response.complete
    hamburg = next(stop for stop in response.stops if stop.stop_id == 2)
    assert (hamburg.latitude, hamburg.longitude) == (53.5511, 9.9937)
    assert geocoder.calls == ["Hamburg, Germany"]
    assert cache.get("Hamburg, Germany") == (53.5511, 9.9937)


def test_geocoding_skipped_unless_requested(monkeypatch: pytest.MonkeyPatch):
    def fail():
        raise AssertionError("geocoder should not be created")

    monkeypatch.setattr(routing_service, "NominatimClient", fail)
    request = RouteOptimizationRequest(stops=[_stop(1, None, None), _stop(2, None, None)])

    response = routing_service.optimize_route(request)

    assert not response.complete


def test_start_by_address():
    request = RouteOptimizationRequest(
        stops=[_stop(1, 0.0, 0.0), _stop(2, 0.0, 1.0), _stop(3, 0.0, 2.0)],
        start=StartReference(address="Stop 3"),
    )

    response = routing_service.optimize_route(request)

    assert [stop.stop_id for stop in response.stops] == [3, 2, 1]
    assert response.metadata["start_pinned"] is True


def test_unknown_start_raises():
    request = RouteOptimizationRequest(
        stops=[_stop(1, 0.0, 0.0), _stop(2, 0.0, 1.0)],
        start=StartReference(stop_id="elf-hq"),
    )

    with pytest.raises(InvalidStartError):
        routing_service.optimize_route(request)


def test_settings_limit_start_candidates(monkeypatch: pytest.MonkeyPatch):
    captured = {}

    def fake_find_shortest_route(stops, start=None, use_two_opt=True, **kwargs):
        captured.update(kwargs)
        return original(stops, start=start, use_two_opt=use_two_opt, **kwargs)

    original = routing_service.find_shortest_route
    monkeypatch.setattr(routing_service, "find_shortest_route", fake_find_shortest_route)
    monkeypatch.setattr(routing_service.settings, "max_start_candidates", 3)
    monkeypatch.setattr(routing_service.settings, "two_opt_max_iterations", 5)

    routing_service.optimize_route(RouteOptimizationRequest(stops=[_stop(1, 0.0, 0.0), _stop(2, 0.0, 1.0)]))

    assert captured == {"max_start_candidates": 3, "max_iterations": 5}


def test_export_route_builds_feature_collection():
    request = RouteOptimizationRequest(
        stops=[_stop(1, 0.0, 0.0), _stop(2, 0.0, 1.0), _stop(3, 0.0, 2.0)],
        start=StartReference(stop_id=1),
    )

    collection = routing_service.export_route(request)

    assert collection["type"] == "FeatureCollection"
    line = collection["features"][0]
    assert line["geometry"]["type"] == "LineString"
    assert line["geometry"]["coordinates"] == [[0.0, 0.0], [1.0, 0.0], [2.0, 0.0]]
    points = [feature for feature in collection["features"] if feature["geometry"]["type"] == "Point"]
    assert [point["properties"]["sequence"] for point in points] == [1, 2, 3]
