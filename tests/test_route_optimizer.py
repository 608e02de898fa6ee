import math
import random

import pytest

from src.sleighroute.models.domain import Stop
from src.sleighroute.services.routing import optimizer
from src.sleighroute.services.routing.construction import nearest_neighbor
from src.sleighroute.services.routing.matrix import build_distance_matrix
from src.sleighroute.services.routing.optimizer import InvalidStartError, find_shortest_route
from src.sleighroute.services.routing.refinement import StopLocator, route_distance, two_opt


def _stop(sid, lat: float | None, lon: float | None, address: str | None = None) -> Stop:
    return Stop(address=address or f"Stop {sid}", stop_id=sid, latitude=lat, longitude=lon)


def _random_stops(count: int, seed: int) -> list[Stop]:
    rng = random.Random(seed)
    return [_stop(i, rng.uniform(47.0, 55.0), rng.uniform(6.0, 15.0)) for i in range(count)]


def _record_starts(monkeypatch: pytest.MonkeyPatch) -> list[int]:
    starts: list[int] = []
    original = optimizer.nearest_neighbor

    def recording(stops, distance_matrix, start_index=0):
        starts.append(start_index)
        return original(stops, distance_matrix, start_index)

    monkeypatch.setattr(optimizer, "nearest_neighbor", recording)
    return starts


def test_empty_input():
    result = find_shortest_route([])

    assert result.stops == ()
    assert result.total_distance_km == 0
    assert result.distance_matrix == []
    assert result.is_complete


def test_single_stop():
    stop = _stop(1, 52.52, 13.405)
    result = find_shortest_route([stop])

    assert result.stops == (stop,)
    assert result.total_distance_km == 0
    assert result.distance_matrix == [[0.0]]


def test_result_is_permutation_of_input():
    stops = _random_stops(8, seed=1)
    result = find_shortest_route(stops)

    assert result.is_complete
    assert sorted(stop.stop_id for stop in result.stops) == list(range(8))
    assert len(result.distance_matrix) == 8


def test_total_distance_matches_route():
    stops = _random_stops(6, seed=2)
    result = find_shortest_route(stops)

    expected = sum(
        result.distance_matrix[stops.index(a)][stops.index(b)]
        for a, b in zip(result.stops, result.stops[1:])
    )
    assert result.total_distance_km == pytest.approx(expected)


def test_repeated_calls_are_deterministic():
    stops = _random_stops(9, seed=3)

    first = find_shortest_route(stops)
    second = find_shortest_route(stops)

    assert first.stops == second.stops
    assert first.total_distance_km == second.total_distance_km


def test_german_cities_example():
    stops = [
        _stop(1, 52.52, 13.405, "Berlin, Germany"),
        _stop(2, 53.5511, 9.9937, "Hamburg, Germany"),
        _stop(3, 48.1351, 11.582, "Munich, Germany"),
        _stop(4, 50.9375, 6.9603, "Cologne, Germany"),
    ]
    result = find_shortest_route(stops, start=stops[0])

    assert result.stops[0] is stops[0]
    assert len(result.stops) == 4
    assert 0 < result.total_distance_km < 2000


def test_explicit_start_by_address_only():
    stops = _random_stops(5, seed=4)
    result = find_shortest_route(stops, start=Stop(address="Stop 3"))

    assert result.stops[0] is stops[3]


def test_explicit_start_evaluates_only_that_start(monkeypatch: pytest.MonkeyPatch):
    starts = _record_starts(monkeypatch)
    stops = _random_stops(12, seed=5)

    find_shortest_route(stops, start=stops[7])

    assert starts == [7]


def test_unknown_start_raises():
    stops = _random_stops(4, seed=6)

    with pytest.raises(InvalidStartError):
        find_shortest_route(stops, start=Stop(address="North Pole", stop_id="missing"))


def test_unknown_start_raises_on_empty_input():
    with pytest.raises(InvalidStartError):
        find_shortest_route([], start=Stop(address="Nowhere", stop_id="missing"))


def test_unknown_start_raises_on_single_stop():
    stops = [_stop(1, 0.0, 0.0, "Workshop")]

    with pytest.raises(InvalidStartError):
        find_shortest_route(stops, start=Stop(address="Nowhere", stop_id="missing"))


def test_known_start_on_single_stop():
    stops = [_stop(1, 0.0, 0.0, "Workshop")]

    result = find_shortest_route(stops, start=Stop(address="Workshop"))

    assert result.stops == (stops[0],)
    assert result.distance_matrix == [[0.0]]


def test_invalid_start_is_a_value_error():
    stops = _random_stops(3, seed=6)

    with pytest.raises(ValueError, match="not found"):
        find_shortest_route(stops, start=Stop(address="Nowhere"))


def test_multi_start_tries_first_ten_positions(monkeypatch: pytest.MonkeyPatch):
    stops = _random_stops(15, seed=11)
    matrix = build_distance_matrix(stops)
    locator = StopLocator(stops)
    expected = min(
        route_distance(two_opt(nearest_neighbor(stops, matrix, start), matrix, stops), matrix, locator)
        for start in range(10)
    )
    starts = _record_starts(monkeypatch)

    result = find_shortest_route(stops)

    assert starts == list(range(10))
    assert result.total_distance_km == pytest.approx(expected)
    assert result.is_complete


def test_multi_start_limited_by_stop_count(monkeypatch: pytest.MonkeyPatch):
    starts = _record_starts(monkeypatch)

    find_shortest_route(_random_stops(4, seed=12))

    assert starts == [0, 1, 2, 3]


def test_start_candidate_limit_is_configurable(monkeypatch: pytest.MonkeyPatch):
    starts = _record_starts(monkeypatch)

    find_shortest_route(_random_stops(6, seed=13), max_start_candidates=2)

    assert starts == [0, 1]


def test_two_opt_can_be_disabled(monkeypatch: pytest.MonkeyPatch):
    def fail(*args, **kwargs):
        raise AssertionError("2-opt should not run")

    monkeypatch.setattr(optimizer, "two_opt", fail)
    stops = _random_stops(6, seed=14)

    result = find_shortest_route(stops, use_two_opt=False)

    assert len(result.stops) == 6


def test_refined_route_not_longer_than_constructed():
    stops = _random_stops(10, seed=15)

    with_two_opt = find_shortest_route(stops, start=stops[0])
    without_two_opt = find_shortest_route(stops, start=stops[0], use_two_opt=False)

    assert with_two_opt.total_distance_km <= without_two_opt.total_distance_km


def test_missing_coordinates_give_partial_route():
    stops = [
        _stop(1, 0.0, 0.0),
        _stop(2, 0.0, 1.0),
        _stop(3, 1.0, 1.0),
        _stop(4, None, None),
    ]

    result = find_shortest_route(stops, start=stops[0])

    assert [stop.stop_id for stop in result.stops] == [1, 2, 3]
    assert not result.is_complete
    assert math.isinf(result.distance_matrix[0][3])
    assert math.isfinite(result.total_distance_km)


def test_starting_at_stop_without_coordinates():
    stops = [_stop(1, 0.0, 0.0), _stop(2, None, None), _stop(3, 1.0, 1.0)]

    result = find_shortest_route(stops, start=stops[1])

    assert result.stops == (stops[1],)
    assert result.total_distance_km == 0


def test_unpinned_start_prefers_zero_length_tour_at_stop_without_coordinates():
    stops = [
        _stop(1, 0.0, 0.0),
        _stop(2, 0.0, 1.0),
        _stop(3, 1.0, 1.0),
        _stop(4, None, None),
    ]

    result = find_shortest_route(stops)

    assert result.stops == (stops[3],)
    assert result.total_distance_km == 0
    assert not result.is_complete


def test_payload_passes_through_untouched():
    wish = {"wish_id": 42, "gift": "Sled"}
    stops = [
        Stop(address="A", stop_id=1, latitude=0.0, longitude=0.0, payload=wish),
        Stop(address="B", stop_id=2, latitude=0.0, longitude=1.0),
    ]

    result = find_shortest_route(stops, start=stops[0])

    assert result.stops[0].payload is wish
    assert wish == {"wish_id": 42, "gift": "Sled"}
