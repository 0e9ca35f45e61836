from __future__ import annotations

import json

from fitbuddy.domain.running import (
    elevation_profile,
    encode_path,
    latest_position,
    path_bounds,
    route_geojson,
)
from fitbuddy.models import Run
from tests.builders import make_run

PATH = [
    (12.97, 77.59, 900.0, 1_700_000_000.0),
    (12.98, 77.60, 905.5, 1_700_000_010.0),
    (12.96, 77.61, 0.0, 1_700_000_020.0),
]


def test_encode_path_round_trips_through_run_model() -> None:
    encoded = encode_path(PATH)

    assert json.loads(encoded)[0] == [12.97, 77.59, 900.0, 1_700_000_000.0]
    run = Run.model_validate(make_run(route_data=encoded))
    assert run.path() == PATH


def test_malformed_route_decodes_to_empty_path(caplog) -> None:
    run = Run.model_validate(make_run(id=9, route_data="[[1, 2]"))

    assert run.path() == []
    assert "Run 9 has malformed route data" in caplog.text


def test_null_altitude_decodes_as_zero() -> None:
    run = Run.model_validate(make_run(route_data="[[1, 2, null, 3]]"))

    assert run.path() == [(1.0, 2.0, 0.0, 3.0)]


def test_route_geojson_uses_lon_lat_order() -> None:
    feature = route_geojson(PATH)

    assert feature["type"] == "Feature"
    assert feature["geometry"]["type"] == "LineString"
    assert feature["geometry"]["coordinates"][1] == [77.60, 12.98]
    assert route_geojson([])["geometry"]["coordinates"] == []


def test_latest_position_and_bounds() -> None:
    assert latest_position(PATH) == [77.61, 12.96]
    assert latest_position([]) is None
    assert path_bounds(PATH) == ((12.96, 77.59), (12.98, 77.61))
    assert path_bounds([]) is None


def test_elevation_profile_samples_every_tenth_point() -> None:
    path = [(0.0, 0.0, float(i), float(i)) for i in range(25)]

    profile = elevation_profile(path)

    assert [point["index"] for point in profile] == [0, 10, 20]
    assert profile[1]["altitude"] == 10.0
