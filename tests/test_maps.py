from __future__ import annotations

import pydeck as pdk
import pytest

from fitbuddy.ui.maps import (
    TILE_SIZE,
    build_static_map,
    fit_zoom,
    live_deck,
    project,
    static_map_html,
    tile_url,
)
from tests.builders import straight_path

TEMPLATE = "https://tiles.test/{z}/{x}/{y}.png?key={key}"


def test_project_origin_and_equator() -> None:
    assert project(0, 0, 0) == pytest.approx((128, 128))
    x, y = project(0, 180, 1)
    assert x == pytest.approx(2 * TILE_SIZE)
    assert y == pytest.approx(TILE_SIZE)


def test_fit_zoom_prefers_the_closest_view() -> None:
    tiny = ((12.97, 77.59), (12.9701, 77.5901))
    wide = ((-60.0, -170.0), (60.0, 170.0))

    assert fit_zoom(tiny, 640, 360) == 17
    assert fit_zoom(wide, 640, 360) <= 1


def test_tile_url_fills_placeholders() -> None:
    assert tile_url(TEMPLATE, 3, 4, 5, "abc") == "https://tiles.test/3/4/5.png?key=abc"
    assert tile_url("https://tile.openstreetmap.org/{z}/{x}/{y}.png", 1, 0, 1) == (
        "https://tile.openstreetmap.org/1/0/1.png"
    )


def test_static_map_centres_route_inside_frame() -> None:
    path = straight_path(8, start_lat=12.97, start_lon=77.59)

    static_map = build_static_map(path, template=TEMPLATE, api_key="k", width=640, height=360)

    assert static_map is not None
    assert static_map.tiles
    assert all(tile.url.endswith("?key=k") for tile in static_map.tiles)
    assert all(f"/{static_map.zoom}/" in tile.url for tile in static_map.tiles)
    for x, y in static_map.line:
        assert 0 <= x <= 640
        assert 0 <= y <= 360
    assert static_map.start == static_map.line[0]
    assert static_map.finish == static_map.line[-1]


def test_static_map_html_contains_tiles_route_and_markers() -> None:
    static_map = build_static_map(straight_path(3), template=TEMPLATE)

    html = static_map_html(static_map)

    assert html.count("<img") == len(static_map.tiles)
    assert "<polyline" in html
    assert html.count("<circle") == 2


def test_empty_path_has_no_static_map() -> None:
    assert build_static_map([], template=TEMPLATE) is None


def test_live_deck_centres_on_position() -> None:
    route = {"geometry": {"coordinates": [[77.59, 12.97], [77.6, 12.98]]}}

    deck = live_deck(route, [77.6, 12.98])

    assert isinstance(deck, pdk.Deck)
    assert deck.initial_view_state.latitude == 12.98
    assert deck.initial_view_state.longitude == 77.6
    assert len(deck.layers) == 2


def test_live_deck_without_fix_shows_route_only() -> None:
    deck = live_deck({"geometry": {"coordinates": []}}, None, mapbox_token="pk.test")

    assert len(deck.layers) == 1
    assert deck.initial_view_state.zoom == 1
