"""Map rendering: a pydeck live map and a static tile-mosaic detail map."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from html import escape
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pydeck as pdk

from ..models import PathPoint

TILE_SIZE = 256
MAX_ZOOM = 17
LIVE_ZOOM = 16
MAPBOX_STYLE = "mapbox://styles/mapbox/dark-v11"


def project(latitude: float, longitude: float, zoom: int) -> Tuple[float, float]:
    """Web Mercator world pixel coordinates at ``zoom``."""

    scale = TILE_SIZE * (2 ** zoom)
    x = (longitude + 180.0) / 360.0 * scale
    sin_lat = math.sin(math.radians(max(min(latitude, 85.05112878), -85.05112878)))
    y = (0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)) * scale
    return x, y


def fit_zoom(
    bounds: Tuple[Tuple[float, float], Tuple[float, float]],
    width: int,
    height: int,
    *,
    padding: int = 24,
    max_zoom: int = MAX_ZOOM,
) -> int:
    (min_lat, min_lon), (max_lat, max_lon) = bounds
    for zoom in range(max_zoom, -1, -1):
        left, top = project(max_lat, min_lon, zoom)
        right, bottom = project(min_lat, max_lon, zoom)
        if right - left <= width - 2 * padding and bottom - top <= height - 2 * padding:
            return zoom
    return 0


def tile_url(template: str, zoom: int, x: int, y: int, api_key: str = "") -> str:
    """Fill ``{z}``, ``{x}``, ``{y}`` and an optional ``{key}`` placeholder."""

    return template.format(z=zoom, x=x, y=y, key=api_key)


@dataclass
class PlacedTile:
    url: str
    left: float
    top: float


@dataclass
class StaticMap:
    width: int
    height: int
    zoom: int
    tiles: List[PlacedTile] = field(default_factory=list)
    line: List[Tuple[float, float]] = field(default_factory=list)

    @property
    def start(self) -> Optional[Tuple[float, float]]:
        return self.line[0] if self.line else None

    @property
    def finish(self) -> Optional[Tuple[float, float]]:
        return self.line[-1] if self.line else None


def build_static_map(
    path: Sequence[PathPoint],
    *,
    template: str,
    api_key: str = "",
    width: int = 640,
    height: int = 360,
) -> Optional[StaticMap]:
    """Lay out the tiles covering ``path`` and project the route onto them."""

    if not path:
        return None
    lats = [p[0] for p in path]
    lons = [p[1] for p in path]
    bounds = ((min(lats), min(lons)), (max(lats), max(lons)))
    zoom = fit_zoom(bounds, width, height)
    center_x, center_y = project(
        (bounds[0][0] + bounds[1][0]) / 2, (bounds[0][1] + bounds[1][1]) / 2, zoom
    )
    origin_x = center_x - width / 2
    origin_y = center_y - height / 2

    tile_count = 2 ** zoom
    tiles: List[PlacedTile] = []
    for ty in range(int(origin_y // TILE_SIZE), int((origin_y + height) // TILE_SIZE) + 1):
        if ty < 0 or ty >= tile_count:
            continue
        for tx in range(int(origin_x // TILE_SIZE), int((origin_x + width) // TILE_SIZE) + 1):
            tiles.append(
                PlacedTile(
                    url=tile_url(template, zoom, tx % tile_count, ty, api_key),
                    left=tx * TILE_SIZE - origin_x,
                    top=ty * TILE_SIZE - origin_y,
                )
            )

    line = []
    for lat, lon, *_ in path:
        x, y = project(lat, lon, zoom)
        line.append((x - origin_x, y - origin_y))
    return StaticMap(width=width, height=height, zoom=zoom, tiles=tiles, line=line)


def _marker(point: Tuple[float, float], fill: str) -> str:
    return f'<circle cx="{point[0]:.1f}" cy="{point[1]:.1f}" r="5" fill="{fill}"/>'


def static_map_html(static_map: StaticMap, *, color: str = "#ffffff") -> str:
    images = "".join(
        f'<img src="{escape(tile.url)}" width="{TILE_SIZE}" height="{TILE_SIZE}" '
        f'style="position:absolute;left:{tile.left:.1f}px;top:{tile.top:.1f}px" />'
        for tile in static_map.tiles
    )
    points = " ".join(f"{x:.1f},{y:.1f}" for x, y in static_map.line)
    markers = ""
    if static_map.start and static_map.finish:
        markers = _marker(static_map.start, "#22c55e") + _marker(static_map.finish, "#ef4444")
    return (
        f'<div style="position:relative;overflow:hidden;width:{static_map.width}px;'
        f'height:{static_map.height}px;border-radius:16px">{images}'
        f'<svg width="{static_map.width}" height="{static_map.height}" '
        'style="position:absolute;left:0;top:0">'
        f'<polyline points="{points}" fill="none" stroke="{color}" stroke-width="4" '
        f'stroke-linejoin="round" stroke-linecap="round"/>{markers}</svg></div>'
    )


def live_deck(
    route: Dict[str, Any],
    position: Optional[Sequence[float]],
    *,
    mapbox_token: str = "",
) -> pdk.Deck:
    """Route line plus current-position marker centred on the latest fix."""

    coordinates = route.get("geometry", {}).get("coordinates", [])
    layers = [
        pdk.Layer(
            "PathLayer",
            data=[{"path": coordinates}],
            get_path="path",
            get_color=[255, 255, 255],
            width_min_pixels=4,
        )
    ]
    if position:
        layers.append(
            pdk.Layer(
                "ScatterplotLayer",
                data=[{"position": list(position)}],
                get_position="position",
                get_fill_color=[34, 197, 94],
                radius_min_pixels=7,
            )
        )
    longitude, latitude = (position[0], position[1]) if position else (0.0, 0.0)
    view = pdk.ViewState(
        latitude=latitude, longitude=longitude, zoom=LIVE_ZOOM if position else 1
    )
    if mapbox_token:
        return pdk.Deck(
            layers=layers,
            initial_view_state=view,
            map_provider="mapbox",
            map_style=MAPBOX_STYLE,
            api_keys={"mapbox": mapbox_token},
        )
    return pdk.Deck(layers=layers, initial_view_state=view, map_provider="carto", map_style="dark")


__all__ = [
    "StaticMap",
    "build_static_map",
    "fit_zoom",
    "live_deck",
    "project",
    "static_map_html",
    "tile_url",
]
