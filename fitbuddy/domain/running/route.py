"""Route buffer encoding and map helpers."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ...models.running import PathPoint


def encode_path(path: Sequence[PathPoint]) -> str:
    """Serialize a route as a JSON array of ``[lat, lon, alt, t]`` arrays."""

    return json.dumps([list(point) for point in path], separators=(",", ":"))


def route_geojson(path: Sequence[PathPoint]) -> Dict[str, Any]:
    """Return a GeoJSON LineString feature in ``[lon, lat]`` order."""

    return {
        "type": "Feature",
        "properties": {},
        "geometry": {
            "type": "LineString",
            "coordinates": [[point[1], point[0]] for point in path],
        },
    }


def latest_position(path: Sequence[PathPoint]) -> Optional[List[float]]:
    if not path:
        return None
    return [path[-1][1], path[-1][0]]


def path_bounds(
    path: Sequence[PathPoint],
) -> Optional[Tuple[Tuple[float, float], Tuple[float, float]]]:
    """Return ``((min_lat, min_lon), (max_lat, max_lon))`` or None for an empty path."""

    if not path:
        return None
    lats = [p[0] for p in path]
    lons = [p[1] for p in path]
    return (min(lats), min(lons)), (max(lats), max(lons))


def elevation_profile(path: Sequence[PathPoint], every: int = 10) -> List[Dict[str, float]]:
    """Sample every ``every``-th point's altitude for the elevation chart."""

    return [
        {"index": index, "altitude": point[2] or 0.0}
        for index, point in enumerate(path)
        if index % every == 0
    ]
