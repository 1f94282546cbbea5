"""
Great-circle distance utilities.

All proximity figures in an assessment come from the haversine formula on a
spherical Earth of radius 3959 miles. Polygon distance is approximated by the
nearest boundary vertex, not the nearest edge.
"""
import math
from typing import Any, Optional, Sequence

import numpy as np

from due_diligence.domain.models import Coordinate

EARTH_RADIUS_MILES = 3959.0


def haversine_distance_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance between two points.

    Args:
        lat1: Latitude of the first point in degrees
        lng1: Longitude of the first point in degrees
        lat2: Latitude of the second point in degrees
        lng2: Longitude of the second point in degrees

    Returns:
        Distance in miles
    """
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def nearest_vertex_distance(
    point: Coordinate,
    rings: Sequence[Sequence[Sequence[float]]],
) -> float:
    """
    Minimum haversine distance from a point to any vertex of a polygon.

    Args:
        point: Query coordinate
        rings: Polygon rings, each a list of [lng, lat] vertices

    Returns:
        Distance in miles, or infinity when the polygon has no vertices
    """
    vertices = [vertex[:2] for ring in rings for vertex in ring if len(vertex) >= 2]
    if not vertices:
        return math.inf

    coords = np.asarray(vertices, dtype=float)
    lat1 = math.radians(point.lat)
    lat2 = np.radians(coords[:, 1])
    d_lat = lat2 - lat1
    d_lng = np.radians(coords[:, 0] - point.lng)

    a = np.sin(d_lat / 2) ** 2 + math.cos(lat1) * np.cos(lat2) * np.sin(d_lng / 2) ** 2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return float(np.min(EARTH_RADIUS_MILES * c))


def feature_distance(
    point: Coordinate,
    geometry: Optional[dict[str, Any]],
    default: Optional[float] = None,
) -> Optional[float]:
    """
    Distance from a point to an ArcGIS point or polygon geometry.

    Args:
        point: Query coordinate
        geometry: ArcGIS geometry ({"x", "y"} or {"rings"}), may be None
        default: Value returned when the geometry is missing or malformed

    Returns:
        Distance in miles, or ``default``
    """
    if not geometry:
        return default

    x, y = geometry.get("x"), geometry.get("y")
    if isinstance(x, (int, float)) and isinstance(y, (int, float)):
        return haversine_distance_miles(point.lat, point.lng, float(y), float(x))

    rings = geometry.get("rings")
    if isinstance(rings, list):
        try:
            distance = nearest_vertex_distance(point, rings)
        except (TypeError, ValueError):
            return default
        if math.isfinite(distance):
            return distance

    return default
