"""
Spatial analysis helper functions.

Provides polygon containment for ArcGIS ring geometries, used when feature
layers are served from local fixture files instead of a GIS service.
"""
from typing import Any, Optional, Sequence
import logging

from shapely.geometry import Point, Polygon

logger = logging.getLogger(__name__)


def ring_to_polygon(ring: Sequence[Sequence[float]]) -> Optional[Polygon]:
    """
    Build a polygon from a single ArcGIS ring.

    Args:
        ring: List of [lng, lat] vertices

    Returns:
        Polygon, or None if the ring has fewer than three vertices
    """
    vertices = [(float(v[0]), float(v[1])) for v in ring if len(v) >= 2]
    if len(vertices) < 3:
        return None
    return Polygon(vertices)


def point_in_rings(
    point: tuple[float, float],
    rings: Sequence[Sequence[Sequence[float]]],
) -> bool:
    """
    Check if a point is inside an ArcGIS polygon.

    Rings are evaluated with the even-odd rule, so holes and multipart
    polygons both resolve correctly without relying on ring orientation.

    Args:
        point: (lng, lat) coordinate tuple
        rings: Polygon rings, each a list of [lng, lat] vertices

    Returns:
        True if point is inside the polygon, False otherwise
    """
    point_geom = Point(point)
    crossings = 0

    for ring in rings:
        polygon = ring_to_polygon(ring)
        if polygon is not None and polygon.contains(point_geom):
            crossings += 1

    return crossings % 2 == 1


def geometry_contains(point: tuple[float, float], geometry: Optional[dict[str, Any]]) -> bool:
    """
    Check if an ArcGIS geometry contains a point.

    Point geometries never contain anything.

    Args:
        point: (lng, lat) coordinate tuple
        geometry: ArcGIS geometry dictionary

    Returns:
        True if the geometry is a polygon containing the point
    """
    if not geometry or not isinstance(geometry.get("rings"), list):
        return False
    return point_in_rings(point, geometry["rings"])
