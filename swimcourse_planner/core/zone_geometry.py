"""Rescue zone polygon geometry.

Rescue zones are closed polygons drawn on the water. The polygon itself
lives in the element metadata as a vertex list; this module turns it into
a Shapely polygon (lng, lat order, matching Shapely/PyProj conventions)
and measures it on the WGS84 ellipsoid.
"""

import logging
from typing import Sequence

import pyproj
from shapely.geometry import Polygon

logger = logging.getLogger(__name__)

MIN_ZONE_VERTICES = 3

_GEOD = pyproj.Geod(ellps="WGS84")


def zone_polygon(vertices: Sequence[tuple[float, float]]) -> Polygon | None:
    """Build a polygon from (lat, lng) vertices.

    Args:
        vertices: Polygon corners in drawing order, not repeated at the end

    Returns:
        Shapely Polygon in (lng, lat) coordinates, or None with fewer than 3 vertices.
    """
    if len(vertices) < MIN_ZONE_VERTICES:
        return None
    return Polygon([(lng, lat) for lat, lng in vertices])


def zone_area_m2(vertices: Sequence[tuple[float, float]]) -> float:
    """Geodesic area of a rescue zone in square meters (0 when degenerate)."""
    polygon = zone_polygon(vertices)
    if polygon is None:
        return 0.0
    area, _perimeter = _GEOD.geometry_area_perimeter(polygon)
    return abs(area)


def is_valid_zone(vertices: Sequence[tuple[float, float]]) -> bool:
    """Check that the vertices form a simple polygon with non-zero area."""
    polygon = zone_polygon(vertices)
    if polygon is None:
        return False
    if not polygon.is_valid:
        logger.debug(f"Rescue zone with {len(vertices)} vertices is self-intersecting")
        return False
    return polygon.area > 0
