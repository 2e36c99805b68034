"""Core foundation for geodesic and polygon calculations.

- GeoCalculator: Geodesic calculations (distances, bearings, offsets, arcs)
- zone_geometry: Rescue zone polygons (validity, area)
"""

from swimcourse_planner.core.geo_calculator import GeoCalculator
from swimcourse_planner.core.zone_geometry import is_valid_zone, zone_area_m2, zone_polygon

__all__ = [
    # Geo calculator
    "GeoCalculator",
    # Rescue zones
    "zone_polygon",
    "zone_area_m2",
    "is_valid_zone",
]
