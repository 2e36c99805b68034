"""Geodesic calculations on Earth's surface.

Provides geographic helper functions for swim course planning:
- Distance calculation (Haversine formula)
- Bearing calculation (initial heading between points)
- Destination calculation (endpoint from start, bearing, distance)
- Perpendicular offsets and swim-side arcs around buoys
- Bearing smoothing (circular math)

All calculations use a spherical Earth approximation (R = 6,371 km).
"""

from math import asin, atan2, cos, degrees, radians, sin, sqrt
from typing import Literal

from swimcourse_planner.constants import ArcConfig, GeoConfig

EARTH_RADIUS_KM = GeoConfig.EARTH_RADIUS_KM

Side = Literal["left", "right"]


class GeoCalculator:
    """Static methods for geodesic calculations on Earth's surface.

    Coordinates are in decimal degrees (WGS84), always passed as (lat, lng).
    Bearings are in degrees clockwise from North (0-360).
    Distances are in kilometers unless the argument name says meters.
    """

    EARTH_RADIUS_KM = EARTH_RADIUS_KM

    @staticmethod
    def haversine_distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
        """Calculate great-circle distance between two points using Haversine formula.

        Args:
            lat1: Latitude of first point (decimal degrees)
            lng1: Longitude of first point (decimal degrees)
            lat2: Latitude of second point (decimal degrees)
            lng2: Longitude of second point (decimal degrees)

        Returns:
            Distance in kilometers.
        """
        dlat = radians(lat2 - lat1)
        dlng = radians(lng2 - lng1)
        a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlng / 2) ** 2
        return EARTH_RADIUS_KM * 2 * atan2(sqrt(a), sqrt(1 - a))

    @staticmethod
    def initial_bearing_deg(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
        """Calculate initial bearing from point 1 to point 2.

        The bearing is the compass direction to travel from start to end,
        measured clockwise from true North. Coincident points give 0.

        Returns:
            Bearing in degrees (0-360, clockwise from North).
        """
        lat1_rad, lat2_rad = radians(lat1), radians(lat2)
        dlng = radians(lng2 - lng1)
        y = sin(dlng) * cos(lat2_rad)
        x = cos(lat1_rad) * sin(lat2_rad) - sin(lat1_rad) * cos(lat2_rad) * cos(dlng)
        return (degrees(atan2(y, x)) + 360) % 360

    @staticmethod
    def destination(
        lat: float,
        lng: float,
        bearing_deg: float,
        distance_m: float,
    ) -> tuple[float, float]:
        """Calculate destination point given start, bearing, and distance.

        Args:
            lat: Latitude of start point (decimal degrees)
            lng: Longitude of start point (decimal degrees)
            bearing_deg: Bearing in degrees (clockwise from North)
            distance_m: Distance to travel in meters

        Returns:
            Tuple (lat, lng) of destination point in decimal degrees.
        """
        brng = radians(bearing_deg)
        lat1 = radians(lat)
        lng1 = radians(lng)
        d_R = distance_m / GeoConfig.EARTH_RADIUS_M

        lat2 = asin(sin(lat1) * cos(d_R) + cos(lat1) * sin(d_R) * cos(brng))
        lng2 = lng1 + atan2(
            sin(brng) * sin(d_R) * cos(lat1),
            cos(d_R) - sin(lat1) * sin(lat2),
        )
        # Normalize to -180..+180
        return degrees(lat2), ((degrees(lng2) + 540) % 360) - 180

    @staticmethod
    def offset_perpendicular(
        lat: float,
        lng: float,
        bearing_deg: float,
        offset_m: float,
        side: Side,
    ) -> tuple[float, float]:
        """Offset a point perpendicular to a bearing.

        Left is bearing - 90°, right is bearing + 90°.

        Returns:
            Tuple (lat, lng) of the offset point.
        """
        perpendicular = bearing_deg - 90 if side == "left" else bearing_deg + 90
        return GeoCalculator.destination(
            lat=lat,
            lng=lng,
            bearing_deg=(perpendicular + 360) % 360,
            distance_m=offset_m,
        )

    @staticmethod
    def arc_around_buoy(
        lat: float,
        lng: float,
        bearing_deg: float,
        side: str,
    ) -> list[tuple[float, float]]:
        """Swim-side bulge of the route polyline around a sided buoy.

        Three points offset towards the swim side: SPREAD_M before the buoy,
        level with it, and SPREAD_M after it along the approach bearing.
        Directional buoys have no forced side and return the buoy itself.

        Returns:
            List of (lat, lng) tuples.
        """
        if side not in ("left", "right"):
            return [(lat, lng)]

        before = GeoCalculator.destination(
            lat=lat, lng=lng, bearing_deg=(bearing_deg + 180) % 360, distance_m=ArcConfig.SPREAD_M
        )
        after = GeoCalculator.destination(lat=lat, lng=lng, bearing_deg=bearing_deg, distance_m=ArcConfig.SPREAD_M)
        return [
            GeoCalculator.offset_perpendicular(
                lat=p_lat, lng=p_lng, bearing_deg=bearing_deg, offset_m=ArcConfig.OFFSET_M, side=side
            )
            for p_lat, p_lng in (before, (lat, lng), after)
        ]

    @staticmethod
    def shortest_arc_deg(bearing_a: float, bearing_b: float) -> float:
        """Signed angular difference from bearing_a to bearing_b in [-180, 180)."""
        return ((bearing_b - bearing_a + 540) % 360) - 180

    @staticmethod
    def ema_bearing(previous: float, target: float, alpha: float) -> float:
        """Move previous towards target by alpha along the shorter arc.

        Args:
            previous: Smoothed bearing so far (degrees)
            target: Raw bearing for this step (degrees)
            alpha: Smoothing factor (0 = keep previous, 1 = jump to target)

        Returns:
            Smoothed bearing in degrees (0-360).
        """
        diff = GeoCalculator.shortest_arc_deg(bearing_a=previous, bearing_b=target)
        return (previous + diff * alpha) % 360

    @staticmethod
    def lerp(a: float, b: float, t: float) -> float:
        """Linear interpolation between two scalars."""
        return a + (b - a) * t
