"""LatLng - The fundamental geometry atom for swim course planning.

A LatLng is a single WGS84 coordinate on the water surface.
Course elements, metadata vertex lists and materialized paths are all
expressed in LatLng.
"""

from dataclasses import dataclass
from typing import Any

from swimcourse_planner.core.geo_calculator import GeoCalculator


@dataclass(frozen=True)
class LatLng:
    """A geographic point.

    Attributes:
        lat: Latitude in decimal degrees, -90..90
        lng: Longitude in decimal degrees, -180..180

    Example:
        point = LatLng(lat=47.37, lng=8.54)
    """

    lat: float
    lng: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude out of range: {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"Longitude out of range: {self.lng}")

    @property
    def lat_lng(self) -> tuple[float, float]:
        """Return (lat, lng) tuple - standard geographic order."""
        return (self.lat, self.lng)

    @property
    def lng_lat(self) -> tuple[float, float]:
        """Return (lng, lat) tuple - GeoJSON/KML order."""
        return (self.lng, self.lat)

    def distance_to(self, other: "LatLng") -> float:
        """Great-circle distance to another point in kilometers."""
        return GeoCalculator.haversine_distance_km(lat1=self.lat, lng1=self.lng, lat2=other.lat, lng2=other.lng)

    def bearing_to(self, other: "LatLng") -> float:
        """Initial bearing to another point in degrees (0 if coincident)."""
        return GeoCalculator.initial_bearing_deg(lat1=self.lat, lng1=self.lng, lat2=other.lat, lng2=other.lng)

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LatLng":
        """Create LatLng from a {"lat": ..., "lng": ...} mapping."""
        return cls(lat=float(data["lat"]), lng=float(data["lng"]))

    def __repr__(self) -> str:
        return f"LatLng(lat={self.lat:.6f}, lng={self.lng:.6f})"
