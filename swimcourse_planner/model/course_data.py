"""CourseData - The course aggregate loaded and saved by the persistence layer.

Holds the element collection, lap count, branding fields and the cached
distance figures. Cached distances are derived from the elements and are
only ever written by the distance model.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from swimcourse_planner.constants import CourseDefaults
from swimcourse_planner.model.course_element import CourseElement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseData:
    """Immutable snapshot of a course.

    Attributes:
        elements: All placed elements (route and annotations)
        laps: Number of laps swum, at least 1
        name: Course name
        zoom_level: Saved map zoom
        lake_label: Name of the lake/venue
        lake_lat_lng: Serialized venue location
        race_label: Branding text
        race_logo: Branding image (data URL), size limits belong to the API layer
        distance_km: Cached one-lap loop distance
        entry_dist_km: Cached shore entry -> start distance
        exit_dist_km: Cached last buoy -> finish distance
        first_lap_extra_km: Cached lap-1 detour through the start
        id: Persistence identifier, None until saved
    """

    elements: tuple[CourseElement, ...] = field(default_factory=tuple)
    laps: int = CourseDefaults.LAPS
    name: str = CourseDefaults.NAME
    zoom_level: int = CourseDefaults.ZOOM_LEVEL
    lake_label: Optional[str] = None
    lake_lat_lng: Optional[str] = None
    race_label: Optional[str] = None
    race_logo: Optional[str] = None
    distance_km: Optional[float] = None
    entry_dist_km: Optional[float] = None
    exit_dist_km: Optional[float] = None
    first_lap_extra_km: Optional[float] = None
    id: Optional[str] = None

    def with_elements(self, elements: "tuple[CourseElement, ...] | list[CourseElement]") -> "CourseData":
        return replace(self, elements=tuple(elements))

    def element_by_id(self, element_id: str) -> CourseElement:
        """Look up an element.

        Raises:
            KeyError: If no element has this id.
        """
        for element in self.elements:
            if element.id == element_id:
                return element
        raise KeyError(element_id)

    @property
    def max_order(self) -> int:
        """Highest order in use, -1 for an empty course."""
        return max((e.order for e in self.elements), default=-1)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape exchanged with the persistence layer."""
        data: dict[str, Any] = {
            "name": self.name,
            "lakeLabel": self.lake_label,
            "lakeLatLng": self.lake_lat_lng,
            "zoomLevel": self.zoom_level,
            "distanceKm": self.distance_km,
            "entryDistKm": self.entry_dist_km,
            "exitDistKm": self.exit_dist_km,
            "firstLapExtraKm": self.first_lap_extra_km,
            "elements": [e.to_dict() for e in self.elements],
            "laps": self.laps,
            "raceLabel": self.race_label,
            "raceLogo": self.race_logo,
        }
        if self.id is not None:
            data["id"] = self.id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CourseData":
        """Deserialize a course, clamping an invalid lap count to 1."""
        laps = data.get("laps") or CourseDefaults.LAPS
        if laps < 1:
            logger.warning(f"Course {data.get('name')!r} has laps={laps}, using 1")
            laps = 1

        return cls(
            elements=tuple(CourseElement.from_dict(data=e) for e in data.get("elements", [])),
            laps=int(laps),
            name=data.get("name", CourseDefaults.NAME),
            zoom_level=data.get("zoomLevel", CourseDefaults.ZOOM_LEVEL),
            lake_label=data.get("lakeLabel"),
            lake_lat_lng=data.get("lakeLatLng"),
            race_label=data.get("raceLabel"),
            race_logo=data.get("raceLogo"),
            distance_km=data.get("distanceKm"),
            entry_dist_km=data.get("entryDistKm"),
            exit_dist_km=data.get("exitDistKm"),
            first_lap_extra_km=data.get("firstLapExtraKm"),
            id=data.get("id"),
        )

    def __repr__(self) -> str:
        return f"CourseData({self.name!r}, {len(self.elements)} elements, laps={self.laps})"
