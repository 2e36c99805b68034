"""CourseElement - An item placed on the swim course.

Elements are immutable snapshots: every edit produces a new element via
dataclasses.replace so undo snapshots never alias live state.
"""

import uuid
from dataclasses import dataclass, replace
from typing import Any, Optional

from swimcourse_planner.model.element_type import FINISH_TYPES, LAP_RESTRICTABLE_TYPES, ElementType
from swimcourse_planner.model.lat_lng import LatLng
from swimcourse_planner.model.metadata import (
    BuoyMetadata,
    ElementMetadata,
    GateMetadata,
    parse_metadata,
    serialize_metadata,
)


def new_element_id() -> str:
    """Generate an opaque, stable element identifier."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class CourseElement:
    """A placed item on the course.

    Attributes:
        id: Opaque identifier, unique within the course, never changes
        type: Element variant
        lat: Latitude in decimal degrees
        lng: Longitude in decimal degrees
        order: Route sequence position (dense after normalization)
        label: Free-text annotation, no effect on geometry
        metadata: Parsed type-specific metadata

    Example:
        buoy = CourseElement(id="b1", type=ElementType.BUOY, lat=47.0, lng=8.0, order=0)
    """

    id: str
    type: ElementType
    lat: float
    lng: float
    order: int
    label: Optional[str] = None
    metadata: Optional[ElementMetadata] = None

    def __post_init__(self) -> None:
        """Validate coordinates and order."""
        # LatLng performs the range checks
        LatLng(lat=self.lat, lng=self.lng)
        if self.order < 0:
            raise ValueError(f"Element order must be non-negative, got {self.order}")

    @property
    def position(self) -> LatLng:
        return LatLng(lat=self.lat, lng=self.lng)

    @property
    def is_finish(self) -> bool:
        """True for every element of a finish structure (current or legacy)."""
        return self.type in FINISH_TYPES

    @property
    def mandatory_laps(self) -> Optional[tuple[int, ...]]:
        """Laps on which this element is active, None meaning every lap."""
        if self.type not in LAP_RESTRICTABLE_TYPES:
            return None
        if isinstance(self.metadata, (BuoyMetadata, GateMetadata)):
            return self.metadata.mandatory_laps
        return None

    def is_active_on_lap(self, lap: int) -> bool:
        laps = self.mandatory_laps
        return laps is None or lap in laps

    @property
    def buoy_side(self) -> str:
        """Passing side of a buoy ("left", "right" or "directional")."""
        if isinstance(self.metadata, BuoyMetadata):
            return self.metadata.side
        return "directional"

    def distance_to(self, other: "CourseElement | LatLng") -> float:
        """Great-circle distance to another element or point in kilometers."""
        return self.position.distance_to(LatLng(lat=other.lat, lng=other.lng))

    def moved_to(self, lat: float, lng: float) -> "CourseElement":
        return replace(self, lat=lat, lng=lng)

    def with_order(self, order: int) -> "CourseElement":
        return replace(self, order=order)

    def with_metadata(self, metadata: Optional[ElementMetadata]) -> "CourseElement":
        return replace(self, metadata=metadata)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the CourseData JSON shape (metadata as a string)."""
        return {
            "id": self.id,
            "type": self.type.value,
            "lat": self.lat,
            "lng": self.lng,
            "order": self.order,
            "label": self.label,
            "metadata": serialize_metadata(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CourseElement":
        """Create CourseElement from dictionary, parsing metadata once."""
        element_type = ElementType(data["type"])
        return cls(
            id=str(data["id"]),
            type=element_type,
            lat=float(data["lat"]),
            lng=float(data["lng"]),
            order=int(data.get("order", 0)),
            label=data.get("label"),
            metadata=parse_metadata(element_type=element_type, raw=data.get("metadata")),
        )

    def __repr__(self) -> str:
        return f"CourseElement({self.type.value} #{self.order}, {self.lat:.6f}, {self.lng:.6f})"
