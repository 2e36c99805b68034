"""Data model for swim course representation.

- LatLng: Geometry atom (lat, lng)
- ElementType: Closed set of course element variants
- ElementMetadata: Typed metadata variants (buoy, gate, funnel, rescue zone, freehand)
- CourseElement: Placed item with id, type, position and order
- CourseData: Course aggregate (elements, laps, cached distances)
- RouteParts: Route-role classification of the elements
- Distance model: loop/entry/exit/first-lap figures and lap-aware race totals
- CourseSession: Editing session applying pure reducers with undo history
"""

from swimcourse_planner.model.course_data import CourseData
from swimcourse_planner.model.course_element import CourseElement
from swimcourse_planner.model.distances import (
    CourseDistances,
    DifferingLap,
    RaceTotal,
    buoys_for_lap,
    compute_distances,
    differing_laps,
    race_total,
)
from swimcourse_planner.model.element_type import FINISH_TYPES, ElementType
from swimcourse_planner.model.lat_lng import LatLng
from swimcourse_planner.model.metadata import (
    BuoyMetadata,
    ElementMetadata,
    FreehandMetadata,
    FunnelMetadata,
    GateMetadata,
    RescueZoneMetadata,
)
from swimcourse_planner.model.ordering import enforce_finish_last
from swimcourse_planner.model.route_parts import RouteParts, extract_route_parts, finish_point

# Session last: its reducers import the generators, which import the modules above
from swimcourse_planner.model.course_session import CourseSession  # noqa: E402

__all__ = [
    "LatLng",
    "ElementType",
    "FINISH_TYPES",
    "ElementMetadata",
    "BuoyMetadata",
    "GateMetadata",
    "FunnelMetadata",
    "RescueZoneMetadata",
    "FreehandMetadata",
    "CourseElement",
    "CourseData",
    "RouteParts",
    "extract_route_parts",
    "finish_point",
    "CourseDistances",
    "RaceTotal",
    "DifferingLap",
    "compute_distances",
    "race_total",
    "buoys_for_lap",
    "differing_laps",
    "enforce_finish_last",
    "CourseSession",
]
