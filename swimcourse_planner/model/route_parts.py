"""Route-parts extraction and finish-point resolution.

Turns the flat element collection into named route roles. Rescue zones
and feeding platforms are map annotations and never take part.

The finish point supports three generations of finish structure, tried
in order:
1. EndpointFinish - current 3-point model (endpoint + two funnel posts)
2. ChannelFinish - legacy 2-point channel, finish is the channel midpoint
3. LegacySingleFinish - legacy single finish marker
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from swimcourse_planner.model.course_element import CourseElement
from swimcourse_planner.model.element_type import NON_ROUTE_TYPES, ElementType
from swimcourse_planner.model.lat_lng import LatLng


@dataclass(frozen=True)
class RouteParts:
    """Classification snapshot of the route elements.

    Recomputed on every read, never cached across mutations.
    Buoys and gates are sorted by order.
    """

    shore_entry: Optional[CourseElement] = None
    start: Optional[CourseElement] = None
    finish_left: Optional[CourseElement] = None
    finish_right: Optional[CourseElement] = None
    finish_endpoint: Optional[CourseElement] = None
    finish_funnel_left: Optional[CourseElement] = None
    finish_funnel_right: Optional[CourseElement] = None
    buoys: tuple[CourseElement, ...] = ()
    gates: tuple[CourseElement, ...] = ()


def route_elements(elements: Iterable[CourseElement]) -> list[CourseElement]:
    """Elements taking part in the route, sorted by order (stable)."""
    return sorted((e for e in elements if e.type not in NON_ROUTE_TYPES), key=lambda e: e.order)


def extract_route_parts(elements: Iterable[CourseElement]) -> RouteParts:
    """Classify elements into route roles.

    When a singleton role appears more than once the lowest order wins and
    the others are ignored.

    Args:
        elements: Any element collection, in any order

    Returns:
        RouteParts (possibly with every role empty).
    """
    ordered = route_elements(elements)

    def first(*types: ElementType) -> Optional[CourseElement]:
        return next((e for e in ordered if e.type in types), None)

    return RouteParts(
        shore_entry=first(ElementType.SHORE_ENTRY),
        start=first(ElementType.START),
        finish_left=first(ElementType.FINISH_LEFT, ElementType.FINISH),
        finish_right=first(ElementType.FINISH_RIGHT),
        finish_endpoint=first(ElementType.FINISH_ENDPOINT),
        finish_funnel_left=first(ElementType.FINISH_FUNNEL_LEFT),
        finish_funnel_right=first(ElementType.FINISH_FUNNEL_RIGHT),
        buoys=tuple(e for e in ordered if e.type == ElementType.BUOY),
        gates=tuple(e for e in ordered if e.type in (ElementType.GATE_LEFT, ElementType.GATE_RIGHT)),
    )


# =============================================================================
# Finish resolution
# =============================================================================


@dataclass(frozen=True)
class EndpointFinish:
    """Current model: the finish endpoint element is the finish point."""

    endpoint: CourseElement

    @property
    def point(self) -> LatLng:
        return self.endpoint.position


@dataclass(frozen=True)
class ChannelFinish:
    """Legacy 2-point channel: the finish point is the channel midpoint."""

    left: CourseElement
    right: CourseElement

    @property
    def point(self) -> LatLng:
        return LatLng(lat=(self.left.lat + self.right.lat) / 2, lng=(self.left.lng + self.right.lng) / 2)


@dataclass(frozen=True)
class LegacySingleFinish:
    """Legacy single marker (or a channel with only its left post)."""

    marker: CourseElement

    @property
    def point(self) -> LatLng:
        return self.marker.position


FinishResolution = Union[EndpointFinish, ChannelFinish, LegacySingleFinish]


def resolve_finish(parts: RouteParts) -> Optional[FinishResolution]:
    """Pick the finish representation present in the course, newest model first."""
    if parts.finish_endpoint is not None:
        return EndpointFinish(endpoint=parts.finish_endpoint)
    if parts.finish_left is not None and parts.finish_right is not None:
        return ChannelFinish(left=parts.finish_left, right=parts.finish_right)
    if parts.finish_left is not None:
        return LegacySingleFinish(marker=parts.finish_left)
    return None


def finish_point(parts: RouteParts) -> Optional[LatLng]:
    """Finish point of the course, or None when no finish is placed."""
    resolution = resolve_finish(parts)
    return resolution.point if resolution is not None else None
