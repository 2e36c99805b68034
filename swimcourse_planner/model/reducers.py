"""Pure course reducers: (CourseData, args) -> CourseData.

Every function returns a new snapshot and leaves its input untouched.
Element-changing reducers re-establish the ordering invariant and refresh
the cached distances. CourseSession applies them and keeps undo history.
"""

import logging
from dataclasses import replace
from typing import Callable, Optional, Sequence

from swimcourse_planner.core.zone_geometry import MIN_ZONE_VERTICES
from swimcourse_planner.generators.finish_group import build_finish_group
from swimcourse_planner.model.course_data import CourseData
from swimcourse_planner.model.course_element import CourseElement, new_element_id
from swimcourse_planner.model.distances import with_distances
from swimcourse_planner.model.element_type import FINISH_TYPES, LAP_RESTRICTABLE_TYPES, ElementType
from swimcourse_planner.model.lat_lng import LatLng
from swimcourse_planner.model.metadata import (
    BuoyMetadata,
    BuoySide,
    ElementMetadata,
    FreehandMetadata,
    GateMetadata,
    RescueZoneMetadata,
)
from swimcourse_planner.model.ordering import enforce_finish_last, normalize_order
from swimcourse_planner.model.route_parts import extract_route_parts

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]

# Placing one of these replaces the previous instance
SINGLETON_TYPES = frozenset({ElementType.START})


def _apply(course: CourseData, elements: Sequence[CourseElement]) -> CourseData:
    return with_distances(course.with_elements(elements))


def _new_element(
    course: CourseData,
    element_type: ElementType,
    point: LatLng,
    offset: int = 1,
    label: Optional[str] = None,
    metadata: Optional[ElementMetadata] = None,
    new_id: IdFactory = new_element_id,
) -> CourseElement:
    return CourseElement(
        id=new_id(),
        type=element_type,
        lat=point.lat,
        lng=point.lng,
        order=course.max_order + offset,
        label=label,
        metadata=metadata,
    )


# =============================================================================
# Adding elements
# =============================================================================


def add_element(
    course: CourseData,
    element_type: ElementType,
    point: LatLng,
    label: Optional[str] = None,
    metadata: Optional[ElementMetadata] = None,
    new_id: IdFactory = new_element_id,
) -> CourseData:
    """Append an element after the current maximum order, finish kept last.

    The start is a singleton: placing one replaces any previous start.
    """
    element = _new_element(course, element_type, point, label=label, metadata=metadata, new_id=new_id)
    kept = course.elements
    if element_type in SINGLETON_TYPES:
        kept = tuple(e for e in kept if e.type != element_type)
        if len(kept) < len(course.elements):
            logger.info(f"Replacing previous {element_type.value}")
    logger.info(f"Added {element_type.value} at ({point.lat:.6f}, {point.lng:.6f})")
    return _apply(course, normalize_order(kept + (element,)))


def add_gate(
    course: CourseData,
    left: LatLng,
    right: LatLng,
    new_id: IdFactory = new_element_id,
) -> CourseData:
    """Append a gate pair (left post first) as one change."""
    gate_left = _new_element(course, ElementType.GATE_LEFT, left, offset=1, new_id=new_id)
    gate_right = _new_element(course, ElementType.GATE_RIGHT, right, offset=2, new_id=new_id)
    logger.info("Added gate pair")
    return _apply(course, normalize_order(course.elements + (gate_left, gate_right)))


def add_rescue_zone(
    course: CourseData,
    vertices: Sequence[LatLng],
    new_id: IdFactory = new_element_id,
) -> CourseData:
    """Append a rescue zone anchored at its first vertex.

    Raises:
        ValueError: With fewer than 3 vertices.
    """
    if len(vertices) < MIN_ZONE_VERTICES:
        raise ValueError(f"Rescue zone needs at least {MIN_ZONE_VERTICES} vertices, got {len(vertices)}")
    return add_element(
        course,
        element_type=ElementType.RESCUE_ZONE,
        point=vertices[0],
        metadata=RescueZoneMetadata(vertices=tuple(vertices)),
        new_id=new_id,
    )


def add_freehand(
    course: CourseData,
    path: Sequence[LatLng],
    color: str,
    label: Optional[str] = None,
    new_id: IdFactory = new_element_id,
) -> CourseData:
    """Append a freehand annotation anchored at its first point.

    Raises:
        ValueError: With fewer than 2 points.
    """
    if len(path) < 2:
        raise ValueError(f"Freehand drawing needs at least 2 points, got {len(path)}")
    return add_element(
        course,
        element_type=ElementType.FREEHAND,
        point=path[0],
        metadata=FreehandMetadata(path=tuple(path), label=label, color=color),
        new_id=new_id,
    )


def add_finish_group(course: CourseData, point: LatLng, new_id: IdFactory = new_element_id) -> CourseData:
    """Replace any existing finish structure with a new 3-point finish group."""
    kept = tuple(e for e in course.elements if e.type not in FINISH_TYPES)
    removed = len(course.elements) - len(kept)
    if removed:
        logger.info(f"Replacing previous finish ({removed} elements)")

    stripped = course.with_elements(kept)
    group = build_finish_group(
        click_point=point,
        buoys=extract_route_parts(kept).buoys,
        max_order=stripped.max_order,
        new_id=new_id,
    )
    return _apply(stripped, normalize_order(kept + group))


# =============================================================================
# Editing elements
# =============================================================================


def _replace_element(course: CourseData, updated: CourseElement) -> tuple[CourseElement, ...]:
    return tuple(updated if e.id == updated.id else e for e in course.elements)


def update_element_position(course: CourseData, element_id: str, point: LatLng) -> CourseData:
    """Move an element.

    Raises:
        KeyError: If the element does not exist.
    """
    element = course.element_by_id(element_id)
    return _apply(course, _replace_element(course, element.moved_to(lat=point.lat, lng=point.lng)))


def update_element_metadata(
    course: CourseData,
    element_id: str,
    metadata: Optional[ElementMetadata],
) -> CourseData:
    """Replace an element's metadata (None clears it).

    Raises:
        KeyError: If the element does not exist.
    """
    element = course.element_by_id(element_id)
    return _apply(course, _replace_element(course, element.with_metadata(metadata)))


def set_buoy_side(course: CourseData, element_id: str, side: BuoySide) -> CourseData:
    """Set a buoy's passing side, keeping its other metadata.

    Raises:
        KeyError: If the element does not exist.
        ValueError: If the element is not a buoy or the side is unknown.
    """
    element = course.element_by_id(element_id)
    if element.type != ElementType.BUOY:
        raise ValueError(f"Only buoys have a passing side, got {element.type.value}")
    if side not in ("left", "right", "directional"):
        raise ValueError(f"Unknown buoy side {side!r}")
    current = element.metadata if isinstance(element.metadata, BuoyMetadata) else BuoyMetadata()
    return update_element_metadata(course, element_id, replace(current, side=side))


def set_mandatory_laps(
    course: CourseData,
    element_id: str,
    laps: Optional[Sequence[int]],
) -> CourseData:
    """Restrict a buoy or gate post to specific laps (None or empty = every lap).

    Raises:
        KeyError: If the element does not exist.
        ValueError: If the element type cannot be lap-restricted.
    """
    element = course.element_by_id(element_id)
    if element.type not in LAP_RESTRICTABLE_TYPES:
        raise ValueError(f"{element.type.value} cannot be restricted to laps")

    mandatory = tuple(laps) if laps else None
    if element.type == ElementType.BUOY:
        current = element.metadata if isinstance(element.metadata, BuoyMetadata) else BuoyMetadata()
    else:
        current = element.metadata if isinstance(element.metadata, GateMetadata) else GateMetadata()
    return update_element_metadata(course, element_id, replace(current, mandatory_laps=mandatory))


def remove_element(course: CourseData, element_id: str) -> CourseData:
    """Delete an element and renumber the remaining ones.

    Deleting any part of a finish structure deletes the whole structure.

    Raises:
        KeyError: If the element does not exist.
    """
    element = course.element_by_id(element_id)
    if element.is_finish:
        kept = [e for e in course.elements if not e.is_finish]
        logger.info(f"Removed finish structure ({len(course.elements) - len(kept)} elements)")
        return _apply(course, normalize_order(kept))
    logger.info(f"Removed {element.type.value} #{element.order}")
    return _apply(course, normalize_order(e for e in course.elements if e.id != element_id))


def reorder_elements(course: CourseData, element_ids: Sequence[str]) -> CourseData:
    """Apply an explicit new sequence; finish elements are forced to the end.

    Raises:
        ValueError: If element_ids is not a permutation of the course's ids.
    """
    by_id = {e.id: e for e in course.elements}
    if len(element_ids) != len(by_id) or set(element_ids) != set(by_id):
        raise ValueError("Reorder must list every element id exactly once")
    return _apply(course, enforce_finish_last(by_id[element_id] for element_id in element_ids))


def restore_elements(course: CourseData, elements: Sequence[CourseElement]) -> CourseData:
    """Swap in a previous element snapshot (undo)."""
    return _apply(course, elements)


# =============================================================================
# Course settings
# =============================================================================


def set_laps(course: CourseData, laps: int) -> CourseData:
    """Change the lap count.

    Raises:
        ValueError: If laps is below 1.
    """
    if laps < 1:
        raise ValueError(f"Laps must be at least 1, got {laps}")
    return replace(course, laps=laps)


def set_race_label(course: CourseData, label: Optional[str]) -> CourseData:
    return replace(course, race_label=label)


def set_race_logo(course: CourseData, logo: Optional[str]) -> CourseData:
    return replace(course, race_logo=logo)
