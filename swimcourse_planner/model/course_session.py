"""CourseSession - The editing session owning the active course.

Holds the current CourseData snapshot, a bounded undo history of element
snapshots, and the dirty flag. Every mutating method pushes the
pre-mutation elements, then assigns the result of a pure reducer.

Lap count and branding changes are settings, not element edits: they mark
the course dirty but are not recorded for undo.
"""

import logging
from typing import Optional, Sequence

from swimcourse_planner.constants import UndoConfig
from swimcourse_planner.model import reducers
from swimcourse_planner.model.course_data import CourseData
from swimcourse_planner.model.course_element import CourseElement, new_element_id
from swimcourse_planner.model.distances import (
    CourseDistances,
    DifferingLap,
    RaceTotal,
    compute_distances,
    differing_laps,
    race_total,
    with_distances,
)
from swimcourse_planner.model.element_type import FINISH_GROUP_TYPES, ElementType
from swimcourse_planner.model.lat_lng import LatLng
from swimcourse_planner.model.metadata import BuoySide, ElementMetadata
from swimcourse_planner.model.route_parts import RouteParts, extract_route_parts

logger = logging.getLogger(__name__)

ElementSnapshot = tuple[CourseElement, ...]


class CourseSession:
    """Active editing session for one course.

    Example:
        session = CourseSession()
        session.add_element(element_type=ElementType.BUOY, point=LatLng(lat=47.0, lng=8.0))
        session.undo()
    """

    def __init__(self, course: Optional[CourseData] = None, new_id=new_element_id) -> None:
        """Initialize session.

        Args:
            course: Course to edit (a new default course if None)
            new_id: Element id factory (injectable for deterministic tests)
        """
        self.course: CourseData = with_distances(course or CourseData())
        self.undo_stack: list[ElementSnapshot] = []
        self.is_dirty = False
        self._new_id = new_id

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def load(self, course: CourseData) -> None:
        """Replace the course (e.g. after loading from storage) and clear history."""
        self.course = with_distances(course)
        self.undo_stack.clear()
        self.is_dirty = False
        logger.info(f"Loaded {self.course!r}")

    def reset(self) -> None:
        """Start over with an empty default course."""
        self.load(CourseData())

    def mark_saved(self) -> None:
        self.is_dirty = False

    # =========================================================================
    # Undo
    # =========================================================================

    def push_undo(self) -> None:
        """Push the current elements to the undo stack with size limiting.

        Discards oldest snapshots when stack exceeds MAX_UNDO_STACK_SIZE.
        """
        self.undo_stack.append(self.course.elements)
        while len(self.undo_stack) > UndoConfig.MAX_UNDO_STACK_SIZE:
            self.undo_stack.pop(0)

    @property
    def can_undo(self) -> bool:
        return len(self.undo_stack) > 0

    def undo(self) -> bool:
        """Restore the most recent element snapshot.

        Returns:
            True if a snapshot was restored, False if history is empty.
        """
        if not self.undo_stack:
            return False
        previous = self.undo_stack.pop()
        self.course = reducers.restore_elements(self.course, previous)
        self.is_dirty = True
        logger.info(f"Undo: restored {len(previous)} elements, {len(self.undo_stack)} snapshots left")
        return True

    def _commit(self, course: CourseData) -> None:
        self.course = course
        self.is_dirty = True

    def _record(self, course: CourseData) -> None:
        self.push_undo()
        self._commit(course)

    # =========================================================================
    # Element operations
    # =========================================================================

    def add_element(
        self,
        element_type: ElementType,
        point: LatLng,
        label: Optional[str] = None,
        metadata: Optional[ElementMetadata] = None,
    ) -> CourseElement:
        """Place a single element.

        Returns:
            The element as stored (with its final order).
        """
        if element_type in FINISH_GROUP_TYPES:
            raise ValueError("Finish structure elements are placed with add_finish_group")
        ids_before = {e.id for e in self.course.elements}
        self._record(
            reducers.add_element(
                self.course, element_type=element_type, point=point, label=label, metadata=metadata, new_id=self._new_id
            )
        )
        return self._added_since(ids_before)[0]

    def add_gate(self, left: LatLng, right: LatLng) -> tuple[CourseElement, CourseElement]:
        """Place a gate pair as one undo step."""
        ids_before = {e.id for e in self.course.elements}
        self._record(reducers.add_gate(self.course, left=left, right=right, new_id=self._new_id))
        gate_left, gate_right = self._added_since(ids_before)
        return gate_left, gate_right

    def add_rescue_zone(self, vertices: Sequence[LatLng]) -> CourseElement:
        ids_before = {e.id for e in self.course.elements}
        self._record(reducers.add_rescue_zone(self.course, vertices=vertices, new_id=self._new_id))
        return self._added_since(ids_before)[0]

    def add_freehand(self, path: Sequence[LatLng], color: str, label: Optional[str] = None) -> CourseElement:
        ids_before = {e.id for e in self.course.elements}
        self._record(reducers.add_freehand(self.course, path=path, color=color, label=label, new_id=self._new_id))
        return self._added_since(ids_before)[0]

    def add_finish_group(self, point: LatLng) -> tuple[CourseElement, ...]:
        """Place the 3-point finish, replacing any previous finish.

        Returns:
            The new (endpoint, funnel_left, funnel_right).
        """
        ids_before = {e.id for e in self.course.elements}
        self._record(reducers.add_finish_group(self.course, point=point, new_id=self._new_id))
        return self._added_since(ids_before)

    def update_element_position(self, element_id: str, point: LatLng) -> None:
        self._record(reducers.update_element_position(self.course, element_id=element_id, point=point))

    def update_element_metadata(self, element_id: str, metadata: Optional[ElementMetadata]) -> None:
        self._record(reducers.update_element_metadata(self.course, element_id=element_id, metadata=metadata))

    def set_buoy_side(self, element_id: str, side: BuoySide) -> None:
        self._record(reducers.set_buoy_side(self.course, element_id=element_id, side=side))

    def set_mandatory_laps(self, element_id: str, laps: Optional[Sequence[int]]) -> None:
        self._record(reducers.set_mandatory_laps(self.course, element_id=element_id, laps=laps))

    def remove_element(self, element_id: str) -> None:
        self._record(reducers.remove_element(self.course, element_id=element_id))

    def reorder_elements(self, element_ids: Sequence[str]) -> None:
        self._record(reducers.reorder_elements(self.course, element_ids=element_ids))

    def _added_since(self, ids_before: set[str]) -> tuple[CourseElement, ...]:
        return tuple(e for e in self.course.elements if e.id not in ids_before)

    # =========================================================================
    # Settings
    # =========================================================================

    def set_laps(self, laps: int) -> None:
        self._commit(reducers.set_laps(self.course, laps=laps))

    def set_race_label(self, label: Optional[str]) -> None:
        self._commit(reducers.set_race_label(self.course, label=label))

    def set_race_logo(self, logo: Optional[str]) -> None:
        self._commit(reducers.set_race_logo(self.course, logo=logo))

    # =========================================================================
    # Derived views
    # =========================================================================

    @property
    def elements(self) -> tuple[CourseElement, ...]:
        return self.course.elements

    def route_parts(self) -> RouteParts:
        return extract_route_parts(self.course.elements)

    def distances(self) -> CourseDistances:
        return compute_distances(self.course.elements)

    def race_total(self) -> RaceTotal:
        return race_total(self.course)

    def differing_laps(self) -> list[DifferingLap]:
        return differing_laps(self.course.elements, self.course.laps)

    def __repr__(self) -> str:
        return f"CourseSession({self.course!r}, undo={len(self.undo_stack)}, dirty={self.is_dirty})"
