"""Click handlers for the course planner map.

Map clicks are dispatched to one handler per placement state. The active
tool decides what the click places:
- Single-click tools (buoy, start, shore entry, feeding platform) place
  one element immediately
- Finish places the 3-point finish group
- Gate, rescue zone and freehand collect clicks through the state machine
- Select ignores map clicks (element selection happens on markers)

A double click closes the rescue zone or ends the freehand stroke.
"""

import logging
from typing import TYPE_CHECKING, Callable, Optional

from swimcourse_planner.model.course_element import CourseElement
from swimcourse_planner.model.element_type import ElementType
from swimcourse_planner.model.lat_lng import LatLng
from swimcourse_planner.placement.state_machine import Tool

if TYPE_CHECKING:
    from swimcourse_planner.placement.state_machine import PlacementStateMachine

logger = logging.getLogger(__name__)

SINGLE_CLICK_TYPES = {
    Tool.BUOY: ElementType.BUOY,
    Tool.START: ElementType.START,
    Tool.SHORE_ENTRY: ElementType.SHORE_ENTRY,
    Tool.FEEDING_PLATFORM: ElementType.FEEDING_PLATFORM,
}

ClickHandler = Callable[["PlacementStateMachine", LatLng], Optional[tuple[CourseElement, ...]]]


# =============================================================================
# CLICK DISPATCH
# =============================================================================


def get_click_handler(state_name: str) -> ClickHandler:
    """Get the appropriate click handler for the given state.

    Raises:
        RuntimeError: If state has no registered handler
    """
    handlers: dict[str, ClickHandler] = {
        "Idle": handle_idle_click,
        "GatePending": handle_gate_pending_click,
        "ZoneDrawing": handle_zone_drawing_click,
        "FreehandDrawing": handle_freehand_drawing_click,
    }

    handler = handlers.get(state_name)
    if handler is None:
        raise RuntimeError(
            f"No click handler registered for state '{state_name}'. Available states: {list(handlers.keys())}."
        )
    return handler


def handle_map_click(sm: "PlacementStateMachine", lat: float, lng: float) -> Optional[tuple[CourseElement, ...]]:
    """Dispatch a map click to the handler for the current state.

    Returns:
        Elements added by this click, or None if it only collected input.

    Raises:
        ValueError: If the coordinates are out of range.
    """
    point = LatLng(lat=lat, lng=lng)
    state_name = sm.current_state.name
    logger.info(f"Click ({lat:.6f}, {lng:.6f}) with tool {sm.context.tool} in state {state_name}")
    return get_click_handler(state_name)(sm, point)


def handle_map_double_click(sm: "PlacementStateMachine") -> Optional[CourseElement]:
    """Close the zone or end the stroke being drawn.

    Returns:
        The committed rescue zone or freehand element, None if nothing was committed.
    """
    ids_before = {e.id for e in sm.session.elements}
    if sm.is_zone_drawing:
        committed = sm.try_transition("close_zone")
    elif sm.is_freehand_drawing:
        committed = sm.try_transition("finish_stroke")
    else:
        logger.info(f"Double click ignored in state {sm.current_state.name}")
        return None

    if not committed:
        return None
    added = [e for e in sm.session.elements if e.id not in ids_before]
    return added[0] if added else None


# =============================================================================
# STATE-SPECIFIC HANDLERS
# =============================================================================


def handle_idle_click(sm: "PlacementStateMachine", point: LatLng) -> Optional[tuple[CourseElement, ...]]:
    """Handle click in IDLE state: place immediately or begin a multi-click tool."""
    tool = sm.context.tool

    if tool in SINGLE_CLICK_TYPES:
        return (sm.session.add_element(element_type=SINGLE_CLICK_TYPES[tool], point=point),)
    if tool == Tool.FINISH:
        return sm.session.add_finish_group(point=point)
    if tool == Tool.GATE:
        sm.place_gate_post(point=point)
        return None
    if tool == Tool.RESCUE_ZONE:
        sm.add_zone_vertex(point=point)
        return None
    if tool == Tool.FREEHAND:
        sm.add_stroke_point(point=point)
        return None

    logger.info("[IDLE] Map click ignored: select tool active")
    return None


def handle_gate_pending_click(sm: "PlacementStateMachine", point: LatLng) -> tuple[CourseElement, ...]:
    """Second gate post: commit the pair."""
    ids_before = {e.id for e in sm.session.elements}
    sm.place_gate_post(point=point)
    return tuple(e for e in sm.session.elements if e.id not in ids_before)


def handle_zone_drawing_click(sm: "PlacementStateMachine", point: LatLng) -> None:
    sm.add_zone_vertex(point=point)


def handle_freehand_drawing_click(sm: "PlacementStateMachine", point: LatLng) -> None:
    sm.add_stroke_point(point=point)
