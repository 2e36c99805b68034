"""State machine for placing course elements on the map.

Uses python-statemachine for the multi-click placement tools:
- Clear state definitions
- Guarded transitions (conditions)
- Entry hooks for clearing pending input
- Explicit event-driven transitions

States (4 states):
    IDLE: Ready; single-click tools place immediately from here
    GATE_PENDING: First gate post clicked, waiting for the second
    ZONE_DRAWING: Collecting rescue zone vertices
    FREEHAND_DRAWING: Collecting freehand stroke points

Active tool (stored in context.tool):
    Determines what a map click does. Switching tools cancels any pending
    gate, zone or stroke.

Transitions:
    IDLE -> GATE_PENDING: place_gate_post (remember first post)
    GATE_PENDING -> IDLE: place_gate_post (commit gate pair)
    IDLE/ZONE_DRAWING -> ZONE_DRAWING: add_zone_vertex
    ZONE_DRAWING -> IDLE: close_zone (needs >= 3 vertices)
    IDLE/FREEHAND_DRAWING -> FREEHAND_DRAWING: add_stroke_point
    FREEHAND_DRAWING -> IDLE: finish_stroke (needs >= 2 points)
    any pending state -> IDLE: cancel
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from swimcourse_planner.constants import CourseDefaults
from swimcourse_planner.core.zone_geometry import MIN_ZONE_VERTICES, is_valid_zone
from swimcourse_planner.model.course_session import CourseSession
from swimcourse_planner.model.lat_lng import LatLng

logger = logging.getLogger(__name__)


class Tool:
    """Map tools. Single-click tools place one element per click."""

    SELECT = "select"
    BUOY = "buoy"
    START = "start"
    FINISH = "finish"
    GATE = "gate"
    SHORE_ENTRY = "shore_entry"
    RESCUE_ZONE = "rescue_zone"
    FEEDING_PLATFORM = "feeding_platform"
    FREEHAND = "freehand"

    ALL = [SELECT, BUOY, START, FINISH, GATE, SHORE_ENTRY, RESCUE_ZONE, FEEDING_PLATFORM, FREEHAND]
    SINGLE_CLICK = [BUOY, START, SHORE_ENTRY, FEEDING_PLATFORM]


@dataclass
class PlacementContext:
    """Shared context/model for the placement state machine.

    Note: The 'state' field is managed by python-statemachine when this
    object is passed as the model.
    """

    session: CourseSession = field(default_factory=CourseSession)
    state: Optional[str] = None

    tool: str = Tool.SELECT
    selected_element_id: Optional[str] = None
    gate_first_click: Optional[LatLng] = None
    zone_points: list[LatLng] = field(default_factory=list)
    stroke_points: list[LatLng] = field(default_factory=list)
    stroke_color: str = CourseDefaults.FREEHAND_COLOR
    stroke_label: Optional[str] = None
    status_message: Optional[str] = None

    def clear_pending(self) -> None:
        """Drop any half-finished gate, zone or stroke."""
        self.gate_first_click = None
        self.zone_points = []
        self.stroke_points = []

    def __repr__(self) -> str:
        return (
            f"PlacementContext(state={self.state}, tool={self.tool}, "
            f"zone_points={len(self.zone_points)}, stroke_points={len(self.stroke_points)})"
        )


class PlacementStateMachine(StateMachine):
    """State machine for multi-click element placement.

    See module docstring for complete transition documentation.
    """

    idle = State("Idle", initial=True)
    gate_pending = State("GatePending")
    zone_drawing = State("ZoneDrawing")
    freehand_drawing = State("FreehandDrawing")

    place_gate_post = idle.to(gate_pending, on="remember_gate_post") | gate_pending.to(idle, on="commit_gate")

    add_zone_vertex = idle.to(zone_drawing, on="append_zone_vertex") | zone_drawing.to.itself(
        on="append_zone_vertex"
    )
    close_zone = zone_drawing.to(idle, cond="has_zone_polygon", on="commit_zone")

    add_stroke_point = idle.to(freehand_drawing, on="append_stroke_point") | freehand_drawing.to.itself(
        on="append_stroke_point"
    )
    finish_stroke = freehand_drawing.to(idle, cond="has_stroke_line", on="commit_stroke")

    cancel = gate_pending.to(idle) | zone_drawing.to(idle) | freehand_drawing.to(idle)

    def __init__(self, context: Optional[PlacementContext] = None, start_value: Optional[str] = None) -> None:
        """Initialize state machine with model pattern.

        Args:
            context: Shared context/model (creates new if None)
            start_value: Optional initial state value (for restoring state)
        """
        model = context or PlacementContext()
        super().__init__(model=model, start_value=start_value)

    @property
    def context(self) -> PlacementContext:
        """Alias for model."""
        return self.model

    @property
    def session(self) -> CourseSession:
        return self.context.session

    # ==========================================================================
    # Guards
    # ==========================================================================

    def has_zone_polygon(self) -> bool:
        """Guard: enough vertices for a closed polygon."""
        return len(self.context.zone_points) >= MIN_ZONE_VERTICES

    def has_stroke_line(self) -> bool:
        """Guard: enough points for a polyline."""
        return len(self.context.stroke_points) >= 2

    # ==========================================================================
    # State checks
    # ==========================================================================

    @property
    def is_idle(self) -> bool:
        return self.idle.is_active

    @property
    def is_gate_pending(self) -> bool:
        return self.gate_pending.is_active

    @property
    def is_zone_drawing(self) -> bool:
        return self.zone_drawing.is_active

    @property
    def is_freehand_drawing(self) -> bool:
        return self.freehand_drawing.is_active

    # ==========================================================================
    # Hooks
    # ==========================================================================

    def on_enter_idle(self) -> None:
        """Hook: every finished or cancelled placement returns here."""
        self.context.clear_pending()

    def remember_gate_post(self, point: LatLng) -> None:
        self.context.gate_first_click = point
        self.context.status_message = "Click the second gate post"

    def commit_gate(self, point: LatLng) -> None:
        first = self.context.gate_first_click
        self.session.add_gate(left=first, right=point)
        self.context.status_message = None

    def append_zone_vertex(self, point: LatLng) -> None:
        self.context.zone_points.append(point)
        remaining = MIN_ZONE_VERTICES - len(self.context.zone_points)
        if remaining > 0:
            self.context.status_message = f"{len(self.context.zone_points)} points - keep clicking to add more"
        else:
            self.context.status_message = "Double-click to close the zone"

    def commit_zone(self) -> None:
        vertices = list(self.context.zone_points)
        if not is_valid_zone([v.lat_lng for v in vertices]):
            logger.warning(f"Rescue zone with {len(vertices)} vertices is not a simple polygon")
        self.session.add_rescue_zone(vertices=vertices)
        self.context.tool = Tool.SELECT
        self.context.status_message = None

    def append_stroke_point(self, point: LatLng) -> None:
        self.context.stroke_points.append(point)

    def commit_stroke(self) -> None:
        self.session.add_freehand(
            path=list(self.context.stroke_points),
            color=self.context.stroke_color,
            label=self.context.stroke_label,
        )

    # ==========================================================================
    # Tool selection
    # ==========================================================================

    def select_tool(self, tool: str) -> None:
        """Switch tool, cancelling any pending multi-click placement.

        Raises:
            ValueError: If tool is unknown.
        """
        if tool not in Tool.ALL:
            raise ValueError(f"Unknown tool {tool!r}")
        if not self.is_idle:
            self.cancel()
        self.context.tool = tool
        self.context.status_message = None
        logger.info(f"Tool: {tool}")

    def try_transition(self, event: str, **kwargs: Any) -> bool:
        """Attempt a transition, returning success/failure.

        Args:
            event: Transition event name
            **kwargs: Arguments for transition

        Returns:
            True if transition succeeded, False otherwise.
        """
        try:
            self.send(event, **kwargs)
            return True
        except TransitionNotAllowed:
            logger.warning(f"Transition '{event}' not allowed from {self.current_state.name}")
            return False

    def __repr__(self) -> str:
        return f"PlacementStateMachine(state={self.current_state.name}, model={self.context!r})"

    @staticmethod
    def create(session: Optional[CourseSession] = None) -> tuple["PlacementStateMachine", PlacementContext]:
        """Factory method to create state machine with context.

        Returns:
            Tuple of (PlacementStateMachine, PlacementContext)
        """
        context = PlacementContext(session=session or CourseSession())
        sm = PlacementStateMachine(context=context)
        logger.info("Created PlacementStateMachine")
        return sm, context
