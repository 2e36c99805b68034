"""Map placement: tool state machine and click dispatch."""

from swimcourse_planner.placement.click_handlers import handle_map_click, handle_map_double_click
from swimcourse_planner.placement.state_machine import PlacementContext, PlacementStateMachine, Tool

__all__ = [
    "PlacementContext",
    "PlacementStateMachine",
    "Tool",
    "handle_map_click",
    "handle_map_double_click",
]
