"""Element types placed on a swim course."""

from enum import Enum


class ElementType(str, Enum):
    """Closed set of course element variants.

    The value is the wire name used in CourseData JSON.
    """

    BUOY = "buoy"
    START = "start"
    SHORE_ENTRY = "shore_entry"
    GATE_LEFT = "gate_left"
    GATE_RIGHT = "gate_right"
    FINISH_ENDPOINT = "finish_endpoint"
    FINISH_FUNNEL_LEFT = "finish_funnel_left"
    FINISH_FUNNEL_RIGHT = "finish_funnel_right"
    FINISH_LEFT = "finish_left"  # Legacy 2-point finish channel
    FINISH_RIGHT = "finish_right"  # Legacy 2-point finish channel
    FINISH = "finish"  # Legacy single-point finish
    RESCUE_ZONE = "rescue_zone"
    FEEDING_PLATFORM = "feeding_platform"
    FREEHAND = "freehand"

    def __str__(self) -> str:
        return self.value


# Every type belonging to a finish structure (current and legacy models).
# These always sort after all other route elements.
FINISH_TYPES: frozenset[ElementType] = frozenset(
    {
        ElementType.FINISH,
        ElementType.FINISH_LEFT,
        ElementType.FINISH_RIGHT,
        ElementType.FINISH_ENDPOINT,
        ElementType.FINISH_FUNNEL_LEFT,
        ElementType.FINISH_FUNNEL_RIGHT,
    }
)

# Map annotations that never take part in route classification
NON_ROUTE_TYPES: frozenset[ElementType] = frozenset({ElementType.RESCUE_ZONE, ElementType.FEEDING_PLATFORM})

# Types whose metadata may restrict them to specific laps
LAP_RESTRICTABLE_TYPES: frozenset[ElementType] = frozenset(
    {ElementType.BUOY, ElementType.GATE_LEFT, ElementType.GATE_RIGHT}
)

# Current 3-point finish structure, created only by the finish group builder
FINISH_GROUP_TYPES: frozenset[ElementType] = frozenset(
    {ElementType.FINISH_ENDPOINT, ElementType.FINISH_FUNNEL_LEFT, ElementType.FINISH_FUNNEL_RIGHT}
)
