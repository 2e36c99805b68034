"""Finish group builder - 3-point finish structure from a single click.

The finish is an endpoint flanked by two funnel posts placed perpendicular
to the approach bearing (last buoy -> click point). Funnel post metadata
records the side of the swimmer's body the post is on while approaching,
which is the opposite of the geometric offset: the post offset to the left
carries side="right" and vice versa. Map rendering relies on this.
"""

import logging
from typing import Callable, Sequence

from swimcourse_planner.constants import FinishConfig
from swimcourse_planner.core.geo_calculator import GeoCalculator
from swimcourse_planner.model.course_element import CourseElement, new_element_id
from swimcourse_planner.model.element_type import ElementType
from swimcourse_planner.model.lat_lng import LatLng
from swimcourse_planner.model.metadata import FunnelMetadata

logger = logging.getLogger(__name__)


def approach_bearing(click_point: LatLng, buoys: Sequence[CourseElement]) -> float:
    """Bearing from the last buoy to the click point, north when no buoy exists."""
    if not buoys:
        return FinishConfig.DEFAULT_BEARING_DEG
    return buoys[-1].position.bearing_to(click_point)


def build_finish_group(
    click_point: LatLng,
    buoys: Sequence[CourseElement],
    max_order: int,
    new_id: Callable[[], str] = new_element_id,
) -> tuple[CourseElement, CourseElement, CourseElement]:
    """Synthesize the finish endpoint and its two funnel posts.

    Removing a previous finish group is the caller's responsibility.

    Args:
        click_point: Where the user clicked (becomes the endpoint)
        buoys: Buoys in route order; the last one defines the approach
        max_order: Highest order currently in use (-1 for empty course)
        new_id: Id factory

    Returns:
        Tuple (endpoint, funnel_left, funnel_right) with orders
        max_order+1, +2, +3.
    """
    bearing = approach_bearing(click_point=click_point, buoys=buoys)

    left_lat, left_lng = GeoCalculator.offset_perpendicular(
        lat=click_point.lat,
        lng=click_point.lng,
        bearing_deg=bearing,
        offset_m=FinishConfig.FUNNEL_OFFSET_M,
        side="left",
    )
    right_lat, right_lng = GeoCalculator.offset_perpendicular(
        lat=click_point.lat,
        lng=click_point.lng,
        bearing_deg=bearing,
        offset_m=FinishConfig.FUNNEL_OFFSET_M,
        side="right",
    )

    endpoint = CourseElement(
        id=new_id(),
        type=ElementType.FINISH_ENDPOINT,
        lat=click_point.lat,
        lng=click_point.lng,
        order=max_order + 1,
    )
    funnel_left = CourseElement(
        id=new_id(),
        type=ElementType.FINISH_FUNNEL_LEFT,
        lat=left_lat,
        lng=left_lng,
        order=max_order + 2,
        metadata=FunnelMetadata(side="right"),
    )
    funnel_right = CourseElement(
        id=new_id(),
        type=ElementType.FINISH_FUNNEL_RIGHT,
        lat=right_lat,
        lng=right_lng,
        order=max_order + 3,
        metadata=FunnelMetadata(side="left"),
    )

    logger.info(f"Finish group at ({click_point.lat:.6f}, {click_point.lng:.6f}), approach bearing {bearing:.1f}°")
    return endpoint, funnel_left, funnel_right
