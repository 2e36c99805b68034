"""Shared pytest fixtures for swimcourse_planner tests.

Provides element factories, small reference courses and sessions with
deterministic element ids.

COORDINATE SYSTEM:
    Tests use coordinates near the equator (lat~0) and prime meridian (lng~0)
    where the math is simple: 1 degree ≈ 111,195 meters in both directions
    on the R = 6371 km sphere. Offsets are written as meters / M.
"""

import itertools
from typing import Callable, Optional

import pytest

from swimcourse_planner.constants import GeoConfig
from swimcourse_planner.model.course_data import CourseData
from swimcourse_planner.model.course_element import CourseElement
from swimcourse_planner.model.course_session import CourseSession
from swimcourse_planner.model.element_type import ElementType
from swimcourse_planner.model.metadata import BuoyMetadata, ElementMetadata

M = GeoConfig.METERS_PER_DEGREE

ElementFactory = Callable[..., CourseElement]


# =============================================================================
# ID AND ELEMENT FACTORIES
# =============================================================================


@pytest.fixture
def sequential_ids() -> Callable[[], str]:
    """Id factory yielding e1, e2, ... for deterministic assertions."""
    counter = itertools.count(1)
    return lambda: f"e{next(counter)}"


@pytest.fixture
def make_element() -> ElementFactory:
    """Factory for CourseElements positioned in meters from the origin.

    Usage: make_element(ElementType.BUOY, north_m=100, east_m=0, order=1)
    """

    def _make(
        element_type: ElementType,
        north_m: float = 0.0,
        east_m: float = 0.0,
        order: int = 0,
        element_id: Optional[str] = None,
        label: Optional[str] = None,
        metadata: Optional[ElementMetadata] = None,
    ) -> CourseElement:
        return CourseElement(
            id=element_id or f"{element_type.value}-{order}",
            type=element_type,
            lat=north_m / M,
            lng=east_m / M,
            order=order,
            label=label,
            metadata=metadata,
        )

    return _make


# =============================================================================
# REFERENCE COURSES
# =============================================================================


@pytest.fixture
def square_buoys(make_element: ElementFactory) -> list[CourseElement]:
    """Four buoys on a 100 m square, counter-clockwise from the origin.

    Loop distance: 4 x 100 m = 0.4 km (to within a few mm on the sphere).
    Orders 1..4.
    """
    return [
        make_element(ElementType.BUOY, north_m=0, east_m=0, order=1, element_id="b1"),
        make_element(ElementType.BUOY, north_m=0, east_m=100, order=2, element_id="b2"),
        make_element(ElementType.BUOY, north_m=100, east_m=100, order=3, element_id="b3"),
        make_element(ElementType.BUOY, north_m=100, east_m=0, order=4, element_id="b4"),
    ]


@pytest.fixture
def square_course_elements(make_element: ElementFactory, square_buoys: list[CourseElement]) -> list[CourseElement]:
    """Square buoy loop with shore entry, start and a finish endpoint.

    Geometry:
        shore_entry: 100 m south of the start
        start: 50 m west of b1 (so lap 1 detours through it)
        finish_endpoint: 50 m west of b4
    Loop 0.4 km, entry 0.1 km, exit 0.05 km.
    First-lap extra: b4->start (sqrt(100² + 50²) ≈ 111.8 m) + start->b1 (50 m)
    - b4->b1 (100 m) ≈ 61.8 m.
    """
    return [
        make_element(ElementType.SHORE_ENTRY, north_m=-100, east_m=-50, order=0, element_id="shore"),
        make_element(ElementType.START, north_m=0, east_m=-50, order=1, element_id="start"),
        *(b.with_order(i + 2) for i, b in enumerate(square_buoys)),
        make_element(ElementType.FINISH_ENDPOINT, north_m=100, east_m=-50, order=6, element_id="finish"),
    ]


@pytest.fixture
def two_lap_restricted_buoys(make_element: ElementFactory) -> list[CourseElement]:
    """Three buoys, the middle one only mandatory on lap 1."""
    return [
        make_element(ElementType.BUOY, north_m=0, east_m=0, order=0, element_id="b1"),
        make_element(
            ElementType.BUOY,
            north_m=0,
            east_m=200,
            order=1,
            element_id="b2",
            metadata=BuoyMetadata(mandatory_laps=(1,)),
        ),
        make_element(ElementType.BUOY, north_m=200, east_m=0, order=2, element_id="b3"),
    ]


@pytest.fixture
def square_course(square_course_elements: list[CourseElement]) -> CourseData:
    """CourseData over the square course, 1 lap."""
    return CourseData(elements=tuple(square_course_elements), name="Square")


# =============================================================================
# SESSION FIXTURES
# =============================================================================


@pytest.fixture
def session(sequential_ids: Callable[[], str]) -> CourseSession:
    """Empty editing session with deterministic ids."""
    return CourseSession(new_id=sequential_ids)
