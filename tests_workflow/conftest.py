"""Shared pytest fixtures for swimcourse_planner workflow tests.

Workflows drive a CourseSession through the placement state machine the way
map clicks do. Minimal fixtures: a session with deterministic ids and a
state machine bound to it.

COORDINATE SYSTEM:
    Tests use coordinates near the equator (lat~0) and prime meridian (lng~0)
    where 1 degree ≈ 111,195 meters in both directions.
"""

import itertools

import pytest

from swimcourse_planner.model.course_session import CourseSession
from swimcourse_planner.placement.state_machine import PlacementContext, PlacementStateMachine

SMAndCtx = tuple[PlacementStateMachine, PlacementContext]


@pytest.fixture
def session() -> CourseSession:
    """Empty session, element ids e1, e2, ..."""
    counter = itertools.count(1)
    return CourseSession(new_id=lambda: f"e{next(counter)}")


@pytest.fixture
def sm_and_ctx(session: CourseSession) -> SMAndCtx:
    """Placement state machine in Idle with the select tool."""
    return PlacementStateMachine.create(session=session)
