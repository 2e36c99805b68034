"""Integration test for the map placement workflow.

Drives the placement state machine through map clicks the way the planner
UI does: select a tool, click the map, double-click to close shapes.
"""

import pytest

from swimcourse_planner.constants import GeoConfig
from swimcourse_planner.model.element_type import FINISH_TYPES, ElementType
from swimcourse_planner.model.metadata import FreehandMetadata, FunnelMetadata, RescueZoneMetadata
from swimcourse_planner.placement.click_handlers import get_click_handler, handle_map_click, handle_map_double_click
from swimcourse_planner.placement.state_machine import Tool

M = GeoConfig.METERS_PER_DEGREE


def types_of(session) -> list[ElementType]:
    return [e.type for e in sorted(session.elements, key=lambda e: e.order)]


class TestSingleClickTools:
    """Buoy, start, shore entry and feeding platform place on one click."""

    def test_buoy_click_places_one_buoy(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.BUOY)

        added = handle_map_click(sm, lat=0.0, lng=0.0)

        assert added is not None and len(added) == 1
        assert added[0].type == ElementType.BUOY
        assert added[0].order == 0
        assert sm.is_idle
        assert ctx.session.is_dirty

    def test_consecutive_buoys_get_increasing_orders(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.BUOY)
        for i in range(3):
            handle_map_click(sm, lat=0.0, lng=i * 100 / M)

        assert [e.order for e in ctx.session.elements] == [0, 1, 2]

    def test_second_start_replaces_first(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.START)

        handle_map_click(sm, lat=0.0, lng=0.0)
        (second,) = handle_map_click(sm, lat=0.001, lng=0.0)

        starts = [e for e in ctx.session.elements if e.type == ElementType.START]
        assert starts == [second]

    def test_shore_entry_and_feeding_platform(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.SHORE_ENTRY)
        handle_map_click(sm, lat=0.0, lng=0.0)
        sm.select_tool(Tool.FEEDING_PLATFORM)
        handle_map_click(sm, lat=0.0, lng=0.001)

        assert types_of(ctx.session) == [ElementType.SHORE_ENTRY, ElementType.FEEDING_PLATFORM]

    def test_select_tool_ignores_clicks(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx

        assert handle_map_click(sm, lat=0.0, lng=0.0) is None
        assert ctx.session.elements == ()
        assert not ctx.session.is_dirty

    def test_invalid_coordinates_rejected(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.BUOY)

        with pytest.raises(ValueError):
            handle_map_click(sm, lat=91.0, lng=0.0)
        assert ctx.session.elements == ()


class TestFinishTool:
    """Finish clicks build the 3-point finish group."""

    def test_finish_places_three_elements(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.BUOY)
        handle_map_click(sm, lat=0.0, lng=0.0)
        sm.select_tool(Tool.FINISH)

        added = handle_map_click(sm, lat=200 / M, lng=0.0)

        assert [e.type for e in added] == [
            ElementType.FINISH_ENDPOINT,
            ElementType.FINISH_FUNNEL_LEFT,
            ElementType.FINISH_FUNNEL_RIGHT,
        ]
        assert isinstance(added[1].metadata, FunnelMetadata)
        assert len(ctx.session.undo_stack) == 2

    def test_second_finish_replaces_first(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.FINISH)
        first = handle_map_click(sm, lat=0.0, lng=0.0)
        second = handle_map_click(sm, lat=0.001, lng=0.0)

        finish_ids = {e.id for e in ctx.session.elements if e.type in FINISH_TYPES}
        assert finish_ids == {e.id for e in second}
        assert not finish_ids & {e.id for e in first}

    def test_buoy_after_finish_sorts_before_finish(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.FINISH)
        handle_map_click(sm, lat=0.0, lng=0.0)
        sm.select_tool(Tool.BUOY)
        handle_map_click(sm, lat=0.001, lng=0.001)

        types = types_of(ctx.session)
        assert types[0] == ElementType.BUOY
        assert all(t in FINISH_TYPES for t in types[1:])
        assert sorted(e.order for e in ctx.session.elements) == [0, 1, 2, 3]


class TestGateTool:
    """Gates take two clicks and land as one undo step."""

    def test_first_click_waits_for_second_post(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.GATE)

        assert handle_map_click(sm, lat=0.0, lng=0.0) is None

        assert sm.is_gate_pending
        assert ctx.gate_first_click is not None
        assert ctx.status_message == "Click the second gate post"
        assert ctx.session.elements == ()

    def test_second_click_commits_pair(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.GATE)
        handle_map_click(sm, lat=0.0, lng=0.0)

        added = handle_map_click(sm, lat=0.0, lng=20 / M)

        assert [e.type for e in added] == [ElementType.GATE_LEFT, ElementType.GATE_RIGHT]
        assert added[0].lng == 0.0
        assert added[1].order == added[0].order + 1
        assert sm.is_idle
        assert ctx.gate_first_click is None

    def test_gate_is_single_undo_step(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.GATE)
        handle_map_click(sm, lat=0.0, lng=0.0)
        handle_map_click(sm, lat=0.0, lng=20 / M)

        assert len(ctx.session.undo_stack) == 1
        assert ctx.session.undo() is True
        assert ctx.session.elements == ()

    def test_switching_tool_cancels_pending_gate(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.GATE)
        handle_map_click(sm, lat=0.0, lng=0.0)

        sm.select_tool(Tool.BUOY)

        assert sm.is_idle
        assert ctx.gate_first_click is None
        assert ctx.tool == Tool.BUOY
        added = handle_map_click(sm, lat=0.0, lng=0.0)
        assert added[0].type == ElementType.BUOY


class TestRescueZoneTool:
    """Rescue zones collect vertices until a double click closes them."""

    def click_square(self, sm, n: int) -> None:
        corners = [(0.0, 0.0), (0.0, 50 / M), (50 / M, 50 / M), (50 / M, 0.0)]
        for lat, lng in corners[:n]:
            handle_map_click(sm, lat=lat, lng=lng)

    def test_vertices_collected(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.RESCUE_ZONE)
        self.click_square(sm, 2)

        assert sm.is_zone_drawing
        assert len(ctx.zone_points) == 2
        assert ctx.status_message == "2 points - keep clicking to add more"

    def test_double_click_closes_zone(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.RESCUE_ZONE)
        self.click_square(sm, 4)
        assert ctx.status_message == "Double-click to close the zone"

        zone = handle_map_double_click(sm)

        assert zone.type == ElementType.RESCUE_ZONE
        assert isinstance(zone.metadata, RescueZoneMetadata)
        assert len(zone.metadata.vertices) == 4
        assert (zone.lat, zone.lng) == (0.0, 0.0)
        assert sm.is_idle
        assert ctx.tool == Tool.SELECT
        assert ctx.zone_points == []

    def test_double_click_with_two_vertices_keeps_drawing(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.RESCUE_ZONE)
        self.click_square(sm, 2)

        assert handle_map_double_click(sm) is None

        assert sm.is_zone_drawing
        assert len(ctx.zone_points) == 2
        assert ctx.session.elements == ()

    def test_rescue_zone_excluded_from_route(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.RESCUE_ZONE)
        self.click_square(sm, 3)
        handle_map_double_click(sm)

        parts = ctx.session.route_parts()
        assert parts.buoys == ()
        assert parts.start is None


class TestFreehandTool:
    """Freehand strokes are labeled annotations."""

    def test_stroke_committed_on_double_click(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.FREEHAND)
        ctx.stroke_label = "Kayak lane"
        handle_map_click(sm, lat=0.0, lng=0.0)
        handle_map_click(sm, lat=0.0, lng=0.001)

        stroke = handle_map_double_click(sm)

        assert stroke.type == ElementType.FREEHAND
        assert isinstance(stroke.metadata, FreehandMetadata)
        assert len(stroke.metadata.path) == 2
        assert stroke.metadata.label == "Kayak lane"
        assert sm.is_idle
        assert ctx.tool == Tool.FREEHAND

    def test_single_point_stroke_not_committed(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        sm.select_tool(Tool.FREEHAND)
        handle_map_click(sm, lat=0.0, lng=0.0)

        assert handle_map_double_click(sm) is None
        assert sm.is_freehand_drawing


class TestDispatch:
    """Click dispatch and tool selection edge cases."""

    def test_double_click_in_idle_ignored(self, sm_and_ctx) -> None:
        sm, _ = sm_and_ctx
        assert handle_map_double_click(sm) is None
        assert sm.is_idle

    def test_unknown_tool_rejected(self, sm_and_ctx) -> None:
        sm, ctx = sm_and_ctx
        with pytest.raises(ValueError, match="Unknown tool"):
            sm.select_tool("lighthouse")
        assert ctx.tool == Tool.SELECT

    def test_unknown_state_has_no_handler(self) -> None:
        with pytest.raises(RuntimeError, match="No click handler"):
            get_click_handler("Drifting")

    def test_every_state_has_handler(self, sm_and_ctx) -> None:
        sm, _ = sm_and_ctx
        for state in sm.states:
            assert callable(get_click_handler(state.name))
