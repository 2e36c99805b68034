"""Integration tests for serialization (save/load roundtrip).

Tests that courses built in a session can be saved as CourseData JSON,
loaded back and shared via share codes without data loss.
"""

import json
from pathlib import Path

import pytest

from swimcourse_planner.constants import GeoConfig
from swimcourse_planner.export.course_encoder import decode_course_data, encode_course_data
from swimcourse_planner.model.course_data import CourseData
from swimcourse_planner.model.course_session import CourseSession
from swimcourse_planner.model.element_type import ElementType
from swimcourse_planner.model.lat_lng import LatLng
from swimcourse_planner.model.metadata import BuoyMetadata, FunnelMetadata, OpaqueMetadata

M = GeoConfig.METERS_PER_DEGREE


def meters(north_m: float, east_m: float) -> LatLng:
    return LatLng(lat=north_m / M, lng=east_m / M)


@pytest.fixture
def built_session(session: CourseSession) -> CourseSession:
    """A full two-lap course with every element kind."""
    session.add_element(element_type=ElementType.SHORE_ENTRY, point=meters(-100, -50))
    session.add_element(element_type=ElementType.START, point=meters(0, -50))
    b1 = session.add_element(element_type=ElementType.BUOY, point=meters(0, 0))
    session.add_element(element_type=ElementType.BUOY, point=meters(0, 100), label="Yellow")
    session.add_gate(left=meters(100, 90), right=meters(100, 110))
    session.add_element(element_type=ElementType.FEEDING_PLATFORM, point=meters(50, 50))
    session.add_rescue_zone(vertices=[meters(200, 0), meters(200, 50), meters(250, 25)])
    session.add_freehand(path=[meters(-50, 0), meters(-50, 100)], color="#FF0000", label="Kayaks")
    session.add_finish_group(point=meters(150, -50))
    session.set_buoy_side(b1.id, "left")
    session.set_mandatory_laps(b1.id, [1])
    session.set_laps(2)
    session.set_race_label("Lake Cup")
    return session


class TestCourseDataSerialization:
    """Tests for CourseData save/load operations."""

    def test_to_dict_and_from_dict_roundtrip(self, built_session: CourseSession) -> None:
        """CourseData can be serialized to dict and restored.

        Tests:
        - All elements preserved with typed metadata
        - Laps and branding preserved
        - Cached distances preserved
        """
        course = built_session.course
        data = course.to_dict()

        json_str = json.dumps(data)
        assert len(json_str) > 0, "Should produce JSON string"

        restored = CourseData.from_dict(data=json.loads(json_str))

        assert restored == course
        assert restored.laps == 2
        assert restored.race_label == "Lake Cup"

    def test_save_and_load_file(self, built_session: CourseSession, tmp_path: Path) -> None:
        path = tmp_path / "course.json"
        path.write_text(json.dumps(built_session.course.to_dict()), encoding="utf-8")

        other = CourseSession()
        other.load(CourseData.from_dict(json.loads(path.read_text(encoding="utf-8"))))

        assert other.course == built_session.course
        assert not other.is_dirty
        assert not other.can_undo

    def test_metadata_stored_as_strings(self, built_session: CourseSession) -> None:
        elements = built_session.course.to_dict()["elements"]
        by_type: dict = {}
        for e in elements:
            by_type.setdefault(e["type"], e)

        assert json.loads(by_type["buoy"]["metadata"]) == {"side": "left", "mandatoryLaps": "1"}
        assert json.loads(by_type["finish_funnel_left"]["metadata"]) == {"side": "right"}
        assert by_type["start"]["metadata"] is None
        assert len(json.loads(by_type["rescue_zone"]["metadata"])) == 3

    def test_unknown_metadata_keys_survive(self, session: CourseSession) -> None:
        data = {
            "name": "Legacy",
            "laps": 1,
            "elements": [
                {"id": "b", "type": "buoy", "lat": 0, "lng": 0, "order": 0, "metadata": '{"color":"red","side":"right"}'},
                {"id": "p", "type": "feeding_platform", "lat": 0, "lng": 0.001, "order": 1, "metadata": '{"x":1}'},
            ],
        }
        session.load(CourseData.from_dict(data))
        buoy = session.course.element_by_id("b")
        assert buoy.metadata == BuoyMetadata(side="right", extra={"color": "red"})

        session.set_mandatory_laps("b", [1, 3])
        saved = session.course.to_dict()["elements"]

        assert json.loads(saved[0]["metadata"]) == {"color": "red", "side": "right", "mandatoryLaps": "1,3"}
        assert session.course.element_by_id("p").metadata == OpaqueMetadata(raw='{"x":1}')
        assert saved[1]["metadata"] == '{"x":1}'

    def test_malformed_metadata_degrades(self, session: CourseSession) -> None:
        data = {
            "name": "Broken",
            "laps": 0,
            "elements": [
                {"id": "b", "type": "buoy", "lat": 0, "lng": 0, "order": 0, "metadata": "{not json"},
                {"id": "f", "type": "finish_funnel_left", "lat": 0, "lng": 0, "order": 1, "metadata": "[]"},
            ],
        }
        session.load(CourseData.from_dict(data))

        assert session.course.laps == 1
        assert session.course.element_by_id("b").metadata is None
        assert session.course.element_by_id("b").buoy_side == "directional"
        assert session.course.element_by_id("f").metadata is None

    def test_loaded_distances_recomputed(self, built_session: CourseSession) -> None:
        data = built_session.course.to_dict()
        data["distanceKm"] = 42.0

        other = CourseSession(course=CourseData.from_dict(data))

        assert other.course.distance_km == built_session.course.distance_km


class TestShareCode:
    """Share codes carry the whole course."""

    def test_session_roundtrip(self, built_session: CourseSession) -> None:
        code = encode_course_data(built_session.course)

        other = CourseSession()
        other.load(decode_course_data(code))

        assert other.course == built_session.course
        assert other.race_total() == built_session.race_total()

    def test_funnel_sides_survive(self, built_session: CourseSession) -> None:
        restored = decode_course_data(encode_course_data(built_session.course))
        funnels = {e.type: e.metadata for e in restored.elements if isinstance(e.metadata, FunnelMetadata)}

        assert funnels[ElementType.FINISH_FUNNEL_LEFT].side == "right"
        assert funnels[ElementType.FINISH_FUNNEL_RIGHT].side == "left"

    def test_lap_figures_after_roundtrip(self, built_session: CourseSession) -> None:
        """Buoy 1 is restricted to lap 1, so lap 2 is highlighted."""
        other = CourseSession(course=decode_course_data(encode_course_data(built_session.course)))

        assert [lap.lap for lap in other.differing_laps()] == [2]
