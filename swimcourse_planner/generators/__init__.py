"""Generators deriving new geometry from the course.

- finish_group: 3-point finish structure from a single click
- lap_path: Multi-lap flyover path with variable pacing
- camera_path: Chase camera frames along the lap path
"""

from swimcourse_planner.generators.camera_path import CameraFrame, build_camera_path
from swimcourse_planner.generators.finish_group import build_finish_group
from swimcourse_planner.generators.lap_path import LapPath, PacingSegment, PathPoint, materialize_path

__all__ = [
    "build_finish_group",
    "materialize_path",
    "LapPath",
    "PathPoint",
    "PacingSegment",
    "build_camera_path",
    "CameraFrame",
]
