"""Chase camera frames for the course flyover.

Samples the paced lap path once per video frame, smooths the heading so
the camera does not snap at sharp turns, and places the camera a few
meters behind the swimmer looking forward.
"""

import logging
from dataclasses import dataclass
from math import floor

from swimcourse_planner.constants import FlyoverConfig
from swimcourse_planner.core.geo_calculator import GeoCalculator
from swimcourse_planner.generators.lap_path import LapPath, PathPosition
from swimcourse_planner.model.lat_lng import LatLng

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CameraFrame:
    """Camera state for one video frame.

    Attributes:
        center: Camera target, CHASE_DISTANCE_M behind the swimmer
        heading: Smoothed forward bearing in degrees
        tilt: Camera tilt in degrees
        zoom: Map zoom level
        swimmer_pos: Interpolated swimmer position
        lap: Lap the swimmer is on
    """

    center: LatLng
    heading: float
    tilt: float
    zoom: int
    swimmer_pos: LatLng
    lap: int


def sample_positions(lap_path: LapPath, total_frames: int) -> list[PathPosition]:
    """Sample the paced path at t = f / total_frames for every frame f."""
    return [lap_path.locate(lap_path.distance_at(f / total_frames)) for f in range(total_frames)]


def smooth_headings(raw_headings: list[float], alpha: float = FlyoverConfig.HEADING_SMOOTHING_ALPHA) -> list[float]:
    """Exponential moving average over headings along the shortest arc."""
    if not raw_headings:
        return []
    smoothed = [raw_headings[0]]
    for heading in raw_headings[1:]:
        smoothed.append(GeoCalculator.ema_bearing(previous=smoothed[-1], target=heading, alpha=alpha))
    return smoothed


def build_camera_path(
    lap_path: LapPath,
    duration_sec: float,
    fps: int = FlyoverConfig.DEFAULT_FPS,
) -> list[CameraFrame]:
    """Build one camera frame per video frame.

    Args:
        lap_path: Materialized course path
        duration_sec: Flyover length in seconds
        fps: Frames per second

    Returns:
        floor(duration_sec * fps) frames, or an empty list for an empty path.

    Raises:
        ValueError: If duration_sec or fps is not positive.
    """
    if duration_sec <= 0:
        raise ValueError(f"Flyover duration must be positive, got {duration_sec}")
    if fps <= 0:
        raise ValueError(f"Frame rate must be positive, got {fps}")
    if lap_path.is_empty:
        return []

    total_frames = floor(duration_sec * fps)
    if total_frames == 0:
        return []

    positions = sample_positions(lap_path=lap_path, total_frames=total_frames)
    headings = smooth_headings([p.bearing_deg for p in positions])

    frames = []
    for position, heading in zip(positions, headings):
        behind_lat, behind_lng = GeoCalculator.destination(
            lat=position.position.lat,
            lng=position.position.lng,
            bearing_deg=(heading + 180) % 360,
            distance_m=FlyoverConfig.CHASE_DISTANCE_M,
        )
        frames.append(
            CameraFrame(
                center=LatLng(lat=behind_lat, lng=behind_lng),
                heading=heading,
                tilt=FlyoverConfig.TILT_DEG,
                zoom=FlyoverConfig.ZOOM,
                swimmer_pos=position.position,
                lap=position.lap,
            )
        )

    logger.info(f"Built {len(frames)} camera frames over {lap_path.total_km:.3f} km")
    return frames
