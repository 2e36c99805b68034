"""Per-lap path materializer for the flyover camera.

Expands the abstract route (start -> buoy loop x laps -> finish) into one
continuous open polyline. Each lap visits only its active buoys and closes
back on its first buoy; the final lap closes on the finish instead, when a
finish exists.

Pacing is not uniform: the polyline is split into pacing segments (entry,
one per lap, exit) and each segment receives a share of the flyover time
proportional to its weight. Entry, exit, the first and the last lap weigh
EDGE_WEIGHT, laps in between MIDDLE_WEIGHT, giving a slow start, a fast
middle and a slow finish. Within a segment time maps linearly to distance.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Literal

import numpy as np

from swimcourse_planner.constants import FlyoverConfig
from swimcourse_planner.core.geo_calculator import GeoCalculator
from swimcourse_planner.model.course_element import CourseElement
from swimcourse_planner.model.distances import buoys_for_lap
from swimcourse_planner.model.lat_lng import LatLng
from swimcourse_planner.model.route_parts import extract_route_parts, finish_point

logger = logging.getLogger(__name__)

PointKind = Literal["start", "buoy", "close", "finish"]
SegmentKind = Literal["entry", "lap", "exit"]


@dataclass(frozen=True)
class PathPoint:
    """One vertex of the materialized path.

    Attributes:
        lat, lng: Position in decimal degrees
        lap: Lap during which the swimmer reaches this point
        kind: start, buoy, close (loop-closing repeat of the first buoy) or finish
        element_id: Id of the element this point comes from
    """

    lat: float
    lng: float
    lap: int
    kind: PointKind
    element_id: str | None = None


@dataclass(frozen=True)
class PacingSegment:
    """Contiguous run of path points sharing one pacing weight."""

    kind: SegmentKind
    lap: int
    start_index: int
    end_index: int
    weight: float


@dataclass(frozen=True)
class PathPosition:
    """Interpolated location on the path."""

    position: LatLng
    bearing_deg: float
    lap: int


@dataclass(frozen=True, eq=False)
class LapPath:
    """Materialized multi-lap path with pacing information."""

    points: tuple[PathPoint, ...] = ()
    segments: tuple[PacingSegment, ...] = ()
    cumulative_km: np.ndarray = field(default_factory=lambda: np.zeros(0))

    @classmethod
    def empty(cls) -> "LapPath":
        return cls()

    @property
    def is_empty(self) -> bool:
        return len(self.points) < 2

    @property
    def total_km(self) -> float:
        return float(self.cumulative_km[-1]) if len(self.cumulative_km) else 0.0

    def segment_km(self, segment: PacingSegment) -> float:
        return float(self.cumulative_km[segment.end_index] - self.cumulative_km[segment.start_index])

    def time_knots(self) -> tuple[np.ndarray, np.ndarray]:
        """Breakpoints of the piecewise-linear time -> distance mapping.

        Returns:
            Tuple (times, distances), times normalized to 0..1.
        """
        weights = np.array([s.weight for s in self.segments], dtype=float)
        times = np.concatenate(([0.0], np.cumsum(weights) / weights.sum()))
        distances = np.array(
            [self.cumulative_km[self.segments[0].start_index]]
            + [self.cumulative_km[s.end_index] for s in self.segments],
            dtype=float,
        )
        return times, distances

    def distance_at(self, t: float) -> float:
        """Cumulative distance reached at normalized time t (0..1)."""
        if self.is_empty:
            return 0.0
        times, distances = self.time_knots()
        return float(np.interp(min(max(t, 0.0), 1.0), times, distances))

    def segment_for_index(self, point_index: int) -> PacingSegment:
        """Pacing segment containing the path edge starting at point_index."""
        for segment in self.segments:
            if segment.start_index <= point_index < segment.end_index:
                return segment
        return self.segments[-1]

    def _edge_bearing(self, index: int) -> float:
        """Forward bearing of edge index -> index+1, skipping zero-length edges."""
        n = len(self.points)
        candidates = list(range(index, n - 1)) + list(range(index - 1, -1, -1))
        for i in candidates:
            if self.cumulative_km[i + 1] > self.cumulative_km[i]:
                a, b = self.points[i], self.points[i + 1]
                return GeoCalculator.initial_bearing_deg(lat1=a.lat, lng1=a.lng, lat2=b.lat, lng2=b.lng)
        return 0.0

    def locate(self, distance_km: float) -> PathPosition:
        """Position and forward bearing at a cumulative distance.

        Raises:
            ValueError: If the path is empty.
        """
        if self.is_empty:
            raise ValueError("Cannot locate a position on an empty path")

        cum = self.cumulative_km
        idx = int(np.searchsorted(cum, distance_km, side="right")) - 1
        idx = min(max(idx, 0), len(self.points) - 2)

        edge_km = cum[idx + 1] - cum[idx]
        edge_t = (distance_km - cum[idx]) / edge_km if edge_km > 0 else 0.0
        edge_t = min(max(edge_t, 0.0), 1.0)

        a, b = self.points[idx], self.points[idx + 1]
        position = LatLng(
            lat=GeoCalculator.lerp(a.lat, b.lat, edge_t),
            lng=GeoCalculator.lerp(a.lng, b.lng, edge_t),
        )
        return PathPosition(
            position=position,
            bearing_deg=self._edge_bearing(idx),
            lap=self.segment_for_index(idx).lap,
        )


def _lap_weight(lap: int, first_lap: int, last_lap: int) -> float:
    if lap in (first_lap, last_lap):
        return FlyoverConfig.EDGE_WEIGHT
    return FlyoverConfig.MIDDLE_WEIGHT


def _cumulative_km(points: list[PathPoint]) -> np.ndarray:
    legs = [
        GeoCalculator.haversine_distance_km(lat1=a.lat, lng1=a.lng, lat2=b.lat, lng2=b.lng)
        for a, b in zip(points, points[1:])
    ]
    return np.concatenate(([0.0], np.cumsum(legs)))


def _point(element: CourseElement, lap: int, kind: PointKind) -> PathPoint:
    return PathPoint(lat=element.lat, lng=element.lng, lap=lap, kind=kind, element_id=element.id)


def materialize_path(elements: Iterable[CourseElement], laps: int) -> LapPath:
    """Build the concrete flyover path for the course.

    Args:
        elements: Course elements in any order
        laps: Number of laps (values below 1 are treated as 1)

    Returns:
        LapPath, empty with fewer than 2 buoys or zero total distance.
    """
    parts = extract_route_parts(elements)
    buoys = parts.buoys
    if len(buoys) < 2:
        return LapPath.empty()

    laps = max(laps, 1)
    lap_buoys = {lap: buoys_for_lap(buoys, lap) for lap in range(1, laps + 1)}
    active_laps = [lap for lap, active in lap_buoys.items() if active]
    if not active_laps:
        logger.warning(f"No buoy is active on any of the {laps} laps")
        return LapPath.empty()
    first_lap, last_lap = active_laps[0], active_laps[-1]
    finish = finish_point(parts)

    points: list[PathPoint] = []
    segments: list[PacingSegment] = []

    if parts.start is not None:
        points.append(_point(parts.start, lap=first_lap, kind="start"))

    segment_start = 0
    for lap in active_laps:
        active = lap_buoys[lap]
        first_idx = len(points)
        points.extend(_point(b, lap=lap, kind="buoy") for b in active)

        if first_idx > 0 and not segments:
            segments.append(
                PacingSegment(kind="entry", lap=lap, start_index=0, end_index=first_idx, weight=FlyoverConfig.EDGE_WEIGHT)
            )
            segment_start = first_idx

        weight = _lap_weight(lap, first_lap=first_lap, last_lap=last_lap)
        if lap == last_lap and finish is not None:
            last_buoy_idx = len(points) - 1
            segments.append(
                PacingSegment(kind="lap", lap=lap, start_index=segment_start, end_index=last_buoy_idx, weight=weight)
            )
            points.append(PathPoint(lat=finish.lat, lng=finish.lng, lap=lap, kind="finish"))
            segments.append(
                PacingSegment(
                    kind="exit",
                    lap=lap,
                    start_index=last_buoy_idx,
                    end_index=len(points) - 1,
                    weight=FlyoverConfig.EDGE_WEIGHT,
                )
            )
        else:
            points.append(_point(active[0], lap=lap, kind="close"))
            segments.append(
                PacingSegment(kind="lap", lap=lap, start_index=segment_start, end_index=len(points) - 1, weight=weight)
            )
        segment_start = len(points) - 1

    cumulative = _cumulative_km(points)
    if cumulative[-1] <= 0:
        logger.warning("Materialized path has zero length, nothing to fly over")
        return LapPath.empty()

    logger.debug(f"Materialized {len(points)} points in {len(segments)} pacing segments, {cumulative[-1]:.3f} km")
    return LapPath(points=tuple(points), segments=tuple(segments), cumulative_km=cumulative)
