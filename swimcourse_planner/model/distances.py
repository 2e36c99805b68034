"""Distance model - loop, entry, exit, first-lap surcharge and race totals.

Conventions:
- Loop: closed circuit through the buoys only (B1 -> ... -> Bn -> B1).
- Entry: shore entry -> start. The start -> first buoy leg is not part of
  the entry; it is accounted for by the first-lap extra.
- First-lap extra: the start is only a waypoint on lap 1, where the closing
  edge Bn -> B1 becomes Bn -> start -> B1.
- Exit: last buoy -> finish point.

Buoys may carry mandatory laps, so the race total sums each lap's own loop
instead of multiplying one loop by the lap count.
"""

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from swimcourse_planner.constants import GeoConfig, LapConfig
from swimcourse_planner.model.course_data import CourseData
from swimcourse_planner.model.course_element import CourseElement
from swimcourse_planner.model.route_parts import extract_route_parts, finish_point

logger = logging.getLogger(__name__)


def _round_km(value: float) -> float:
    return round(value, GeoConfig.DISTANCE_DECIMALS)


@dataclass(frozen=True)
class CourseDistances:
    """Cached distance figures, each rounded to meters (km with 3 decimals)."""

    loop_km: float = 0.0
    entry_km: float = 0.0
    exit_km: float = 0.0
    first_lap_extra_km: float = 0.0


@dataclass(frozen=True)
class RaceTotal:
    """Lap-aware race distance.

    Attributes:
        total_km: Everything the swimmer covers from shore entry to finish
        avg_loop_km: Mean loop distance over all laps
        total_loop_km: Sum of every lap's own loop
        entry_km: Shore entry -> start
        first_lap_extra_km: Lap-1 detour through the start
        exit_km: Last buoy of the last lap -> finish
    """

    total_km: float
    avg_loop_km: float
    total_loop_km: float = 0.0
    entry_km: float = 0.0
    first_lap_extra_km: float = 0.0
    exit_km: float = 0.0


@dataclass(frozen=True)
class DifferingLap:
    """A lap whose buoy sequence differs from the full sequence."""

    lap: int
    color: str


# =============================================================================
# Lap filtering
# =============================================================================


def buoys_for_lap(buoys: Iterable[CourseElement], lap: int) -> list[CourseElement]:
    """Buoys active on the given lap, in their original order.

    Buoys without mandatory laps are active on every lap.
    """
    return [b for b in buoys if b.is_active_on_lap(lap)]


def loop_km(buoys: Sequence[CourseElement]) -> float:
    """Closed-circuit distance through the buoys, including the wraparound edge.

    Returns:
        Distance in km (unrounded), 0 for fewer than 2 buoys.
    """
    n = len(buoys)
    if n < 2:
        return 0.0
    return sum(buoys[i].distance_to(buoys[(i + 1) % n]) for i in range(n))


def lap_loop_km(buoys: Sequence[CourseElement], lap: int) -> float:
    """Closed-loop distance for one lap's active buoys."""
    return loop_km(buoys_for_lap(buoys, lap))


def first_lap_extra_km(buoys: Sequence[CourseElement], start: CourseElement | None) -> float:
    """Extra distance of routing the closing edge through the start.

    Returns:
        Bn -> start + start -> B1 - Bn -> B1, or 0 without start or buoys.
    """
    if start is None or not buoys:
        return 0.0
    first, last = buoys[0], buoys[-1]
    return last.distance_to(start) + start.distance_to(first) - last.distance_to(first)


# =============================================================================
# Course figures
# =============================================================================


def compute_distances(elements: Iterable[CourseElement]) -> CourseDistances:
    """Compute the cached distance figures over all buoys.

    Never raises; an empty course gives all zeros.
    """
    parts = extract_route_parts(elements)
    buoys = parts.buoys

    entry = 0.0
    if parts.shore_entry is not None and parts.start is not None:
        entry = parts.shore_entry.distance_to(parts.start)

    exit_ = 0.0
    finish = finish_point(parts)
    if finish is not None and buoys:
        exit_ = buoys[-1].distance_to(finish)

    distances = CourseDistances(
        loop_km=_round_km(loop_km(buoys)),
        entry_km=_round_km(entry),
        exit_km=_round_km(exit_),
        first_lap_extra_km=_round_km(first_lap_extra_km(buoys, parts.start)),
    )
    logger.debug(f"Distances for {len(buoys)} buoys: {distances}")
    return distances


def with_distances(course: CourseData) -> CourseData:
    """Return the course with its cached distance fields recomputed."""
    distances = compute_distances(course.elements)
    return replace(
        course,
        distance_km=distances.loop_km,
        entry_dist_km=distances.entry_km,
        exit_dist_km=distances.exit_km,
        first_lap_extra_km=distances.first_lap_extra_km,
    )


def race_total(course: CourseData) -> RaceTotal:
    """Total race distance honoring per-lap buoy subsets.

    First-lap extra uses the lap-1 subset, exit uses the last lap's subset
    (falling back to all buoys when that lap has none).
    """
    parts = extract_route_parts(course.elements)
    buoys = parts.buoys
    laps = max(course.laps, 1)

    total_loop = sum(lap_loop_km(buoys, lap) for lap in range(1, laps + 1))
    avg_loop = total_loop / laps

    entry = 0.0
    if parts.shore_entry is not None and parts.start is not None:
        entry = parts.shore_entry.distance_to(parts.start)

    extra = first_lap_extra_km(buoys_for_lap(buoys, 1), parts.start)

    exit_ = 0.0
    finish = finish_point(parts)
    if finish is not None and buoys:
        last_lap_buoys = buoys_for_lap(buoys, laps) or list(buoys)
        exit_ = last_lap_buoys[-1].distance_to(finish)

    return RaceTotal(
        total_km=entry + total_loop + extra + exit_,
        avg_loop_km=avg_loop,
        total_loop_km=total_loop,
        entry_km=entry,
        first_lap_extra_km=extra,
        exit_km=exit_,
    )


def differing_laps(elements: Iterable[CourseElement], laps: int) -> list[DifferingLap]:
    """Laps whose active buoys differ from the full buoy sequence.

    Each differing lap gets the next highlight color; laps using all buoys
    keep the default route color and are not listed.
    """
    buoys = extract_route_parts(elements).buoys
    if len(buoys) < 2 or laps <= 1:
        return []
    if all(b.mandatory_laps is None for b in buoys):
        return []

    all_ids = [b.id for b in buoys]
    colors = LapConfig.DIFF_LAP_COLORS
    result: list[DifferingLap] = []
    for lap in range(1, laps + 1):
        if [b.id for b in buoys_for_lap(buoys, lap)] != all_ids:
            result.append(DifferingLap(lap=lap, color=colors[len(result) % len(colors)]))
    return result
