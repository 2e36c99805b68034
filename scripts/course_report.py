"""Print the distance report of a saved course and export it.

Reads a CourseData JSON document, recomputes the cached distances and the
lap-aware race total, then writes GPX, KML and coordinate CSV files next
to the input (or into --output-dir).

Run: python scripts/course_report.py my_course.json [--output-dir output]
"""

import argparse
import json
import logging
from pathlib import Path

from swimcourse_planner.core.zone_geometry import zone_area_m2
from swimcourse_planner.export import build_coordinate_csv, build_gpx, build_kml, csv_filename, encode_course_data
from swimcourse_planner.model import CourseData
from swimcourse_planner.model.distances import differing_laps, race_total, with_distances
from swimcourse_planner.model.metadata import RescueZoneMetadata

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def course_report(input_file: Path, output_dir: Path | None = None) -> None:
    """Load a course, print its distances and write the export files."""
    with open(input_file, "r", encoding="utf-8") as fh:
        course = with_distances(CourseData.from_dict(json.load(fh)))

    total = race_total(course)
    print(f"Course: {course.name} ({len(course.elements)} elements, {course.laps} laps)")
    print(f"Loop:            {course.distance_km:.3f} km")
    print(f"Entry:           {course.entry_dist_km:.3f} km")
    print(f"First-lap extra: {course.first_lap_extra_km:.3f} km")
    print(f"Exit:            {course.exit_dist_km:.3f} km")
    print(f"Race total:      {total.total_km:.3f} km (avg loop {total.avg_loop_km:.3f} km)")
    for lap in differing_laps(course.elements, course.laps):
        print(f"Lap {lap.lap} differs from the full buoy sequence ({lap.color})")
    for zone in course.elements:
        if isinstance(zone.metadata, RescueZoneMetadata):
            print(f"Rescue zone #{zone.order}: {zone_area_m2(zone.metadata.vertex_tuples):.0f} m²")

    target = output_dir or input_file.parent
    target.mkdir(parents=True, exist_ok=True)
    stem = input_file.stem

    (target / f"{stem}.gpx").write_text(build_gpx(course.name, course.elements), encoding="utf-8")
    (target / f"{stem}.kml").write_text(build_kml(course.name, course.elements), encoding="utf-8")
    (target / csv_filename(course.name)).write_text(build_coordinate_csv(course.elements), encoding="utf-8")
    logger.info(f"Exports written to {target}")

    print(f"Share code: {encode_course_data(course)}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Distance report and export for a swim course JSON file")
    parser.add_argument("input_file", type=Path)
    parser.add_argument("--output-dir", type=Path, default=None)
    args = parser.parse_args()
    course_report(input_file=args.input_file, output_dir=args.output_dir)
