"""Coordinate list CSV: one numbered row per route element."""

import csv
import io
import re
from typing import Iterable

from swimcourse_planner.constants import ExportConfig
from swimcourse_planner.export.route_order import export_route
from swimcourse_planner.model.course_element import CourseElement


def build_coordinate_csv(elements: Iterable[CourseElement]) -> str:
    """Rows are `#,Type,Label,Latitude,Longitude`, numbered from 1."""
    decimals = ExportConfig.CSV_COORDINATE_DECIMALS
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(ExportConfig.CSV_HEADER)
    for number, element in enumerate(export_route(elements), start=1):
        writer.writerow(
            [
                number,
                ExportConfig.TYPE_LABELS.get(element.type.value, element.type.value),
                element.label or "",
                f"{element.lat:.{decimals}f}",
                f"{element.lng:.{decimals}f}",
            ]
        )
    return buffer.getvalue()


def csv_filename(course_name: str) -> str:
    """Download name: non-alphanumerics replaced by underscores."""
    return f"{re.sub(r'[^a-zA-Z0-9]', '_', course_name)}_coordinates.csv"
