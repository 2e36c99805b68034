"""Course serializers: GPX, KML, coordinate CSV and share links."""

from swimcourse_planner.export.course_encoder import decode_course_data, encode_course_data
from swimcourse_planner.export.csv_builder import build_coordinate_csv, csv_filename
from swimcourse_planner.export.gpx_builder import build_gpx
from swimcourse_planner.export.kml_builder import build_kml

__all__ = [
    "build_gpx",
    "build_kml",
    "build_coordinate_csv",
    "csv_filename",
    "encode_course_data",
    "decode_course_data",
]
