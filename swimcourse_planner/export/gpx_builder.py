"""GPX export: one waypoint per route element plus a closed route."""

import logging
import xml.etree.ElementTree as ET
from typing import Iterable

from swimcourse_planner.constants import ExportConfig
from swimcourse_planner.export.route_order import display_name, export_route
from swimcourse_planner.model.course_element import CourseElement

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
GPX_SCHEMA_LOCATION = f"{ExportConfig.GPX_NAMESPACE} {ExportConfig.GPX_NAMESPACE}/gpx.xsd"


def build_gpx(name: str, elements: Iterable[CourseElement]) -> str:
    """Export a course to GPX 1.1.

    Waypoints and route points follow the element order. The route is
    closed by repeating the first point as "Return to start".
    """
    route = export_route(elements)

    gpx = ET.Element(
        "gpx",
        {
            "version": "1.1",
            "creator": ExportConfig.CREATOR,
            "xmlns": ExportConfig.GPX_NAMESPACE,
            "xmlns:xsi": XSI_NAMESPACE,
            "xsi:schemaLocation": GPX_SCHEMA_LOCATION,
        },
    )

    metadata = ET.SubElement(gpx, "metadata")
    ET.SubElement(metadata, "name").text = name

    for element in route:
        wpt = ET.SubElement(gpx, "wpt", lat=str(element.lat), lon=str(element.lng))
        ET.SubElement(wpt, "name").text = display_name(element)
        ET.SubElement(wpt, "type").text = element.type.value

    rte = ET.SubElement(gpx, "rte")
    ET.SubElement(rte, "name").text = name
    for element in route:
        rtept = ET.SubElement(rte, "rtept", lat=str(element.lat), lon=str(element.lng))
        ET.SubElement(rtept, "name").text = display_name(element)

    if route:
        first = route[0]
        rtept = ET.SubElement(rte, "rtept", lat=str(first.lat), lon=str(first.lng))
        ET.SubElement(rtept, "name").text = ExportConfig.CLOSE_POINT_NAME

    ET.indent(gpx, space="  ")
    logger.info(f"GPX export {name!r}: {len(route)} route points")
    return XML_DECLARATION + ET.tostring(gpx, encoding="unicode", method="xml")
