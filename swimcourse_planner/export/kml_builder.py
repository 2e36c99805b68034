"""KML export for Google Earth.

Document layout:
- One IconStyle per element type present, plus route and rescue styles
- LookAt centered on the mean route position
- One Placemark per route element
- Closed route LineString (2+ route elements)
- One Polygon per rescue zone with at least 3 vertices
"""

import logging
import xml.etree.ElementTree as ET
from typing import Iterable

from swimcourse_planner.constants import ExportConfig
from swimcourse_planner.core.zone_geometry import MIN_ZONE_VERTICES
from swimcourse_planner.export.route_order import display_name, export_route
from swimcourse_planner.model.course_element import CourseElement
from swimcourse_planner.model.element_type import ElementType
from swimcourse_planner.model.lat_lng import LatLng
from swimcourse_planner.model.metadata import RescueZoneMetadata

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def _coordinate(lat: float, lng: float) -> str:
    # KML is lng,lat,alt
    return f"{lng},{lat},0"


def _coordinates_text(points: list[LatLng]) -> str:
    return " ".join(_coordinate(lat=p.lat, lng=p.lng) for p in points)


def _add_icon_style(document: ET.Element, type_name: str) -> None:
    style = ET.SubElement(document, "Style", id=f"style-{type_name}")
    icon_style = ET.SubElement(style, "IconStyle")
    ET.SubElement(icon_style, "color").text = ExportConfig.KML_COLORS.get(type_name, ExportConfig.KML_DEFAULT_COLOR)
    ET.SubElement(icon_style, "scale").text = "1.0"
    icon = ET.SubElement(icon_style, "Icon")
    ET.SubElement(icon, "href").text = ExportConfig.KML_ICONS.get(type_name, ExportConfig.KML_DEFAULT_ICON)


def _add_shared_styles(document: ET.Element) -> None:
    route_style = ET.SubElement(document, "Style", id="route-line")
    line = ET.SubElement(route_style, "LineStyle")
    ET.SubElement(line, "color").text = ExportConfig.KML_ROUTE_COLOR
    ET.SubElement(line, "width").text = str(ExportConfig.KML_ROUTE_WIDTH)

    rescue_style = ET.SubElement(document, "Style", id="rescue-zone")
    poly = ET.SubElement(rescue_style, "PolyStyle")
    ET.SubElement(poly, "color").text = ExportConfig.KML_RESCUE_FILL
    ET.SubElement(poly, "outline").text = "1"
    outline = ET.SubElement(rescue_style, "LineStyle")
    ET.SubElement(outline, "color").text = ExportConfig.KML_RESCUE_OUTLINE
    ET.SubElement(outline, "width").text = "2"


def _add_look_at(document: ET.Element, route: list[CourseElement]) -> None:
    avg_lat = sum(e.lat for e in route) / len(route)
    avg_lng = sum(e.lng for e in route) / len(route)
    look_at = ET.SubElement(document, "LookAt")
    ET.SubElement(look_at, "longitude").text = str(avg_lng)
    ET.SubElement(look_at, "latitude").text = str(avg_lat)
    ET.SubElement(look_at, "altitude").text = "0"
    ET.SubElement(look_at, "range").text = str(ExportConfig.KML_LOOKAT_RANGE_M)
    ET.SubElement(look_at, "tilt").text = str(ExportConfig.KML_LOOKAT_TILT_DEG)
    ET.SubElement(look_at, "heading").text = "0"


def _rescue_vertices(element: CourseElement) -> list[LatLng]:
    if isinstance(element.metadata, RescueZoneMetadata):
        return list(element.metadata.vertices)
    return []


def build_kml(name: str, elements: Iterable[CourseElement]) -> str:
    """Export a course to KML 2.2."""
    elements = list(elements)
    route = export_route(elements)
    rescue_zones = [e for e in elements if e.type == ElementType.RESCUE_ZONE]

    kml = ET.Element("kml", xmlns=ExportConfig.KML_NAMESPACE)
    document = ET.SubElement(kml, "Document")
    ET.SubElement(document, "name").text = name

    # Styles in first-appearance order of the types
    for type_name in dict.fromkeys(e.type.value for e in elements):
        _add_icon_style(document=document, type_name=type_name)
    _add_shared_styles(document=document)

    if route:
        _add_look_at(document=document, route=route)

    for element in route:
        placemark = ET.SubElement(document, "Placemark")
        ET.SubElement(placemark, "name").text = display_name(element)
        ET.SubElement(placemark, "description").text = element.type.value
        ET.SubElement(placemark, "styleUrl").text = f"#style-{element.type.value}"
        point = ET.SubElement(placemark, "Point")
        ET.SubElement(point, "coordinates").text = _coordinate(lat=element.lat, lng=element.lng)

    if len(route) >= 2:
        placemark = ET.SubElement(document, "Placemark")
        ET.SubElement(placemark, "name").text = "Route"
        ET.SubElement(placemark, "styleUrl").text = "#route-line"
        line = ET.SubElement(placemark, "LineString")
        ET.SubElement(line, "tessellate").text = "1"
        closed = [e.position for e in route] + [route[0].position]
        ET.SubElement(line, "coordinates").text = _coordinates_text(closed)

    polygons = 0
    for zone in rescue_zones:
        vertices = _rescue_vertices(zone)
        if len(vertices) < MIN_ZONE_VERTICES:
            logger.warning(f"Skipping rescue zone {zone.id} with {len(vertices)} vertices")
            continue
        placemark = ET.SubElement(document, "Placemark")
        ET.SubElement(placemark, "name").text = "Rescue Zone"
        ET.SubElement(placemark, "styleUrl").text = "#rescue-zone"
        polygon = ET.SubElement(placemark, "Polygon")
        ring = ET.SubElement(ET.SubElement(polygon, "outerBoundaryIs"), "LinearRing")
        ET.SubElement(ring, "coordinates").text = _coordinates_text(vertices + [vertices[0]])
        polygons += 1

    ET.indent(kml, space="  ")
    logger.info(f"KML export {name!r}: {len(route)} placemarks, {polygons} rescue zones")
    return XML_DECLARATION + ET.tostring(kml, encoding="unicode", method="xml")
