"""Visit sequence shared by the GPX, KML and CSV serializers."""

from typing import Iterable

from swimcourse_planner.model.course_element import CourseElement
from swimcourse_planner.model.element_type import ElementType


def export_route(elements: Iterable[CourseElement]) -> list[CourseElement]:
    """Elements in visit order, rescue zones excluded."""
    return sorted((e for e in elements if e.type != ElementType.RESCUE_ZONE), key=lambda e: e.order)


def display_name(element: CourseElement) -> str:
    """Element label, or its type with spaces ("shore entry")."""
    return element.label if element.label is not None else element.type.value.replace("_", " ")
