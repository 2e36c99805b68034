"""Ordering invariant - finish elements always come last.

Exports and route extraction use `order` as the visit sequence, so a
finish element must never sit between route elements, no matter when it
was placed or how the list was reordered.
"""

from typing import Iterable

from swimcourse_planner.model.course_element import CourseElement


def sort_by_order(elements: Iterable[CourseElement]) -> list[CourseElement]:
    """Elements sorted by order (stable for equal orders)."""
    return sorted(elements, key=lambda e: e.order)


def enforce_finish_last(elements: Iterable[CourseElement]) -> tuple[CourseElement, ...]:
    """Move finish elements to the end and renumber orders densely from 0.

    The given sequence is the desired order: relative order within the
    non-finish and finish partitions is preserved as given.

    Args:
        elements: Elements in the intended sequence

    Returns:
        New elements with order 0..n-1, finish elements last.
    """
    elements = list(elements)
    non_finish = [e for e in elements if not e.is_finish]
    finish = [e for e in elements if e.is_finish]
    return tuple(e if e.order == i else e.with_order(i) for i, e in enumerate(non_finish + finish))


def normalize_order(elements: Iterable[CourseElement]) -> tuple[CourseElement, ...]:
    """Sort by current order, then enforce the finish-last invariant."""
    return enforce_finish_last(sort_by_order(elements))
