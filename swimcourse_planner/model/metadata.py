"""Element metadata - typed variants of the opaque metadata string.

At the data boundary metadata is a JSON string whose shape depends on the
element type. It is parsed exactly once (when a CourseElement is loaded)
into one of the variants below, and serialized back when exported:

- BuoyMetadata: passing side and mandatory laps
- GateMetadata: mandatory laps
- FunnelMetadata: which side of the swimmer a finish funnel post marks
- RescueZoneMetadata: closed polygon vertex list
- FreehandMetadata: annotation polyline with label and color
- OpaqueMetadata: anything attached to other types, kept verbatim

Malformed JSON never raises: it degrades to "no metadata", which means a
directional buoy that is active on every lap.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Literal, Optional

from swimcourse_planner.constants import CourseDefaults
from swimcourse_planner.model.element_type import ElementType
from swimcourse_planner.model.lat_lng import LatLng

logger = logging.getLogger(__name__)

BuoySide = Literal["left", "right", "directional"]

SIDED = ("left", "right")


@dataclass(frozen=True)
class ElementMetadata(ABC):
    """Abstract base class for parsed element metadata."""

    @abstractmethod
    def to_json_value(self) -> Any:
        """JSON-compatible value written back into the metadata string."""


@dataclass(frozen=True)
class BuoyMetadata(ElementMetadata):
    """Buoy passing side and lap restriction.

    Attributes:
        side: "left"/"right" forces the passing side, "directional" lets
            swimmers pass either way
        mandatory_laps: Lap numbers on which the buoy is active, None = every lap
        extra: Unknown keys preserved for round-trips
    """

    side: BuoySide = "directional"
    mandatory_laps: Optional[tuple[int, ...]] = None
    extra: dict[str, Any] = field(default_factory=dict, hash=False)

    def to_json_value(self) -> dict[str, Any]:
        data = dict(self.extra)
        if self.side in SIDED:
            data["side"] = self.side
        if self.mandatory_laps is not None:
            data["mandatoryLaps"] = format_mandatory_laps(self.mandatory_laps)
        return data


@dataclass(frozen=True)
class GateMetadata(ElementMetadata):
    """Gate post lap restriction."""

    mandatory_laps: Optional[tuple[int, ...]] = None
    extra: dict[str, Any] = field(default_factory=dict, hash=False)

    def to_json_value(self) -> dict[str, Any]:
        data = dict(self.extra)
        if self.mandatory_laps is not None:
            data["mandatoryLaps"] = format_mandatory_laps(self.mandatory_laps)
        return data


@dataclass(frozen=True)
class FunnelMetadata(ElementMetadata):
    """Finish funnel post.

    The side is the side of the swimmer's body the post is on while
    approaching, which is the opposite of its geometric offset.
    """

    side: Literal["left", "right"]

    def to_json_value(self) -> dict[str, Any]:
        return {"side": self.side}


@dataclass(frozen=True)
class RescueZoneMetadata(ElementMetadata):
    """Closed rescue zone polygon (first vertex is not repeated)."""

    vertices: tuple[LatLng, ...] = ()

    @property
    def vertex_tuples(self) -> list[tuple[float, float]]:
        """Vertices as (lat, lng) tuples."""
        return [v.lat_lng for v in self.vertices]

    def to_json_value(self) -> list[dict[str, float]]:
        return [v.to_dict() for v in self.vertices]


@dataclass(frozen=True)
class FreehandMetadata(ElementMetadata):
    """Label-only annotation polyline, not part of the swim route."""

    path: tuple[LatLng, ...] = ()
    label: Optional[str] = None
    color: str = CourseDefaults.FREEHAND_COLOR

    def to_json_value(self) -> dict[str, Any]:
        data: dict[str, Any] = {"path": [p.to_dict() for p in self.path], "color": self.color}
        if self.label:
            data["label"] = self.label
        return data


@dataclass(frozen=True)
class OpaqueMetadata(ElementMetadata):
    """Metadata on element types that carry no interpreted fields."""

    raw: str

    def to_json_value(self) -> Any:
        return json.loads(self.raw)


# =============================================================================
# Mandatory laps
# =============================================================================


def parse_mandatory_laps(value: Any) -> Optional[tuple[int, ...]]:
    """Parse a comma-separated lap list such as "1,3".

    Non-numeric tokens are dropped. Missing or fully unparseable values
    mean "every lap" and return None. A JSON array is read like its
    comma-joined string.
    """
    if isinstance(value, (list, tuple)):
        value = ",".join(str(v) for v in value)
    if value is None or value == "":
        return None
    laps = []
    for token in str(value).split(","):
        token = token.strip()
        try:
            laps.append(int(token))
        except ValueError:
            continue
    if not laps:
        logger.warning(f"Ignoring unparseable mandatoryLaps value {value!r}")
        return None
    return tuple(laps)


def format_mandatory_laps(laps: tuple[int, ...]) -> str:
    """Inverse of parse_mandatory_laps."""
    return ",".join(str(lap) for lap in laps)


# =============================================================================
# Parsing
# =============================================================================


def _parse_points(items: Any) -> tuple[LatLng, ...]:
    points = []
    for item in items:
        try:
            points.append(LatLng.from_dict(item))
        except (KeyError, TypeError, ValueError):
            logger.warning(f"Skipping malformed vertex {item!r}")
    return tuple(points)


def _parse_buoy(data: Any) -> BuoyMetadata:
    if not isinstance(data, dict):
        return BuoyMetadata()
    side = data.get("side")
    extra = {k: v for k, v in data.items() if k not in ("side", "mandatoryLaps")}
    return BuoyMetadata(
        side=side if side in SIDED else "directional",
        mandatory_laps=parse_mandatory_laps(data.get("mandatoryLaps")),
        extra=extra,
    )


def _parse_gate(data: Any) -> GateMetadata:
    if not isinstance(data, dict):
        return GateMetadata()
    extra = {k: v for k, v in data.items() if k != "mandatoryLaps"}
    return GateMetadata(mandatory_laps=parse_mandatory_laps(data.get("mandatoryLaps")), extra=extra)


def _parse_funnel(data: Any) -> Optional[FunnelMetadata]:
    if isinstance(data, dict) and data.get("side") in SIDED:
        return FunnelMetadata(side=data["side"])
    return None


def _parse_rescue_zone(data: Any) -> RescueZoneMetadata:
    if not isinstance(data, list):
        return RescueZoneMetadata()
    return RescueZoneMetadata(vertices=_parse_points(data))


def _parse_freehand(data: Any) -> FreehandMetadata:
    # Older drawings stored the bare vertex array
    if isinstance(data, list):
        return FreehandMetadata(path=_parse_points(data))
    if isinstance(data, dict) and isinstance(data.get("path"), list):
        return FreehandMetadata(
            path=_parse_points(data["path"]),
            label=data.get("label") or None,
            color=data.get("color") or CourseDefaults.FREEHAND_COLOR,
        )
    return FreehandMetadata()


_PARSERS = {
    ElementType.BUOY: _parse_buoy,
    ElementType.GATE_LEFT: _parse_gate,
    ElementType.GATE_RIGHT: _parse_gate,
    ElementType.FINISH_FUNNEL_LEFT: _parse_funnel,
    ElementType.FINISH_FUNNEL_RIGHT: _parse_funnel,
    ElementType.RESCUE_ZONE: _parse_rescue_zone,
    ElementType.FREEHAND: _parse_freehand,
}


def parse_metadata(element_type: ElementType, raw: Optional[str]) -> Optional[ElementMetadata]:
    """Parse a raw metadata string for the given element type.

    Args:
        element_type: Type of the owning element (selects the variant)
        raw: JSON string from the data boundary, or None

    Returns:
        Typed metadata, or None when absent or malformed.
    """
    if raw is None or raw == "":
        return None
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning(f"Malformed metadata on {element_type.value}: {raw!r}")
        return None

    parser = _PARSERS.get(element_type)
    if parser is None:
        return OpaqueMetadata(raw=raw)
    return parser(data)


def serialize_metadata(metadata: Optional[ElementMetadata]) -> Optional[str]:
    """Serialize typed metadata back into its JSON string (None stays None).

    Buoy and gate metadata without any remaining key serialize to None.
    """
    if metadata is None:
        return None
    if isinstance(metadata, OpaqueMetadata):
        return metadata.raw
    value = metadata.to_json_value()
    if isinstance(value, dict) and not value and isinstance(metadata, (BuoyMetadata, GateMetadata)):
        return None
    return json.dumps(value)
