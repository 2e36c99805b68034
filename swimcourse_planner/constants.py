"""Configuration constants for Swim Course Planner.

All configurable parameters are centralized here for easy tuning.

Classes:
    GeoConfig: Spherical Earth model
    ArcConfig: Swim-side arc around sided buoys
    FinishConfig: Finish funnel geometry
    LapConfig: Differing-lap highlight colors
    FlyoverConfig: Chase camera pacing and framing
    UndoConfig: Undo history depth
    CourseDefaults: Values for a freshly created course
    ExportConfig: GPX/KML/CSV serializer settings
"""

from math import pi


class GeoConfig:
    """Spherical Earth model used by every distance calculation."""

    EARTH_RADIUS_KM = 6371.0
    EARTH_RADIUS_M = EARTH_RADIUS_KM * 1000

    # Meters per degree of latitude (and of longitude at the equator)
    METERS_PER_DEGREE = EARTH_RADIUS_M * pi / 180

    # Decimal places kept for cached distances (3 decimals = 1 m)
    DISTANCE_DECIMALS = 3


class ArcConfig:
    """Arc drawn around buoys that must be passed on a fixed side."""

    OFFSET_M = 15.0  # Perpendicular bulge towards the swim side
    SPREAD_M = 15.0  # Distance before/after the buoy along the approach


class FinishConfig:
    """3-point finish structure (endpoint + two funnel posts)."""

    FUNNEL_OFFSET_M = 10.0  # Each funnel post sits this far from the endpoint
    DEFAULT_BEARING_DEG = 0.0  # Approach from the south when no buoy exists


class LapConfig:
    """Lap variation highlighting."""

    # Colors for laps that differ from the standard (all-buoys) route.
    # Laps using every buoy keep the default route color and are not listed.
    DIFF_LAP_COLORS = ["#22C55E", "#7C3AED", "#EC4899", "#F97316"]


class FlyoverConfig:
    """Chase camera path parameters."""

    DEFAULT_FPS = 30

    # Pacing: slow start, fast middle, slow finish
    EDGE_WEIGHT = 3.0  # Entry, exit, first lap and last lap
    MIDDLE_WEIGHT = 1.0  # Every lap in between

    HEADING_SMOOTHING_ALPHA = 0.08  # EMA factor on shortest-arc heading change
    CHASE_DISTANCE_M = 10.0  # Camera center sits this far behind the swimmer
    TILT_DEG = 67.5
    ZOOM = 18


class UndoConfig:
    """Undo system configuration."""

    # Maximum number of element snapshots kept in the undo stack
    # Older snapshots are discarded when limit is reached
    MAX_UNDO_STACK_SIZE = 50


class CourseDefaults:
    """Values for a freshly created or reset course."""

    NAME = "Untitled Course"
    ZOOM_LEVEL = 14
    LAPS = 1
    FREEHAND_COLOR = "#FFFFFF"


class ExportConfig:
    """Serializer settings shared by GPX, KML and CSV builders."""

    CREATOR = "OW Parcour Designer"
    GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"
    KML_NAMESPACE = "http://www.opengis.net/kml/2.2"
    CLOSE_POINT_NAME = "Return to start"

    KML_ROUTE_COLOR = "fff68235"
    KML_ROUTE_WIDTH = 3
    KML_RESCUE_FILL = "554444ef"
    KML_RESCUE_OUTLINE = "ff4444ef"
    KML_LOOKAT_RANGE_M = 1500
    KML_LOOKAT_TILT_DEG = 45

    KML_ICONS = {
        "buoy": "https://maps.google.com/mapfiles/kml/shapes/sailing.png",
        "start": "https://maps.google.com/mapfiles/kml/paddle/go.png",
        "finish": "https://maps.google.com/mapfiles/kml/paddle/stop.png",
        "gate_left": "https://maps.google.com/mapfiles/kml/shapes/flag.png",
        "gate_right": "https://maps.google.com/mapfiles/kml/shapes/flag.png",
        "shore_entry": "https://maps.google.com/mapfiles/kml/shapes/beach.png",
        "feeding_platform": "https://maps.google.com/mapfiles/kml/shapes/dining.png",
        "rescue_zone": "https://maps.google.com/mapfiles/kml/shapes/hospitals.png",
    }
    KML_DEFAULT_ICON = "https://maps.google.com/mapfiles/kml/paddle/wht-blank.png"

    KML_COLORS = {
        "buoy": "ff00bfff",
        "start": "ff00ff00",
        "finish": "ff0000ff",
        "gate_left": "ffff6633",
        "gate_right": "ffff6633",
        "shore_entry": "ff0080ff",
        "feeding_platform": "ffed3a7c",
        "rescue_zone": "ff4444ef",
    }
    KML_DEFAULT_COLOR = "ffffffff"

    CSV_HEADER = ["#", "Type", "Label", "Latitude", "Longitude"]
    CSV_COORDINATE_DECIMALS = 6

    TYPE_LABELS = {
        "buoy": "Buoy",
        "start": "Start",
        "finish": "Finish",
        "finish_left": "Finish Left",
        "finish_right": "Finish Right",
        "finish_endpoint": "Finish Endpoint",
        "finish_funnel_left": "Finish Funnel Left",
        "finish_funnel_right": "Finish Funnel Right",
        "gate_left": "Gate Left",
        "gate_right": "Gate Right",
        "shore_entry": "Shore Entry",
        "rescue_zone": "Rescue Zone",
        "feeding_platform": "Feeding Platform",
        "freehand": "Drawing",
    }
