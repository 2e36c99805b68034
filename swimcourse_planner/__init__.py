"""Swim Course Planner - Design open-water swim courses on a map.

A modular course planning library featuring:
- Spherical geometry for buoy-to-buoy distances and bearings
- Lap-aware race distances with per-lap mandatory buoys
- Three-point finish funnels generated from a single click
- State machine-based placement of gates, rescue zones and drawings
- Flyover paths with variable pacing and a smoothed chase camera
- GPX, KML, coordinate CSV and share-link export

Modules:
    core: Foundation classes (geo calculations, rescue zone geometry)
    model: Data structures (CourseElement, CourseData, distances, session)
    generators: Derived geometry (finish group, lap path, camera path)
    placement: Tool state machine and map click dispatch
    export: Course serializers

Example:
    from swimcourse_planner.model import CourseSession, ElementType, LatLng
    from swimcourse_planner.export import build_gpx
"""
