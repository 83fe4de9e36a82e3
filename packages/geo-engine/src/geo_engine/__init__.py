"""Geo engine core package."""

from geo_engine.distance import EARTH_RADIUS_METERS, haversine_distance_meters, round_meters
from geo_engine.geofence import evaluate_geofence, find_nearest_site, is_point_inside_radius
from geo_engine.models import GeofenceResult, GeoPoint, Site

__all__ = [
    "EARTH_RADIUS_METERS",
    "GeoPoint",
    "GeofenceResult",
    "Site",
    "evaluate_geofence",
    "find_nearest_site",
    "haversine_distance_meters",
    "is_point_inside_radius",
    "round_meters",
]
