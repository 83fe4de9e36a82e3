from __future__ import annotations

from collections.abc import Sequence

from geo_engine.distance import haversine_distance_meters
from geo_engine.models import GeofenceResult, GeoPoint, Site


def is_point_inside_radius(center: GeoPoint, point: GeoPoint, radius_meters: float) -> bool:
    _validate_radius(radius_meters)
    return haversine_distance_meters(center, point) <= radius_meters


def find_nearest_site(point: GeoPoint, sites: Sequence[Site]) -> tuple[Site, float]:
    """Return the closest site and its distance in meters.

    Ties keep the site that appears first in ``sites``.
    """
    if not sites:
        raise ValueError("sites must not be empty")
    best_site: Site | None = None
    best_distance = 0.0
    for site in sites:
        distance = haversine_distance_meters(point, site.point)
        if best_site is None or distance < best_distance:
            best_site = site
            best_distance = distance
    return best_site, best_distance


def evaluate_geofence(point: GeoPoint, sites: Sequence[Site], radius_meters: float) -> GeofenceResult:
    _validate_radius(radius_meters)
    site, distance = find_nearest_site(point, sites)
    # boundary is inclusive and compared before rounding
    return GeofenceResult(site=site, distance_meters=distance, within=distance <= radius_meters)


def _validate_radius(radius_meters: float) -> None:
    if radius_meters < 0:
        raise ValueError("radius_meters must be >= 0")
