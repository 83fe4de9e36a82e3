from dataclasses import dataclass


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True)
class Site:
    name: str
    lat: float
    lng: float

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)


@dataclass(frozen=True)
class GeofenceResult:
    site: Site
    distance_meters: float
    within: bool
