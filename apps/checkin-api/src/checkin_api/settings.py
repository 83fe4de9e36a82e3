from __future__ import annotations

from pydantic import BaseModel, Field

from devkit.config import ServiceSettings, load_settings
from geo_engine.models import Site

from checkin_api.checkin import CheckinConfig

DEFAULT_TOKEN_SECRET = "CAMBIA_ESTE_SECRET"


class SiteSettings(BaseModel):
    name: str = Field(min_length=1)
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


DEFAULT_SITES = [
    SiteSettings(name="SEDE GAIRA KM7", lat=11.18957, lng=-74.21414),
    SiteSettings(name="RELLENO SANITARIO", lat=11.256635, lng=-74.157481),
    SiteSettings(name="REBOMBEO", lat=11.18702, lng=-74.2173),
    SiteSettings(name="CAN CLL 22", lat=11.23625, lng=-74.18786),
    SiteSettings(name="PTAP MAMATOCO", lat=11.224788, lng=-74.160243),
]


class CheckinSettings(ServiceSettings):
    SERVICE_NAME: str = "checkin-api"
    TOKEN_SECRET: str = DEFAULT_TOKEN_SECRET
    CHECKIN_RADIUS_METERS: int = Field(default=200, ge=0)
    CHECKIN_SITES: list[SiteSettings] = Field(default_factory=lambda: list(DEFAULT_SITES), min_length=1)

    @property
    def uses_default_secret(self) -> bool:
        return self.TOKEN_SECRET == DEFAULT_TOKEN_SECRET

    def to_config(self) -> CheckinConfig:
        return CheckinConfig(
            secret=self.TOKEN_SECRET.encode("utf-8"),
            sites=tuple(Site(name=item.name, lat=item.lat, lng=item.lng) for item in self.CHECKIN_SITES),
            radius_meters=self.CHECKIN_RADIUS_METERS,
        )


def load_checkin_settings() -> CheckinSettings:
    return load_settings("checkin-api", CheckinSettings)
