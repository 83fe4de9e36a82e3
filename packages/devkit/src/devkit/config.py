from __future__ import annotations

from typing import TypeVar

from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    SERVICE_NAME: str = "service"
    LOG_LEVEL: str = "INFO"


SettingsT = TypeVar("SettingsT", bound=ServiceSettings)


def load_settings(service_name: str, settings_cls: type[SettingsT] = ServiceSettings) -> SettingsT:
    return settings_cls(SERVICE_NAME=service_name)
