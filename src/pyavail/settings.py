"""In-memory settings store."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pyavail.models.settings import EndpointSettings


class InMemorySettingsStore:
    """Settings store backed by a dict of per-endpoint overrides.

    Values are re-read on every lookup, so :meth:`set_device` takes
    effect immediately for a running engine.
    """

    def __init__(self, devices: Mapping[str, EndpointSettings | Mapping[str, Any]] | None = None) -> None:
        self._devices: dict[str, EndpointSettings] = {}
        for address, settings in (devices or {}).items():
            self.set_device(address, settings)

    def set_device(self, address: str, settings: EndpointSettings | Mapping[str, Any]) -> None:
        if not isinstance(settings, EndpointSettings):
            settings = EndpointSettings.model_validate(settings)
        self._devices[address] = settings

    def remove_device(self, address: str) -> None:
        self._devices.pop(address, None)

    def get_endpoint_overrides(self, address: str) -> EndpointSettings | None:
        return self._devices.get(address)

    def resolve_display_name(self, address: str) -> str | None:
        settings = self._devices.get(address)
        if settings is None:
            return None
        return settings.friendly_name
