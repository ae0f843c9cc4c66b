"""Tracking policy and per-endpoint setting resolution.

Allow/deny lists are fixed when the policy is built. Per-endpoint
overrides are read from the settings store on every call so that
configuration edits apply to a running engine.
"""

from __future__ import annotations

from pyavail.config import AvailabilityConfig
from pyavail.interfaces import SettingsStore
from pyavail.models.endpoint import Endpoint
from pyavail.state.capability import is_pingable


class AvailabilityPolicy:
    def __init__(self, config: AvailabilityConfig, settings: SettingsStore) -> None:
        self._config = config
        self._settings = settings
        self._allow_list = frozenset(config.allow_list)
        self._deny_list = frozenset(config.deny_list)

    def display_name(self, endpoint: Endpoint) -> str:
        """Human readable name, falling back to the address."""
        name = self._settings.resolve_display_name(endpoint.address)
        return name or endpoint.address

    def is_tracked(self, endpoint: Endpoint) -> bool:
        """Whether availability is tracked for *endpoint*.

        A non-empty allow list is authoritative; the deny list only
        applies when no allow list is configured.
        """
        name = self._settings.resolve_display_name(endpoint.address)

        if self._allow_list:
            return endpoint.address in self._allow_list or (name is not None and name in self._allow_list)

        if endpoint.address in self._deny_list or (name is not None and name in self._deny_list):
            return False

        return True

    def is_pingable(self, endpoint: Endpoint) -> bool:
        return is_pingable(endpoint, self._config.pingable_models)

    def resolve_override(self, endpoint: Endpoint, setting: str, default: bool) -> bool:
        """Return the endpoint's override for *setting*, else *default*."""
        overrides = self._settings.get_endpoint_overrides(endpoint.address)
        if overrides is None:
            return default
        value = overrides.get(setting)
        return default if value is None else value

    def is_ping_on_startup_enabled(self, endpoint: Endpoint) -> bool:
        # An override lets non-pingable devices (e.g. battery locks) be probed once at startup.
        return self.resolve_override(endpoint, "ping_on_startup", self.is_pingable(endpoint))

    def is_refresh_on_startup_enabled(self, endpoint: Endpoint) -> bool:
        return self.resolve_override(
            endpoint,
            "refresh_on_startup",
            self._config.refresh_on_startup and self.is_pingable(endpoint),
        )

    def is_refresh_allowed(self, endpoint: Endpoint) -> bool:
        return self.resolve_override(endpoint, "allow_refresh_state", True)
