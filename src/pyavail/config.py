"""Engine configuration for pyavail."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any

from pyavail._constants import PASSIVE_CHECK_INTERVAL_SECONDS, PASSIVE_TIMEOUT
from pyavail.exceptions import AvailabilityConfigError


def _parse_bool(value: str) -> bool | None:
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return None


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    parsed = _parse_bool(value)
    return default if parsed is None else parsed


def _env_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _as_names(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, Iterable):
        raise AvailabilityConfigError(f"{field_name} must be a list of strings, got {type(value).__name__}")
    names: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise AvailabilityConfigError(f"{field_name} entries must be strings, got {item!r}")
        stripped = item.strip()
        if stripped:
            names.append(stripped)
    return tuple(names)


@dataclasses.dataclass(frozen=True)
class AvailabilityConfig:
    """Global availability configuration.

    Parameters
    ----------
    availability_timeout : float
        Seconds between active probes of a pingable endpoint. Inbound
        traffic from the endpoint restarts the countdown.
    refresh_on_startup : bool
        Read state from pingable endpoints the first time they are seen
        online after startup.
    reconnect_refresh_keys : tuple[str, ...]
        State keys read from an endpoint when it comes back online.
    allow_list : frozenset[str]
        Addresses or display names to track. When non-empty, only these
        endpoints are tracked and ``deny_list`` is ignored.
    deny_list : frozenset[str]
        Addresses or display names excluded from tracking.
    pingable_models : frozenset[str]
        Extra model identifiers treated as pingable end devices.
    passive_check_interval : float
        Seconds between inactivity checks of non-pingable endpoints.
    passive_timeout : timedelta
        Silence after which a non-pingable endpoint is marked offline.
    base_topic : str
        MQTT topic prefix for availability announcements.
    mqtt_host : str
        MQTT broker host.
    mqtt_port : int
        MQTT broker port.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    """

    availability_timeout: float = 60.0
    refresh_on_startup: bool = False
    reconnect_refresh_keys: tuple[str, ...] = ("state",)
    allow_list: frozenset[str] = frozenset()
    deny_list: frozenset[str] = frozenset()
    pingable_models: frozenset[str] = frozenset()
    passive_check_interval: float = PASSIVE_CHECK_INTERVAL_SECONDS
    passive_timeout: timedelta = PASSIVE_TIMEOUT
    base_topic: str = "zigbee2mqtt"
    mqtt_host: str = "localhost"
    mqtt_port: int = 1883
    mqtt_keepalive: int = 60

    def __post_init__(self) -> None:
        if self.availability_timeout <= 0:
            raise AvailabilityConfigError(f"availability_timeout must be positive, got {self.availability_timeout}")
        if self.passive_check_interval <= 0:
            raise AvailabilityConfigError(
                f"passive_check_interval must be positive, got {self.passive_check_interval}"
            )
        if self.passive_timeout <= timedelta(0):
            raise AvailabilityConfigError("passive_timeout must be positive")
        # Accept any iterable for the list fields; store them immutable.
        object.__setattr__(
            self, "reconnect_refresh_keys", _as_names(self.reconnect_refresh_keys, "reconnect_refresh_keys")
        )
        object.__setattr__(self, "allow_list", frozenset(_as_names(self.allow_list, "allow_list")))
        object.__setattr__(self, "deny_list", frozenset(_as_names(self.deny_list, "deny_list")))
        object.__setattr__(self, "pingable_models", frozenset(_as_names(self.pingable_models, "pingable_models")))
        base_topic = self.base_topic.strip().strip("/")
        if not base_topic:
            raise AvailabilityConfigError("base_topic must be non-empty")
        object.__setattr__(self, "base_topic", base_topic)

    @classmethod
    def from_settings(cls, advanced: Mapping[str, Any], **overrides: Any) -> AvailabilityConfig:
        """Create configuration from a zigbee2mqtt style ``advanced`` section.

        The legacy ``availability_whitelist`` / ``availability_blacklist``
        keys are merged into the pass/block lists.

        Parameters
        ----------
        advanced
            Mapping holding the ``availability_*`` keys.
        **overrides
            Explicit field values that take precedence.

        Returns
        -------
        AvailabilityConfig
            Populated configuration.
        """
        config_kwargs: dict[str, Any] = {}

        timeout = advanced.get("availability_timeout")
        if timeout is not None:
            try:
                config_kwargs["availability_timeout"] = float(timeout)
            except (TypeError, ValueError) as exc:
                raise AvailabilityConfigError(f"availability_timeout is not a number: {timeout!r}") from exc

        refresh = advanced.get("availability_refresh_state_on_startup")
        if refresh is not None:
            parsed = _parse_bool(refresh) if isinstance(refresh, str) else refresh
            if not isinstance(parsed, bool):
                raise AvailabilityConfigError(f"availability_refresh_state_on_startup is not a boolean: {refresh!r}")
            config_kwargs["refresh_on_startup"] = parsed

        keys = advanced.get("availability_reconnect_converter_keys")
        if keys is not None:
            config_kwargs["reconnect_refresh_keys"] = _as_names(keys, "availability_reconnect_converter_keys")

        config_kwargs["allow_list"] = _as_names(
            advanced.get("availability_passlist"), "availability_passlist"
        ) + _as_names(advanced.get("availability_whitelist"), "availability_whitelist")
        config_kwargs["deny_list"] = _as_names(
            advanced.get("availability_blocklist"), "availability_blocklist"
        ) + _as_names(advanced.get("availability_blacklist"), "availability_blacklist")

        config_kwargs.update(overrides)
        return cls(**config_kwargs)

    @classmethod
    def from_env(cls, **overrides: Any) -> AvailabilityConfig:
        """Create configuration from ``PYAVAIL_*`` environment variables.

        List variables are comma separated. Explicit keyword arguments
        override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_FLOAT_MAP = {
            "PYAVAIL_AVAILABILITY_TIMEOUT": "availability_timeout",
            "PYAVAIL_PASSIVE_CHECK_INTERVAL": "passive_check_interval",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                try:
                    config_kwargs[field_name] = float(val)
                except ValueError as exc:
                    raise AvailabilityConfigError(f"{env_key} is not a number: {val!r}") from exc

        _ENV_LIST_MAP = {
            "PYAVAIL_RECONNECT_REFRESH_KEYS": "reconnect_refresh_keys",
            "PYAVAIL_ALLOW_LIST": "allow_list",
            "PYAVAIL_DENY_LIST": "deny_list",
            "PYAVAIL_PINGABLE_MODELS": "pingable_models",
        }
        for env_key, field_name in _ENV_LIST_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = _env_list(val)

        if "refresh_on_startup" not in overrides:
            config_kwargs["refresh_on_startup"] = _env_bool(env.get("PYAVAIL_REFRESH_ON_STARTUP"), False)

        passive_hours = env.get("PYAVAIL_PASSIVE_TIMEOUT_HOURS")
        if passive_hours is not None and "passive_timeout" not in overrides:
            try:
                config_kwargs["passive_timeout"] = timedelta(hours=float(passive_hours))
            except ValueError as exc:
                raise AvailabilityConfigError(
                    f"PYAVAIL_PASSIVE_TIMEOUT_HOURS is not a number: {passive_hours!r}"
                ) from exc

        base_topic = env.get("PYAVAIL_BASE_TOPIC")
        if base_topic is not None:
            config_kwargs["base_topic"] = base_topic

        host = env.get("PYAVAIL_MQTT_HOST")
        if host is not None:
            config_kwargs["mqtt_host"] = host

        _ENV_INT_MAP = {
            "PYAVAIL_MQTT_PORT": "mqtt_port",
            "PYAVAIL_MQTT_KEEPALIVE": "mqtt_keepalive",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                try:
                    config_kwargs[field_name] = int(val)
                except ValueError as exc:
                    raise AvailabilityConfigError(f"{env_key} is not an integer: {val!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
