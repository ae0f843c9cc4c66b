"""Endpoint capability classification.

Pure functions of the endpoint snapshot. Nothing here is cached: a
device that re-joins as a different model is classified anew the next
time it is looked at.
"""

from __future__ import annotations

from collections.abc import Collection

from pyavail._constants import (
    BATTERY_POWER_SOURCE,
    PINGABLE_END_DEVICE_MODELS,
    SELF_REPORTING_MANUFACTURER_IDS,
    SELF_REPORTING_MANUFACTURER_NAMES,
)
from pyavail.models.endpoint import Capability, DeviceType, Endpoint


def is_battery_powered(endpoint: Endpoint) -> bool:
    source = endpoint.power_source
    return source is not None and source.strip().lower() == BATTERY_POWER_SOURCE


def is_pingable(endpoint: Endpoint, extra_models: Collection[str] = ()) -> bool:
    """Whether *endpoint* answers active probes reliably.

    True for the known pingable end-device models and for mains powered
    routers.
    """
    if endpoint.model_id is not None and (
        endpoint.model_id in PINGABLE_END_DEVICE_MODELS or endpoint.model_id in extra_models
    ):
        return True
    return endpoint.device_type == DeviceType.ROUTER and not is_battery_powered(endpoint)


def classify(endpoint: Endpoint, extra_models: Collection[str] = ()) -> Capability:
    if is_pingable(endpoint, extra_models):
        return Capability.PINGABLE
    if endpoint.device_type == DeviceType.ROUTER:
        return Capability.NON_PINGABLE_ROUTER
    return Capability.NON_PINGABLE_OTHER


def reports_state_on_announce(endpoint: Endpoint) -> bool:
    """Whether the device family pushes its own state after an announce (IKEA TRADFRI)."""
    if endpoint.manufacturer_id is not None and endpoint.manufacturer_id in SELF_REPORTING_MANUFACTURER_IDS:
        return True
    return endpoint.manufacturer_name in SELF_REPORTING_MANUFACTURER_NAMES
