from __future__ import annotations

from conftest import battery_sensor, router

from pyavail.models.endpoint import Capability, DeviceType, Endpoint
from pyavail.state.capability import classify, is_pingable, reports_state_on_announce


def test_mains_router_is_pingable() -> None:
    assert is_pingable(router("0x01"))
    assert classify(router("0x01")) is Capability.PINGABLE


def test_router_without_power_source_is_pingable() -> None:
    assert is_pingable(Endpoint(address="0x01", device_type=DeviceType.ROUTER))


def test_battery_router_is_not_pingable() -> None:
    endpoint = Endpoint(address="0x02", device_type=DeviceType.ROUTER, power_source="Battery")

    assert not is_pingable(endpoint)
    assert classify(endpoint) is Capability.NON_PINGABLE_ROUTER


def test_battery_end_device_is_not_pingable() -> None:
    endpoint = battery_sensor("0x03")

    assert not is_pingable(endpoint)
    assert classify(endpoint) is Capability.NON_PINGABLE_OTHER


def test_known_pingable_end_device_model() -> None:
    endpoint = Endpoint(address="0x04", device_type=DeviceType.END_DEVICE, model_id="E11-G13")

    assert is_pingable(endpoint)


def test_extra_pingable_models() -> None:
    endpoint = battery_sensor("0x05", model_id="lock.v2")

    assert not is_pingable(endpoint)
    assert is_pingable(endpoint, extra_models={"lock.v2"})


def test_classification_follows_new_snapshot_after_rejoin() -> None:
    before = battery_sensor("0x06", model_id="plug.v1")
    after = before.model_copy(update={"device_type": DeviceType.ROUTER, "power_source": "Mains (single phase)"})

    assert classify(before) is Capability.NON_PINGABLE_OTHER
    assert classify(after) is Capability.PINGABLE


def test_tradfri_reports_state_on_announce() -> None:
    assert reports_state_on_announce(router("0x07", manufacturer_id=4476))
    assert reports_state_on_announce(router("0x08", manufacturer_name="IKEA of Sweden"))
    assert not reports_state_on_announce(router("0x09", manufacturer_id=4107))
    assert not reports_state_on_announce(router("0x0a"))
