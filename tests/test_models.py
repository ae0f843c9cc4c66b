"""Tests for endpoint and settings model parsing."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from pyavail.models import DeviceType, Endpoint, EndpointSettings, parse_epoch_timestamp


def test_endpoint_from_stack_payload() -> None:
    endpoint = Endpoint.model_validate(
        {
            "ieeeAddr": " 0x00158d0001a2b3c4 ",
            "modelID": "lumi.sensor_motion",
            "manufacturerID": 4151,
            "type": "EndDevice",
            "powerSource": "Battery",
            "lastSeen": 1767268800000,
        }
    )

    assert endpoint.address == "0x00158d0001a2b3c4"
    assert endpoint.model_id == "lumi.sensor_motion"
    assert endpoint.device_type is DeviceType.END_DEVICE
    assert endpoint.last_seen == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def test_unknown_device_type_maps_to_unknown() -> None:
    endpoint = Endpoint.model_validate({"ieeeAddr": "0x01", "type": "GreenPower"})

    assert endpoint.device_type is DeviceType.UNKNOWN


def test_empty_address_rejected() -> None:
    with pytest.raises(ValidationError):
        Endpoint(address="   ")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, None),
        (0, None),
        (1767268800, datetime(2026, 1, 1, 12, 0, tzinfo=UTC)),
        (1767268800000, datetime(2026, 1, 1, 12, 0, tzinfo=UTC)),
        (datetime(2026, 1, 1, 12, 0), datetime(2026, 1, 1, 12, 0, tzinfo=UTC)),
        ("1767268800", datetime(2026, 1, 1, 12, 0, tzinfo=UTC)),
        ("2026-01-01T12:00:00Z", datetime(2026, 1, 1, 12, 0, tzinfo=UTC)),
        ("2026-01-01T14:00:00+02:00", datetime(2026, 1, 1, 12, 0, tzinfo=UTC)),
        ("", None),
    ],
)
def test_parse_epoch_timestamp(value: object, expected: datetime | None) -> None:
    assert parse_epoch_timestamp(value) == expected


def test_endpoint_last_seen_iso_string() -> None:
    endpoint = Endpoint.model_validate({"ieeeAddr": "0x01", "lastSeen": "2026-01-01T12:00:00.000Z"})

    assert endpoint.last_seen == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def test_endpoint_last_seen_garbage_rejected() -> None:
    with pytest.raises(ValidationError):
        Endpoint.model_validate({"ieeeAddr": "0x01", "lastSeen": "yesterday"})


def test_endpoint_settings_accepts_device_option_names() -> None:
    settings = EndpointSettings.model_validate(
        {
            "friendlyName": "front_door_lock",
            "availability_ping_device_on_startup": True,
            "availability_allow_refresh_state": False,
        }
    )

    assert settings.friendly_name == "front_door_lock"
    assert settings.get("ping_on_startup") is True
    assert settings.get("allow_refresh_state") is False
    assert settings.get("refresh_on_startup") is None


def test_endpoint_settings_get_ignores_unknown_and_name() -> None:
    settings = EndpointSettings(friendly_name="lamp")

    assert settings.get("friendly_name") is None
    assert settings.get("no_such_setting") is None
