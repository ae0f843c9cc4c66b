from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import paho.mqtt.client as mqtt
import pytest
from conftest import FakeDirectory, FakeProber, FakeRefreshTransport, battery_sensor

from pyavail._mqtt import MqttPublisher
from pyavail.config import AvailabilityConfig
from pyavail.engine import AvailabilityEngine
from pyavail.settings import InMemorySettingsStore


class _FakeClient:
    def __init__(self, rc: int = mqtt.MQTT_ERR_SUCCESS) -> None:
        self.rc = rc
        self.published: list[tuple[str, str, int, bool]] = []
        self.disconnected = False
        self.loop_stopped = False

    def publish(self, topic: str, payload: str, qos: int = 0, retain: bool = False) -> Any:
        self.published.append((topic, payload, qos, retain))
        return SimpleNamespace(rc=self.rc)

    def disconnect(self) -> None:
        self.disconnected = True

    def loop_stop(self) -> None:
        self.loop_stopped = True


def test_publish_prefixes_base_topic() -> None:
    client = _FakeClient()
    publisher = MqttPublisher(AvailabilityConfig(base_topic="zigbee2mqtt"), client=client)  # type: ignore[arg-type]

    publisher.publish("kitchen_plug/availability", "online")

    assert client.published == [("zigbee2mqtt/kitchen_plug/availability", "online", 0, True)]


def test_publish_without_client_is_dropped() -> None:
    publisher = MqttPublisher(AvailabilityConfig())

    publisher.publish("lamp/availability", "offline")

    assert not publisher.is_running


def test_publish_not_queued_does_not_raise() -> None:
    client = _FakeClient(rc=mqtt.MQTT_ERR_NO_CONN)
    publisher = MqttPublisher(AvailabilityConfig(), client=client)  # type: ignore[arg-type]

    publisher.publish("lamp/availability", "offline")

    assert len(client.published) == 1


def test_stop_disconnects_and_stops_loop() -> None:
    client = _FakeClient()
    publisher = MqttPublisher(AvailabilityConfig(), client=client)  # type: ignore[arg-type]

    publisher.stop()
    publisher.publish("lamp/availability", "online")

    assert client.disconnected
    assert client.loop_stopped
    assert client.published == []


@pytest.mark.asyncio
async def test_engine_publishes_through_mqtt() -> None:
    client = _FakeClient()
    config = AvailabilityConfig(base_topic="z2m")
    sensor = battery_sensor("0x01")
    engine = AvailabilityEngine(
        config,
        directory=FakeDirectory([sensor]),
        prober=FakeProber(),
        refresher=FakeRefreshTransport(),
        settings=InMemorySettingsStore({"0x01": {"friendly_name": "hall_motion"}}),
        publisher=MqttPublisher(config, client=client),  # type: ignore[arg-type]
    )

    await engine.start()
    await engine.stop()

    assert client.published == [
        ("z2m/hall_motion/availability", "online", 0, True),
        ("z2m/hall_motion/availability", "offline", 0, True),
    ]
