"""MQTT publication transport for availability announcements."""

from __future__ import annotations

import logging
from typing import Any, cast

import paho.mqtt.client as mqtt

from pyavail.config import AvailabilityConfig


class MqttPublisher:
    """Threaded paho-mqtt client publishing retained availability payloads.

    Topics handed to :meth:`publish` are relative to the configured base
    topic. Publishing is fire-and-forget (QoS 0); messages published
    while disconnected are dropped with a debug log.
    """

    def __init__(
        self,
        config: AvailabilityConfig,
        *,
        client_id: str = "",
        username: str | None = None,
        password: str | None = None,
        client: mqtt.Client | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._client_id = client_id
        self._username = username
        self._password = password
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = client
        self._running = client is not None

    @property
    def is_running(self) -> bool:
        """Whether the MQTT network loop is running."""
        return self._running

    def topic(self, relative: str) -> str:
        return f"{self._config.base_topic}/{relative.lstrip('/')}"

    def start(self) -> None:
        """Connect to the broker and start the network loop."""
        self.stop()
        self._logger.debug(
            "MQTT publisher start requested host=%s port=%s client_id=%s",
            self._config.mqtt_host,
            self._config.mqtt_port,
            self._client_id,
        )

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=self._client_id,
        )
        client.enable_logger(self._logger)
        if self._username is not None:
            client.username_pw_set(self._username, self._password)

        def on_connect(
            _client: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._logger.warning("MQTT connect failed: %s", reason_code)
                return
            self._logger.debug("MQTT connected successfully reason=%s", reason_code)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if self._running:
                self._logger.debug("MQTT disconnected: %s", reason_code)

        client.on_connect = on_connect
        client.on_disconnect = on_disconnect

        client.connect(self._config.mqtt_host, self._config.mqtt_port, keepalive=self._config.mqtt_keepalive)
        client.loop_start()

        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def stop(self) -> None:
        """Disconnect and stop the network loop if running."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")

    def publish(self, topic: str, payload: str, *, retain: bool = True) -> None:
        client = self._client
        full_topic = self.topic(topic)
        if client is None or not self._running:
            self._logger.debug("MQTT publisher not running, dropping %s=%s", full_topic, payload)
            return
        info = client.publish(full_topic, payload, qos=0, retain=retain)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            self._logger.debug("MQTT publish to %s not queued rc=%s", full_topic, info.rc)
