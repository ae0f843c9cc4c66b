"""Fixed thresholds and device lists used by the availability engine."""

from __future__ import annotations

from datetime import timedelta

#: Interval between passive inactivity checks for non-pingable endpoints.
PASSIVE_CHECK_INTERVAL_SECONDS: float = 300.0

#: A non-pingable endpoint silent for longer than this is considered offline.
PASSIVE_TIMEOUT: timedelta = timedelta(hours=25)

#: Model identifiers of end devices that answer pings reliably even though
#: they join as end devices (E11-G13 plug, Commercial Electric 53170161).
PINGABLE_END_DEVICE_MODELS: frozenset[str] = frozenset({"E11-G13", "Zigbee CCT Downlight"})

#: Manufacturers whose devices push their own state after an announce.
SELF_REPORTING_MANUFACTURER_IDS: frozenset[int] = frozenset({4476})
SELF_REPORTING_MANUFACTURER_NAMES: frozenset[str] = frozenset({"IKEA of Sweden"})

BATTERY_POWER_SOURCE = "battery"

AVAILABILITY_TOPIC_SUFFIX = "availability"
PAYLOAD_ONLINE = "online"
PAYLOAD_OFFLINE = "offline"
