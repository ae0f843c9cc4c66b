"""pyavail - Async availability tracking for networked endpoints."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyavail")
except PackageNotFoundError:
    __version__ = "0+local"
from pyavail._mqtt import MqttPublisher
from pyavail.config import AvailabilityConfig
from pyavail.engine import AvailabilityEngine
from pyavail.exceptions import (
    AvailabilityConfigError,
    AvailabilityError,
    ProbeError,
    RefreshError,
)
from pyavail.ingestion import EventType
from pyavail.models import Capability, DeviceType, Endpoint, EndpointSettings
from pyavail.settings import InMemorySettingsStore

__all__ = [
    "__version__",
    "AvailabilityConfig",
    "AvailabilityConfigError",
    "AvailabilityEngine",
    "AvailabilityError",
    "Capability",
    "DeviceType",
    "Endpoint",
    "EndpointSettings",
    "EventType",
    "InMemorySettingsStore",
    "MqttPublisher",
    "ProbeError",
    "RefreshError",
]
