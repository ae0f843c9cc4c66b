"""Data models for endpoints and their settings."""

from pyavail.models._base import EpochTimestamp, parse_epoch_timestamp
from pyavail.models.endpoint import Capability, DeviceType, Endpoint
from pyavail.models.settings import EndpointSettings

__all__ = [
    "Capability",
    "DeviceType",
    "Endpoint",
    "EndpointSettings",
    "EpochTimestamp",
    "parse_epoch_timestamp",
]
