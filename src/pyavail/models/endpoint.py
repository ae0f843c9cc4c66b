"""Endpoint model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pyavail.models._base import EpochTimestamp


class DeviceType(StrEnum):
    """Network role reported by the stack."""

    COORDINATOR = "Coordinator"
    ROUTER = "Router"
    END_DEVICE = "EndDevice"
    UNKNOWN = "Unknown"

    @classmethod
    def _missing_(cls, value: object) -> DeviceType:
        return cls.UNKNOWN


class Capability(StrEnum):
    """How the liveness of an endpoint is established."""

    PINGABLE = "pingable"
    NON_PINGABLE_ROUTER = "non_pingable_router"
    NON_PINGABLE_OTHER = "non_pingable_other"


class Endpoint(BaseModel):
    """A networked device known to the stack.

    Instances are snapshots: the directory hands out a fresh one
    whenever metadata (``last_seen``, model after a re-join) changes.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    address: str = Field(..., validation_alias=AliasChoices("address", "ieeeAddr", "ieee_address"))
    """Stable hardware address (e.g. ``"0x00158d0001a2b3c4"``)."""
    model_id: str | None = Field(default=None, validation_alias=AliasChoices("modelID", "model_id"))
    """Model identifier reported by the device."""
    manufacturer_id: int | None = Field(
        default=None,
        validation_alias=AliasChoices("manufacturerID", "manufacturer_id"),
    )
    """Numeric manufacturer code."""
    manufacturer_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("manufacturerName", "manufacturer_name"),
    )
    device_type: DeviceType = Field(default=DeviceType.UNKNOWN, validation_alias=AliasChoices("type", "device_type"))
    power_source: str | None = Field(default=None, validation_alias=AliasChoices("powerSource", "power_source"))
    """Power source string as reported (e.g. ``"Mains (single phase)"``, ``"Battery"``)."""
    last_seen: EpochTimestamp = Field(default=None, validation_alias=AliasChoices("lastSeen", "last_seen"))
    """Last time any traffic was received from the device."""

    @field_validator("address")
    @classmethod
    def _normalize_address(cls, value: str) -> str:
        address = value.strip()
        if not address:
            raise ValueError("address must be non-empty")
        return address

    @field_validator("device_type", mode="before")
    @classmethod
    def _coerce_device_type(cls, value: object) -> DeviceType:
        if value is None:
            return DeviceType.UNKNOWN
        return DeviceType(str(value))
