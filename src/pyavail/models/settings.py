"""Per-endpoint setting overrides."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class EndpointSettings(BaseModel):
    """Overrides configured for a single endpoint.

    ``None`` means "not configured": the global default applies. The
    zigbee2mqtt device option names are accepted as aliases.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    friendly_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("friendly_name", "friendlyName"),
    )
    ping_on_startup: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("ping_on_startup", "availability_ping_device_on_startup"),
    )
    refresh_on_startup: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("refresh_on_startup", "availability_refresh_state_on_startup"),
    )
    allow_refresh_state: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("allow_refresh_state", "availability_allow_refresh_state"),
    )
    """``False`` disables state reads on reconnect (saves battery)."""

    def get(self, setting: str) -> bool | None:
        """Return the override for *setting*, ``None`` when unset or unknown."""
        if setting == "friendly_name" or setting not in type(self).model_fields:
            return None
        value = getattr(self, setting)
        return value if isinstance(value, bool) else None
