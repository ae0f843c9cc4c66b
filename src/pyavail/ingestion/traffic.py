"""Inbound traffic notifications.

Any traffic from an endpoint proves it is alive. Announces are special:
a device power-cycled within the probe timeout is never seen offline,
so its state may be stale even though availability never flipped.
"""

from __future__ import annotations

from enum import StrEnum

from pyavail.models.endpoint import Endpoint
from pyavail.state.capability import reports_state_on_announce


class EventType(StrEnum):
    MESSAGE = "message"
    DEVICE_JOINED = "deviceJoined"
    DEVICE_INTERVIEW = "deviceInterview"
    DEVICE_ANNOUNCE = "deviceAnnounce"


def needs_refresh_after_announce(event_type: str, endpoint: Endpoint, *, was_online: bool) -> bool:
    """Whether an announce from an endpoint already believed online warrants a state read."""
    return event_type == EventType.DEVICE_ANNOUNCE and was_online and not reports_state_on_announce(endpoint)
