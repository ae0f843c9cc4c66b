"""Collaborators consumed by the availability engine.

The engine never talks to the network stack, the broker or the settings
file directly; hosts hand it objects satisfying these protocols.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from pyavail.models.endpoint import Endpoint
from pyavail.models.settings import EndpointSettings


class EndpointDirectory(Protocol):
    """Endpoints currently known to the network stack."""

    def list_known_endpoints(self) -> list[Endpoint]: ...

    def resolve(self, address: str) -> Endpoint | None: ...


class ProbeTransport(Protocol):
    """Active liveness probe; raises when the endpoint does not answer."""

    async def probe(self, endpoint: Endpoint) -> None: ...


class StateReader(Protocol):
    """Reads one or more state keys from an endpoint."""

    async def read(self, endpoint: Endpoint, key: str) -> None: ...


class RefreshTransport(Protocol):
    """Maps state keys to the reader able to fetch them.

    Several keys may resolve to the same reader; the engine calls each
    distinct reader once per refresh.
    """

    def find_reader(self, endpoint: Endpoint, key: str) -> StateReader | None: ...


class SettingsStore(Protocol):
    """Live per-endpoint settings; looked up on every use."""

    def get_endpoint_overrides(self, address: str) -> EndpointSettings | None: ...

    def resolve_display_name(self, address: str) -> str | None: ...


class PublicationTransport(Protocol):
    """Fire-and-forget publisher for availability announcements."""

    def publish(self, topic: str, payload: str, *, retain: bool = True) -> None: ...


TrafficCallback = Callable[[str, Endpoint], None]


class EventBus(Protocol):
    """Delivers ``(event_type, endpoint)`` notifications for inbound traffic."""

    def subscribe(self, callback: TrafficCallback) -> Callable[[], None]:
        """Register *callback*; the returned callable unsubscribes it."""
        ...
