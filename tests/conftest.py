from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import pytest

from pyavail.config import AvailabilityConfig
from pyavail.engine import AvailabilityEngine
from pyavail.exceptions import ProbeError, RefreshError
from pyavail.models.endpoint import DeviceType, Endpoint
from pyavail.settings import InMemorySettingsStore

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def router(address: str, **kwargs: Any) -> Endpoint:
    return Endpoint(address=address, device_type=DeviceType.ROUTER, power_source="Mains (single phase)", **kwargs)


def battery_sensor(address: str, **kwargs: Any) -> Endpoint:
    return Endpoint(address=address, device_type=DeviceType.END_DEVICE, power_source="Battery", **kwargs)


class FakeDirectory:
    def __init__(self, endpoints: list[Endpoint] | None = None) -> None:
        self.endpoints: dict[str, Endpoint] = {e.address: e for e in endpoints or []}

    def add(self, endpoint: Endpoint) -> None:
        self.endpoints[endpoint.address] = endpoint

    def remove(self, address: str) -> None:
        self.endpoints.pop(address, None)

    def list_known_endpoints(self) -> list[Endpoint]:
        return list(self.endpoints.values())

    def resolve(self, address: str) -> Endpoint | None:
        return self.endpoints.get(address)


class FakeProber:
    """Answers probes from a per-address script; ``default`` once the script is exhausted."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.scripts: dict[str, list[bool]] = {}
        self.default = True

    def script(self, address: str, *outcomes: bool) -> None:
        self.scripts.setdefault(address, []).extend(outcomes)

    async def probe(self, endpoint: Endpoint) -> None:
        self.calls.append(endpoint.address)
        queued = self.scripts.get(endpoint.address)
        ok = queued.pop(0) if queued else self.default
        if not ok:
            raise ProbeError("no response", address=endpoint.address)


class FakeReader:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[str, str]] = []

    async def read(self, endpoint: Endpoint, key: str) -> None:
        self.calls.append((endpoint.address, key))
        if self.fail:
            raise RefreshError("read timed out", address=endpoint.address, key=key)


class FakeRefreshTransport:
    def __init__(self, readers: dict[str, FakeReader] | None = None) -> None:
        self.readers = readers if readers is not None else {"state": FakeReader()}

    def find_reader(self, endpoint: Endpoint, key: str) -> FakeReader | None:
        return self.readers.get(key)

    @property
    def reads(self) -> list[tuple[str, str]]:
        seen: list[FakeReader] = []
        calls: list[tuple[str, str]] = []
        for reader in self.readers.values():
            if any(reader is other for other in seen):
                continue
            seen.append(reader)
            calls.extend(reader.calls)
        return calls


class FakePublisher:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str, bool]] = []

    def publish(self, topic: str, payload: str, *, retain: bool = True) -> None:
        self.messages.append((topic, payload, retain))

    def payloads(self, topic: str) -> list[str]:
        return [payload for t, payload, _retain in self.messages if t == topic]


class FakeEventBus:
    def __init__(self) -> None:
        self.subscribers: list[Callable[[str, Endpoint], None]] = []

    def subscribe(self, callback: Callable[[str, Endpoint], None]) -> Callable[[], None]:
        self.subscribers.append(callback)

        def unsubscribe() -> None:
            self.subscribers.remove(callback)

        return unsubscribe

    def emit(self, event_type: str, endpoint: Endpoint) -> None:
        for callback in list(self.subscribers):
            callback(event_type, endpoint)


@dataclass
class Harness:
    directory: FakeDirectory = field(default_factory=FakeDirectory)
    prober: FakeProber = field(default_factory=FakeProber)
    refresh: FakeRefreshTransport = field(default_factory=FakeRefreshTransport)
    settings: InMemorySettingsStore = field(default_factory=InMemorySettingsStore)
    publisher: FakePublisher = field(default_factory=FakePublisher)
    bus: FakeEventBus = field(default_factory=FakeEventBus)
    now: datetime = NOW

    def clock(self) -> datetime:
        return self.now

    def engine(self, config: AvailabilityConfig | None = None, *, with_bus: bool = True) -> AvailabilityEngine:
        return AvailabilityEngine(
            config or AvailabilityConfig(availability_timeout=10),
            directory=self.directory,
            prober=self.prober,
            refresher=self.refresh,
            settings=self.settings,
            publisher=self.publisher,
            event_bus=self.bus if with_bus else None,
            clock=self.clock,
        )


@pytest.fixture
def harness() -> Harness:
    return Harness()


def seconds_until(handle: asyncio.TimerHandle) -> float:
    return handle.when() - asyncio.get_running_loop().time()
