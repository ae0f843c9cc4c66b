"""Availability engine.

Decides per endpoint whether it is online, announces every transition
once, and refreshes endpoint state when a device comes back.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime

from pyavail.config import AvailabilityConfig
from pyavail.ingestion.traffic import needs_refresh_after_announce
from pyavail.interfaces import (
    EndpointDirectory,
    EventBus,
    ProbeTransport,
    PublicationTransport,
    RefreshTransport,
    SettingsStore,
)
from pyavail.models.endpoint import Endpoint
from pyavail.scheduler import LivenessScheduler
from pyavail.state.policy import AvailabilityPolicy
from pyavail.state.refresh import StateRefresher
from pyavail.state.store import AvailabilityStore

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AvailabilityEngine:
    """Liveness tracking for every endpoint known to the directory.

    Usage::

        engine = AvailabilityEngine(
            config,
            directory=directory,
            prober=prober,
            refresher=refresher,
            settings=settings,
            publisher=publisher,
            event_bus=bus,
        )
        await engine.start()
        ...
        await engine.stop()

    Without an event bus the host feeds traffic through
    :meth:`on_traffic` itself, and calls :meth:`on_connect` for devices
    that join after :meth:`start`.
    """

    def __init__(
        self,
        config: AvailabilityConfig,
        *,
        directory: EndpointDirectory,
        prober: ProbeTransport,
        refresher: RefreshTransport,
        settings: SettingsStore,
        publisher: PublicationTransport,
        event_bus: EventBus | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._directory = directory
        self._event_bus = event_bus
        self._unsubscribe: Callable[[], None] | None = None
        self._policy = AvailabilityPolicy(config, settings)
        self._refresher = StateRefresher(
            transport=refresher,
            policy=self._policy,
            keys=config.reconnect_refresh_keys,
        )
        self._store = AvailabilityStore(
            policy=self._policy,
            publisher=publisher,
            refresh=self._refresher.refresh,
        )
        self._scheduler = LivenessScheduler(
            config=config,
            directory=directory,
            prober=prober,
            policy=self._policy,
            store=self._store,
            clock=clock,
        )
        self._started = False
        self._stopping = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Connect every known endpoint and begin supervising it."""
        if self._started or self._stopping:
            return
        self._started = True

        if self._event_bus is not None:
            self._unsubscribe = self._event_bus.subscribe(self.on_traffic)

        endpoints = self._directory.list_known_endpoints()
        _logger.debug("Starting availability tracking for %d endpoints", len(endpoints))
        results = await asyncio.gather(
            *(self.on_connect(endpoint) for endpoint in endpoints),
            return_exceptions=True,
        )
        for endpoint, result in zip(endpoints, results, strict=True):
            if isinstance(result, BaseException):
                _logger.error("Failed to connect '%s'", endpoint.address, exc_info=result)

    async def stop(self) -> None:
        """Stop all timers and announce every tracked endpoint offline."""
        if self._stopping:
            return
        self._stopping = True

        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        await self._scheduler.stop()
        self._store.cancel_refreshes()

        for endpoint in self._directory.list_known_endpoints():
            if self._policy.is_tracked(endpoint):
                self._store.set_availability(endpoint, False, force=True)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    async def on_connect(self, endpoint: Endpoint) -> None:
        """Announce *endpoint* and arm its supervision.

        Called at startup for every known endpoint and by the host when a
        device (re)joins. Always announces once, even when the state did
        not change.
        """
        if self._stopping:
            return
        if not self._policy.is_tracked(endpoint):
            _logger.debug("Availability tracking disabled for '%s'", self._policy.display_name(endpoint))
            return

        address = endpoint.address
        if self._policy.is_ping_on_startup_enabled(endpoint):
            await self._scheduler.probe_now(address)
            if self._stopping:
                return

        previous = self._store.get(address)
        self._store.set_availability(endpoint, True if previous is None else previous, force=True)
        self._scheduler.arm(endpoint)

    def on_traffic(self, event_type: str, endpoint: Endpoint) -> None:
        """Treat traffic from *endpoint* as proof that it is online."""
        if self._stopping or not self._policy.is_tracked(endpoint):
            return

        address = endpoint.address
        was_online = self._store.is_online(address)
        self._store.set_availability(endpoint, True)

        if self._policy.is_pingable(endpoint):
            self._scheduler.arm_probe(address)
            if needs_refresh_after_announce(event_type, endpoint, was_online=was_online):
                _logger.debug("'%s' announced while online, refreshing state", self._policy.display_name(endpoint))
                self._store.request_refresh(endpoint)
        elif self._scheduler.timer_for(address) is None:
            # Joined after start without an on_connect: supervise it from now on.
            self._scheduler.arm_passive_check(address)
