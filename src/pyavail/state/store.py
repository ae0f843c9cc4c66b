"""Availability state store.

This is the only component allowed to record whether an endpoint is
online, and the only one that announces transitions.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pyavail._constants import AVAILABILITY_TOPIC_SUFFIX, PAYLOAD_OFFLINE, PAYLOAD_ONLINE
from pyavail.interfaces import PublicationTransport
from pyavail.models.endpoint import Endpoint
from pyavail.state.policy import AvailabilityPolicy

_logger = logging.getLogger(__name__)


def availability_topic(name: str) -> str:
    return f"{name}/{AVAILABILITY_TOPIC_SUFFIX}"


class AvailabilityStore:
    """Last known availability per endpoint address.

    An address without an entry has never been reported; that is
    distinct from being offline.
    """

    def __init__(
        self,
        *,
        policy: AvailabilityPolicy,
        publisher: PublicationTransport,
        refresh: Callable[[Endpoint], Awaitable[None]],
    ) -> None:
        self._policy = policy
        self._publisher = publisher
        self._refresh = refresh
        self._state: dict[str, bool] = {}
        self._refresh_tasks: set[asyncio.Task[None]] = set()
        self._closed = False

    def get(self, address: str) -> bool | None:
        return self._state.get(address)

    def has_state(self, address: str) -> bool:
        return address in self._state

    def is_online(self, address: str) -> bool:
        return self._state.get(address) is True

    def is_offline(self, address: str) -> bool:
        return self._state.get(address) is False

    def known_addresses(self) -> list[str]:
        return list(self._state)

    def forget(self, address: str) -> None:
        self._state.pop(address, None)

    def set_availability(self, endpoint: Endpoint, available: bool, *, force: bool = False) -> None:
        """Record *available* for *endpoint* and announce it if it changed.

        ``force`` announces even when the state is unchanged. Coming
        online for the first time (when startup refresh is enabled) or
        after being offline requests a state refresh.
        """
        address = endpoint.address
        available = bool(available)
        previous = self._state.get(address)

        should_publish = previous is not available or force
        refresh_for_startup = available and previous is None and self._policy.is_refresh_on_startup_enabled(endpoint)
        refresh_for_reconnect = available and previous is False

        # Record first so a refresh that produces traffic does not trigger again.
        self._state[address] = available

        if refresh_for_startup or refresh_for_reconnect:
            self.request_refresh(endpoint)

        if should_publish:
            self._publish(endpoint, available)

    def request_refresh(self, endpoint: Endpoint) -> None:
        """Start a background state refresh for *endpoint*."""
        if self._closed:
            return
        task = asyncio.get_running_loop().create_task(self._run_refresh(endpoint))
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)

    async def _run_refresh(self, endpoint: Endpoint) -> None:
        try:
            await self._refresh(endpoint)
        except Exception:
            _logger.error("State refresh of '%s' failed", self._policy.display_name(endpoint), exc_info=True)

    async def wait_for_refreshes(self) -> None:
        """Wait until every refresh started so far has finished."""
        while self._refresh_tasks:
            await asyncio.gather(*list(self._refresh_tasks), return_exceptions=True)

    def cancel_refreshes(self) -> None:
        self._closed = True
        for task in list(self._refresh_tasks):
            task.cancel()
        self._refresh_tasks.clear()

    def _publish(self, endpoint: Endpoint, available: bool) -> None:
        name = self._policy.display_name(endpoint)
        payload = PAYLOAD_ONLINE if available else PAYLOAD_OFFLINE
        _logger.debug("Publishing availability of '%s': %s", name, payload)
        try:
            self._publisher.publish(availability_topic(name), payload, retain=True)
        except Exception:
            _logger.error("Failed to publish availability of '%s'", name, exc_info=True)
