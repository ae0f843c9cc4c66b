"""Per-endpoint liveness timers.

Pingable endpoints get a one-shot probe timer that is re-armed after
every probe and whenever traffic arrives. Non-pingable endpoints get a
repeating inactivity check. Every address owns at most one
:class:`asyncio.TimerHandle`; arming always cancels the previous one.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime

from pyavail.config import AvailabilityConfig
from pyavail.interfaces import EndpointDirectory, ProbeTransport
from pyavail.models.endpoint import Endpoint
from pyavail.state.policy import AvailabilityPolicy
from pyavail.state.store import AvailabilityStore

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LivenessScheduler:
    def __init__(
        self,
        *,
        config: AvailabilityConfig,
        directory: EndpointDirectory,
        prober: ProbeTransport,
        policy: AvailabilityPolicy,
        store: AvailabilityStore,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._directory = directory
        self._prober = prober
        self._policy = policy
        self._store = store
        self._clock = clock
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._probe_tasks: set[asyncio.Task[None]] = set()
        self._stopped = False

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    def timer_for(self, address: str) -> asyncio.TimerHandle | None:
        """The armed timer of *address*, if any."""
        return self._timers.get(address)

    def tracked_addresses(self) -> list[str]:
        return list(self._timers)

    # ------------------------------------------------------------------
    # Arming
    # ------------------------------------------------------------------

    def arm(self, endpoint: Endpoint) -> None:
        """Arm the timer matching the current classification of *endpoint*."""
        if self._policy.is_pingable(endpoint):
            self.arm_probe(endpoint.address)
        else:
            self.arm_passive_check(endpoint.address)

    def arm_probe(self, address: str) -> None:
        """(Re)start the probe countdown of a pingable endpoint."""
        self._arm(address, self._config.availability_timeout, self._on_probe_timer)

    def arm_passive_check(self, address: str) -> None:
        self._arm(address, self._config.passive_check_interval, self._on_passive_timer)

    def _arm(self, address: str, delay: float, callback: Callable[[str], None]) -> None:
        if self._stopped:
            return
        self.cancel(address)
        loop = asyncio.get_running_loop()
        self._timers[address] = loop.call_later(delay, callback, address)

    def cancel(self, address: str) -> None:
        handle = self._timers.pop(address, None)
        if handle is not None:
            handle.cancel()

    # ------------------------------------------------------------------
    # Pingable endpoints
    # ------------------------------------------------------------------

    def _on_probe_timer(self, address: str) -> None:
        self._timers.pop(address, None)
        if self._stopped:
            return
        self._spawn_probe(address, requeue=True)

    def _spawn_probe(self, address: str, *, requeue: bool) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(self.probe(address, requeue=requeue))
        self._probe_tasks.add(task)
        task.add_done_callback(self._probe_tasks.discard)
        return task

    async def probe_now(self, address: str) -> None:
        """Probe *address* once without re-arming.

        The probe is cancelled by :meth:`stop` like any scheduled one.
        """
        if self._stopped:
            return
        task = self._spawn_probe(address, requeue=False)
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        exc = None if task.cancelled() else task.exception()
        if exc is not None:
            raise exc

    async def probe(self, address: str, *, requeue: bool = True) -> None:
        """Probe *address* once and record the outcome.

        With ``requeue`` the next probe is armed whatever the outcome,
        including errors raised by the directory or the settings store.
        """
        rearm = requeue
        try:
            endpoint = self._directory.resolve(address)
            if endpoint is None:
                _logger.debug("Stop pinging '%s', device is not known anymore", address)
                rearm = False
                self._forget(address)
                return

            name = self._policy.display_name(endpoint)
            # Already offline devices fail on every probe; keep that out of the error log.
            level = logging.DEBUG if self._store.is_offline(address) else logging.ERROR
            try:
                await self._prober.probe(endpoint)
            except Exception:
                self._store.set_availability(endpoint, False)
                _logger.log(level, "Failed to ping '%s'", name)
            else:
                self._store.set_availability(endpoint, True)
                _logger.debug("Successfully pinged '%s'", name)
        except Exception:
            _logger.error("Ping cycle of '%s' failed", address, exc_info=True)
        finally:
            if rearm:
                self.arm_probe(address)

    # ------------------------------------------------------------------
    # Non-pingable endpoints
    # ------------------------------------------------------------------

    def _on_passive_timer(self, address: str) -> None:
        self._timers.pop(address, None)
        try:
            endpoint = self.check_passive(address)
            if endpoint is not None:
                self.arm(endpoint)
        except Exception:
            _logger.error("Inactivity check of '%s' failed", address, exc_info=True)
            # Keep the last known classification until the next check succeeds.
            self.arm_passive_check(address)

    def check_passive(self, address: str) -> Endpoint | None:
        """Mark *address* offline when it has been silent too long.

        Returns the resolved endpoint, or ``None`` when the directory no
        longer knows it (its tracking is dropped).
        """
        endpoint = self._directory.resolve(address)
        if endpoint is None:
            _logger.debug("Stop checking '%s', device is not known anymore", address)
            self._forget(address)
            return None
        if endpoint.last_seen is None:
            return endpoint

        ago = self._clock() - endpoint.last_seen
        _logger.debug(
            "Non-pingable device '%s' was last seen %.0f seconds ago",
            self._policy.display_name(endpoint),
            ago.total_seconds(),
        )
        if ago > self._config.passive_timeout:
            self._store.set_availability(endpoint, False)
        return endpoint

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _forget(self, address: str) -> None:
        self.cancel(address)
        self._store.forget(address)

    async def stop(self) -> None:
        """Cancel every timer and in-flight probe; no timer is armed afterwards."""
        self._stopped = True
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()

        current = asyncio.current_task()
        tasks = [task for task in self._probe_tasks if task is not current]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._probe_tasks.clear()
