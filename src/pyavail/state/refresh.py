"""Best-effort state reads after an endpoint (re)connects."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pyavail.interfaces import RefreshTransport, StateReader
from pyavail.models.endpoint import Endpoint
from pyavail.state.policy import AvailabilityPolicy

_logger = logging.getLogger(__name__)


class StateRefresher:
    """Reads the configured state keys from an endpoint.

    Each key is mapped to a reader through the refresh transport. A
    reader serving several keys is only called for the first of them.
    """

    def __init__(
        self,
        *,
        transport: RefreshTransport,
        policy: AvailabilityPolicy,
        keys: Sequence[str],
    ) -> None:
        self._transport = transport
        self._policy = policy
        self._keys = tuple(keys)

    async def refresh(self, endpoint: Endpoint) -> None:
        """Read state from *endpoint*. Failures are logged, never raised."""
        if not self._policy.is_refresh_allowed(endpoint):
            _logger.debug("State refresh disabled for '%s'", self._policy.display_name(endpoint))
            return

        used: list[StateReader] = []
        try:
            for key in self._keys:
                reader = self._transport.find_reader(endpoint, key)
                if reader is None or any(reader is seen for seen in used):
                    continue
                await reader.read(endpoint, key)
                used.append(reader)
        except Exception:
            _logger.error(
                "Failed to read state of '%s' after reconnect",
                self._policy.display_name(endpoint),
                exc_info=True,
            )
