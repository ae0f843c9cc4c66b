"""Ingestion layer.

Translates inbound traffic notifications into liveness evidence.
"""

from pyavail.ingestion.traffic import EventType, needs_refresh_after_announce

__all__ = ["EventType", "needs_refresh_after_announce"]
