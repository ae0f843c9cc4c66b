"""Custom exception hierarchy for pyavail."""

from __future__ import annotations


class AvailabilityError(Exception):
    """Base exception for all pyavail errors."""


class AvailabilityConfigError(AvailabilityError):
    """Invalid or missing configuration."""


class ProbeError(AvailabilityError):
    """An active liveness probe did not get an answer.

    Probe transports may raise any exception; this one is provided so
    they can carry the endpoint address along.
    """

    def __init__(self, message: str, *, address: str = "") -> None:
        self.address = address
        super().__init__(message)


class RefreshError(AvailabilityError):
    """Reading state from an endpoint after (re)connect failed."""

    def __init__(self, message: str, *, address: str = "", key: str = "") -> None:
        self.address = address
        self.key = key
        super().__init__(message)
