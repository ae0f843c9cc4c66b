#!/usr/bin/env python3
"""Run the availability engine against a simulated fleet.

Builds a handful of fake routers and battery sensors, answers probes at
random with the given failure rate and publishes availability either to
a real broker (``--mqtt-host``) or to stdout.

Use this to watch transition logging and retained topics without a
Zigbee stack attached.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import signal
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyavail import (  # noqa: E402
    AvailabilityConfig,
    AvailabilityEngine,
    DeviceType,
    Endpoint,
    EventType,
    InMemorySettingsStore,
    MqttPublisher,
    ProbeError,
)

_LOG = logging.getLogger("simulate_fleet")


class SimulatedFleet:
    def __init__(self, routers: int, sensors: int) -> None:
        now = datetime.now(UTC)
        self.endpoints: dict[str, Endpoint] = {}
        for idx in range(routers):
            address = f"0x00158d00000001{idx:02x}"
            self.endpoints[address] = Endpoint(
                address=address,
                device_type=DeviceType.ROUTER,
                power_source="Mains (single phase)",
                last_seen=now,
            )
        for idx in range(sensors):
            address = f"0x00158d00000002{idx:02x}"
            self.endpoints[address] = Endpoint(
                address=address,
                device_type=DeviceType.END_DEVICE,
                power_source="Battery",
                last_seen=now - timedelta(hours=random.randint(0, 30)),
            )

    def list_known_endpoints(self) -> list[Endpoint]:
        return list(self.endpoints.values())

    def resolve(self, address: str) -> Endpoint | None:
        return self.endpoints.get(address)


class RandomProber:
    def __init__(self, failure_rate: float) -> None:
        self._failure_rate = failure_rate

    async def probe(self, endpoint: Endpoint) -> None:
        await asyncio.sleep(random.uniform(0.01, 0.2))
        if random.random() < self._failure_rate:
            raise ProbeError("no response", address=endpoint.address)


class NoRefresh:
    def find_reader(self, endpoint: Endpoint, key: str) -> None:
        return None


class StdoutPublisher:
    def publish(self, topic: str, payload: str, *, retain: bool = True) -> None:
        print(f"[fleet] {topic} = {payload}{' (retained)' if retain else ''}")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--routers", type=int, default=3)
    parser.add_argument("--sensors", type=int, default=3)
    parser.add_argument("--timeout", type=float, default=5.0, help="availability_timeout in seconds")
    parser.add_argument("--failure-rate", type=float, default=0.3)
    parser.add_argument("--traffic-interval", type=float, default=2.0, help="Seconds between simulated messages")
    parser.add_argument("--duration", type=float, default=30.0, help="Stop after N seconds (0 = run until Ctrl+C)")
    parser.add_argument("--mqtt-host", default=None, help="Publish to this broker instead of stdout")
    parser.add_argument("--mqtt-port", type=int, default=1883)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> int:
    config = AvailabilityConfig(
        availability_timeout=args.timeout,
        mqtt_host=args.mqtt_host or "localhost",
        mqtt_port=args.mqtt_port,
    )
    fleet = SimulatedFleet(args.routers, args.sensors)

    mqtt_publisher: MqttPublisher | None = None
    if args.mqtt_host:
        mqtt_publisher = MqttPublisher(config, client_id="pyavail-simulator")
        mqtt_publisher.start()
    publisher = mqtt_publisher or StdoutPublisher()

    engine = AvailabilityEngine(
        config,
        directory=fleet,
        prober=RandomProber(args.failure_rate),
        refresher=NoRefresh(),
        settings=InMemorySettingsStore(),
        publisher=publisher,
    )

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)
    if args.duration > 0:
        loop.call_later(args.duration, stop.set)

    await engine.start()
    try:
        while not stop.is_set():
            try:
                await asyncio.wait_for(stop.wait(), timeout=args.traffic_interval)
            except TimeoutError:
                endpoint = random.choice(fleet.list_known_endpoints())
                _LOG.debug("Simulated message from %s", endpoint.address)
                engine.on_traffic(EventType.MESSAGE, endpoint)
    finally:
        await engine.stop()
        if mqtt_publisher is not None:
            mqtt_publisher.stop()
    return 0


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(_main())
