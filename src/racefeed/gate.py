import asyncio
import logging
from typing import List, Sequence

from racefeed.control import ControlSurface
from racefeed.sinks.abstract import RaceSink
from racefeed.util.race_state import RaceStateAggregator
from racefeed.util.snapshot import RaceSnapshot, SnapshotBuilder

POLL_INTERVAL = 5.0
PUBLISH_INTERVAL = 2.0

class PublicationGate:
    """
    Tracks the operator's online switch and target car.

    Going offline throws away live telemetry and the leaderboard, so that nothing stale gets
    published when it comes back; lap history is kept. Coming back online does nothing by itself.
    """

    online: bool
    target_car: str | None

    def __init__(self, aggregator: RaceStateAggregator, control: ControlSurface, poll_interval: float = POLL_INTERVAL):
        self.aggregator = aggregator
        self.control = control
        self.poll_interval = poll_interval
        self.online = False
        self.target_car = None
        self._log = logging.getLogger(__name__)

    def set_online(self, online: bool) -> None:
        if online == self.online:
            return

        self.online = online
        if online:
            self._log.info("Online")
        else:
            self._log.info("Offline, not publishing")
            self.aggregator.clear_live()

    async def poll(self) -> bool:
        try:
            online = await self.control.read_online()
        except Exception:
            self._log.exception("Couldn't read the online switch, assuming offline")
            online = False

        self.set_online(online)
        if not online:
            return False

        try:
            target_car = await self.control.read_target_car()
        except Exception:
            self._log.exception("Couldn't read the target car, keeping %s", self.target_car)
        else:
            if target_car != self.target_car:
                self._log.info("Target car is now %s", target_car)
            self.target_car = target_car

        try:
            await self.control.heartbeat()
        except Exception:
            self._log.exception("Heartbeat failed")

        return True

    async def run(self) -> None:
        while True:
            await self.poll()
            await asyncio.sleep(self.poll_interval)

class SnapshotPublisher:
    """Hands a snapshot to every sink on a fixed interval, while the gate is open"""

    sinks: List[RaceSink]

    def __init__(self, gate: PublicationGate, builder: SnapshotBuilder, sinks: Sequence[RaceSink], interval: float = PUBLISH_INTERVAL):
        self.gate = gate
        self.builder = builder
        self.sinks = list(sinks)
        self.interval = interval
        self._log = logging.getLogger(__name__)

    async def tick(self) -> RaceSnapshot | None:
        if not self.gate.online:
            self._log.debug("Not publishing, offline")
            return None

        if not self.gate.aggregator.state.has_live_data():
            self._log.debug("Not publishing, no data yet")
            return None

        # built in one go, before anything awaits
        snapshot = self.builder.build(self.gate.target_car)

        for sink in self.sinks:
            try:
                await sink.publish(snapshot)
            except Exception:
                self._log.exception("%s failed to publish", type(sink).__name__)

        return snapshot

    async def run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.tick()
