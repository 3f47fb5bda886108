#!/usr/bin/env python
import argparse
import asyncio
import contextlib
import logging

import homeassistant_api

from racefeed import FrameExtractor, RaceFeedClient
from racefeed.adapters import TcpAdapter
from racefeed.config import RelaySettings, parse_priority
from racefeed.control import ControlSurface, HomeAssistantControl, StaticControl
from racefeed.gate import PublicationGate, SnapshotPublisher
from racefeed.reference import load_reference
from racefeed.sinks import ConsoleSink, RaceSink
from racefeed.sinks.homeassistantsink import HomeAssistantSink
from racefeed.sinks.rabbitsink import RabbitSink
from racefeed.util import RaceStateAggregator, SnapshotBuilder

logging.basicConfig(
    format="%(asctime)s %(name)s: %(message)s",
    level=logging.INFO,
)

async def main(settings: RelaySettings, console: bool):
    roster = load_reference(settings.reference_path) if settings.reference_path is not None else dict()

    adapter = TcpAdapter(settings.host, settings.port, reconnect_delay=settings.reconnect_delay,
                         extractor_factory=lambda: FrameExtractor(settings.priority, settings.max_pending))
    client = RaceFeedClient(adapter)
    aggregator = RaceStateAggregator(roster, client)

    with contextlib.ExitStack() as stack:
        sinks: list[RaceSink] = list()
        control: ControlSurface = StaticControl(True, settings.target_car)

        if settings.homeassistant_url is not None:
            ha = stack.enter_context(homeassistant_api.Client(settings.homeassistant_url, settings.homeassistant_token))
            control = HomeAssistantControl(ha, heartbeat_entity="input_datetime.racefeed_heartbeat")
            sinks.append(HomeAssistantSink(ha))

        if settings.rabbitmq_url is not None:
            sinks.append(RabbitSink.connect(settings.rabbitmq_url))

        if console or len(sinks) == 0:
            sinks.append(ConsoleSink())

        gate = PublicationGate(aggregator, control, settings.poll_interval)
        publisher = SnapshotPublisher(gate, SnapshotBuilder(aggregator, roster), sinks, settings.publish_interval)

        await asyncio.gather(client.go(), gate.run(), publisher.run())

if __name__ == "__main__":
    settings = RelaySettings.from_env()

    parser = argparse.ArgumentParser()
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", default=settings.port, type=int)
    parser.add_argument("-r", "--reference", default=settings.reference_path)
    parser.add_argument("-c", "--car", default=settings.target_car)
    parser.add_argument("--priority")
    parser.add_argument("--console", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    settings.host = args.host
    settings.port = args.port
    settings.reference_path = args.reference
    settings.target_car = args.car
    if args.priority is not None:
        settings.priority = parse_priority(args.priority)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        asyncio.run(main(settings, args.console))
    except (KeyboardInterrupt, asyncio.exceptions.CancelledError):
        ...
