import logging

import orjson
import pika
import pika.exceptions
from pika.adapters.blocking_connection import BlockingChannel
from pika.exchange_type import ExchangeType

from racefeed.errors import SinkError
from racefeed.sinks.abstract import RaceSink
from racefeed.util.snapshot import RaceSnapshot

class RabbitSink(RaceSink):
    """Publishes each snapshot to a topic exchange as three messages: telemetry, leaderboard, and driver_info"""

    channel: BlockingChannel

    def __init__(self, channel: BlockingChannel, exchange: str = "racefeed"):
        self.channel = channel
        self.exchange = exchange
        self._log = logging.getLogger(__name__)
        self.channel.exchange_declare(exchange, exchange_type=ExchangeType.topic)

    @classmethod
    def connect(cls, url: str, exchange: str = "racefeed") -> "RabbitSink":
        connection = pika.BlockingConnection(pika.URLParameters(url))
        return cls(connection.channel(), exchange)

    async def publish(self, snapshot: RaceSnapshot) -> None:
        messages = {
            "telemetry": {"ts": snapshot.ts, "target": snapshot.target_telemetry, "cars": list(snapshot.telemetry.values())},
            "leaderboard": {"ts": snapshot.ts, "rows": snapshot.rows},
        }
        if snapshot.target is not None:
            messages["driver_info"] = {"ts": snapshot.ts, "target": snapshot.target, "lap": snapshot.laps.get(snapshot.target.car)}

        try:
            for routing_key, body in messages.items():
                self.channel.basic_publish(exchange=self.exchange, routing_key=routing_key, body=orjson.dumps(body))
        except pika.exceptions.AMQPError as e:
            raise SinkError(f"Publishing to {self.exchange} failed: {e!r}") from e

        self._log.debug("Published %d messages to %s", len(messages), self.exchange)
