import logging
import time
from abc import ABC, abstractmethod
from asyncio import gather
from dataclasses import dataclass
from typing import Awaitable, Callable, Coroutine, List

from racefeed.framing import Frame, FrameExtractor, MessageKind

class EOS(Exception):
    """Raised when the adapter reaches the end of the given byte stream"""
    pass

@dataclass
class Update:
    """A single framed message consumed from the backing adapter's stream"""

    kind: MessageKind
    "The message kind the block was framed as"

    data: bytes
    "The raw block"

    ts: int
    "The time that the block was completed, in Unix time (ns)"

    seq: int = 0
    "Position in the adapter's stream, assigned on dispatch"

type MessageCallback = Callable[[Update], None | Awaitable[None]]
type ConnectionCallback = Callable[[bool], None]

class RaceFeedAdapter(ABC):
    message_callbacks: List[MessageCallback]
    connection_callbacks: List[ConnectionCallback]
    last_sequence: int

    def __init__(self, extractor_factory: Callable[[], FrameExtractor] = FrameExtractor):
        self.message_callbacks = list()
        self.connection_callbacks = list()
        self.last_sequence = 0
        self._extractor_factory = extractor_factory
        self._adapter_log = logging.getLogger(__name__)

    @abstractmethod
    async def run(self) -> None:
        ...

    def on_message(self, callback: MessageCallback) -> None:
        self.message_callbacks.append(callback)

    def on_connection_change(self, callback: ConnectionCallback) -> None:
        """`callback` gets True when the feed connects and False when it drops"""
        self.connection_callbacks.append(callback)

    def _connection_changed(self, connected: bool) -> None:
        for callback in self.connection_callbacks:
            callback(connected)

    async def _feed(self, extractor: FrameExtractor, chunk: bytes) -> None:
        """Feeds one read into `extractor` and dispatches whatever it completed, even when the feed then overflows"""
        try:
            extractor.feed(chunk)
        finally:
            await self._frames(extractor.drain(), time.time_ns())

    async def _frames(self, frames: List[Frame], ts: int) -> None:
        for frame in frames:
            await self._message(Update(frame.kind, frame.block, ts))

    async def _message(self, update: Update):
        update.seq = self.last_sequence
        self.last_sequence += 1

        # synchronous callbacks run to completion here, before anything else gets scheduled
        futures = list()
        for callback in self.message_callbacks:
            try:
                future = callback(update)
            except EOS:
                raise
            except Exception:
                self._adapter_log.exception("Callback failed for %s #%d", update.kind.value, update.seq)
                continue

            if not isinstance(future, Coroutine):
                continue
            futures.append(future)

        for result in await gather(*futures, return_exceptions=True):
            if isinstance(result, EOS):
                raise result
            elif isinstance(result, Exception):
                self._adapter_log.error("Callback failed for %s #%d", update.kind.value, update.seq, exc_info=result)
