import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

from racefeed.errors import FeedOverflowError

DEFAULT_MAX_PENDING = 1024 * 1024

class MessageKind(Enum):
    TELEMETRY = "Telemetry_Leaderboard"
    PIT_SUMMARY = "Pit_Summary"
    LEADERBOARD = "Unofficial_Leaderboard"
    COMPLETED_LAP = "Completed_Lap"

    @property
    def start_marker(self) -> bytes:
        return b"<" + self.value.encode()

    @property
    def end_marker(self) -> bytes:
        # lap events are a single self-closing tag, everything else is a paired tag
        if self is MessageKind.COMPLETED_LAP:
            return b"/>"
        return b"</" + self.value.encode() + b">"

DEFAULT_PRIORITY = (MessageKind.TELEMETRY, MessageKind.PIT_SUMMARY, MessageKind.LEADERBOARD, MessageKind.COMPLETED_LAP)

class StepResult(Enum):
    EMITTED = "emitted"
    INCOMPLETE = "incomplete"
    EMPTY = "empty"

@dataclass(frozen=True)
class Frame:
    kind: MessageKind
    block: bytes
    "The raw message, from the start marker through the end marker"

class FrameExtractor:
    """
    Carves the feed's unframed byte stream into complete message blocks.

    Only one kind's start marker is looked at per step: the first kind in `priority` that
    appears anywhere in the buffer wins, and if its end marker hasn't arrived yet nothing is
    extracted until more bytes show up. Anything in front of an extracted block is dropped
    along with it.
    """

    priority: Sequence[MessageKind]
    max_pending: int | None
    _buffer: bytearray
    _frames: List[Frame]

    def __init__(self, priority: Sequence[MessageKind] = DEFAULT_PRIORITY, max_pending: int | None = DEFAULT_MAX_PENDING):
        if len(set(priority)) != len(priority):
            raise ValueError("priority lists a message kind twice")

        self.priority = tuple(priority)
        self.max_pending = max_pending
        self._buffer = bytearray()
        self._frames = list()
        self._log = logging.getLogger(__name__)

    @property
    def pending(self) -> int:
        """Number of buffered bytes that haven't been consumed by a complete block"""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> None:
        self._buffer += chunk

        while self._step() is StepResult.EMITTED:
            pass

        if self.max_pending is not None and len(self._buffer) > self.max_pending:
            raise FeedOverflowError(len(self._buffer), self.max_pending)

    def drain(self) -> List[Frame]:
        frames = self._frames
        self._frames = list()
        return frames

    def reset(self) -> None:
        if len(self._buffer) > 0:
            self._log.debug("Discarding %d buffered bytes", len(self._buffer))
        self._buffer.clear()

    def _step(self) -> StepResult:
        for kind in self.priority:
            start = self._buffer.find(kind.start_marker)
            if start == -1:
                continue

            end = self._buffer.find(kind.end_marker, start)
            if end == -1:
                return StepResult.INCOMPLETE

            end += len(kind.end_marker)
            if start > 0:
                self._log.debug("Skipping %d bytes ahead of %s", start, kind.value)

            self._frames.append(Frame(kind, bytes(self._buffer[start:end])))
            del self._buffer[:end]
            return StepResult.EMITTED

        return StepResult.EMPTY
