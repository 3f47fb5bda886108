from abc import ABC, abstractmethod

from racefeed.util.snapshot import RaceSnapshot

class RaceSink(ABC):
    """Somewhere snapshots get published. Failures are the publisher's problem to log, not ours to hide"""

    @abstractmethod
    async def publish(self, snapshot: RaceSnapshot) -> None:
        ...
