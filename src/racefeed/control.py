import datetime
import logging
from abc import ABC, abstractmethod

import homeassistant_api
from homeassistant_api import State

class ControlSurface(ABC):
    """Where the operator flips the relay online and picks which car to follow"""

    @abstractmethod
    async def read_online(self) -> bool:
        ...

    @abstractmethod
    async def read_target_car(self) -> str | None:
        ...

    async def heartbeat(self) -> None:
        """Called on every poll that finds the relay online"""
        ...

class StaticControl(ControlSurface):
    online: bool
    target_car: str | None

    def __init__(self, online: bool = True, target_car: str | None = None):
        self.online = online
        self.target_car = target_car

    async def read_online(self) -> bool:
        return self.online

    async def read_target_car(self) -> str | None:
        return self.target_car

class HomeAssistantControl(ControlSurface):
    """Reads the switches from Home Assistant helpers: an input_boolean for online, an input_text for the car"""

    def __init__(self, ha: homeassistant_api.Client,
                 online_entity: str = "input_boolean.racefeed_online",
                 target_entity: str = "input_text.racefeed_target_car",
                 heartbeat_entity: str | None = None):
        self.ha = ha
        self.online_entity = online_entity
        self.target_entity = target_entity
        self.heartbeat_entity = heartbeat_entity
        self._log = logging.getLogger(__name__)

    async def read_online(self) -> bool:
        return self.ha.get_state(entity_id=self.online_entity).state == "on"

    async def read_target_car(self) -> str | None:
        value = self.ha.get_state(entity_id=self.target_entity).state
        # HA reports helpers it can't read as "unknown"/"unavailable"
        if value is None or value.strip() == "" or value in ("unknown", "unavailable"):
            return None
        return value.strip()

    async def heartbeat(self) -> None:
        if self.heartbeat_entity is None:
            return

        now = datetime.datetime.now(datetime.timezone.utc).isoformat()
        self.ha.set_state(State(entity_id=self.heartbeat_entity, state=now))
        self._log.debug("Heartbeat %s", now)
