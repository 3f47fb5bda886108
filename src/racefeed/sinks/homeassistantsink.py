import homeassistant_api
from homeassistant_api import State

from racefeed.sinks.abstract import RaceSink
from racefeed.util.formatting import UNAVAILABLE
from racefeed.util.snapshot import RaceSnapshot

class HomeAssistantSink(RaceSink):
    def __init__(self, ha: homeassistant_api.Client, prefix: str = "racefeed"):
        self.ha = ha
        self.prefix = prefix

    async def publish(self, snapshot: RaceSnapshot) -> None:
        if len(snapshot.rows) > 0:
            leader = snapshot.rows[0]
            name = leader.driver.full_name if leader.driver is not None else leader.car
            self.ha.set_state(State(entity_id=f"sensor.{self.prefix}_leader", state=name,
                                    attributes={"number": leader.car}))

        target = snapshot.target
        if target is None:
            return

        state = f"P{target.rank}" if target.rank is not None else UNAVAILABLE
        self.ha.set_state(State(entity_id=f"sensor.{self.prefix}_target", state=state,
                                attributes={"number": target.car,
                                            "speed": target.speed,
                                            "lap": target.lap_number,
                                            "last_lap": target.last_lap_time,
                                            "lap_delta": target.lap_delta,
                                            "ahead": target.car_ahead_name,
                                            "ahead_split": target.ahead_split,
                                            "behind": target.car_behind_name}))
