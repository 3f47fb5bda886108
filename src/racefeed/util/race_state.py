import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List

from racefeed.client import RaceFeedClient
from racefeed.events import CarTelemetry, LapCompleted, LeaderboardEntry, LeaderboardSnapshot, PitSummary, \
    TelemetrySnapshot
from racefeed.reference import Roster

@dataclass
class LapRecord:
    car: str
    fastest_lap: float | None = None
    last_lap_number: int | None = None
    last_lap_time: float | None = None
    total_time: float | None = None
    laps_behind_leader: int | None = None
    time_behind_leader: float | None = None
    last_lap_delta: float | None = None
    """Last lap time minus the one before it; negative is faster. None until there are two laps to compare"""

@dataclass
class RaceState:
    telemetry: Dict[str, CarTelemetry] = field(default_factory=dict)
    leaderboard: List[LeaderboardEntry] = field(default_factory=list)
    """Always in rank order, so the car ahead is the previous index"""
    laps: Dict[str, LapRecord] = field(default_factory=dict)
    pit_stops: Dict[str, int] = field(default_factory=dict)

    def has_live_data(self) -> bool:
        return len(self.telemetry) > 0 or len(self.leaderboard) > 0

class RaceStateAggregator:
    """
    Owns the race model and applies each decoded message to it, in the order the feed sent them.

    Every apply_* call finishes its mutation before returning and never awaits, so a snapshot
    taken from another task sees the state either before or after a message, never halfway.
    """

    _state: RaceState
    _on_lap_callbacks: List[Callable[[LapRecord], None]]

    def __init__(self, roster: Roster | None = None, client: RaceFeedClient | None = None):
        self._log = logging.getLogger(__name__)
        self._state = RaceState()
        self._on_lap_callbacks = list()

        for car in (roster or dict()).keys():
            self._state.laps[car] = LapRecord(car)

        if client is not None:
            client.on_telemetry(self.apply_telemetry)
            client.on_leaderboard(self.apply_leaderboard)
            client.on_lap_completed(self.apply_lap_completed)
            client.on_pit_summary(self.apply_pit_summary)

    @property
    def state(self) -> RaceState:
        return self._state

    def on_lap(self, callback: Callable[[LapRecord], None]) -> None:
        self._on_lap_callbacks.append(callback)

    def target_telemetry(self, car: str | None) -> CarTelemetry | None:
        if car is None:
            return None
        return self._state.telemetry.get(car)

    def apply_telemetry(self, snapshot: TelemetrySnapshot) -> None:
        for car in snapshot.cars:
            self._state.telemetry[car.car] = replace(car, pit_stops=self._state.pit_stops.get(car.car, 0))

    def apply_leaderboard(self, snapshot: LeaderboardSnapshot) -> None:
        self._state.leaderboard = sorted(snapshot.entries, key=lambda e: e.rank)

    def apply_lap_completed(self, event: LapCompleted) -> None:
        record = self._state.laps.get(event.car)
        if record is None:
            self._log.info("Car %s isn't in the reference data, adding it", event.car)
            record = LapRecord(event.car)
            self._state.laps[event.car] = record

        if record.last_lap_time is None:
            record.last_lap_delta = None
        else:
            record.last_lap_delta = event.lap_time - record.last_lap_time

        record.fastest_lap = event.fastest_lap
        record.last_lap_number = event.lap_number
        record.last_lap_time = event.lap_time
        record.total_time = event.total_time
        record.laps_behind_leader = event.laps_behind_leader
        record.time_behind_leader = event.time_behind_leader
        self._log.debug("Car %s completed lap %d in %.3f", event.car, event.lap_number, event.lap_time)

        for callback in self._on_lap_callbacks:
            callback(record)

    def apply_pit_summary(self, event: PitSummary) -> None:
        stops = self._state.pit_stops.get(event.car, 0) + 1
        self._state.pit_stops[event.car] = stops
        self._log.info("Car %s pit stop %d: %s", event.car, stops, event.attributes)

        if event.car in self._state.telemetry:
            self._state.telemetry[event.car] = replace(self._state.telemetry[event.car], pit_stops=stops)

    def clear_live(self) -> None:
        """Forgets telemetry and the leaderboard. Lap history and pit counts are facts about the session and stay"""
        self._log.info("Clearing live data (%d cars, %d leaderboard entries)",
                       len(self._state.telemetry), len(self._state.leaderboard))
        self._state.telemetry = dict()
        self._state.leaderboard = list()
