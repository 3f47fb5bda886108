import logging
import time
from collections import deque
from dataclasses import dataclass, replace
from typing import Deque, Dict, List, Tuple

from racefeed.events import CarTelemetry, LeaderboardEntry
from racefeed.reference import DriverReference, Roster
from racefeed.util.formatting import PEDAL_BANDS, RPM_BANDS, UNAVAILABLE, Trend, compare_split, format_interval, \
    format_lap_delta, format_leader_split, indicator_lights, lap_delta_trend, ordinal_suffix, rounded
from racefeed.util.race_state import LapRecord, RaceStateAggregator

SPLIT_HISTORY = 3

@dataclass
class LeaderboardRow:
    rank: int
    ordinal: str
    car: str
    driver: DriverReference | None
    leader_split: str
    """Time behind the leader, or time plus laps for lapped cars"""
    interval_split: str
    """Gap to the car one place up"""
    speed: str
    laps_completed: str
    last_lap_time: str
    highlight: bool
    """Set on the target car's row"""

@dataclass
class TargetCarInfo:
    car: str
    rank: int | None
    ordinal: str
    driver: DriverReference | None
    speed: str
    lap_number: str
    last_lap_time: str
    lap_delta: str
    lap_delta_trend: Trend
    car_ahead: str
    car_ahead_name: str
    car_behind: str
    car_behind_name: str
    ahead_split: str
    ahead_split_trend: Trend
    rpm_lights: Tuple[bool, ...]
    throttle_lights: Tuple[bool, ...]
    brake_lights: Tuple[bool, ...]

@dataclass
class RaceSnapshot:
    ts: int
    target_car: str | None
    target_telemetry: CarTelemetry | None
    telemetry: Dict[str, CarTelemetry]
    leaderboard: List[LeaderboardEntry]
    laps: Dict[str, LapRecord]
    rows: List[LeaderboardRow]
    target: TargetCarInfo | None

class SnapshotBuilder:
    """
    Produces read-only copies of the race state with the display values worked out.

    The builder remembers the driver-ahead splits it has handed out, per (car, car ahead) pair,
    so that the next one can be marked as improving or worsening.
    """

    _aggregator: RaceStateAggregator
    _roster: Roster
    _splits: Dict[Tuple[str, str], Deque[float]]

    def __init__(self, aggregator: RaceStateAggregator, roster: Roster | None = None):
        self._aggregator = aggregator
        self._roster = roster or dict()
        self._splits = dict()
        self._log = logging.getLogger(__name__)

    def build(self, target_car: str | None = None) -> RaceSnapshot:
        state = self._aggregator.state
        telemetry = {car: replace(x) for car, x in state.telemetry.items()}
        leaderboard = list(state.leaderboard)
        laps = {car: replace(x) for car, x in state.laps.items()}

        rows = [self._row(i, leaderboard, telemetry, laps, target_car) for i in range(len(leaderboard))]
        target = None
        if target_car is not None:
            target = self._target(target_car, leaderboard, telemetry, laps)

        return RaceSnapshot(time.time_ns(), target_car, telemetry.get(target_car) if target_car else None,
                            telemetry, leaderboard, laps, rows, target)

    def _driver(self, car: str) -> DriverReference | None:
        driver = self._roster.get(car)
        if driver is None:
            self._log.debug("No reference data for car %s", car)
        return driver

    def _row(self, i: int, leaderboard: List[LeaderboardEntry], telemetry: Dict[str, CarTelemetry],
             laps: Dict[str, LapRecord], target_car: str | None) -> LeaderboardRow:
        entry = leaderboard[i]
        ahead = leaderboard[i - 1] if i > 0 else None
        lap = laps.get(entry.car)
        car_telemetry = telemetry.get(entry.car)

        return LeaderboardRow(entry.rank,
                              ordinal_suffix(entry.rank),
                              entry.car,
                              self._driver(entry.car),
                              format_leader_split(entry.laps_behind, entry.time_behind),
                              format_interval(entry, ahead),
                              rounded(car_telemetry.speed, 0) if car_telemetry is not None else UNAVAILABLE,
                              _lap_number(lap),
                              _lap_time(lap),
                              entry.car == target_car)

    def _target(self, car: str, leaderboard: List[LeaderboardEntry], telemetry: Dict[str, CarTelemetry],
                laps: Dict[str, LapRecord]) -> TargetCarInfo:
        index = next((i for i, x in enumerate(leaderboard) if x.car == car), None)
        if index is None:
            self._log.debug("Target car %s isn't on the leaderboard", car)
            entry = ahead = behind = None
        else:
            entry = leaderboard[index]
            ahead = leaderboard[index - 1] if index > 0 else None
            behind = leaderboard[index + 1] if index + 1 < len(leaderboard) else None

        car_telemetry = telemetry.get(car)
        lap = laps.get(car)
        delta = lap.last_lap_delta if lap is not None else None

        if entry is not None and entry.laps_behind > 0:
            split_trend = Trend.UNCHANGED
            ahead_split = format_interval(entry, ahead)
        elif entry is not None and ahead is not None:
            split = round(entry.time_behind - ahead.time_behind, 3)
            history = self._splits.setdefault((car, ahead.car), deque(maxlen=SPLIT_HISTORY))
            split_trend = compare_split(split, history)
            history.append(split)
            ahead_split = "+" + rounded(split)
        else:
            split_trend = Trend.UNCHANGED
            ahead_split = UNAVAILABLE

        # telemetry carries a rank too, for when the leaderboard hasn't caught up
        if entry is not None:
            rank = entry.rank
        elif car_telemetry is not None:
            rank = car_telemetry.rank
        else:
            rank = None

        return TargetCarInfo(car,
                             rank,
                             ordinal_suffix(rank) if rank is not None else UNAVAILABLE,
                             self._driver(car),
                             rounded(car_telemetry.speed, 0) if car_telemetry is not None else UNAVAILABLE,
                             _lap_number(lap),
                             _lap_time(lap),
                             format_lap_delta(delta),
                             lap_delta_trend(delta),
                             ahead.car if ahead is not None else UNAVAILABLE,
                             self._last_name(ahead),
                             behind.car if behind is not None else UNAVAILABLE,
                             self._last_name(behind),
                             ahead_split,
                             split_trend,
                             indicator_lights(car_telemetry.rpm if car_telemetry else 0, RPM_BANDS),
                             indicator_lights(car_telemetry.throttle if car_telemetry else 0, PEDAL_BANDS),
                             indicator_lights(car_telemetry.brake if car_telemetry else 0, PEDAL_BANDS))

    def _last_name(self, entry: LeaderboardEntry | None) -> str:
        if entry is None:
            return UNAVAILABLE

        driver = self._driver(entry.car)
        return driver.last_name if driver is not None else UNAVAILABLE

def _lap_number(lap: LapRecord | None) -> str:
    if lap is None or lap.last_lap_number is None:
        return UNAVAILABLE
    return str(lap.last_lap_number)

def _lap_time(lap: LapRecord | None) -> str:
    if lap is None or lap.last_lap_time is None:
        return UNAVAILABLE
    return rounded(lap.last_lap_time)
