from .race_state import LapRecord as LapRecord, RaceState as RaceState, RaceStateAggregator as RaceStateAggregator
from .snapshot import LeaderboardRow as LeaderboardRow, RaceSnapshot as RaceSnapshot, SnapshotBuilder as SnapshotBuilder, \
    TargetCarInfo as TargetCarInfo
from .formatting import UNAVAILABLE as UNAVAILABLE, Trend as Trend
