from dataclasses import dataclass
from typing import Tuple

@dataclass
class LeaderboardEntry:
    car: str
    rank: int
    laps_behind: int
    time_behind: float
    """Seconds behind the leader. Only meaningful when laps_behind is 0"""

@dataclass
class LeaderboardSnapshot:
    entries: Tuple[LeaderboardEntry, ...]
