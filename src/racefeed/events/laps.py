from dataclasses import dataclass, field
from typing import Dict

@dataclass
class LapCompleted:
    car: str
    fastest_lap: float
    lap_number: int
    lap_time: float
    total_time: float
    """Cumulative race time (the feed's Time attribute)"""
    laps_behind_leader: int
    time_behind_leader: float

@dataclass
class PitSummary:
    car: str
    attributes: Dict[str, str] = field(default_factory=dict)
    """Everything else on the Pit_Summary tag, unparsed"""
