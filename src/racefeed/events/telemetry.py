from dataclasses import dataclass
from typing import Tuple

@dataclass
class CarTelemetry:
    car: str
    """Car number as the feed sends it. Not necessarily numeric"""
    rank: int
    speed: float
    rpm: int
    throttle: int
    """Throttle pedal, 0-100"""
    brake: int
    """Brake pedal, 0-100"""
    battery: int
    """Battery_Pct_Remaining, 0-100"""
    pit_stops: int = 0

@dataclass
class TelemetrySnapshot:
    cars: Tuple[CarTelemetry, ...]
