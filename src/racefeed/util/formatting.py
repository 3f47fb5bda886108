from enum import Enum
from typing import Sequence, Tuple

from racefeed.events import LeaderboardEntry

UNAVAILABLE = "-"
"""Shown in place of any derived value we couldn't look up"""

RPM_BANDS = (2000, 4000, 6000, 8000, 10000, 11000)
PEDAL_BANDS = (20, 40, 60, 80, 95)

class Trend(Enum):
    IMPROVED = "improved"
    WORSENED = "worsened"
    UNCHANGED = "unchanged"

def ordinal_suffix(n: int) -> str:
    if 11 <= n % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")

def rounded(value: float, places: int = 3) -> str:
    # round() first so that -0.0004 doesn't come out as "-0.000"
    return f"{round(value, places) + 0.0:.{places}f}"

def rounded_text(text: str, places: int = 3) -> str:
    """Rounds a numeric string for display, handing back anything unparseable as it was"""
    try:
        return rounded(float(text), places)
    except ValueError:
        return text

def format_leader_split(laps_behind: int, time_behind: float) -> str:
    if laps_behind == 0:
        return rounded(time_behind)
    elif laps_behind == 1:
        return f"{rounded(time_behind)} 1 lap"
    return f"{rounded(time_behind)} {laps_behind} laps"

def format_interval(entry: LeaderboardEntry, ahead: LeaderboardEntry | None) -> str:
    """
    Gap to the car one place up. The leader (nobody ahead) shows its own time behind, normally zero.

    A lapped car's time behind isn't comparable with the car ahead, so it shows its leader split instead.
    """
    if entry.laps_behind > 0:
        return format_leader_split(entry.laps_behind, entry.time_behind)
    elif ahead is None:
        return rounded(entry.time_behind)
    return "+" + rounded(entry.time_behind - ahead.time_behind)

def format_lap_delta(delta: float | None) -> str:
    if delta is None or delta == 0:
        return ""
    elif delta < 0:
        return rounded(delta)
    return "+" + rounded(delta)

def lap_delta_trend(delta: float | None) -> Trend:
    if delta is None or delta == 0:
        return Trend.UNCHANGED
    return Trend.IMPROVED if delta < 0 else Trend.WORSENED

def compare_split(split: float, previous: Sequence[float]) -> Trend:
    """Compares a new gap against (up to) the last three published ones, so one noisy sample doesn't flip it"""
    recent = list(previous)[-3:]
    if any(split < x for x in recent):
        return Trend.IMPROVED
    elif any(split > x for x in recent):
        return Trend.WORSENED
    return Trend.UNCHANGED

def indicator_lights(value: float, bands: Sequence[float]) -> Tuple[bool, ...]:
    return tuple(value >= x for x in bands)
