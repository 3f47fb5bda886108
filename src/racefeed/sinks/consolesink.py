from colorist import Color

from racefeed.sinks.abstract import RaceSink
from racefeed.util.formatting import Trend
from racefeed.util.snapshot import RaceSnapshot

TREND_COLORS = {Trend.IMPROVED: Color.GREEN, Trend.WORSENED: Color.RED, Trend.UNCHANGED: Color.OFF}

class ConsoleSink(RaceSink):
    """Prints a timing tower. Mostly for watching a feed by hand"""

    async def publish(self, snapshot: RaceSnapshot) -> None:
        for row in snapshot.rows:
            name = (row.driver.display_name or row.driver.full_name) if row.driver is not None else ""
            color = Color.YELLOW if row.highlight else Color.OFF
            print(f"{color}{row.rank:>3}{row.ordinal} {row.car:>4} {name:<20} {row.leader_split:>14} {row.interval_split:>10} "
                  f"{row.speed:>4} {row.laps_completed:>4} {row.last_lap_time:>8}{Color.OFF}")

        target = snapshot.target
        if target is not None:
            print(f"{Color.CYAN}Car {target.car}: {target.rank}{target.ordinal}, lap {target.lap_number} "
                  f"{target.last_lap_time} {TREND_COLORS[target.lap_delta_trend]}{target.lap_delta}{Color.CYAN}, "
                  f"{TREND_COLORS[target.ahead_split_trend]}{target.ahead_split}{Color.CYAN} to {target.car_ahead_name}{Color.OFF}")
