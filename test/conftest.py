import pytest

from racefeed.reference import DriverReference

LEADERBOARD = (b'<Unofficial_Leaderboard><Position Car="12" Rank="1" Laps_Behind="0" Time_Behind="0.0"/>'
               b'<Position Car="9" Rank="2" Laps_Behind="0" Time_Behind="1.234"/></Unofficial_Leaderboard>')

TELEMETRY = (b'<Telemetry_Leaderboard Time="12:01:02">'
             b'<Position Car="12" Rank="1" speed="211.6" rpm="11250" throttle="100" brake="0" Battery_Pct_Remaining="87"/>'
             b'<Position Car="9" Rank="2" speed="198.2" rpm="10400" throttle="64" brake="22" Battery_Pct_Remaining="45"/>'
             b'</Telemetry_Leaderboard>')

def completed_lap(car: str, lap: int, lap_time: float, total: float = 100.0) -> bytes:
    return (f'<Completed_Lap Car="{car}" Fastest_Lap="{lap_time}" Lap_Number="{lap}" Lap_Time="{lap_time}" '
            f'Time="{total}" Laps_Behind_Leader="0" Time_Behind_Leader="0.0"/>').encode()

@pytest.fixture
def roster():
    return {"12": DriverReference("12", "Alex", "Palou", "A. Palou", "Chip Ganassi Racing"),
            "9": DriverReference("9", "Scott", "Dixon", "S. Dixon", "Chip Ganassi Racing"),
            "5": DriverReference("5", "Pato", "O'Ward", "P. O'Ward", "Arrow McLaren")}
