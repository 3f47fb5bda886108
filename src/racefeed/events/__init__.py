from .telemetry import CarTelemetry as CarTelemetry, TelemetrySnapshot as TelemetrySnapshot
from .leaderboard import LeaderboardEntry as LeaderboardEntry, LeaderboardSnapshot as LeaderboardSnapshot
from .laps import LapCompleted as LapCompleted, PitSummary as PitSummary

type RaceMessage = TelemetrySnapshot | LeaderboardSnapshot | LapCompleted | PitSummary
