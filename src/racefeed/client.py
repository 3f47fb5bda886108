import logging
from typing import Any, List
from collections.abc import Callable

from racefeed.adapters.abstract import RaceFeedAdapter, Update
from racefeed.decoder import decode
from racefeed.errors import DecodeError
from racefeed.events import LapCompleted, LeaderboardSnapshot, PitSummary, TelemetrySnapshot

class RaceFeedClient:

    telemetry_callbacks: List[Callable[[TelemetrySnapshot], None]]
    leaderboard_callbacks: List[Callable[[LeaderboardSnapshot], None]]
    lap_completed_callbacks: List[Callable[[LapCompleted], None]]
    pit_summary_callbacks: List[Callable[[PitSummary], None]]
    decode_error_callbacks: List[Callable[[DecodeError], None]]

    def __init__(self, adapter: RaceFeedAdapter):
        self.adapter = adapter
        self.adapter.on_message(self._update)
        self._log = logging.getLogger(__name__)

        self.telemetry_callbacks = list()
        self.leaderboard_callbacks = list()
        self.lap_completed_callbacks = list()
        self.pit_summary_callbacks = list()
        self.decode_error_callbacks = list()

    async def go(self) -> None:
        await self.adapter.run()

    def on_telemetry(self, callback: Callable[[TelemetrySnapshot], None]) -> None:
        self.telemetry_callbacks.append(callback)

    def on_leaderboard(self, callback: Callable[[LeaderboardSnapshot], None]) -> None:
        self.leaderboard_callbacks.append(callback)

    def on_lap_completed(self, callback: Callable[[LapCompleted], None]) -> None:
        self.lap_completed_callbacks.append(callback)

    def on_pit_summary(self, callback: Callable[[PitSummary], None]) -> None:
        self.pit_summary_callbacks.append(callback)

    def on_decode_error(self, callback: Callable[[DecodeError], None]) -> None:
        self.decode_error_callbacks.append(callback)

    def on_connection_change(self, callback: Callable[[bool], None]) -> None:
        self.adapter.on_connection_change(callback)

    def _update(self, update: Update) -> None:
        try:
            message = decode(update.kind, update.data)
        except DecodeError as e:
            self._log.warning("Dropping %s #%d: %s (%s...)", update.kind.value, update.seq, e, update.data[:50])
            self._fire_callbacks(self.decode_error_callbacks, e)
            return

        if isinstance(message, TelemetrySnapshot):
            self._fire_callbacks(self.telemetry_callbacks, message)
        elif isinstance(message, LeaderboardSnapshot):
            self._fire_callbacks(self.leaderboard_callbacks, message)
        elif isinstance(message, LapCompleted):
            self._fire_callbacks(self.lap_completed_callbacks, message)
        elif isinstance(message, PitSummary):
            self._fire_callbacks(self.pit_summary_callbacks, message)

    def _fire_callbacks(self, callbacks: List[Callable[[Any], None]], payload: Any) -> None:
        for callback in callbacks:
            callback(payload)
