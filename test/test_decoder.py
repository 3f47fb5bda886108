import pytest

from conftest import LEADERBOARD, TELEMETRY, completed_lap
from racefeed.decoder import decode, parse_markup
from racefeed.errors import DecodeError
from racefeed.events import CarTelemetry, LapCompleted, LeaderboardEntry, LeaderboardSnapshot, PitSummary, \
    TelemetrySnapshot
from racefeed.framing import MessageKind

SINGLE_TELEMETRY = (b'<Telemetry_Leaderboard>'
                    b'<Position Car="12" Rank="1" speed="211.6" rpm="11250" throttle="100" brake="0" Battery_Pct_Remaining="87"/>'
                    b'</Telemetry_Leaderboard>')

class TestDecoder:
    def test_telemetry(self):
        snapshot = decode(MessageKind.TELEMETRY, TELEMETRY)
        assert snapshot == TelemetrySnapshot((CarTelemetry("12", 1, 211.6, 11250, 100, 0, 87),
                                              CarTelemetry("9", 2, 198.2, 10400, 64, 22, 45)))

    def test_single_position_is_still_a_sequence(self):
        single = decode(MessageKind.TELEMETRY, SINGLE_TELEMETRY)
        many = decode(MessageKind.TELEMETRY, TELEMETRY)
        assert single == TelemetrySnapshot((many.cars[0],))

    def test_leaderboard(self):
        snapshot = decode(MessageKind.LEADERBOARD, LEADERBOARD)
        assert snapshot == LeaderboardSnapshot((LeaderboardEntry("12", 1, 0, 0.0), LeaderboardEntry("9", 2, 0, 1.234)))

    def test_empty_leaderboard(self):
        assert decode(MessageKind.LEADERBOARD, b"<Unofficial_Leaderboard></Unofficial_Leaderboard>") == LeaderboardSnapshot(())

    def test_completed_lap(self):
        lap = decode(MessageKind.COMPLETED_LAP, completed_lap("9", 4, 41.5, 166.25))
        assert lap == LapCompleted("9", 41.5, 4, 41.5, 166.25, 0, 0.0)

    def test_pit_summary_car_on_child(self):
        summary = decode(MessageKind.PIT_SUMMARY, b'<Pit_Summary Lap="21"><Stop Car="5"/></Pit_Summary>')
        assert summary == PitSummary("5", {"Lap": "21"})

    def test_pit_summary_without_car(self):
        with pytest.raises(DecodeError) as e:
            decode(MessageKind.PIT_SUMMARY, b'<Pit_Summary Lap="21"></Pit_Summary>')
        assert e.value.field == "Car"

    def test_bad_integer(self):
        block = TELEMETRY.replace(b'rpm="10400"', b'rpm="10x00"')
        with pytest.raises(DecodeError) as e:
            decode(MessageKind.TELEMETRY, block)
        assert (e.value.kind, e.value.field, e.value.raw_value) == ("Telemetry_Leaderboard", "rpm", "10x00")

    def test_integers_are_not_floats(self):
        with pytest.raises(DecodeError) as e:
            decode(MessageKind.LEADERBOARD, LEADERBOARD.replace(b'Rank="2"', b'Rank="2.0"'))
        assert e.value.field == "Rank"

    def test_bad_float(self):
        with pytest.raises(DecodeError) as e:
            decode(MessageKind.LEADERBOARD, LEADERBOARD.replace(b'Time_Behind="1.234"', b'Time_Behind="1:02.3"'))
        assert e.value.field == "Time_Behind"
        assert e.value.raw_value == "1:02.3"

    def test_missing_field(self):
        with pytest.raises(DecodeError) as e:
            decode(MessageKind.LEADERBOARD, LEADERBOARD.replace(b' Laps_Behind="0" Time_Behind="1.234"', b''))
        assert e.value.field == "Laps_Behind"
        assert e.value.raw_value is None

    def test_malformed_markup(self):
        with pytest.raises(DecodeError) as e:
            decode(MessageKind.LEADERBOARD, b'<Unofficial_Leaderboard><Position Car="1"></Unofficial_Leaderboard>')
        assert e.value.reason == "syntax"

    def test_wrong_root(self):
        with pytest.raises(DecodeError) as e:
            decode(MessageKind.TELEMETRY, LEADERBOARD)
        assert e.value.reason == "syntax"

class TestMarkup:
    def test_children_named(self):
        node = parse_markup(LEADERBOARD)
        assert node.tag == "Unofficial_Leaderboard"
        assert [x.attributes["Car"] for x in node.children_named("Position")] == ["12", "9"]
        assert node.children_named("Nothing") == []

    def test_find_attribute(self):
        node = parse_markup(b'<A><B/><C><D Car="7"/></C></A>')
        assert node.find_attribute("Car") == "7"
        assert node.find_attribute("Rank") is None
