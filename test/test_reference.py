import orjson

from racefeed.config import RelaySettings, parse_priority
from racefeed.framing import DEFAULT_PRIORITY, MessageKind
from racefeed.reference import DriverReference, load_reference, parse_reference

class TestReference:
    def test_list(self):
        roster = parse_reference([{"car": "12", "first_name": "Alex", "last_name": "Palou", "team": "CGR"},
                                  {"car": 9, "first_name": "Scott", "last_name": "Dixon"}])
        assert roster["12"] == DriverReference("12", "Alex", "Palou", team="CGR")
        assert roster["9"].full_name == "Scott Dixon"

    def test_map(self):
        roster = parse_reference({"5": {"first_name": "Pato", "last_name": "O'Ward", "headshot": "https://example.com/5.png"}})
        assert roster["5"].headshot == "https://example.com/5.png"

    def test_rows_without_car_are_skipped(self):
        assert parse_reference([{"first_name": "Nobody"}]) == {}

    def test_load(self, tmp_path):
        path = tmp_path / "drivers.json"
        path.write_bytes(orjson.dumps([{"car": "12", "first_name": "Alex", "last_name": "Palou"}]))
        assert list(load_reference(path).keys()) == ["12"]

class TestSettings:
    def test_defaults(self):
        settings = RelaySettings.from_env({})
        assert (settings.host, settings.port) == ("localhost", 5000)
        assert settings.priority == list(DEFAULT_PRIORITY)
        assert settings.poll_interval == 5.0

    def test_environment(self):
        settings = RelaySettings.from_env({"RACEFEED_HOST": "10.0.0.5", "RACEFEED_PORT": "50005",
                                           "RACEFEED_MAX_PENDING": "0", "RABBITMQ_URL": "amqp://localhost"})
        assert (settings.host, settings.port) == ("10.0.0.5", 50005)
        assert settings.max_pending is None
        assert settings.rabbitmq_url == "amqp://localhost"

    def test_priority(self):
        assert parse_priority("Completed_Lap, Unofficial_Leaderboard") == [MessageKind.COMPLETED_LAP, MessageKind.LEADERBOARD,
                                                                           MessageKind.TELEMETRY, MessageKind.PIT_SUMMARY]
