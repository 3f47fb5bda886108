import pytest

from conftest import LEADERBOARD, TELEMETRY, completed_lap
from racefeed.errors import FeedOverflowError
from racefeed.framing import Frame, FrameExtractor, MessageKind

def extract(*chunks: bytes, **kwargs):
    extractor = FrameExtractor(**kwargs)
    frames = list()
    for chunk in chunks:
        extractor.feed(chunk)
        frames += extractor.drain()
    return extractor, frames

class TestFrameExtractor:
    def test_complete_message(self):
        extractor, frames = extract(LEADERBOARD)
        assert frames == [Frame(MessageKind.LEADERBOARD, LEADERBOARD)]
        assert extractor.pending == 0

    def test_split_at_every_offset(self):
        for i in range(1, len(LEADERBOARD)):
            _, frames = extract(LEADERBOARD[:i], LEADERBOARD[i:])
            assert frames == [Frame(MessageKind.LEADERBOARD, LEADERBOARD)], f"split at {i}"

    def test_one_byte_at_a_time(self):
        data = TELEMETRY + TELEMETRY
        _, whole = extract(data)
        _, trickled = extract(*[data[i:i + 1] for i in range(len(data))])
        assert whole == trickled
        assert len(whole) == 2

    def test_incomplete_message_is_kept(self):
        extractor, frames = extract(LEADERBOARD[:40])
        assert frames == []
        assert extractor.pending == 40

    def test_drain_forgets_frames(self):
        extractor, _ = extract(LEADERBOARD)
        assert extractor.drain() == []

    def test_junk_before_a_message_is_dropped(self):
        extractor, frames = extract(b"\r\nheartbeat\r\n" + LEADERBOARD + b"\r\n")
        assert frames == [Frame(MessageKind.LEADERBOARD, LEADERBOARD)]
        assert extractor.pending == 2

    def test_nothing_recognizable_is_kept(self):
        extractor, frames = extract(b"<Something_Else/>")
        assert frames == []
        assert extractor.pending == len(b"<Something_Else/>")

    def test_self_closing_lap(self):
        lap = completed_lap("9", 4, 41.5)
        _, frames = extract(lap[:10], lap[10:])
        assert frames == [Frame(MessageKind.COMPLETED_LAP, lap)]

    def test_pit_summary(self):
        pit = b'<Pit_Summary Car="5" In_Lap="21"><Stop Duration="7.1"/></Pit_Summary>'
        _, frames = extract(pit)
        assert frames == [Frame(MessageKind.PIT_SUMMARY, pit)]

    def test_same_kind_back_to_back(self):
        first = completed_lap("9", 4, 41.5)
        second = completed_lap("12", 4, 41.2)
        _, frames = extract(first + second)
        assert [x.block for x in frames] == [first, second]

    def test_priority_wins_and_drops_what_it_skips(self):
        lap = completed_lap("9", 4, 41.5)
        _, frames = extract(lap + TELEMETRY)
        assert frames == [Frame(MessageKind.TELEMETRY, TELEMETRY)]

    def test_configured_priority(self):
        lap = completed_lap("9", 4, 41.5)
        priority = (MessageKind.COMPLETED_LAP, MessageKind.TELEMETRY, MessageKind.LEADERBOARD, MessageKind.PIT_SUMMARY)
        _, frames = extract(lap + TELEMETRY, priority=priority)
        assert [x.kind for x in frames] == [MessageKind.COMPLETED_LAP, MessageKind.TELEMETRY]

    def test_incomplete_priority_kind_blocks_others(self):
        extractor, frames = extract(completed_lap("9", 4, 41.5) + TELEMETRY[:30])
        assert frames == []

        extractor.feed(TELEMETRY[30:])
        assert [x.kind for x in extractor.drain()] == [MessageKind.TELEMETRY]

    def test_overflow(self):
        extractor = FrameExtractor(max_pending=64)
        with pytest.raises(FeedOverflowError) as e:
            extractor.feed(b"<Telemetry_Leaderboard>" + b"x" * 64)
        assert isinstance(e.value, ConnectionError)

    def test_overflow_keeps_completed_frames(self):
        extractor = FrameExtractor(max_pending=64)
        with pytest.raises(FeedOverflowError):
            extractor.feed(LEADERBOARD + b"<Telemetry_Leaderboard>" + b"x" * 64)
        assert extractor.drain() == [Frame(MessageKind.LEADERBOARD, LEADERBOARD)]

    def test_no_limit(self):
        extractor = FrameExtractor(max_pending=None)
        extractor.feed(b"<Telemetry_Leaderboard>" + b"x" * (2 * 1024 * 1024))
        assert extractor.drain() == []

    def test_reset(self):
        extractor, _ = extract(LEADERBOARD[:40])
        extractor.reset()
        assert extractor.pending == 0

        extractor.feed(LEADERBOARD[40:])
        assert extractor.drain() == []

    def test_duplicate_priority(self):
        with pytest.raises(ValueError):
            FrameExtractor(priority=(MessageKind.TELEMETRY, MessageKind.TELEMETRY))
