"""
Turns framed blocks into typed messages.

The feed sends one `Position` element per car. When only one car matches it isn't wrapped in
anything different, so callers always go through `MarkupNode.children_named`, which hands back a
sequence either way.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, TypeVar
from xml.etree import ElementTree

from racefeed.errors import DecodeError
from racefeed.events import CarTelemetry, LapCompleted, LeaderboardEntry, LeaderboardSnapshot, PitSummary, \
    RaceMessage, TelemetrySnapshot
from racefeed.framing import MessageKind

T = TypeVar("T")

@dataclass
class MarkupNode:
    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["MarkupNode"] = field(default_factory=list)

    def children_named(self, tag: str) -> List["MarkupNode"]:
        return [x for x in self.children if x.tag == tag]

    def find_attribute(self, name: str) -> str | None:
        """Depth-first search for the first node carrying `name`, starting with this one"""
        if name in self.attributes:
            return self.attributes[name]

        for child in self.children:
            value = child.find_attribute(name)
            if value is not None:
                return value

        return None

def parse_markup(block: bytes | str, kind: str = "markup") -> MarkupNode:
    try:
        root = ElementTree.fromstring(block)
    except ElementTree.ParseError as e:
        raise DecodeError.syntax(kind, str(e)) from e

    return _to_node(root)

def _to_node(element: ElementTree.Element) -> MarkupNode:
    return MarkupNode(element.tag, dict(element.attrib), [_to_node(x) for x in element])

def decode(kind: MessageKind, block: bytes | str) -> RaceMessage:
    root = parse_markup(block, kind.value)
    if root.tag != kind.value:
        raise DecodeError.syntax(kind.value, f"expected <{kind.value}>, got <{root.tag}>")

    if kind is MessageKind.TELEMETRY:
        return TelemetrySnapshot(tuple(_car_telemetry(kind, x) for x in root.children_named("Position")))
    elif kind is MessageKind.LEADERBOARD:
        return LeaderboardSnapshot(tuple(_leaderboard_entry(kind, x) for x in root.children_named("Position")))
    elif kind is MessageKind.COMPLETED_LAP:
        return _lap_completed(kind, root)
    elif kind is MessageKind.PIT_SUMMARY:
        car = root.find_attribute("Car")
        if car is None:
            raise DecodeError(kind.value, "Car")
        return PitSummary(car, dict(root.attributes))

    raise ValueError(f"Unknown message kind {kind}")

def _car_telemetry(kind: MessageKind, node: MarkupNode) -> CarTelemetry:
    attrs = node.attributes
    return CarTelemetry(_text(kind, attrs, "Car"),
                        _integer(kind, attrs, "Rank"),
                        _decimal(kind, attrs, "speed"),
                        _integer(kind, attrs, "rpm"),
                        _integer(kind, attrs, "throttle"),
                        _integer(kind, attrs, "brake"),
                        _integer(kind, attrs, "Battery_Pct_Remaining"))

def _leaderboard_entry(kind: MessageKind, node: MarkupNode) -> LeaderboardEntry:
    attrs = node.attributes
    return LeaderboardEntry(_text(kind, attrs, "Car"),
                            _integer(kind, attrs, "Rank"),
                            _integer(kind, attrs, "Laps_Behind"),
                            _decimal(kind, attrs, "Time_Behind"))

def _lap_completed(kind: MessageKind, node: MarkupNode) -> LapCompleted:
    attrs = node.attributes
    return LapCompleted(_text(kind, attrs, "Car"),
                        _decimal(kind, attrs, "Fastest_Lap"),
                        _integer(kind, attrs, "Lap_Number"),
                        _decimal(kind, attrs, "Lap_Time"),
                        _decimal(kind, attrs, "Time"),
                        _integer(kind, attrs, "Laps_Behind_Leader"),
                        _decimal(kind, attrs, "Time_Behind_Leader"))

def _text(kind: MessageKind, attrs: Mapping[str, str], name: str) -> str:
    value = attrs.get(name)
    if value is None or value.strip() == "":
        raise DecodeError(kind.value, name, value)
    return value.strip()

def _integer(kind: MessageKind, attrs: Mapping[str, str], name: str) -> int:
    return _convert(kind, attrs, name, lambda x: int(x, 10))

def _decimal(kind: MessageKind, attrs: Mapping[str, str], name: str) -> float:
    return _convert(kind, attrs, name, float)

def _convert(kind: MessageKind, attrs: Mapping[str, str], name: str, parse: Callable[[str], T]) -> T:
    value = attrs.get(name)
    if value is None:
        raise DecodeError(kind.value, name)

    try:
        return parse(value.strip())
    except ValueError as e:
        raise DecodeError(kind.value, name, value) from e
