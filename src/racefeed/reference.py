import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import orjson

_log = logging.getLogger(__name__)

@dataclass(frozen=True)
class DriverReference:
    car: str
    first_name: str
    last_name: str
    display_name: str | None = None
    team: str | None = None
    car_logo: str | None = None
    team_logo: str | None = None
    headshot: str | None = None
    """URL of the driver's headshot graphic"""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

type Roster = Dict[str, DriverReference]

def load_reference(path: str | Path) -> Roster:
    with open(path, "rb") as f:
        return parse_reference(orjson.loads(f.read()))

def parse_reference(data: Any) -> Roster:
    """Accepts either a list of driver rows, or a map of rows keyed by car number"""

    roster: Roster = dict()
    if isinstance(data, dict):
        rows = [dict(row, car=car) for car, row in data.items()]
    else:
        rows = list(data)

    for row in rows:
        car = str(row.get("car", "")).strip()
        if car == "":
            _log.warning("Skipping reference row without a car number: %s", row)
            continue

        roster[car] = DriverReference(car,
                                      row.get("first_name", ""),
                                      row.get("last_name", ""),
                                      row.get("display_name", None),
                                      row.get("team", None),
                                      row.get("car_logo", None),
                                      row.get("team_logo", None),
                                      row.get("headshot", None))

    _log.info("Loaded reference data for %d cars", len(roster))
    return roster
