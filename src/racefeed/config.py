import os
from dataclasses import dataclass, field
from typing import List, Mapping

from racefeed.framing import DEFAULT_MAX_PENDING, DEFAULT_PRIORITY, MessageKind

@dataclass
class RelaySettings:
    host: str = "localhost"
    port: int = 5000
    reference_path: str | None = None
    target_car: str | None = None
    rabbitmq_url: str | None = None
    homeassistant_url: str | None = None
    homeassistant_token: str | None = None
    publish_interval: float = 2.0
    poll_interval: float = 5.0
    reconnect_delay: float = 5.0
    max_pending: int | None = DEFAULT_MAX_PENDING
    priority: List[MessageKind] = field(default_factory=lambda: list(DEFAULT_PRIORITY))
    """Order in which message kinds are looked for in the buffer"""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ) -> "RelaySettings":
        settings = cls()
        settings.host = environ.get("RACEFEED_HOST", settings.host)
        settings.port = int(environ.get("RACEFEED_PORT", settings.port))
        settings.reference_path = environ.get("RACEFEED_REFERENCE", settings.reference_path)
        settings.target_car = environ.get("RACEFEED_TARGET_CAR", settings.target_car)
        settings.rabbitmq_url = environ.get("RABBITMQ_URL", settings.rabbitmq_url)
        settings.homeassistant_url = environ.get("HOMEASSISTANT_URL", settings.homeassistant_url)
        settings.homeassistant_token = environ.get("HOMEASSISTANT_TOKEN", settings.homeassistant_token)
        settings.publish_interval = float(environ.get("RACEFEED_PUBLISH_INTERVAL", settings.publish_interval))
        settings.poll_interval = float(environ.get("RACEFEED_POLL_INTERVAL", settings.poll_interval))
        settings.reconnect_delay = float(environ.get("RACEFEED_RECONNECT_DELAY", settings.reconnect_delay))

        if "RACEFEED_MAX_PENDING" in environ:
            # 0 turns the limit off
            settings.max_pending = int(environ["RACEFEED_MAX_PENDING"]) or None

        if "RACEFEED_PRIORITY" in environ:
            settings.priority = parse_priority(environ["RACEFEED_PRIORITY"])

        return settings

def parse_priority(value: str) -> List[MessageKind]:
    """Comma-separated tag names, e.g. "Completed_Lap,Telemetry_Leaderboard". Kinds left out go last, in the default order"""
    priority = [MessageKind(x.strip()) for x in value.split(",") if x.strip() != ""]
    return priority + [x for x in DEFAULT_PRIORITY if x not in priority]
