class RaceFeedError(Exception):
    """Base class for everything racefeed raises on purpose"""
    pass

class DecodeError(RaceFeedError):
    """Raised when a framed block can't be turned into a typed message. Only that message is lost."""

    kind: str
    field: str | None
    raw_value: str | None
    reason: str

    def __init__(self, kind: str, field: str | None = None, raw_value: str | None = None, reason: str = "field"):
        self.kind = kind
        self.field = field
        self.raw_value = raw_value
        self.reason = reason

        if reason == "syntax":
            super().__init__(f"{kind}: malformed markup ({raw_value})")
        elif raw_value is None:
            super().__init__(f"{kind}: missing {field}")
        else:
            super().__init__(f"{kind}: bad {field} {raw_value!r}")

    @classmethod
    def syntax(cls, kind: str, detail: str) -> "DecodeError":
        return cls(kind, raw_value=detail, reason="syntax")

class FeedOverflowError(RaceFeedError, ConnectionError):
    """Raised when the feed buffers more unterminated bytes than we're willing to hold"""

    def __init__(self, pending: int, limit: int):
        self.pending = pending
        self.limit = limit
        super().__init__(f"{pending} bytes pending without a complete message (limit {limit})")

class SinkError(RaceFeedError):
    """Raised by a sink that noticed its own publish failed"""
    pass
