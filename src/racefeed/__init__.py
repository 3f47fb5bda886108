from .client import RaceFeedClient as RaceFeedClient
from .framing import FrameExtractor as FrameExtractor, MessageKind as MessageKind
from .decoder import decode as decode
from .errors import DecodeError as DecodeError, FeedOverflowError as FeedOverflowError, SinkError as SinkError
