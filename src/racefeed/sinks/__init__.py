from .abstract import RaceSink as RaceSink
from .consolesink import ConsoleSink as ConsoleSink
