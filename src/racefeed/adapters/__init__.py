from .abstract import EOS as EOS, RaceFeedAdapter as RaceFeedAdapter, Update as Update
from .captureadapter import CaptureAdapter as CaptureAdapter
from .tcpadapter import TcpAdapter as TcpAdapter
