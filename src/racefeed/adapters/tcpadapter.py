import asyncio
import logging

from racefeed.adapters.abstract import EOS, RaceFeedAdapter
from racefeed.errors import FeedOverflowError

RECONNECT_DELAY = 5.0
READ_SIZE = 64 * 1024

class TcpAdapter(RaceFeedAdapter):
    """
    Reads the timing feed from a plain TCP socket. There's no handshake; bytes are framed as they arrive.

    A socket error tears the connection down and retries after a fixed delay, forever. Whatever
    was buffered for an unfinished message is thrown away with the connection.
    """

    host: str
    port: int
    reconnect_delay: float
    reconnect: bool
    connected: bool

    def __init__(self, host: str, port: int, reconnect_delay: float = RECONNECT_DELAY, reconnect: bool = True, **kwargs):
        super().__init__(**kwargs)
        self.host = host
        self.port = port
        self.reconnect_delay = reconnect_delay
        self.reconnect = reconnect
        self.connected = False
        self._log = logging.getLogger(__name__)

    async def run(self) -> None:
        self._log.info("Starting")
        while True:
            try:
                await self._session()
                self._log.info("Disconnected from %s:%d", self.host, self.port)
            except EOS:
                return
            except FeedOverflowError as e:
                self._log.error("Dropping connection to %s:%d: %s", self.host, self.port, e)
            except OSError as e:
                self._log.error("Socket error on %s:%d: %s", self.host, self.port, e)
            finally:
                self._set_connected(False)

            if not self.reconnect:
                return

            self._log.info("Reconnecting in %.0fs", self.reconnect_delay)
            await asyncio.sleep(self.reconnect_delay)

    async def _session(self) -> None:
        reader, writer = await asyncio.open_connection(self.host, self.port)
        self._log.info("Connected to %s:%d", self.host, self.port)
        self._set_connected(True)

        extractor = self._extractor_factory()
        try:
            while True:
                chunk = await reader.read(READ_SIZE)
                if len(chunk) == 0:
                    break

                self._log.debug("Received %d bytes (%d pending)", len(chunk), extractor.pending)
                await self._feed(extractor, chunk)
        finally:
            extractor.reset()
            writer.close()
            try:
                await writer.wait_closed()
            except OSError:
                # the peer may already be gone; the close itself is what we wanted
                self._log.debug("Socket already closed")

    def _set_connected(self, connected: bool) -> None:
        if connected == self.connected:
            return

        self.connected = connected
        self._connection_changed(connected)
