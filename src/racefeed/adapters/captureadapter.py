import logging
import sys

from anyio import open_file, wrap_file
from racefeed.adapters.abstract import EOS, RaceFeedAdapter
from racefeed.errors import FeedOverflowError

class CaptureAdapter(RaceFeedAdapter):
    """Replays raw feed bytes recorded by capture.py, in chunks of `chunk_size` to mimic socket reads"""

    def __init__(self, filename, chunk_size: int = 4096, **kwargs):
        super().__init__(**kwargs)
        self.filename = filename
        self.chunk_size = chunk_size
        self._log = logging.getLogger(__name__)

    async def run(self) -> None:
        self._log.info("Starting")
        if self.filename == "-":
            in_file = wrap_file(sys.stdin.buffer)
        else:
            in_file = await open_file(self.filename, "rb")

        extractor = self._extractor_factory()
        async with in_file:
            self._log.debug("Opened %s", self.filename)
            self._connection_changed(True)
            try:
                while True:
                    chunk = await in_file.read(self.chunk_size)
                    if len(chunk) == 0:
                        self._log.info("End of stream (%d bytes left unframed)", extractor.pending)
                        break

                    await self._feed(extractor, chunk)
            except EOS:
                self._log.info("Stopped by a callback")
            except FeedOverflowError as e:
                self._log.error("Giving up on %s: %s", self.filename, e)
            finally:
                self._connection_changed(False)
