#!/usr/bin/env python

import argparse
import asyncio
import logging
import random

from anyio import open_file

logging.basicConfig(
    format="%(asctime)s %(name)s: %(message)s",
    level=logging.INFO,
)

log = logging.getLogger("replay")

async def serve(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
    peer = writer.get_extra_info("peername")
    log.info("Replaying %s to %s", args.input, peer)

    try:
        async with await open_file(args.input, "rb") as in_file:
            while True:
                # random chunk sizes so that messages straddle reads, like the real feed does
                chunk = await in_file.read(random.randint(1, args.chunk))
                if len(chunk) == 0:
                    break

                writer.write(chunk)
                await writer.drain()
                await asyncio.sleep(args.delay / args.multiplier)
    except ConnectionError as e:
        log.info("%s went away: %s", peer, e)
    finally:
        writer.close()

    log.info("Finished replaying to %s", peer)

async def main():
    server = await asyncio.start_server(serve, args.host, args.port)
    log.info("Listening on %s:%d", args.host, args.port)
    async with server:
        await server.serve_forever()

if __name__ == "__main__":
    global args

    parser = argparse.ArgumentParser()
    parser.add_argument("-i", "--input", required=True)
    parser.add_argument("--host", default="localhost")
    parser.add_argument("--port", default=5000, type=int)
    parser.add_argument("--chunk", default=512, type=int)
    parser.add_argument("--delay", default=0.05, type=float)
    parser.add_argument("-x", "--multiplier", default=1, type=int)
    args = parser.parse_args()

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        ...
