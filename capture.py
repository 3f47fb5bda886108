#!/usr/bin/env python
import argparse
import asyncio
import logging
import time

logging.basicConfig(
    format="%(asctime)s %(name)s: %(message)s",
    level=logging.INFO,
)

log = logging.getLogger("capture")

async def capture(out_file):
    reader, writer = await asyncio.open_connection(args.host, args.port)
    log.info("Capturing %s:%d to %s", args.host, args.port, args.output)
    last_update = time.time()
    total = 0

    try:
        while True:
            try:
                chunk = await asyncio.wait_for(reader.read(64 * 1024), timeout=args.timeout)
            except TimeoutError:
                log.info("%ds since last update, done!", int(time.time() - last_update))
                return

            if len(chunk) == 0:
                log.info("Feed closed")
                return

            # raw bytes, exactly as received; CaptureAdapter does the framing on replay
            out_file.write(chunk)
            out_file.flush()
            total += len(chunk)
            last_update = time.time()
    finally:
        log.info("Captured %d bytes", total)
        writer.close()

async def main():
    with open(args.output, "ab") as out_file:
        await capture(out_file)

if __name__ == "__main__":
    global args

    parser = argparse.ArgumentParser()
    parser.add_argument("--host", default="localhost")
    parser.add_argument("--port", default=5000, type=int)
    parser.add_argument("-o", "--output", required=True)
    parser.add_argument("-t", "--timeout", default=5 * 60, type=int)
    args = parser.parse_args()

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        ...
