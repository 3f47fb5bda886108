#!/usr/bin/env python

import argparse
import asyncio
import logging
import os
import sys
import time

from colorist import Color

from racefeed import DecodeError, RaceFeedClient
from racefeed.adapters import CaptureAdapter, TcpAdapter
from racefeed.events import LeaderboardSnapshot, PitSummary
from racefeed.reference import Roster, load_reference
from racefeed.util import LapRecord, RaceStateAggregator
from racefeed.util.formatting import format_lap_delta, lap_delta_trend, rounded_text, Trend

logging.basicConfig(
    format="%(asctime)s %(name)s: %(message)s",
    level=logging.INFO,
)

roster: Roster = dict()
leader: str | None = None

def name(car: str) -> str:
    driver = roster.get(car)
    return f"{driver.full_name} ({car})" if driver is not None else f"Car {car}"

def driver_filter(func):
    def wrapper(obj):
        if args.car is not None and obj.car != args.car:
            return

        func(obj)
    return wrapper

def main():
    global roster

    if args.reference is not None:
        roster = load_reference(args.reference)

    if ":" in args.input and not os.path.exists(args.input):
        host, port = args.input.rsplit(":", 1)
        adapter = TcpAdapter(host, int(port))
    else:
        if args.input != "-" and not os.path.exists(args.input):
            print(f"{args.input} doesn't exist")
            sys.exit(255)
        adapter = CaptureAdapter(args.input)

    client = RaceFeedClient(adapter)
    client.on_leaderboard(on_leaderboard)
    client.on_pit_summary(on_pit_summary)
    client.on_decode_error(on_decode_error)
    client.on_connection_change(lambda c: print(f"{Color.GREEN if c else Color.RED}{"Connected" if c else "Disconnected"}{Color.OFF}"))

    aggregator = RaceStateAggregator(roster, client)
    aggregator.on_lap(on_lap)

    started = time.time()
    asyncio.run(client.go())

    print(f"Done after {time.time() - started:.1f}s")
    for entry in aggregator.state.leaderboard:
        print(f"{entry.rank}: {name(entry.car)}")

def on_leaderboard(snapshot: LeaderboardSnapshot):
    global leader

    if len(snapshot.entries) == 0:
        return

    first = min(snapshot.entries, key=lambda e: e.rank)
    if first.car != leader:
        print(f"{Color.YELLOW}{name(first.car)} leads{Color.OFF}")
        leader = first.car

@driver_filter
def on_lap(record: LapRecord):
    trend = lap_delta_trend(record.last_lap_delta)
    color = Color.GREEN if trend == Trend.IMPROVED else Color.RED if trend == Trend.WORSENED else Color.OFF
    print(f"{Color.MAGENTA}\t{name(record.car)} lap {record.last_lap_number}: {record.last_lap_time:.3f}{Color.OFF} "
          f"{color}{format_lap_delta(record.last_lap_delta)}{Color.OFF}")

@driver_filter
def on_pit_summary(summary: PitSummary):
    details = ", ".join(f"{k}={rounded_text(v)}" for k, v in summary.attributes.items() if k != "Car")
    print(f"{Color.BLUE}{name(summary.car)} pitted{Color.OFF} {details}")

def on_decode_error(error: DecodeError):
    print(f"{Color.RED}Bad {error.kind} message: {error}{Color.OFF}")

if __name__ == "__main__":
    global args

    parser = argparse.ArgumentParser()
    parser.add_argument("-i", "--input", default="-", help="host:port, a capture file, or - for stdin")
    parser.add_argument("-r", "--reference")
    parser.add_argument("-c", "--car")
    args = parser.parse_args()

    try:
        main()
    except (KeyboardInterrupt, BrokenPipeError):
        ...
