#!/usr/bin/env python3
"""
Example 1: Walk a Lane and Inspect Lane Changes
=================================================

This example loads a road network from a JSON file, walks a lane from a
starting waypoint to its end, and prints the lane-change permission and
neighbouring lanes at every sample.

Usage:
    python 01_walk_lane.py /path/to/network.json ROAD_ID LANE_ID [STEP]
    python 01_walk_lane.py data/fork.json 1 -1 5
"""

import logging
import sys

from lanepoint import LaneGraphNetwork


def main():
    if len(sys.argv) < 4:
        print("Usage: python 01_walk_lane.py <network.json> <road_id> <lane_id> [step]")
        print("\nThis example walks a lane and prints lane-change permissions.")
        return

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    path = sys.argv[1]
    road_id, lane_id = int(sys.argv[2]), int(sys.argv[3])
    step = float(sys.argv[4]) if len(sys.argv) > 4 else 5.0

    network = LaneGraphNetwork.from_json(path)
    road = network.roads.get(road_id)
    if road is None:
        print(f"Road {road_id} not found.")
        return

    start_s = 0.0 if lane_id < 0 else road.length
    start = network.get_waypoint(road_id, lane_id, start_s)
    if start is None:
        print(f"Lane {lane_id} not found on road {road_id}.")
        return

    samples = [start] + start.next_until_lane_end(step)

    print(f"\n--- Walking {start} every {step} m ---")
    for wp in samples:
        right = wp.get_right_lane()
        left = wp.get_left_lane()
        loc = wp.transform.location
        print(
            f"  s={wp.s:7.2f}  ({loc.x:8.2f}, {loc.y:8.2f})  "
            f"lane change: {wp.get_lane_change().name:<5}  "
            f"right: {right.lane_id if right else '-':>3}  "
            f"left: {left.lane_id if left else '-':>3}"
        )

    print("\n--- Continuations ---")
    for nxt in samples[-1].next(step):
        print(f"  {nxt}  junction: {nxt.get_junction_id()}")


if __name__ == "__main__":
    main()
