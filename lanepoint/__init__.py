"""
lanepoint: Waypoints on Lane Graphs
=====================================

lanepoint provides read-only waypoint handles on a road network's lane
graph, together with the algorithms that move them around:

    - Forward/backward traversal by arbitrary distance, across forks
    - Walking a lane to its end or start
    - Resolving the adjacent lanes to the left and right
    - Deriving lane-change permission from painted lane markings

Quick start::

    from lanepoint import LaneGraphNetwork

    network = LaneGraphNetwork.from_json("town.json")
    wp = network.get_waypoint(road_id=1, lane_id=-1, s=0.0)
    for sample in wp.next_until_lane_end(2.0):
        print(sample.s, sample.get_lane_change())
"""

__version__ = "0.1.0"

from lanepoint.core.location import LaneType, WaypointLocation
from lanepoint.core.marking import LaneChange, LaneMarking
from lanepoint.core.waypoint import Waypoint
from lanepoint.core.lane_graph import LaneGraphNetwork

__all__ = [
    "LaneType",
    "WaypointLocation",
    "LaneChange",
    "LaneMarking",
    "Waypoint",
    "LaneGraphNetwork",
]
