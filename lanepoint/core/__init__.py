"""
Core waypoint abstraction: locations, lane markings, the road network
interface, waypoints and the bundled lane graph network.
"""

from lanepoint.core.location import NO_JUNCTION, LaneType, WaypointLocation
from lanepoint.core.marking import (
    LaneChange,
    LaneMarking,
    LaneMarkingColor,
    LaneMarkingType,
    MarkRecord,
    lane_change_permission,
)
from lanepoint.core.road_network import RoadNetwork
from lanepoint.core.waypoint import Waypoint
from lanepoint.core.lane_walker import walk_lane
from lanepoint.core.lane_graph import Lane, LaneGraphNetwork, Road

__all__ = [
    "NO_JUNCTION",
    "LaneType",
    "WaypointLocation",
    "LaneChange",
    "LaneMarking",
    "LaneMarkingColor",
    "LaneMarkingType",
    "MarkRecord",
    "lane_change_permission",
    "RoadNetwork",
    "Waypoint",
    "walk_lane",
    "Lane",
    "LaneGraphNetwork",
    "Road",
]
