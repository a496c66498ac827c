"""
Waypoints
===========

A :class:`Waypoint` is a read-only handle on a precise position of the
lane graph: a road, a lane and a longitudinal offset ``s``. It keeps a
reference to the road network that produced it and asks that network
for everything it does not cache itself.

Example::

    wp = network.get_waypoint(road_id=1, lane_id=-1, s=0.0)
    for nxt in wp.next(5.0):
        print(nxt.road_id, nxt.lane_id, nxt.s)
    print(wp.get_lane_change())
"""

from typing import List, Optional, Tuple

from lanepoint.core.lane_walker import walk_lane
from lanepoint.core.location import LaneType, WaypointLocation
from lanepoint.core.marking import (
    LaneChange,
    LaneMarking,
    MarkRecord,
    lane_change_permission,
)
from lanepoint.core.road_network import RoadNetwork
from lanepoint.utils.geometry import Transform


class Waypoint:
    """An immutable position on a road network.

    The world transform and the pair of raw lane marking records are
    computed once, at construction. Traversal methods return new
    waypoints sharing the same network.

    Args:
        network: Road network this waypoint belongs to. It is never
            modified through the waypoint.
        location: Position in the lane graph. It is assumed valid for
            ``network``.
    """

    __slots__ = ("_network", "_location", "_transform", "_mark_record")

    def __init__(self, network: RoadNetwork, location: WaypointLocation):
        self._network = network
        self._location = location
        self._transform = network.compute_transform(location)
        self._mark_record: Tuple[
            Optional[MarkRecord], Optional[MarkRecord]
        ] = network.get_mark_record(location)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def network(self) -> RoadNetwork:
        return self._network

    @property
    def location(self) -> WaypointLocation:
        return self._location

    @property
    def transform(self) -> Transform:
        return self._transform

    @property
    def road_id(self) -> int:
        return self._location.road_id

    @property
    def lane_id(self) -> int:
        return self._location.lane_id

    @property
    def s(self) -> float:
        """Longitudinal offset along the road in meters."""
        return self._location.s

    @property
    def id(self) -> int:
        """Hash of the location, identical for waypoints at the same position."""
        return hash(self._location)

    def get_junction_id(self) -> int:
        return self._network.get_junction_id(self._location.road_id)

    def is_junction(self) -> bool:
        return self._network.is_junction(self._location.road_id)

    def get_lane_width(self) -> float:
        return self._network.get_lane_width(self._location)

    def get_lane_type(self) -> LaneType:
        return self._network.get_lane_type(self._location)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def next(self, distance: float) -> List["Waypoint"]:
        """Waypoints ``distance`` meters ahead in the direction of travel.

        Returns an empty list at a dead end and one waypoint per branch
        at a fork, in the order the network enumerates them.
        """
        return self._wrap(self._network.get_next(self._location, distance))

    def previous(self, distance: float) -> List["Waypoint"]:
        """Waypoints ``distance`` meters behind, against the direction of travel."""
        return self._wrap(self._network.get_previous(self._location, distance))

    def next_until_lane_end(self, distance: float) -> List["Waypoint"]:
        """Waypoints every ``distance`` meters until the end of this lane."""
        return walk_lane(self, distance, forward=True)

    def previous_until_lane_start(self, distance: float) -> List["Waypoint"]:
        """Waypoints every ``distance`` meters back to the start of this lane."""
        return walk_lane(self, distance, forward=False)

    def get_right_lane(self) -> Optional["Waypoint"]:
        """Waypoint at the same ``s`` on the lane to the right, if there is one."""
        location = self._network.get_right(self._location)
        if location is None:
            return None
        return Waypoint(self._network, location)

    def get_left_lane(self) -> Optional["Waypoint"]:
        """Waypoint at the same ``s`` on the lane to the left, if there is one."""
        location = self._network.get_left(self._location)
        if location is None:
            return None
        return Waypoint(self._network, location)

    # ------------------------------------------------------------------
    # Lane markings
    # ------------------------------------------------------------------

    def get_right_lane_marking(self) -> Optional[LaneMarking]:
        right, _ = self._mark_record
        if right is not None:
            return LaneMarking.from_record(right)
        return None

    def get_left_lane_marking(self) -> Optional[LaneMarking]:
        """Marking on the left border of the lane.

        Returns None whenever the right record is missing, even if a left
        record exists.
        """
        right, left = self._mark_record
        # TODO: guard on the left record once callers no longer depend on
        # the right-record check.
        if right is not None and left is not None:
            return LaneMarking.from_record(left)
        return None

    def get_lane_change(self) -> LaneChange:
        """Lane changes permitted from this waypoint, in its direction of travel."""
        right, left = self._mark_record
        return lane_change_permission(right, left, self._location.lane_id)

    # ------------------------------------------------------------------

    def _wrap(self, locations: List[WaypointLocation]) -> List["Waypoint"]:
        return [Waypoint(self._network, location) for location in locations]

    def __eq__(self, other):
        if not isinstance(other, Waypoint):
            return NotImplemented
        return self._network is other._network and self._location == other._location

    def __hash__(self):
        return hash((id(self._network), self._location))

    def __repr__(self):
        return (
            f"Waypoint(road_id={self.road_id}, lane_id={self.lane_id}, "
            f"s={self.s:.2f})"
        )
