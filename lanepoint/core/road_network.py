"""
Road Network Interface
========================

The read-only queries a waypoint needs from the road network that
produced it. Any object providing these methods can back a
:class:`~lanepoint.core.waypoint.Waypoint`; the bundled implementation is
:class:`~lanepoint.core.lane_graph.LaneGraphNetwork`.

Implementations must be safe for concurrent read-only access, since
waypoints share the network without locking.
"""

from typing import List, Optional, Protocol, Tuple

from lanepoint.core.location import LaneType, WaypointLocation
from lanepoint.core.marking import MarkRecord
from lanepoint.utils.geometry import Transform


class RoadNetwork(Protocol):
    """Primitive queries on an immutable road network."""

    def compute_transform(self, location: WaypointLocation) -> Transform:
        ...

    def get_mark_record(
        self, location: WaypointLocation
    ) -> Tuple[Optional[MarkRecord], Optional[MarkRecord]]:
        """Raw ``(right, left)`` marking records at a location."""
        ...

    def get_junction_id(self, road_id: int) -> int:
        ...

    def is_junction(self, road_id: int) -> bool:
        ...

    def get_lane_width(self, location: WaypointLocation) -> float:
        ...

    def get_lane_type(self, location: WaypointLocation) -> LaneType:
        ...

    def get_next(
        self, location: WaypointLocation, distance: float
    ) -> List[WaypointLocation]:
        """Every location reached by advancing ``distance`` along the lane graph."""
        ...

    def get_previous(
        self, location: WaypointLocation, distance: float
    ) -> List[WaypointLocation]:
        """Every location reached by retreating ``distance`` along the lane graph."""
        ...

    def get_right(self, location: WaypointLocation) -> Optional[WaypointLocation]:
        ...

    def get_left(self, location: WaypointLocation) -> Optional[WaypointLocation]:
        ...
