"""
Lane Walking
==============

Repeatedly step a waypoint along its lane until the lane ends (or, going
backwards, starts). The walk samples the lane every ``distance`` meters
and keeps only waypoints on the lane it started from.
"""

import logging
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from lanepoint.core.waypoint import Waypoint

logger = logging.getLogger(__name__)


def walk_lane(origin: "Waypoint", distance: float, forward: bool = True) -> List["Waypoint"]:
    """Sample the rest of ``origin``'s lane in steps of ``distance``.

    Each round keeps the candidates whose ``(lane_id, road_id)`` equal
    those of ``origin``. Only the last kept waypoint is stepped further;
    other matches from the same round are returned but not expanded.
    The walk stops at the first round without a match.

    The step size is not refined near the lane boundary, so short lanes
    can be overshot entirely when ``distance`` is large.

    Args:
        origin: Waypoint the walk starts from (not included in the result).
        distance: Step size in meters.
        forward: Walk in the direction of travel when True, against it
            otherwise.

    Returns:
        Waypoints in traversal order.
    """

    def step(waypoint: "Waypoint") -> List["Waypoint"]:
        return waypoint.next(distance) if forward else waypoint.previous(distance)

    lane_key = (origin.lane_id, origin.road_id)
    result: List["Waypoint"] = []
    frontier = step(origin)

    continuing = True
    while continuing:
        continuing = False
        for candidate in frontier:
            if (candidate.lane_id, candidate.road_id) == lane_key:
                result.append(candidate)
                continuing = True
        if continuing:
            frontier = step(result[-1])

    logger.debug(
        "Walked %s lane %d of road %s: %d waypoints",
        "forward" if forward else "backward",
        origin.lane_id,
        origin.road_id,
        len(result),
    )
    return result
