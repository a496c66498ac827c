"""
Waypoint Locations and Lane Types
===================================

The minimal identifying data of a position in the lane graph, and the
semantic lane types a road network can report for it.

Lane ids are signed: negative lanes travel along the road's reference
direction (increasing ``s``), positive lanes travel against it. Lane 0 is
the centre line and is never a drivable location.
"""

import enum
from dataclasses import dataclass

#: Junction id reported for roads that are not part of a junction.
NO_JUNCTION = -1


@dataclass(frozen=True)
class WaypointLocation:
    """A position in the lane graph.

    Attributes:
        road_id: Identifier of the road segment.
        lane_id: Signed lane identifier; the sign encodes the direction of
            travel relative to the road's reference direction.
        s: Longitudinal offset along the road in meters.
    """

    road_id: int
    lane_id: int
    s: float

    @property
    def lane_key(self):
        """The ``(road_id, lane_id)`` pair identifying the lane."""
        return (self.road_id, self.lane_id)


class LaneType(enum.Flag):
    """Semantic type of a lane.

    Bit values follow the OpenDRIVE lane type enumeration so that
    several types can be combined into a filter, e.g.
    ``LaneType.DRIVING | LaneType.BIDIRECTIONAL``.
    """

    NONE = 0x1
    DRIVING = 0x1 << 1
    STOP = 0x1 << 2
    SHOULDER = 0x1 << 3
    BIKING = 0x1 << 4
    SIDEWALK = 0x1 << 5
    BORDER = 0x1 << 6
    RESTRICTED = 0x1 << 7
    PARKING = 0x1 << 8
    BIDIRECTIONAL = 0x1 << 9
    MEDIAN = 0x1 << 10
    ROADWORKS = 0x1 << 14
    TRAM = 0x1 << 15
    RAIL = 0x1 << 16
    ENTRY = 0x1 << 17
    EXIT = 0x1 << 18
    OFF_RAMP = 0x1 << 19
    ON_RAMP = 0x1 << 20
    ANY = (
        DRIVING | STOP | SHOULDER | BIKING | SIDEWALK | BORDER | RESTRICTED
        | PARKING | BIDIRECTIONAL | MEDIAN | ROADWORKS | TRAM | RAIL | ENTRY
        | EXIT | OFF_RAMP | ON_RAMP
    )

    @classmethod
    def from_name(cls, name: str) -> "LaneType":
        """Parse a lane type from its (case-insensitive) name.

        Args:
            name: Type name such as ``"driving"`` or ``"sidewalk"``.

        Returns:
            The matching LaneType.

        Raises:
            ValueError: If the name is not a known lane type.
        """
        key = name.strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown lane type: {name!r}") from None
