"""
Lane Markings and Lane-Change Permission
==========================================

Raw marking records are stored by the road network relative to the
road's reference direction. This module wraps them into caller-facing
value types and derives the lane-change permission as seen from the
lane's actual direction of travel.

Example::

    from lanepoint.core.marking import LaneChange, MarkRecord, lane_change_permission

    right = MarkRecord(lane_change=LaneChange.RIGHT)
    lane_change_permission(right, None, lane_id=-1)  # LaneChange.BOTH
"""

import enum
from dataclasses import dataclass
from typing import Optional


class LaneChange(enum.Flag):
    """Lateral directions in which a lane change is permitted."""

    NONE = 0
    RIGHT = 0x1
    LEFT = 0x2
    BOTH = RIGHT | LEFT

    def swapped(self) -> "LaneChange":
        """Exchange RIGHT and LEFT; BOTH and NONE are unchanged."""
        if self is LaneChange.RIGHT:
            return LaneChange.LEFT
        if self is LaneChange.LEFT:
            return LaneChange.RIGHT
        return self

    @classmethod
    def from_name(cls, name: str) -> "LaneChange":
        key = name.strip().upper()
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown lane change value: {name!r}") from None


class LaneMarkingType(enum.Enum):
    OTHER = "other"
    BROKEN = "broken"
    SOLID = "solid"
    SOLID_SOLID = "solid_solid"
    SOLID_BROKEN = "solid_broken"
    BROKEN_SOLID = "broken_solid"
    BROKEN_BROKEN = "broken_broken"
    BOTTS_DOTS = "botts_dots"
    GRASS = "grass"
    CURB = "curb"
    NONE = "none"


class LaneMarkingColor(enum.Enum):
    STANDARD = "standard"
    BLUE = "blue"
    GREEN = "green"
    RED = "red"
    WHITE = "white"
    YELLOW = "yellow"
    OTHER = "other"


@dataclass(frozen=True)
class MarkRecord:
    """Raw marking record attached to the outer border of a lane.

    Attributes:
        s_offset: Road ``s`` at which this record starts to apply.
        type: Painted pattern.
        color: Paint color.
        lane_change: Permitted lane change relative to the road's
            reference direction.
        width: Painted line width in meters.
    """

    s_offset: float = 0.0
    type: LaneMarkingType = LaneMarkingType.NONE
    color: LaneMarkingColor = LaneMarkingColor.STANDARD
    lane_change: LaneChange = LaneChange.BOTH
    width: float = 0.0


@dataclass(frozen=True)
class LaneMarking:
    """Lane marking as reported to callers of a waypoint."""

    type: LaneMarkingType
    color: LaneMarkingColor
    lane_change: LaneChange
    width: float

    @classmethod
    def from_record(cls, record: MarkRecord) -> "LaneMarking":
        return cls(
            type=record.type,
            color=record.color,
            lane_change=record.lane_change,
            width=record.width,
        )


def inner_lane_id(lane_id: int) -> int:
    """Id of the neighbouring lane towards the road centre (0 is the centre)."""
    return lane_id - 1 if lane_id > 0 else lane_id + 1


def lane_change_permission(
    right_record: Optional[MarkRecord],
    left_record: Optional[MarkRecord],
    lane_id: int,
) -> LaneChange:
    """Derive the permitted lane changes for a lane.

    A missing record means nothing is painted, which does not restrict
    lane changes, so it counts as ``BOTH``. Records are stored relative to
    the road's reference direction: for a lane travelling against it
    (positive id) the right record has RIGHT and LEFT exchanged, and the
    left record is exchanged when the inner neighbour's id is positive.

    Args:
        right_record: Marking on the right border of the lane, if any.
        left_record: Marking on the left border of the lane, if any.
        lane_id: Signed id of the lane.

    Returns:
        LaneChange whose RIGHT bit is set iff a change to the right is
        permitted and whose LEFT bit is set iff a change to the left is.
    """
    right = right_record.lane_change if right_record is not None else LaneChange.BOTH
    left = left_record.lane_change if left_record is not None else LaneChange.BOTH

    # Lane travels against the road's reference direction.
    if lane_id > 0:
        right = right.swapped()
    if inner_lane_id(lane_id) > 0:
        left = left.swapped()

    return (right & LaneChange.RIGHT) | (left & LaneChange.LEFT)
