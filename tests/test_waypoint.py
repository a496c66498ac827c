"""
Tests for the Waypoint entity and lane walking, against a table-driven
road network.
"""

import pytest

from lanepoint.core.location import NO_JUNCTION, LaneType, WaypointLocation
from lanepoint.core.marking import (
    LaneChange,
    LaneMarkingColor,
    LaneMarkingType,
    MarkRecord,
)
from lanepoint.core.waypoint import Waypoint
from lanepoint.utils.geometry import Location, Transform


class StubNetwork:
    """Road network answering queries from lookup tables.

    ``next_map``/``previous_map`` map a location to the locations returned
    for any distance; unknown locations are dead ends.
    """

    def __init__(
        self,
        next_map=None,
        previous_map=None,
        right_map=None,
        left_map=None,
        marks=None,
        junctions=None,
    ):
        self.next_map = next_map or {}
        self.previous_map = previous_map or {}
        self.right_map = right_map or {}
        self.left_map = left_map or {}
        self.marks = marks or {}
        self.junctions = junctions or {}
        self.transform_calls = 0
        self.mark_calls = 0
        self.distances = []

    def compute_transform(self, location):
        self.transform_calls += 1
        return Transform(location=Location(x=location.s))

    def get_mark_record(self, location):
        self.mark_calls += 1
        return self.marks.get(location.lane_key, (None, None))

    def get_junction_id(self, road_id):
        return self.junctions.get(road_id, NO_JUNCTION)

    def is_junction(self, road_id):
        return road_id in self.junctions

    def get_lane_width(self, location):
        return 3.0 + abs(location.lane_id) * 0.25

    def get_lane_type(self, location):
        return LaneType.SIDEWALK if abs(location.lane_id) > 2 else LaneType.DRIVING

    def get_next(self, location, distance):
        self.distances.append(distance)
        return list(self.next_map.get(location, []))

    def get_previous(self, location, distance):
        self.distances.append(distance)
        return list(self.previous_map.get(location, []))

    def get_right(self, location):
        return self.right_map.get(location)

    def get_left(self, location):
        return self.left_map.get(location)


def loc(s, road_id=1, lane_id=-1):
    return WaypointLocation(road_id, lane_id, float(s))


def _straight_lane(length=40, step=10, road_id=1, lane_id=-1):
    """next/previous tables sampling one lane of ``length`` every ``step``."""
    stations = list(range(0, length, step))
    next_map = {
        loc(a, road_id, lane_id): [loc(b, road_id, lane_id)]
        for a, b in zip(stations, stations[1:])
    }
    previous_map = {
        loc(b, road_id, lane_id): [loc(a, road_id, lane_id)]
        for a, b in zip(stations, stations[1:])
    }
    return next_map, previous_map


class TestWaypointIdentity:
    """Accessors and forwarding queries."""

    def test_accessors_match_location(self):
        network = StubNetwork()
        wp = Waypoint(network, WaypointLocation(7, -2, 12.5))
        assert wp.road_id == 7
        assert wp.lane_id == -2
        assert wp.s == 12.5
        assert wp.location == WaypointLocation(7, -2, 12.5)
        assert wp.network is network

    def test_transform_and_marks_cached_at_construction(self):
        network = StubNetwork()
        wp = Waypoint(network, loc(5))
        assert network.transform_calls == 1
        assert network.mark_calls == 1
        assert wp.transform.location.x == 5.0
        wp.transform
        wp.get_lane_change()
        wp.get_right_lane_marking()
        assert network.transform_calls == 1
        assert network.mark_calls == 1

    def test_forwarded_queries(self):
        network = StubNetwork(junctions={3: 42})
        plain = Waypoint(network, loc(0, road_id=1, lane_id=-1))
        junction = Waypoint(network, loc(0, road_id=3, lane_id=-3))
        assert plain.get_junction_id() == NO_JUNCTION
        assert plain.is_junction() is False
        assert junction.get_junction_id() == 42
        assert junction.is_junction() is True
        assert plain.get_lane_width() == pytest.approx(3.25)
        assert plain.get_lane_type() is LaneType.DRIVING
        assert junction.get_lane_type() is LaneType.SIDEWALK

    def test_is_read_only(self):
        wp = Waypoint(StubNetwork(), loc(0))
        with pytest.raises(AttributeError):
            wp.road_id = 3
        with pytest.raises(AttributeError):
            wp.cache = {}

    def test_equality_and_hash(self):
        network = StubNetwork()
        a = Waypoint(network, loc(10))
        b = Waypoint(network, loc(10))
        other_network = Waypoint(StubNetwork(), loc(10))
        assert a == b
        assert hash(a) == hash(b)
        assert a.id == b.id
        assert a != other_network
        assert len({a, b}) == 1

    def test_repr(self):
        wp = Waypoint(StubNetwork(), WaypointLocation(4, 1, 2.0))
        assert repr(wp) == "Waypoint(road_id=4, lane_id=1, s=2.00)"


class TestSingleStepTraversal:
    def test_next_wraps_every_location(self):
        network = StubNetwork(next_map={loc(0): [loc(10)]})
        result = Waypoint(network, loc(0)).next(10.0)
        assert len(result) == 1
        assert result[0].location == loc(10)
        assert result[0].network is network
        assert network.distances == [10.0]

    def test_next_dead_end_is_empty(self):
        assert Waypoint(StubNetwork(), loc(0)).next(10.0) == []

    def test_next_fork_keeps_branch_order(self):
        branches = [loc(0, road_id=2), loc(0, road_id=3, lane_id=-2)]
        network = StubNetwork(next_map={loc(35): branches})
        result = Waypoint(network, loc(35)).next(5.0)
        assert [w.location for w in result] == branches

    def test_previous(self):
        network = StubNetwork(previous_map={loc(10): [loc(0)]})
        result = Waypoint(network, loc(10)).previous(10.0)
        assert [w.s for w in result] == [0.0]
        assert Waypoint(network, loc(0)).previous(10.0) == []


class TestLaneWalker:
    """Tests for next_until_lane_end / previous_until_lane_start."""

    def test_walk_to_lane_end(self):
        next_map, _ = _straight_lane(length=40, step=10)
        network = StubNetwork(next_map=next_map)
        result = Waypoint(network, loc(0)).next_until_lane_end(10.0)
        assert [w.s for w in result] == [10.0, 20.0, 30.0]

    def test_walk_to_lane_start(self):
        _, previous_map = _straight_lane(length=40, step=10)
        network = StubNetwork(previous_map=previous_map)
        result = Waypoint(network, loc(30)).previous_until_lane_start(10.0)
        assert [w.s for w in result] == [20.0, 10.0, 0.0]

    def test_first_round_is_filtered_next(self):
        seeds = [loc(10), loc(0, road_id=2), loc(10, lane_id=-2)]
        network = StubNetwork(next_map={loc(0): seeds})
        wp = Waypoint(network, loc(0))
        same_lane = [
            w for w in wp.next(10.0)
            if (w.road_id, w.lane_id) == (wp.road_id, wp.lane_id)
        ]
        assert wp.next_until_lane_end(10.0) == same_lane

    def test_no_same_lane_successor_is_empty(self):
        network = StubNetwork(next_map={loc(0): [loc(0, road_id=2)]})
        assert Waypoint(network, loc(0)).next_until_lane_end(10.0) == []

    def test_fork_into_other_lanes_stops_walk(self):
        next_map, _ = _straight_lane(length=40, step=10)
        next_map[loc(30)] = [loc(0, road_id=2), loc(0, road_id=3)]
        network = StubNetwork(next_map=next_map)
        result = Waypoint(network, loc(0)).next_until_lane_end(10.0)
        assert [w.s for w in result] == [10.0, 20.0, 30.0]

    def test_filter_uses_originating_lane(self):
        # Road 2 continues on from road 2 but the walk started on road 1.
        network = StubNetwork(
            next_map={
                loc(0): [loc(10)],
                loc(10): [loc(0, road_id=2)],
                loc(0, road_id=2): [loc(10, road_id=2)],
            }
        )
        result = Waypoint(network, loc(0)).next_until_lane_end(10.0)
        assert [w.location for w in result] == [loc(10)]

    def test_only_last_match_is_expanded(self):
        # Both branches stay on the lane; only the second one is stepped.
        network = StubNetwork(
            next_map={
                loc(0): [loc(10), loc(15)],
                loc(10): [loc(20)],
                loc(15): [loc(25)],
            }
        )
        result = Waypoint(network, loc(0)).next_until_lane_end(10.0)
        assert [w.s for w in result] == [10.0, 15.0, 25.0]

    def test_backward_filter_uses_originating_lane(self):
        network = StubNetwork(
            previous_map={
                loc(20): [loc(10)],
                loc(10): [loc(30, road_id=0)],
                loc(30, road_id=0): [loc(20, road_id=0)],
            }
        )
        result = Waypoint(network, loc(20)).previous_until_lane_start(10.0)
        assert [w.location for w in result] == [loc(10)]

    def test_backward_only_last_match_is_expanded(self):
        network = StubNetwork(
            previous_map={
                loc(30): [loc(20), loc(15)],
                loc(20): [loc(10)],
                loc(15): [loc(5)],
            }
        )
        result = Waypoint(network, loc(30)).previous_until_lane_start(10.0)
        assert [w.s for w in result] == [20.0, 15.0, 5.0]

    def test_distance_passed_to_every_step(self):
        next_map, _ = _straight_lane(length=40, step=10)
        network = StubNetwork(next_map=next_map)
        Waypoint(network, loc(0)).next_until_lane_end(10.0)
        assert network.distances == [10.0] * 4


class TestLateralNeighbors:
    def test_neighbors(self):
        network = StubNetwork(
            right_map={loc(5): loc(5, lane_id=-2)},
            left_map={loc(5): loc(5, lane_id=1)},
        )
        wp = Waypoint(network, loc(5))
        assert wp.get_right_lane().location == loc(5, lane_id=-2)
        assert wp.get_left_lane().location == loc(5, lane_id=1)

    def test_edge_lane_has_no_neighbor(self):
        wp = Waypoint(StubNetwork(), loc(5))
        assert wp.get_right_lane() is None
        assert wp.get_left_lane() is None


class TestLaneMarkings:
    """Marking accessors and lane-change derivation on a waypoint."""

    right = MarkRecord(
        type=LaneMarkingType.SOLID,
        color=LaneMarkingColor.WHITE,
        lane_change=LaneChange.NONE,
        width=0.2,
    )
    left = MarkRecord(
        type=LaneMarkingType.BROKEN,
        color=LaneMarkingColor.YELLOW,
        lane_change=LaneChange.BOTH,
        width=0.1,
    )

    def _waypoint(self, marks, lane_id=-1):
        network = StubNetwork(marks={(1, lane_id): marks})
        return Waypoint(network, loc(0, lane_id=lane_id))

    def test_both_markings(self):
        wp = self._waypoint((self.right, self.left))
        assert wp.get_right_lane_marking().type is LaneMarkingType.SOLID
        assert wp.get_right_lane_marking().width == pytest.approx(0.2)
        assert wp.get_left_lane_marking().color is LaneMarkingColor.YELLOW

    def test_no_markings(self):
        wp = self._waypoint((None, None))
        assert wp.get_right_lane_marking() is None
        assert wp.get_left_lane_marking() is None

    def test_left_marking_requires_right_record(self):
        wp = self._waypoint((None, self.left))
        assert wp.get_right_lane_marking() is None
        assert wp.get_left_lane_marking() is None

    def test_missing_left_record(self):
        wp = self._waypoint((self.right, None))
        assert wp.get_right_lane_marking() is not None
        assert wp.get_left_lane_marking() is None

    def test_lane_change(self):
        wp = self._waypoint((self.right, self.left))
        assert wp.get_lane_change() == LaneChange.LEFT
        assert wp.get_lane_change() == wp.get_lane_change()

    def test_lane_change_without_right_record(self):
        wp = self._waypoint((None, self.right))
        assert wp.get_lane_change() == LaneChange.RIGHT

    def test_lane_change_opposite_direction(self):
        record = MarkRecord(lane_change=LaneChange.LEFT)
        forward = self._waypoint((record, self.right), lane_id=-1)
        backward = self._waypoint((record, self.right), lane_id=1)
        assert forward.get_lane_change() == LaneChange.NONE
        assert backward.get_lane_change() == LaneChange.RIGHT
