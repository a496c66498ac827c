"""
Lane Graph Road Network
=========================

An in-memory, read-only road network backed by a NetworkX lane
connectivity graph. It answers every query a
:class:`~lanepoint.core.waypoint.Waypoint` needs and hands out
waypoints for its own lanes.

Lane connectivity is a directed graph whose nodes are ``(road_id,
lane_id)`` pairs. An edge ``a -> b`` means that a vehicle driving to the
end of lane ``a`` continues on lane ``b``. Edges are enumerated in the
order they were declared, which fixes the branch order at forks.

Example::

    from lanepoint.core.lane_graph import LaneGraphNetwork

    network = LaneGraphNetwork.from_json("town.json")
    wp = network.get_waypoint(road_id=1, lane_id=-1, s=0.0)
    samples = wp.next_until_lane_end(2.0)
"""

import bisect
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import networkx as nx
import numpy as np

from lanepoint.core.location import NO_JUNCTION, LaneType, WaypointLocation
from lanepoint.core.marking import (
    LaneChange,
    LaneMarkingColor,
    LaneMarkingType,
    MarkRecord,
    inner_lane_id,
)
from lanepoint.core.waypoint import Waypoint
from lanepoint.utils.geometry import (
    Location,
    Rotation,
    Transform,
    interpolate_polyline,
    normalize_angle,
    polyline_length,
)

logger = logging.getLogger(__name__)

LaneKey = Tuple[int, int]


@dataclass(frozen=True)
class Lane:
    """A lane of a road.

    Attributes:
        lane_id: Signed lane id. 0 is the centre line, which only carries
            marks.
        lane_type: Semantic type of the lane.
        width: Lane width in meters.
        marks: Records for the lane's outer border, sorted by ``s_offset``.
        successors: Lanes entered at the end of this one, in travel
            direction.
        predecessors: Lanes leading into this one.
    """

    lane_id: int
    lane_type: LaneType = LaneType.DRIVING
    width: float = 3.5
    marks: Tuple[MarkRecord, ...] = ()
    successors: Tuple[LaneKey, ...] = ()
    predecessors: Tuple[LaneKey, ...] = ()
    mark_offsets: Tuple[float, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "mark_offsets", tuple(m.s_offset for m in self.marks))

    def mark_at(self, s: float) -> Optional[MarkRecord]:
        """The mark record in effect at road offset ``s``, if any."""
        idx = bisect.bisect_right(self.mark_offsets, s) - 1
        if idx < 0:
            return None
        return self.marks[idx]


@dataclass(frozen=True, eq=False)
class Road:
    """A road segment with its reference line and lanes.

    Attributes:
        road_id: Identifier of the road.
        length: Road length in meters; ``s`` ranges over ``[0, length]``.
        reference_line: (N, 2) or (N, 3) polyline of the road's reference
            line. Its arc length is stretched to ``length``.
        lanes: Mapping of lane id to Lane, centre line included.
        junction_id: Junction the road belongs to, or ``NO_JUNCTION``.
    """

    road_id: int
    length: float
    reference_line: np.ndarray
    lanes: Mapping[int, Lane] = field(default_factory=dict)
    junction_id: int = NO_JUNCTION


class LaneGraphNetwork:
    """Immutable road network over a lane connectivity graph.

    Args:
        roads: Roads making up the network.

    Raises:
        ValueError: If two roads share an id.
    """

    def __init__(self, roads: Iterable[Road]):
        road_map: Dict[int, Road] = {}
        for road in roads:
            if road.road_id in road_map:
                raise ValueError(f"Duplicate road id: {road.road_id}")
            road_map[road.road_id] = road
        self._roads = MappingProxyType(road_map)
        self._graph = nx.freeze(self._build_connectivity_graph())

        logger.info(
            "Loaded road network: %d roads, %d lanes, %d connections",
            len(self._roads),
            self._graph.number_of_nodes(),
            self._graph.number_of_edges(),
        )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], default_lane_width: float = 3.5
    ) -> "LaneGraphNetwork":
        """Build a network from a plain dictionary.

        The dictionary has a ``"roads"`` list. Each road has an ``"id"``,
        an optional ``"length"``, ``"reference_line"`` and
        ``"junction_id"``, and a ``"lanes"`` list. Each lane has an
        ``"id"`` and optional ``"type"``, ``"width"``, ``"marks"``,
        ``"successors"`` and ``"predecessors"`` (lists of
        ``[road_id, lane_id]``).

        Args:
            data: Network description.
            default_lane_width: Width used for lanes without ``"width"``.

        Returns:
            LaneGraphNetwork with the described roads.

        Raises:
            ValueError: If the description is malformed.
        """
        if "roads" not in data:
            raise ValueError("Road network data must contain a 'roads' list.")
        roads = [
            _parse_road(road_data, default_lane_width) for road_data in data["roads"]
        ]
        return cls(roads)

    @classmethod
    def from_json(
        cls, path: Union[str, Path], default_lane_width: float = 3.5
    ) -> "LaneGraphNetwork":
        """Load a network from a JSON file in the ``from_dict`` layout.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file content is malformed.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Road network file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data, default_lane_width=default_lane_width)

    # ------------------------------------------------------------------
    # Network properties
    # ------------------------------------------------------------------

    @property
    def roads(self) -> Mapping[int, Road]:
        return self._roads

    @property
    def lane_graph(self) -> nx.DiGraph:
        """Frozen lane connectivity graph."""
        return self._graph

    @property
    def num_lanes(self) -> int:
        return self._graph.number_of_nodes()

    def get_waypoint(self, road_id: int, lane_id: int, s: float) -> Optional[Waypoint]:
        """Waypoint at an exact lane position, or None if it does not exist."""
        road = self._roads.get(road_id)
        if road is None or lane_id == 0 or lane_id not in road.lanes:
            return None
        if not 0.0 <= s <= road.length:
            return None
        return Waypoint(self, WaypointLocation(road_id, lane_id, float(s)))

    def generate_waypoints(
        self, distance: float, lane_type: LaneType = LaneType.DRIVING
    ) -> List[Waypoint]:
        """Sample every lane of the given type every ``distance`` meters.

        Samples start at the beginning of each lane in its direction of
        travel.

        Args:
            distance: Sampling step in meters.
            lane_type: Lane types to include.

        Returns:
            Waypoints grouped by lane, in lane declaration order.

        Raises:
            ValueError: If ``distance`` is not positive.
        """
        if distance <= 0:
            raise ValueError(f"Sampling distance must be positive, got {distance}")

        waypoints = []
        for road_id, lane_id in self._graph.nodes:
            road = self._roads[road_id]
            if not road.lanes[lane_id].lane_type & lane_type:
                continue
            for u in np.arange(0.0, road.length, distance):
                location = self._location_at((road_id, lane_id), float(u))
                waypoints.append(Waypoint(self, location))
        return waypoints

    def get_topology(self) -> List[Tuple[Waypoint, Waypoint]]:
        """Connections between driving lanes.

        Returns:
            One ``(start of lane, start of successor lane)`` pair per edge
            of the lane graph whose ends are both driving lanes.
        """
        topology = []
        for a, b in self._graph.edges:
            if not (self._is_driving(a) and self._is_driving(b)):
                continue
            topology.append(
                (
                    Waypoint(self, self._location_at(a, 0.0)),
                    Waypoint(self, self._location_at(b, 0.0)),
                )
            )
        return topology

    # ------------------------------------------------------------------
    # Waypoint queries
    # ------------------------------------------------------------------

    def compute_transform(self, location: WaypointLocation) -> Transform:
        road = self._roads[location.road_id]
        line = road.reference_line
        scale = polyline_length(line) / road.length
        point, heading = interpolate_polyline(line, location.s * scale)

        offset = self._lane_center_offset(road, location.lane_id)
        heading_rad = np.radians(heading)
        normal = np.array([-np.sin(heading_rad), np.cos(heading_rad)])
        x, y = point[:2] + offset * normal

        yaw = heading if location.lane_id < 0 else heading + 180.0
        return Transform(
            location=Location(float(x), float(y), float(point[2])),
            rotation=Rotation(yaw=normalize_angle(yaw)),
        )

    def get_mark_record(
        self, location: WaypointLocation
    ) -> Tuple[Optional[MarkRecord], Optional[MarkRecord]]:
        road = self._roads[location.road_id]
        return (
            self._mark_at(road, location.lane_id, location.s),
            self._mark_at(road, inner_lane_id(location.lane_id), location.s),
        )

    def get_junction_id(self, road_id: int) -> int:
        return self._roads[road_id].junction_id

    def is_junction(self, road_id: int) -> bool:
        return self._roads[road_id].junction_id != NO_JUNCTION

    def get_lane_width(self, location: WaypointLocation) -> float:
        return self._roads[location.road_id].lanes[location.lane_id].width

    def get_lane_type(self, location: WaypointLocation) -> LaneType:
        return self._roads[location.road_id].lanes[location.lane_id].lane_type

    def get_next(
        self, location: WaypointLocation, distance: float
    ) -> List[WaypointLocation]:
        """Locations ``distance`` meters ahead, one per reachable branch.

        Raises:
            ValueError: If ``distance`` is negative.
        """
        if distance < 0:
            raise ValueError(f"Distance must be non-negative, got {distance}")
        return self._advance(location.lane_key, self._lane_position(location) + distance)

    def get_previous(
        self, location: WaypointLocation, distance: float
    ) -> List[WaypointLocation]:
        """Locations ``distance`` meters behind, one per reachable branch.

        Raises:
            ValueError: If ``distance`` is negative.
        """
        if distance < 0:
            raise ValueError(f"Distance must be non-negative, got {distance}")
        return self._retreat(location.lane_key, self._lane_position(location) - distance)

    def get_right(self, location: WaypointLocation) -> Optional[WaypointLocation]:
        lane_id = location.lane_id
        right_id = lane_id - 1 if lane_id < 0 else lane_id + 1
        return self._neighbour(location, right_id)

    def get_left(self, location: WaypointLocation) -> Optional[WaypointLocation]:
        lane_id = location.lane_id
        if abs(lane_id) == 1:
            # Crosses the centre line into the opposite direction.
            left_id = -lane_id
        else:
            left_id = lane_id + 1 if lane_id < 0 else lane_id - 1
        return self._neighbour(location, left_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build_connectivity_graph(self) -> nx.DiGraph:
        """Build the directed lane graph from successor/predecessor links.

        Links to lanes that do not exist are skipped with a warning.
        """
        G = nx.DiGraph()

        for road in self._roads.values():
            for lane_id, lane in road.lanes.items():
                if lane_id != 0:
                    G.add_node((road.road_id, lane_id))

        for road in self._roads.values():
            for lane_id, lane in road.lanes.items():
                if lane_id == 0:
                    continue
                key = (road.road_id, lane_id)
                for suc in lane.successors:
                    self._add_link(G, key, suc)
                for pred in lane.predecessors:
                    self._add_link(G, pred, key)

        return G

    @staticmethod
    def _add_link(G: nx.DiGraph, source: LaneKey, target: LaneKey) -> None:
        missing = [key for key in (source, target) if key not in G]
        if missing:
            logger.warning(
                "Skipping lane link %s -> %s: unknown lane %s", source, target, missing[0]
            )
            return
        G.add_edge(source, target)

    def _is_driving(self, key: LaneKey) -> bool:
        road_id, lane_id = key
        return bool(self._roads[road_id].lanes[lane_id].lane_type & LaneType.DRIVING)

    def _lane_position(self, location: WaypointLocation) -> float:
        """Distance from the start of the lane in its direction of travel."""
        if location.lane_id < 0:
            return location.s
        return self._roads[location.road_id].length - location.s

    def _location_at(self, key: LaneKey, u: float) -> WaypointLocation:
        road_id, lane_id = key
        s = u if lane_id < 0 else self._roads[road_id].length - u
        return WaypointLocation(road_id, lane_id, s)

    def _advance(self, key: LaneKey, u: float) -> List[WaypointLocation]:
        # A lane covers [0, length); its end is the start of its successors.
        result = []
        stack = [(key, u)]
        while stack:
            key, u = stack.pop()
            length = self._roads[key[0]].length
            if u < length:
                result.append(self._location_at(key, u))
                continue
            # Reversed so branches pop in edge insertion order.
            successors = list(self._graph.successors(key))
            stack.extend((suc, u - length) for suc in reversed(successors))
        return result

    def _retreat(self, key: LaneKey, u: float) -> List[WaypointLocation]:
        result = []
        stack = [(key, u)]
        while stack:
            key, u = stack.pop()
            if u >= 0.0:
                result.append(self._location_at(key, u))
                continue
            predecessors = list(self._graph.predecessors(key))
            stack.extend(
                (pred, self._roads[pred[0]].length + u)
                for pred in reversed(predecessors)
            )
        return result

    def _neighbour(
        self, location: WaypointLocation, lane_id: int
    ) -> Optional[WaypointLocation]:
        if lane_id == 0 or lane_id not in self._roads[location.road_id].lanes:
            return None
        return WaypointLocation(location.road_id, lane_id, location.s)

    @staticmethod
    def _mark_at(road: Road, lane_id: int, s: float) -> Optional[MarkRecord]:
        lane = road.lanes.get(lane_id)
        if lane is None:
            return None
        return lane.mark_at(s)

    @staticmethod
    def _lane_center_offset(road: Road, lane_id: int) -> float:
        """Signed lateral offset of a lane centre from the reference line.

        Positive offsets are to the left of the reference direction.
        """
        side = 1.0 if lane_id > 0 else -1.0
        inner = sum(
            lane.width
            for other_id, lane in road.lanes.items()
            if other_id * side > 0 and abs(other_id) < abs(lane_id)
        )
        return side * (inner + road.lanes[lane_id].width / 2.0)


def _parse_road(data: Dict[str, Any], default_lane_width: float) -> Road:
    road_id = int(data["id"])

    if "reference_line" in data:
        line = np.asarray(data["reference_line"], dtype=np.float64)
        if line.ndim != 2 or line.shape[0] < 2 or line.shape[1] not in (2, 3):
            raise ValueError(
                f"Road {road_id}: reference_line must be an (N, 2) or (N, 3) "
                f"array with N >= 2, got shape {line.shape}"
            )
        length = float(data.get("length", polyline_length(line)))
    else:
        if "length" not in data:
            raise ValueError(f"Road {road_id}: needs a length or a reference_line")
        length = float(data["length"])
        line = np.array([[0.0, 0.0], [length, 0.0]])

    if length <= 0:
        raise ValueError(f"Road {road_id}: length must be positive, got {length}")
    line.setflags(write=False)

    lanes = {}
    for lane_data in data.get("lanes", []):
        lane = _parse_lane(lane_data, default_lane_width)
        lanes[lane.lane_id] = lane

    return Road(
        road_id=road_id,
        length=length,
        reference_line=line,
        lanes=MappingProxyType(lanes),
        junction_id=int(data.get("junction_id", NO_JUNCTION)),
    )


def _parse_lane(data: Dict[str, Any], default_lane_width: float) -> Lane:
    lane_id = int(data["id"])
    marks = sorted(
        (_parse_mark(m) for m in data.get("marks", [])), key=lambda m: m.s_offset
    )
    return Lane(
        lane_id=lane_id,
        lane_type=LaneType.from_name(data.get("type", "none" if lane_id == 0 else "driving")),
        width=float(data.get("width", 0.0 if lane_id == 0 else default_lane_width)),
        marks=tuple(marks),
        successors=tuple((int(r), int(l)) for r, l in data.get("successors", [])),
        predecessors=tuple((int(r), int(l)) for r, l in data.get("predecessors", [])),
    )


def _parse_mark(data: Dict[str, Any]) -> MarkRecord:
    try:
        return MarkRecord(
            s_offset=float(data.get("s_offset", 0.0)),
            type=LaneMarkingType(data.get("type", "none")),
            color=LaneMarkingColor(data.get("color", "standard")),
            lane_change=LaneChange.from_name(data.get("lane_change", "both")),
            width=float(data.get("width", 0.0)),
        )
    except ValueError as e:
        raise ValueError(f"Invalid lane mark {data!r}: {e}") from e
