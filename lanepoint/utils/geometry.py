"""
Geometric Utility Functions
=============================

Polyline measurements and pose types used by the lane graph to place
waypoints in the world.
"""

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class Location:
    """A point in world coordinates (meters)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def distance(self, other: "Location") -> float:
        return float(
            np.linalg.norm(
                np.array([self.x - other.x, self.y - other.y, self.z - other.z])
            )
        )


@dataclass(frozen=True)
class Rotation:
    """Orientation in degrees."""

    pitch: float = 0.0
    yaw: float = 0.0
    roll: float = 0.0


@dataclass(frozen=True)
class Transform:
    """World pose of a waypoint: location plus rotation."""

    location: Location = field(default_factory=Location)
    rotation: Rotation = field(default_factory=Rotation)

    def forward_vector(self) -> np.ndarray:
        """Unit vector pointing along the yaw of this transform.

        Returns:
            np.ndarray of shape (2,).
        """
        yaw = np.radians(self.rotation.yaw)
        return np.array([np.cos(yaw), np.sin(yaw)])


def normalize_angle(angle_deg: float) -> float:
    """Normalize angle to [-180, 180] degrees.

    Args:
        angle_deg: Angle in degrees (any range).

    Returns:
        Equivalent angle in [-180, 180].
    """
    angle = angle_deg % 360.0
    if angle > 180.0:
        angle -= 360.0
    return angle


def polyline_length(polyline: np.ndarray) -> float:
    """Compute total arc length of a polyline.

    Args:
        polyline: (N, 2) or (N, 3) array of points.

    Returns:
        Total length. Returns 0.0 if fewer than 2 points.
    """
    if len(polyline) < 2:
        return 0.0
    diffs = np.diff(polyline[:, :2], axis=0)
    return float(np.sum(np.sqrt(np.sum(diffs**2, axis=1))))


def cumulative_lengths(polyline: np.ndarray) -> np.ndarray:
    """Arc length at each vertex of a polyline, starting at 0.

    Args:
        polyline: (N, 2) or (N, 3) array of points.

    Returns:
        (N,) array of non-decreasing arc lengths.
    """
    if len(polyline) < 2:
        return np.zeros(len(polyline))
    diffs = np.diff(polyline[:, :2], axis=0)
    seg = np.sqrt(np.sum(diffs**2, axis=1))
    return np.concatenate([[0.0], np.cumsum(seg)])


def interpolate_polyline(
    polyline: np.ndarray, distance: float
) -> Tuple[np.ndarray, float]:
    """Point and heading at a given arc length along a polyline.

    The distance is clamped to the polyline's extent. Heading is taken
    from the segment containing the point.

    Args:
        polyline: (N, 2) or (N, 3) array of points, N >= 2.
        distance: Arc length from the first vertex.

    Returns:
        Tuple of (point with 3 coordinates, heading in degrees).
    """
    points = polyline
    if points.shape[1] == 2:
        points = np.hstack([points, np.zeros((len(points), 1))])

    arc = cumulative_lengths(points)
    distance = float(np.clip(distance, 0.0, arc[-1]))

    idx = int(np.searchsorted(arc, distance, side="right")) - 1
    idx = min(max(idx, 0), len(points) - 2)

    seg_len = arc[idx + 1] - arc[idx]
    ratio = (distance - arc[idx]) / seg_len if seg_len > 1e-10 else 0.0
    start, end = points[idx], points[idx + 1]
    point = start + ratio * (end - start)

    heading = np.degrees(np.arctan2(end[1] - start[1], end[0] - start[0]))
    return point, float(heading)
