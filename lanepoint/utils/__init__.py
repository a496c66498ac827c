"""
Utility functions for lanepoint.
"""

from lanepoint.utils.geometry import (
    Location,
    Rotation,
    Transform,
    cumulative_lengths,
    interpolate_polyline,
    normalize_angle,
    polyline_length,
)

__all__ = [
    "Location",
    "Rotation",
    "Transform",
    "cumulative_lengths",
    "interpolate_polyline",
    "normalize_angle",
    "polyline_length",
]
