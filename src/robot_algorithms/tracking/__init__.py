"""
tracking - 路径跟踪控制
"""

from .pure_pursuit import (
    TrackingError,
    TrackingFailure,
    lookahead_curvature,
    path_point_index,
    ray_circle_intersection,
)

__all__ = [
    "TrackingError",
    "TrackingFailure",
    "lookahead_curvature",
    "path_point_index",
    "ray_circle_intersection",
]
