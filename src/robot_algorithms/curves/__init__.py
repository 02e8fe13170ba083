"""
curves - 平面曲线: Dubins / Reeds–Shepp 最短路径, 五次多项式轨迹
"""

from .pose import Pose
from .dubins import (
    DubinsPath,
    PathNotFoundError,
    Segment,
    SegmentKind,
    advance,
    mod2pi,
)
from .reeds_shepp import ReedsSheppPath, reflect, timeflip, wrap_angle
from .quintic import (
    InvalidDurationError,
    InvalidTimeStepError,
    NoValidPolynomialError,
    OutOfRangeError,
    QuinticError,
    QuinticPolynomial,
    quintic_coefficients,
)

__all__ = [
    "Pose",
    "DubinsPath",
    "PathNotFoundError",
    "Segment",
    "SegmentKind",
    "mod2pi",
    "advance",
    "ReedsSheppPath",
    "timeflip",
    "reflect",
    "wrap_angle",
    "QuinticPolynomial",
    "QuinticError",
    "InvalidDurationError",
    "OutOfRangeError",
    "InvalidTimeStepError",
    "NoValidPolynomialError",
    "quintic_coefficients",
]
