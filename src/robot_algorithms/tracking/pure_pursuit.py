"""
tracking/pure_pursuit.py - 纯追踪 (Pure Pursuit) 路径跟踪

给定折线路径与机器人位姿, 求跟随路径所需的转向曲率:

    1. 在前视圆 (半径 lookahead) 内找路径上最靠后的点 c_i
    2. 从 c_i 沿路径方向发射射线, 与前视圆求交得目标点
    3. 目标点变换到机器人局部坐标系 (x 轴为朝向)
    4. curvature = -2 · y_local / lookahead²

返回值为 1/半径, 负值表示左转。
"""

import enum
import logging
import math
from typing import Sequence, Tuple

import numpy as np

from ..curves.pose import Pose
from ..planner.errors import RobotAlgorithmsError

logger = logging.getLogger(__name__)


class TrackingFailure(str, enum.Enum):
    ROBOT_TOO_FAR = "robot_too_far"
    WRONG_ORIENTATION = "wrong_orientation"
    INVALID_PATH = "invalid_path"
    INVALID_INPUT = "invalid_input"
    INTERNAL = "internal"


class TrackingError(RobotAlgorithmsError):
    """纯追踪失败, ``failure`` 给出原因"""

    def __init__(self, failure: TrackingFailure, message: str = ""):
        self.failure = failure
        super().__init__(message or f"tracking failed: {failure.value}")


def _as_points(points: Sequence[Sequence[float]]) -> np.ndarray:
    arr = np.asarray(points, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[0] < 2 or arr.shape[1] != 2:
        raise TrackingError(TrackingFailure.INVALID_PATH,
                            "path must contain at least two 2-D points")
    return arr


def path_point_index(points: np.ndarray, position: np.ndarray,
                     lookahead_sq: float) -> int:
    """前视圆内下标最大的路径点

    Raises:
        TrackingError(ROBOT_TOO_FAR): 前视圆内没有任何路径点, 路径应重新规划
    """
    d_sq = np.sum((points - position) ** 2, axis=1)
    inside = np.nonzero(d_sq < lookahead_sq)[0]
    if inside.size == 0:
        raise TrackingError(TrackingFailure.ROBOT_TOO_FAR)
    return int(inside[-1])


def ray_circle_intersection(
    seg_start: np.ndarray,
    direction: np.ndarray,
    center: np.ndarray,
    radius_sq: float,
) -> Tuple[float, np.ndarray]:
    """从圆内一点出发的射线与圆的唯一交点

    Returns:
        (t, point), point = seg_start + t · direction, t > 0
    """
    oc = seg_start - center
    a = float(direction @ direction)
    b = 2.0 * float(oc @ direction)
    c = float(oc @ oc) - radius_sq

    disc = b * b - 4.0 * a * c
    if disc < 0.0:
        logger.error("纯追踪: 射线与前视圆无交点")
        raise TrackingError(TrackingFailure.INTERNAL, "no intersection")

    disc = math.sqrt(disc)
    t0, t1 = sorted(((-b - disc) / (2.0 * a), (-b + disc) / (2.0 * a)))
    # 起点在圆内时必有 t0 <= 0 < t1
    if t0 > 0.0:
        logger.error("纯追踪: 射线起点不在前视圆内")
        raise TrackingError(TrackingFailure.INTERNAL, "ray starts outside circle")
    if t1 <= 0.0:
        logger.error("纯追踪: 没有正向交点")
        raise TrackingError(TrackingFailure.INTERNAL, "no forward intersection")
    return t1, seg_start + t1 * direction


def lookahead_curvature(points: Sequence[Sequence[float]], pose: Pose,
                        lookahead: float) -> float:
    """跟随 points 所需的曲率 (1/半径, 负值为左转)

    Args:
        points: 路径折线 (N, 2), N >= 2
        pose: 机器人位姿
        lookahead: 前视距离 (> 0)

    Raises:
        TrackingError: 见 TrackingFailure
    """
    if not lookahead > 0.0:
        raise TrackingError(TrackingFailure.INVALID_INPUT,
                            f"lookahead must be positive, got {lookahead}")
    pts = _as_points(points)
    l_sq = lookahead * lookahead
    position = pose.position

    c_i = path_point_index(pts, position, l_sq)
    if c_i + 1 == len(pts):
        direction = pts[c_i] - pts[c_i - 1]
    else:
        direction = pts[c_i + 1] - pts[c_i]
    if not np.any(direction):
        raise TrackingError(TrackingFailure.INVALID_PATH,
                            f"zero-length path segment at index {c_i}")

    _, target = ray_circle_intersection(pts[c_i], direction, position, l_sq)

    local = Pose(*(target - position)).rotated(-pose.angle)
    if local.x < 0.0:
        logger.warning("纯追踪: 机器人朝向与路径方向相反")
        raise TrackingError(TrackingFailure.WRONG_ORIENTATION)

    curvature = 2.0 * -local.y / l_sq
    logger.debug("纯追踪: 目标点 %s, 曲率 %.4f", target, curvature)
    return curvature
