"""
space/continuous.py - 连续配置空间

BoxSpace: 轴对齐边界内的 n 维连续 C-space, 障碍物由 Scene 给出。
提供采样树规划器所需的 sample / nearest / steer / is_valid_segment。

``resolution`` 是线段离散碰撞检测的采样间隔, 也是 steer 沿线段前进时的
检查步长, 它是整个规划子系统中影响最大的参数: 过大可能穿过薄障碍,
过小则碰撞检测次数线性增长。
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from ..planner.metric import Metric, euclidean
from .collision import CollisionChecker
from .scene import Scene

logger = logging.getLogger(__name__)


class BoxSpace:
    """有界连续配置空间

    Args:
        bounds: 每维 (lo, hi)
        scene: 障碍物场景 (可选)
        resolution: 线段碰撞检测采样间隔
        metric: 距离度量 (最近邻查询与路径代价); steer 始终沿直线前进

    除碰撞计数器外所有查询只读, 可在规划调用间复用。

    Example:
        >>> space = BoxSpace([(0, 10), (0, 10)], scene, resolution=0.05)
        >>> q = space.sample(np.random.default_rng(0))
        >>> q_new = space.steer(q_near, q, max_step=0.5)
    """

    def __init__(
        self,
        bounds: Sequence[Tuple[float, float]],
        scene: Optional[Scene] = None,
        resolution: float = 0.05,
        metric: Metric = euclidean,
    ) -> None:
        b = np.asarray(bounds, dtype=np.float64)
        if b.ndim != 2 or b.shape[1] != 2:
            raise ValueError(f"bounds 必须是 (ndim, 2) 形状, got {b.shape}")
        if np.any(b[:, 0] >= b[:, 1]):
            raise ValueError("bounds 每维须满足 lo < hi")
        if resolution <= 0:
            raise ValueError(f"resolution 必须为正, got {resolution}")
        self.lows = b[:, 0].copy()
        self.highs = b[:, 1].copy()
        self.scene = scene if scene is not None else Scene()
        self.resolution = float(resolution)
        self.metric = metric
        self.checker = CollisionChecker(self.scene, bounds=b)

    @property
    def ndim(self) -> int:
        return self.lows.shape[0]

    @property
    def bounds(self) -> np.ndarray:
        return np.stack([self.lows, self.highs], axis=1)

    @property
    def n_collision_checks(self) -> int:
        return self.checker.n_collision_checks

    # ── 采样 / 度量 ─────────────────────────────────────────

    def sample(self, rng: np.random.Generator) -> np.ndarray:
        """在边界内均匀采样 (随机性完全来自调用方的 rng)"""
        return rng.uniform(self.lows, self.highs)

    def distance(self, q_a, q_b) -> float:
        return self.metric(q_a, q_b)

    def nearest(self, points: np.ndarray, target: np.ndarray) -> int:
        """points 中距 target 最近的行号 (并列时取最小行号)"""
        points = np.asarray(points, dtype=np.float64)
        if points.shape[0] == 0:
            raise ValueError("nearest() 需要至少一个点")
        if self.metric is euclidean:
            diffs = points - target
            return int(np.argmin(np.sum(diffs * diffs, axis=1)))
        dists = [self.metric(p, target) for p in points]
        return int(np.argmin(dists))

    # ── 有效性 ─────────────────────────────────────────────

    def is_valid(self, q) -> bool:
        q = np.asarray(q, dtype=np.float64)
        if q.shape != (self.ndim,):
            return False
        return not self.checker.check_config_collision(q)

    def is_valid_segment(self, q_a, q_b) -> bool:
        """按 resolution 离散检测线段 (含两端点)"""
        return not self.checker.check_segment_collision(
            np.asarray(q_a, dtype=np.float64),
            np.asarray(q_b, dtype=np.float64),
            self.resolution,
        )

    def steer(self, q_from, q_toward, max_step: float) -> Optional[np.ndarray]:
        """从 q_from 朝 q_toward 前进至多 max_step

        沿线段以 resolution 为间隔检查, 遇到障碍时停在最后一个有效点。

        Returns:
            新配置; 若连第一个检查步都被阻挡 (或 q_from 本身无效、
            两点重合) 则返回 None 表示无进展
        """
        q_from = np.asarray(q_from, dtype=np.float64)
        q_toward = np.asarray(q_toward, dtype=np.float64)
        diff = q_toward - q_from
        dist = float(np.linalg.norm(diff))
        if dist < 1e-12 or max_step <= 0:
            return None
        if self.checker.check_config_collision(q_from):
            return None

        length = min(max_step, dist)
        n_steps = max(1, int(np.ceil(length / self.resolution)))
        ts = (np.arange(1, n_steps + 1) / n_steps * (length / dist))[:, None]
        qs = q_from + ts * diff
        hit = self.checker.check_config_collision_batch(qs)
        if not np.any(hit):
            return qs[-1].copy()
        first = int(np.argmax(hit))
        if first == 0:
            return None
        logger.debug("steer 被阻挡, 在第 %d/%d 步停止", first, n_steps)
        return qs[first - 1].copy()

    def __repr__(self) -> str:
        return (f"BoxSpace(ndim={self.ndim}, obstacles={self.scene.n_obstacles}, "
                f"resolution={self.resolution})")
