"""
space/collision.py - 碰撞检测模块

C-space 中的点/线段碰撞检测：
- 单点碰撞检测：越界或落入任一障碍物
- 批量碰撞检测：(N, ndim) 一次向量化判断
- 线段碰撞检测：等间隔采样逐点检查 (两端点包含在内)

线段检测的分辨率决定了正确性与速度的折中: 宽度小于分辨率的障碍物
可能被"跳过"。
"""

from typing import Optional, Sequence, Tuple

import numpy as np

from .scene import Scene


class CollisionChecker:
    """碰撞检测器

    Args:
        scene: 障碍物场景 (None 视为空场景)
        bounds: 每维 (lo, hi) 边界; 给出时越界点视为碰撞

    计数器 ``n_collision_checks`` 在查询时自增, 因此多个线程共享同一个
    checker 时计数不精确; 检测结果本身不受影响。

    Example:
        >>> checker = CollisionChecker(scene, bounds=[(0, 1), (0, 1)])
        >>> is_collide = checker.check_config_collision(q)
        >>> seg_collide = checker.check_segment_collision(q0, q1, 0.05)
    """

    def __init__(
        self,
        scene: Optional[Scene] = None,
        bounds: Optional[Sequence[Tuple[float, float]]] = None,
    ) -> None:
        self.scene = scene if scene is not None else Scene()
        if bounds is not None:
            b = np.asarray(bounds, dtype=np.float64)
            self._lows, self._highs = b[:, 0], b[:, 1]
        else:
            self._lows = self._highs = None
        self._n_collision_checks = 0

    @property
    def n_collision_checks(self) -> int:
        """累计碰撞检测调用次数"""
        return self._n_collision_checks

    def reset_counter(self) -> None:
        self._n_collision_checks = 0

    def check_config_in_limits(self, q: np.ndarray) -> bool:
        """检查配置是否在边界内"""
        if self._lows is None:
            return True
        return bool(np.all(q >= self._lows) and np.all(q <= self._highs))

    def check_config_collision(self, q: np.ndarray) -> bool:
        """单点碰撞检测

        Returns:
            True = 碰撞 (或越界)
        """
        self._n_collision_checks += 1
        q = np.asarray(q, dtype=np.float64)
        if not self.check_config_in_limits(q):
            return True
        for obs in self.scene:
            if obs.contains_point(q):
                return True
        return False

    def check_config_collision_batch(self, qs: np.ndarray) -> np.ndarray:
        """批量单点碰撞检测

        Args:
            qs: (N, ndim) 配置数组

        Returns:
            (N,) bool, True = 碰撞
        """
        qs = np.atleast_2d(np.asarray(qs, dtype=np.float64))
        self._n_collision_checks += qs.shape[0]
        hit = np.zeros(qs.shape[0], dtype=bool)
        if self._lows is not None:
            hit |= np.any((qs < self._lows) | (qs > self._highs), axis=1)
        for obs in self.scene:
            hit |= obs.contains_batch(qs)
        return hit

    def check_segment_collision(
        self,
        q_start: np.ndarray,
        q_end: np.ndarray,
        resolution: Optional[float] = None,
    ) -> bool:
        """线段碰撞检测

        在两个配置之间等间隔采样 (间隔不超过 resolution), 批量检测。

        Args:
            q_start: 起始配置
            q_end: 终止配置
            resolution: 采样间隔（C-space L2 距离），默认 0.05

        Returns:
            True = 存在碰撞点, False = 所有采样点无碰撞
        """
        if resolution is None:
            resolution = 0.05

        q_start = np.asarray(q_start, dtype=np.float64)
        q_end = np.asarray(q_end, dtype=np.float64)
        dist = float(np.linalg.norm(q_end - q_start))
        if dist < 1e-10:
            return self.check_config_collision(q_start)

        n_steps = max(2, int(np.ceil(dist / resolution)) + 1)
        ts = np.linspace(0.0, 1.0, n_steps)[:, None]
        qs = q_start + ts * (q_end - q_start)
        return bool(np.any(self.check_config_collision_batch(qs)))
