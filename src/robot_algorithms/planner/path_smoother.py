"""
planner/path_smoother.py - 路径后处理

提供路径简化和平滑功能：
1. Shortcut：确定性贪心捷径, 每个锚点直连最远的可达后续路径点
2. 等间距重采样
3. 移动平均平滑 (逐点碰撞检查, 碰撞则保留原点)

直连判定:
    - 配置空间提供 ``is_valid_segment`` (连续空间) → 线段碰撞检测
    - 否则 (离散空间) → 目标点出现在 ``neighbors(anchor)`` 中, 且 shortcut
      只在直连边代价不超过被替换子路径代价之和时采用
"""

import logging
from typing import Any, Callable, List, Optional, Sequence

import numpy as np

from .metric import euclidean
from .models import SmootherConfig

logger = logging.getLogger(__name__)


class PathSmoother:
    """路径后处理器

    Args:
        space: 产生该路径的配置空间
        config: SmootherConfig (重采样 / 平滑参数)

    Example:
        >>> smoother = PathSmoother(grid)
        >>> short = smoother.shortcut(result.path)
        >>> smoother.shortcut(short) == short   # 幂等
        True
    """

    def __init__(self, space, config: Optional[SmootherConfig] = None) -> None:
        self.space = space
        self.config = config if config is not None else SmootherConfig()

    # ── 直连判定 ───────────────────────────────────────────

    def can_connect(self, a: Any, b: Any) -> bool:
        """a → b 是否可直接连接"""
        if hasattr(self.space, "is_valid_segment"):
            return bool(self.space.is_valid_segment(a, b))
        return any(_same_point(nb, b) for nb, _ in self.space.neighbors(a))

    def edge_cost(self, a: Any, b: Any) -> Optional[float]:
        """离散空间中 a → b 的边代价; 不相邻时返回 None"""
        for nb, cost in self.space.neighbors(a):
            if _same_point(nb, b):
                return float(cost)
        return None

    def _is_valid_path(self, path: Sequence[Any]) -> bool:
        return all(self.can_connect(path[i], path[i + 1])
                   for i in range(len(path) - 1))

    # ── Shortcut ───────────────────────────────────────────

    def shortcut(self, path: Sequence[Any]) -> List[Any]:
        """确定性贪心 shortcut

        从锚点 i 出发, 由远到近寻找第一个可直连的 j, 保留 path[j] 作为
        下一个锚点, 中间点全部移除。由于每个锚点都已直连到"最远可达点",
        对结果再次执行不会再移除任何点 (幂等)。

        离散空间中还要求直连边代价不超过被替换子路径的边代价之和,
        因此结果代价不会高于输入 (加权栅格上斜穿高代价格子会被拒绝)。

        两端点不变; 结果点数不多于输入。若某条保留的边无法通过验证
        (例如输入本身相邻点就不可直连), 则该段保持原样。

        Args:
            path: 原始路径点序列

        Returns:
            简化后的路径
        """
        path = list(path)
        if len(path) <= 2:
            return path

        discrete = not hasattr(self.space, "is_valid_segment")
        if discrete:
            # 原路径各边代价; 不相邻的边记为 inf
            seg_costs = []
            for a, b in zip(path[:-1], path[1:]):
                c = self.edge_cost(a, b)
                seg_costs.append(float('inf') if c is None else c)

        result = [path[0]]
        i = 0
        n = len(path)
        while i < n - 1:
            nxt = i + 1
            for j in range(n - 1, i + 1, -1):
                if discrete:
                    direct = self.edge_cost(path[i], path[j])
                    if direct is None or direct > sum(seg_costs[i:j]) + 1e-12:
                        continue
                elif not self.can_connect(path[i], path[j]):
                    continue
                nxt = j
                break
            # 原始相邻段: 无论能否验证都按原样保留
            result.append(path[nxt])
            i = nxt

        removed = n - len(result)
        if removed > 0:
            logger.info("Shortcut 优化: 路径从 %d → %d 个点", n, len(result))
        return result

    # ── 连续路径工具 ─────────────────────────────────────────

    def resample(
        self,
        path: Sequence[np.ndarray],
        resolution: Optional[float] = None,
    ) -> List[np.ndarray]:
        """等间距重采样

        在路径上以不超过 resolution 的步长重新插值, 保留原有路径点。

        Args:
            path: 输入路径 (连续配置)
            resolution: 目标点间距, 默认取 config.resample_resolution

        Returns:
            重采样后的路径
        """
        if resolution is None:
            resolution = self.config.resample_resolution
        if len(path) <= 1:
            return [np.array(p, dtype=np.float64) for p in path]

        resampled = [np.array(path[0], dtype=np.float64)]

        for i in range(1, len(path)):
            p0 = np.asarray(path[i - 1], dtype=np.float64)
            seg_vec = np.asarray(path[i], dtype=np.float64) - p0
            seg_len = float(np.linalg.norm(seg_vec))

            if seg_len < 1e-10:
                continue

            n_steps = max(1, int(np.ceil(seg_len / resolution)))
            for k in range(1, n_steps + 1):
                resampled.append(p0 + (k / n_steps) * seg_vec)

        return resampled

    def smooth_moving_average(
        self,
        path: Sequence[np.ndarray],
        window: Optional[int] = None,
        n_iters: Optional[int] = None,
    ) -> List[np.ndarray]:
        """移动平均平滑

        保持首尾点不变，对中间点做窗口平均。平均后的点若无效, 或与前一点
        的连线不可直连, 则保留原点。

        Args:
            path: 输入路径 (连续配置)
            window: 平滑窗口大小
            n_iters: 迭代次数

        Returns:
            平滑后的路径
        """
        window = self.config.smooth_window if window is None else window
        n_iters = self.config.smooth_iters if n_iters is None else n_iters
        if len(path) <= 2:
            return [np.array(p, dtype=np.float64) for p in path]

        path = [np.array(p, dtype=np.float64) for p in path]
        half_w = window // 2

        for _ in range(n_iters):
            new_path = [path[0].copy()]
            changed = False

            for i in range(1, len(path) - 1):
                lo = max(0, i - half_w)
                hi = min(len(path), i + half_w + 1)
                avg = np.mean(path[lo:hi], axis=0)

                if (self.space.is_valid(avg)
                        and self.can_connect(new_path[-1], avg)
                        and self.can_connect(avg, path[i + 1])):
                    if not np.allclose(avg, path[i]):
                        changed = True
                    new_path.append(avg)
                else:
                    new_path.append(path[i].copy())

            new_path.append(path[-1].copy())

            if not changed or not self._is_valid_path(new_path):
                break
            path = new_path

        return path


def _same_point(a: Any, b: Any) -> bool:
    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        return bool(np.array_equal(a, b))
    return a == b


def compute_path_length(path: Sequence[Any],
                        metric: Callable[[Any, Any], float] = euclidean) -> float:
    """计算路径总长度 (默认 L2)"""
    if len(path) < 2:
        return 0.0
    return float(sum(metric(path[i - 1], path[i])
                     for i in range(1, len(path))))
