"""
planner/metric.py - 距离与代价函数

纯函数, 无状态:
1. 距离度量: euclidean / manhattan / chebyshev / octile / zero
2. 代价组合: weighted / summed / terrain_cost
3. 代价检查: checked_cost (负代价 → debug 抛异常, 否则截断为 0)

契约 (文档化的前置条件, 库本身不强制):
    - distance(a, b) >= 0, distance(a, a) == 0, 对称
    - 作为 A* 启发函数时需满足三角不等式且不高估剩余代价 (admissible)
    - edge_cost(a, b) >= 0, 可以不同于 distance (如地形权重)
"""

import logging
import math
from typing import Callable, Sequence

import numpy as np

from .errors import ConfigurationSpaceViolation

logger = logging.getLogger(__name__)

Metric = Callable[[Sequence[float], Sequence[float]], float]

_SQRT2_MINUS_1 = math.sqrt(2.0) - 1.0


def _diff(a, b) -> np.ndarray:
    return np.abs(np.asarray(a, dtype=np.float64)
                  - np.asarray(b, dtype=np.float64))


def euclidean(a, b) -> float:
    """L2 距离"""
    return float(np.sqrt(np.sum(_diff(a, b) ** 2)))


def manhattan(a, b) -> float:
    """L1 距离 (4-连通单位代价网格的一致启发)"""
    return float(np.sum(_diff(a, b)))


def chebyshev(a, b) -> float:
    """L∞ 距离"""
    d = _diff(a, b)
    return float(np.max(d)) if d.size else 0.0


def octile(a, b) -> float:
    """8-连通网格距离: 对角步长 √2, 直行步长 1.

    只定义在二维点上.
    """
    d = _diff(a, b)
    if d.shape != (2,):
        raise ValueError(f"octile 只支持二维点, got shape {d.shape}")
    lo, hi = sorted(d.tolist())
    return float(hi + _SQRT2_MINUS_1 * lo)


def zero(a, b) -> float:
    """零启发, A* 退化为 Dijkstra"""
    return 0.0


# ==================== 组合子 ====================

def weighted(metric: Metric, weight: float) -> Metric:
    """把 metric 乘以非负权重.

    weight > 1 用于加权 A* 时不再保证最优.
    """
    if weight < 0:
        raise ValueError(f"weight 必须非负, got {weight}")

    def _weighted(a, b) -> float:
        return weight * metric(a, b)

    _weighted.__name__ = f"weighted_{getattr(metric, '__name__', 'metric')}"
    return _weighted


def summed(*metrics: Metric) -> Metric:
    """若干代价之和"""
    if not metrics:
        raise ValueError("summed() 至少需要一个 metric")

    def _summed(a, b) -> float:
        return float(sum(m(a, b) for m in metrics))

    return _summed


def terrain_cost(cost_map: np.ndarray, base: Metric = euclidean) -> Metric:
    """地形加权边代价: base(a, b) × 两端格子通行权重的均值.

    Args:
        cost_map: 各格子的通行权重 (>= 0), 按点坐标索引
        base: 基础几何距离
    """
    cost_map = np.asarray(cost_map, dtype=np.float64)
    if np.any(cost_map < 0):
        raise ValueError("cost_map 含负权重")

    def _terrain(a, b) -> float:
        w = 0.5 * (cost_map[tuple(a)] + cost_map[tuple(b)])
        return float(base(a, b) * w)

    return _terrain


# ==================== 代价检查 ====================

def checked_cost(cost: float, a=None, b=None, debug: bool = False) -> float:
    """检查边代价非负.

    负代价是调用方的编程错误: debug 模式下抛出
    ConfigurationSpaceViolation, 否则记录警告并截断为 0 继续.
    """
    if cost >= 0:
        return float(cost)
    if debug:
        raise ConfigurationSpaceViolation(
            f"edge {a!r} -> {b!r} has invalid cost {cost!r}")
    logger.warning("边 %r -> %r 代价为负 (%.6g), 截断为 0", a, b, cost)
    return 0.0
