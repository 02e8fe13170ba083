"""
space/base.py — 配置空间接口

规划器只依赖以下两种能力 (结构化类型, 不要求继承):

DiscreteSpace   : 图搜索规划器的底层 (网格 / 显式图)
ContinuousSpace : 采样树规划器的底层 (连续 C-space)

配置空间不持有任何规划状态, 在一次规划调用期间被只读借用, 可跨调用复用。
多线程并发规划时是否可共享取决于实现的查询方法是否可重入, 实现方需在
文档中说明。
"""

from __future__ import annotations

from typing import Hashable, Iterable, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np


@runtime_checkable
class DiscreteSpace(Protocol):
    """离散配置空间

    ``neighbors`` 必须是确定性的: 同一输入总是给出相同的邻居序列和顺序,
    因为顺序会影响前沿中的并列处理。
    """

    def is_valid(self, point: Hashable) -> bool:
        ...

    def neighbors(self, point: Hashable) -> Iterable[Tuple[Hashable, float]]:
        ...


@runtime_checkable
class ContinuousSpace(Protocol):
    """连续配置空间"""

    @property
    def ndim(self) -> int:
        ...

    def sample(self, rng: np.random.Generator) -> np.ndarray:
        ...

    def nearest(self, points: np.ndarray, target: np.ndarray) -> int:
        ...

    def steer(self, q_from: np.ndarray, q_toward: np.ndarray,
              max_step: float):
        ...

    def is_valid(self, q: np.ndarray) -> bool:
        ...

    def is_valid_segment(self, q_a: np.ndarray, q_b: np.ndarray) -> bool:
        ...

    def distance(self, q_a: Sequence[float], q_b: Sequence[float]) -> float:
        ...
