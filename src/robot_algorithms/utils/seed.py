"""
utils/seed.py — 随机种子管理

所有随机性都来自调用方显式给出的种子或 Generator, 不使用全局随机状态。
"""

from typing import Optional, Union

import numpy as np

SeedLike = Union[int, np.random.Generator]


def make_rng(seed: Optional[SeedLike]) -> np.random.Generator:
    """返回 numpy Generator.

    Args:
        seed: 整数种子, 或已有的 ``np.random.Generator`` (原样返回)

    Raises:
        ValueError: seed 为 None (必须显式给出种子以保证可复现)
    """
    if isinstance(seed, np.random.Generator):
        return seed
    if seed is None:
        raise ValueError("需要显式的随机种子或 np.random.Generator")
    return np.random.default_rng(int(seed))
