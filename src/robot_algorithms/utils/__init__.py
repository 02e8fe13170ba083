"""utils/ — 随机种子与计时工具"""

from .seed import make_rng
from .timing import Timer

__all__ = ["make_rng", "Timer"]
