"""
utils/timing.py — 阶段计时器

规划器用它把各阶段耗时写入 ``PlanningResult.phase_times``。
"""

import time
from contextlib import contextmanager
from typing import Dict


class Timer:
    """阶段计时器

    同名阶段多次进入时累加耗时, 并记录进入次数::

        timer = Timer()
        with timer.phase("search"):
            ...
        result.phase_times = timer.to_dict()   # {"search": s, "total": s}
    """

    def __init__(self) -> None:
        self.records: Dict[str, float] = {}
        self.counts: Dict[str, int] = {}

    @contextmanager
    def phase(self, name: str):
        t0 = time.perf_counter()
        try:
            yield
        finally:
            dt = time.perf_counter() - t0
            self.records[name] = self.records.get(name, 0.0) + dt
            self.counts[name] = self.counts.get(name, 0) + 1

    @property
    def total(self) -> float:
        return sum(self.records.values())

    def reset(self) -> None:
        self.records.clear()
        self.counts.clear()

    def to_dict(self) -> Dict[str, float]:
        """各阶段秒数, 另加 "total" 键"""
        out = dict(self.records)
        out["total"] = self.total
        return out

    def summary(self, unit: str = "ms") -> str:
        """按耗时降序的多行汇总, 含占比"""
        scale = 1e3 if unit == "ms" else 1.0
        total = self.total
        rows = sorted(self.records.items(), key=lambda kv: -kv[1])
        lines = [
            f"  {name:<16s} x{self.counts[name]:<4d} {sec * scale:9.2f} {unit}"
            f"  {100.0 * sec / total if total > 0 else 0.0:5.1f}%"
            for name, sec in rows
        ]
        lines.append(f"  {'total':<16s}       {total * scale:9.2f} {unit}")
        return "\n".join(lines)
