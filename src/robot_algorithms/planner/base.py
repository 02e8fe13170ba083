"""
planner/base.py — 统一规划器接口

BasePlanner ABC  ：所有规划器的统一接口
PlanningResult   ：所有规划器的统一结果格式
FailureReason    ：失败原因分类
"""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import PlanningError


class FailureReason(str, enum.Enum):
    """规划失败原因.

    NO_PATH_EXISTS 只由完备的图搜索给出 (前沿耗尽 = 确实无解);
    BUDGET_EXHAUSTED 表示在给定预算内没找到, 不代表无解.
    """

    INVALID_START_OR_GOAL = "invalid_start_or_goal"
    NO_PATH_EXISTS = "no_path_exists"
    BUDGET_EXHAUSTED = "budget_exhausted"
    CAPACITY_EXCEEDED = "capacity_exceeded"


# ═══════════════════════════════════════════════════════════════════════════
# PlanningResult
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class PlanningResult:
    """所有规划方法的统一结果格式."""

    success: bool
    path: Optional[List[Any]]        # start → goal (含两端), None if failed
    cost: float                      # 路径代价 (边代价之和)
    planning_time: float = 0.0       # wall-clock seconds
    nodes_explored: int = 0          # 扩展节点数 / 树节点数
    collision_checks: int = 0
    reason: Optional[FailureReason] = None
    phase_times: Dict[str, float] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    tree: Any = None                 # TreeSnapshot (采样树规划器)

    # ── convenience ──────────────────────────────────────────────

    @property
    def n_waypoints(self) -> int:
        if self.path is None:
            return 0
        return len(self.path)

    @property
    def n_edges(self) -> int:
        return max(0, self.n_waypoints - 1)

    @property
    def degenerate(self) -> bool:
        """起点等于终点时返回的单点路径."""
        return bool(self.metadata.get("degenerate", False))

    def unwrap(self) -> List[Any]:
        """返回路径; 失败时抛出 PlanningError."""
        if not self.success:
            raise PlanningError(self.reason)
        return self.path

    def to_dict(self) -> dict:
        d = {
            "success": self.success,
            "cost": self.cost,
            "planning_time": self.planning_time,
            "nodes_explored": self.nodes_explored,
            "collision_checks": self.collision_checks,
            "n_waypoints": self.n_waypoints,
            "reason": self.reason.value if self.reason else None,
            "phase_times": dict(self.phase_times),
        }
        d.update(self.metadata)
        return d

    @staticmethod
    def failure(reason: FailureReason,
                planning_time: float = 0.0,
                nodes_explored: int = 0,
                collision_checks: int = 0,
                **metadata) -> "PlanningResult":
        """快捷构造失败结果."""
        return PlanningResult(
            success=False, path=None, cost=float("inf"),
            planning_time=planning_time,
            nodes_explored=nodes_explored,
            collision_checks=collision_checks,
            reason=reason,
            metadata=metadata,
        )


# ═══════════════════════════════════════════════════════════════════════════
# BasePlanner ABC
# ═══════════════════════════════════════════════════════════════════════════

class BasePlanner(abc.ABC):
    """所有规划器的统一接口.

    规划器只保存不可变配置, 每次 ``plan()`` 自建前沿/节点存储,
    因此同一实例可以被顺序复用::

        planner = GraphSearchPlanner(heuristic=manhattan)
        r1 = planner.plan(grid, (0, 0), (4, 4))
        r2 = planner.plan(grid, (1, 0), (3, 2))
    """

    @abc.abstractmethod
    def plan(self, space, start, goal) -> PlanningResult:
        """执行规划.

        Args:
            space: 配置空间 (规划期间只读借用)
            start: 起点
            goal:  终点

        Returns:
            PlanningResult 统一结果 (失败也以返回值表达)
        """

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """该规划器的名称 (用于日志/图表)."""
