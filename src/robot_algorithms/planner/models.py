"""
planner/models.py - 规划器参数配置

定义各规划器使用的配置数据类: GraphSearchConfig、RRTConfig、SmootherConfig。
所有参数都以显式配置值传入规划器, 不读取任何全局/环境状态。
"""

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional


class _ConfigMixin:
    """JSON / dict 序列化公共实现"""

    def to_dict(self) -> Dict[str, Any]:
        """转为字典"""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_json(self, filepath) -> str:
        """保存到 JSON 文件

        Returns:
            保存的文件路径字符串
        """
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        return str(filepath)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """从字典创建（忽略未知字段，缺失字段用默认值）"""
        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)

    @classmethod
    def from_json(cls, filepath):
        """从 JSON 文件加载"""
        with open(Path(filepath), 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_dict(data)


@dataclass
class GraphSearchConfig(_ConfigMixin):
    """A* / Dijkstra 参数配置

    Attributes:
        heuristic_weight: 启发项权重 w (priority = g + w·h); w > 1 时
            为加权 A*, 结果不再保证最短
        max_expansions: 最大扩展节点数 (None = 不限), 超出返回 BUDGET_EXHAUSTED
        node_capacity: 节点存储容量 (None = 动态增长), 超出返回 CAPACITY_EXCEEDED
        debug: 开启契约检查 (负代价直接抛出 ConfigurationSpaceViolation)
    """
    heuristic_weight: float = 1.0
    max_expansions: Optional[int] = None
    node_capacity: Optional[int] = None
    debug: bool = False

    def __post_init__(self) -> None:
        if self.heuristic_weight < 0:
            raise ValueError(
                f"heuristic_weight 必须非负, got {self.heuristic_weight}")
        if self.max_expansions is not None and self.max_expansions <= 0:
            raise ValueError(
                f"max_expansions 必须为正, got {self.max_expansions}")
        if self.node_capacity is not None and self.node_capacity <= 0:
            raise ValueError(
                f"node_capacity 必须为正, got {self.node_capacity}")


@dataclass
class RRTConfig(_ConfigMixin):
    """采样树规划器参数配置

    Attributes:
        algorithm: 'rrt' | 'rrt_star'
        max_iterations: 采样迭代预算
        step_size: steer 单步最大长度
        goal_bias: 直接采样目标点的概率 [0, 1]
        goal_tolerance: 新节点距目标小于该值即视为到达
        min_progress: steer 结果与最近节点距离低于该值视为无进展
        seed: 随机种子 (plan() 未传入 rng 时使用)
        node_capacity: 树节点初始容量
        growable: 容量满时是否倍增 (False = 固定容量, 满则 CAPACITY_EXCEEDED)
        nn_index: 最近邻索引 'linear' | 'kdtree'
        kdtree_rebuild_every: kdtree 索引每插入多少节点重建一次
        rewire_factor: RRT* 邻域半径上限 = rewire_factor × step_size
    """
    algorithm: str = 'rrt'
    max_iterations: int = 5000
    step_size: float = 0.5
    goal_bias: float = 0.05
    goal_tolerance: float = 0.3
    min_progress: float = 1e-9
    seed: int = 42
    node_capacity: int = 1024
    growable: bool = True
    nn_index: str = 'linear'
    kdtree_rebuild_every: int = 64
    rewire_factor: float = 2.0

    def __post_init__(self) -> None:
        if self.algorithm not in ('rrt', 'rrt_star'):
            raise ValueError(f"Unknown algorithm: {self.algorithm}. "
                             f"Choose from ['rrt', 'rrt_star']")
        if self.nn_index not in ('linear', 'kdtree'):
            raise ValueError(f"Unknown nn_index: {self.nn_index}. "
                             f"Choose from ['linear', 'kdtree']")
        if self.max_iterations <= 0:
            raise ValueError(
                f"max_iterations 必须为正, got {self.max_iterations}")
        if self.step_size <= 0:
            raise ValueError(f"step_size 必须为正, got {self.step_size}")
        if not 0.0 <= self.goal_bias <= 1.0:
            raise ValueError(f"goal_bias 必须在 [0, 1], got {self.goal_bias}")
        if self.goal_tolerance < 0:
            raise ValueError(
                f"goal_tolerance 必须非负, got {self.goal_tolerance}")
        if self.node_capacity <= 0:
            raise ValueError(
                f"node_capacity 必须为正, got {self.node_capacity}")
        if self.kdtree_rebuild_every <= 0:
            raise ValueError(
                f"kdtree_rebuild_every 必须为正, got {self.kdtree_rebuild_every}")


@dataclass
class SmootherConfig(_ConfigMixin):
    """路径后处理参数配置

    Attributes:
        resample_resolution: 等间距重采样的点间距
        smooth_window: 移动平均窗口
        smooth_iters: 移动平均迭代次数
    """
    resample_resolution: float = 0.1
    smooth_window: int = 3
    smooth_iters: int = 5

    def __post_init__(self) -> None:
        if self.resample_resolution <= 0:
            raise ValueError(
                f"resample_resolution 必须为正, got {self.resample_resolution}")
        if self.smooth_window < 1:
            raise ValueError(
                f"smooth_window 必须 >= 1, got {self.smooth_window}")
