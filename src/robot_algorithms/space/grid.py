"""
space/grid.py - 占据栅格离散配置空间

点为格子索引 ``(row, col)``; 占据栅格中 True 表示障碍。
边代价 = 步长 (直行 1, 对角 √2) × 两端格子通行权重的均值。
"""

import math
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

Cell = Tuple[int, int]

# 固定的邻居顺序: N, E, S, W, 然后 NE, SE, SW, NW
_MOVES_4: Tuple[Cell, ...] = ((-1, 0), (0, 1), (1, 0), (0, -1))
_MOVES_DIAG: Tuple[Cell, ...] = ((-1, 1), (1, 1), (1, -1), (-1, -1))
_SQRT2 = math.sqrt(2.0)


class GridSpace:
    """二维占据栅格

    Args:
        occupancy: (H, W) 布尔数组, True = 障碍
        connectivity: 4 或 8 连通
        cost_map: (H, W) 非负通行权重 (可选, 默认全 1)
        allow_corner_cutting: 8 连通时是否允许贴着障碍角斜穿

    查询方法只读, 可在多个规划调用间共享。

    Example:
        >>> grid = GridSpace.from_strings([
        ...     "....",
        ...     ".##.",
        ...     "....",
        ... ])
        >>> grid.is_valid((1, 1))
        False
        >>> [c for c, _ in grid.neighbors((0, 0))]
        [(0, 1), (1, 0)]
    """

    def __init__(
        self,
        occupancy,
        connectivity: int = 4,
        cost_map=None,
        allow_corner_cutting: bool = False,
    ) -> None:
        occ = np.asarray(occupancy, dtype=bool)
        if occ.ndim != 2:
            raise ValueError(f"occupancy 必须是二维数组, got ndim={occ.ndim}")
        if connectivity not in (4, 8):
            raise ValueError(f"connectivity 必须为 4 或 8, got {connectivity}")
        self.occupancy = occ
        self.connectivity = connectivity
        self.allow_corner_cutting = allow_corner_cutting

        if cost_map is None:
            self.cost_map = None
        else:
            cm = np.asarray(cost_map, dtype=np.float64)
            if cm.shape != occ.shape:
                raise ValueError(
                    f"cost_map 形状 {cm.shape} 与 occupancy {occ.shape} 不一致")
            if np.any(cm < 0):
                raise ValueError("cost_map 含负权重")
            self.cost_map = cm

        self.markers: dict = {}

    # ── 构造 ─────────────────────────────────────────────────────

    @classmethod
    def from_strings(cls, rows: Sequence[str], **kwargs) -> "GridSpace":
        """从字符画创建: '#' 为障碍, 其余为空闲.

        其余非 '.' 字符 (如 'S', 'G') 记录在 ``markers`` 中:
        ``markers['S'] == (row, col)``。
        """
        if not rows:
            raise ValueError("rows 不能为空")
        width = len(rows[0])
        if any(len(r) != width for r in rows):
            raise ValueError("各行长度必须一致")
        occ = np.array([[ch == '#' for ch in r] for r in rows], dtype=bool)
        grid = cls(occ, **kwargs)
        for i, r in enumerate(rows):
            for j, ch in enumerate(r):
                if ch not in '.#':
                    grid.markers[ch] = (i, j)
        return grid

    @classmethod
    def empty(cls, height: int, width: int, **kwargs) -> "GridSpace":
        """全空闲栅格"""
        return cls(np.zeros((height, width), dtype=bool), **kwargs)

    # ── 查询 ─────────────────────────────────────────────────────

    @property
    def shape(self) -> Tuple[int, int]:
        return self.occupancy.shape

    def in_bounds(self, cell) -> bool:
        r, c = cell
        h, w = self.occupancy.shape
        return 0 <= r < h and 0 <= c < w

    def is_valid(self, cell) -> bool:
        """格子在界内且非障碍"""
        if len(cell) != 2 or not self.in_bounds(cell):
            return False
        return not bool(self.occupancy[cell[0], cell[1]])

    def weight(self, cell: Cell) -> float:
        """格子通行权重"""
        if self.cost_map is None:
            return 1.0
        return float(self.cost_map[cell[0], cell[1]])

    def edge_cost(self, a: Cell, b: Cell) -> float:
        """相邻格子间的边代价"""
        step = _SQRT2 if (a[0] != b[0] and a[1] != b[1]) else 1.0
        if self.cost_map is None:
            return step
        return step * 0.5 * (self.weight(a) + self.weight(b))

    def neighbors(self, cell: Cell) -> Iterator[Tuple[Cell, float]]:
        """按固定顺序枚举有效邻居及边代价"""
        r, c = cell
        for dr, dc in _MOVES_4:
            nb = (r + dr, c + dc)
            if self.is_valid(nb):
                yield nb, self.edge_cost(cell, nb)
        if self.connectivity == 4:
            return
        for dr, dc in _MOVES_DIAG:
            nb = (r + dr, c + dc)
            if not self.is_valid(nb):
                continue
            if not self.allow_corner_cutting and not (
                self.is_valid((r + dr, c)) and self.is_valid((r, c + dc))
            ):
                continue
            yield nb, self.edge_cost(cell, nb)

    def free_cells(self) -> List[Cell]:
        """所有空闲格子 (行优先)"""
        rows, cols = np.nonzero(~self.occupancy)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def with_obstacles(self, cells) -> "GridSpace":
        """返回额外标记了障碍格子的新栅格 (原栅格不变)"""
        occ = self.occupancy.copy()
        for r, c in cells:
            occ[r, c] = True
        grid = GridSpace(occ, self.connectivity, self.cost_map,
                         self.allow_corner_cutting)
        grid.markers = dict(self.markers)
        return grid

    def __repr__(self) -> str:
        h, w = self.shape
        return (f"GridSpace({h}x{w}, connectivity={self.connectivity}, "
                f"blocked={int(self.occupancy.sum())})")


def path_cells_valid(grid: GridSpace, path: Optional[Sequence[Cell]]) -> bool:
    """检查路径每个格子有效且相邻格子互为邻居"""
    if not path:
        return False
    if not all(grid.is_valid(c) for c in path):
        return False
    for a, b in zip(path[:-1], path[1:]):
        if b not in {nb for nb, _ in grid.neighbors(a)}:
            return False
    return True
