"""
viz/plot.py - 2D 绘图工具

栅格 / 规划树 / 路径 / Dubins 与 Reeds–Shepp 曲线 / 五次多项式轨迹的 matplotlib 绘制。
所有函数接受可选的 ``ax``, 缺省时新建 figure, 返回所用的 Axes。

配色:
- 障碍物: 深灰
- 规划树: 浅灰细线
- 路径: 橙色实线 + 圆点
- 起点 / 终点: 绿色 / 红色
"""

from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection
from matplotlib.patches import Circle, Rectangle

from ..curves.dubins import DubinsPath, SegmentKind
from ..curves.reeds_shepp import ReedsSheppPath
from ..curves.quintic import QuinticPolynomial
from ..planner.base import PlanningResult
from ..space.scene import AABBObstacle, SphereObstacle

PATH_COLOR = '#FF5722'
TREE_COLOR = '#9E9E9E'
OBSTACLE_COLOR = '#424242'
START_COLOR = '#4CAF50'
GOAL_COLOR = '#F44336'

SEGMENT_COLORS = {
    SegmentKind.LEFT: '#2196F3',
    SegmentKind.STRAIGHT: '#607D8B',
    SegmentKind.RIGHT: '#9C27B0',
}


def _get_ax(ax):
    if ax is None:
        _, ax = plt.subplots(1, 1, figsize=(6, 6))
    return ax


def _finish(ax, title: str = "") -> None:
    ax.set_aspect('equal')
    ax.grid(True, alpha=0.3)
    if title:
        ax.set_title(title)


def plot_path(path: Sequence, ax=None, color: str = PATH_COLOR,
              label: Optional[str] = None):
    """折线路径 (N, 2); 栅格路径的 (row, col) 需先转换为 (x, y)"""
    ax = _get_ax(ax)
    if path is None or len(path) == 0:
        return ax
    pts = np.asarray(path, dtype=np.float64).reshape(len(path), -1)[:, :2]
    ax.plot(pts[:, 0], pts[:, 1], 'o-', color=color, linewidth=2,
            markersize=3, label=label, zorder=5)
    ax.plot(*pts[0], 'o', color=START_COLOR, markersize=8, zorder=6)
    ax.plot(*pts[-1], 'o', color=GOAL_COLOR, markersize=8, zorder=6)
    return ax


def plot_grid(space, path: Optional[Sequence] = None, ax=None):
    """占据栅格; 行号向下, 列号向右 (imshow 约定)"""
    ax = _get_ax(ax)
    occ = np.asarray(space.occupancy, dtype=np.float64)
    ax.imshow(occ, cmap='Greys', origin='upper',
              interpolation='nearest', vmin=0, vmax=1)
    if path is not None and len(path) > 0:
        # (row, col) → (x=col, y=row)
        plot_path([(c, r) for r, c in path], ax=ax)
    ax.set_xlabel('col')
    ax.set_ylabel('row')
    ax.set_aspect('equal')
    ax.set_title(f'{space.shape[0]}x{space.shape[1]} grid')
    return ax


def plot_scene(scene, ax=None):
    """二维场景中的障碍物 (AABB 为矩形, 球为圆)"""
    ax = _get_ax(ax)
    for obs in scene:
        if obs.ndim != 2:
            continue
        if isinstance(obs, AABBObstacle):
            w, h = obs.size
            ax.add_patch(Rectangle(tuple(obs.min_point), w, h,
                                   color=OBSTACLE_COLOR, alpha=0.6))
        elif isinstance(obs, SphereObstacle):
            ax.add_patch(Circle(tuple(obs.center), obs.radius,
                                color=OBSTACLE_COLOR, alpha=0.6))
    return ax


def plot_tree(result: PlanningResult, space=None, ax=None):
    """RRT 规划树与结果路径

    Args:
        result: RRTPlanner 的结果 (``result.tree`` 为 None 时只画路径)
        space: 可选 BoxSpace, 用于画障碍物和设置坐标范围
    """
    ax = _get_ax(ax)
    if space is not None:
        plot_scene(space.scene, ax=ax)
        ax.set_xlim(space.lows[0], space.highs[0])
        ax.set_ylim(space.lows[1], space.highs[1])

    tree = result.tree
    if tree is not None and tree.n_nodes > 1:
        segments = [(p[:2], c[:2]) for p, c in tree.edges()]
        ax.add_collection(LineCollection(segments, colors=TREE_COLOR,
                                         linewidths=0.6, zorder=2))
        if space is None:
            ax.autoscale_view()

    if result.success:
        plot_path(result.path, ax=ax)
    status = 'ok' if result.success else result.reason.value
    _finish(ax, f"{result.metadata.get('algorithm', '')} ({status})")
    return ax


def _plot_curve(path, step_size: float, ax, title: str):
    ax = _get_ax(ax)
    samples = path.sample(step_size)
    for (p0, _), (p1, kind) in zip(samples[:-1], samples[1:]):
        ax.plot([p0.x, p1.x], [p0.y, p1.y], '-',
                color=SEGMENT_COLORS[kind], linewidth=2)
    for pose, color in ((path.start, START_COLOR), (path.end, GOAL_COLOR)):
        ax.quiver(pose.x, pose.y, *pose.heading, color=color,
                  angles='xy', zorder=6)
    _finish(ax, title)
    return ax


def plot_dubins(path: DubinsPath, step_size: float, ax=None):
    """Dubins 路径, 按段类型着色"""
    return _plot_curve(path, step_size, ax,
                       f'Dubins {path.word}, length {path.length:.3f}')


def plot_reeds_shepp(path: ReedsSheppPath, step_size: float, ax=None):
    """Reeds–Shepp 路径, 按段类型着色; 标题给出换向次数"""
    return _plot_curve(path, step_size, ax,
                       f'Reeds-Shepp {path.word}, length {path.length:.3f}, '
                       f'{path.n_cusps} cusps')


def plot_quintic(poly: QuinticPolynomial, n: int = 100, ax=None):
    """五次多项式轨迹 (位置)"""
    ax = _get_ax(ax)
    pts = poly.sample(n)
    plot_path(pts, ax=ax)
    _finish(ax, f'quintic, T={poly.duration:.2f}')
    return ax
