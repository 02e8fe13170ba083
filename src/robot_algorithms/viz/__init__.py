"""
viz - matplotlib 可视化 (核心规划器不依赖本模块)
"""

from .plot import (
    plot_dubins,
    plot_grid,
    plot_path,
    plot_quintic,
    plot_reeds_shepp,
    plot_scene,
    plot_tree,
)

__all__ = [
    "plot_grid",
    "plot_path",
    "plot_scene",
    "plot_tree",
    "plot_dubins",
    "plot_reeds_shepp",
    "plot_quintic",
]
