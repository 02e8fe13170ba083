import math

import matplotlib.pyplot as plt
import numpy as np
import pytest

from robot_algorithms.curves import DubinsPath, Pose, QuinticPolynomial, ReedsSheppPath
from robot_algorithms.planner import RRTConfig, RRTPlanner, astar, manhattan
from robot_algorithms.viz import (
    plot_dubins,
    plot_grid,
    plot_path,
    plot_quintic,
    plot_reeds_shepp,
    plot_scene,
    plot_tree,
)


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


def test_plot_grid_with_path(enclosed_grid) -> None:
    result = astar(enclosed_grid, (4, 0), (0, 4), manhattan)
    ax = plot_grid(enclosed_grid, result.path)
    assert len(ax.lines) >= 1
    assert len(ax.images) == 1


def test_plot_tree_success_and_failure(wall_box, caged_goal_box) -> None:
    ok = RRTPlanner(RRTConfig(seed=5, max_iterations=20000, goal_bias=0.1)).plan(
        wall_box, [1.0, 1.0], [9.0, 1.0])
    ax = plot_tree(ok, wall_box)
    assert len(ax.collections) == 1
    assert len(ax.patches) == 1

    failed = RRTPlanner(RRTConfig(max_iterations=50)).plan(
        caged_goal_box, [1.0, 1.0], [8.0, 8.0])
    ax = plot_tree(failed)
    assert "budget_exhausted" in ax.get_title()


def test_plot_scene_spheres(wall_box) -> None:
    wall_box.scene.add_sphere([2.0, 8.0], 0.5)
    ax = plot_scene(wall_box.scene)
    assert len(ax.patches) == 2


def test_plot_path_reuses_axes() -> None:
    fig, ax = plt.subplots()
    out = plot_path([np.array([0.0, 0.0]), np.array([1.0, 1.0])], ax=ax)
    assert out is ax
    assert plot_path([], ax=ax) is ax


def test_plot_curves() -> None:
    dubins = DubinsPath.shortest(Pose(0, 0, 0), Pose(3, 3, math.pi / 2), 1.0)
    ax = plot_dubins(dubins, 0.1)
    assert dubins.word in ax.get_title()

    rs = ReedsSheppPath.shortest(Pose(0, 0, 0), Pose(-1, 2, math.pi), 1.0)
    ax = plot_reeds_shepp(rs, 0.1)
    assert rs.word in ax.get_title()
    assert "cusps" in ax.get_title()

    poly = QuinticPolynomial(([0, 0], [1, 0], [0, 0]), ([5, 2], [1, 0], [0, 0]), 3.0)
    ax = plot_quintic(poly, n=20)
    assert len(ax.lines) >= 1
