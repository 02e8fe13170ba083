import os

import numpy as np
import pytest

os.environ.setdefault("MPLBACKEND", "Agg")

from robot_algorithms.space import BoxSpace, GridSpace, Scene  # noqa: E402


@pytest.fixture
def empty_grid():
    return GridSpace.empty(5, 5)


@pytest.fixture
def enclosed_grid():
    # (2, 2) 被障碍完全包围
    return GridSpace.from_strings([
        ".....",
        ".###.",
        ".#G#.",
        ".###.",
        "S....",
    ])


@pytest.fixture
def empty_box():
    return BoxSpace([(0.0, 10.0), (0.0, 10.0)])


@pytest.fixture
def wall_box():
    # 中间一堵墙, 只在上方留缺口
    scene = Scene()
    scene.add_obstacle([4.5, 0.0], [5.5, 7.0], name="wall")
    return BoxSpace([(0.0, 10.0), (0.0, 10.0)], scene)


@pytest.fixture
def caged_goal_box():
    # 目标 (8, 8) 被四面墙围住
    scene = Scene()
    scene.add_obstacle([7.0, 7.0], [9.0, 7.2], name="bottom")
    scene.add_obstacle([7.0, 8.8], [9.0, 9.0], name="top")
    scene.add_obstacle([7.0, 7.0], [7.2, 9.0], name="left")
    scene.add_obstacle([8.8, 7.0], [9.0, 9.0], name="right")
    return BoxSpace([(0.0, 10.0), (0.0, 10.0)], scene)


@pytest.fixture
def rng():
    return np.random.default_rng(0)
