import math

import numpy as np
import pytest

from robot_algorithms.space import DiscreteSpace, GridSpace, path_cells_valid


def test_from_strings_and_markers() -> None:
    grid = GridSpace.from_strings([
        "S..",
        ".#.",
        "..G",
    ])
    assert grid.shape == (3, 3)
    assert grid.markers == {"S": (0, 0), "G": (2, 2)}
    assert not grid.is_valid((1, 1))
    assert grid.is_valid((2, 2))
    assert not grid.is_valid((3, 0))
    assert not grid.is_valid((-1, 0))
    assert isinstance(grid, DiscreteSpace)


def test_ragged_rows_rejected() -> None:
    with pytest.raises(ValueError):
        GridSpace.from_strings(["...", ".."])


def test_neighbor_order_is_fixed() -> None:
    grid = GridSpace.empty(3, 3, connectivity=8)
    cells = [c for c, _ in grid.neighbors((1, 1))]
    assert cells == [(0, 1), (1, 2), (2, 1), (1, 0),
                     (0, 2), (2, 2), (2, 0), (0, 0)]


def test_diagonal_cost_and_corner_cutting() -> None:
    grid = GridSpace.from_strings([
        "..",
        "#.",
    ], connectivity=8)
    costs = dict(grid.neighbors((0, 0)))
    assert (1, 1) not in costs       # 贴着 (1, 0) 的角
    assert costs[(0, 1)] == 1.0

    cutting = GridSpace.from_strings(["..", "#."], connectivity=8,
                                     allow_corner_cutting=True)
    assert dict(cutting.neighbors((0, 0)))[(1, 1)] == pytest.approx(math.sqrt(2))


def test_cost_map_weights_edges() -> None:
    cost_map = np.array([[1.0, 3.0]])
    grid = GridSpace.empty(1, 2, cost_map=cost_map)
    assert dict(grid.neighbors((0, 0)))[(0, 1)] == pytest.approx(2.0)
    with pytest.raises(ValueError):
        GridSpace.empty(2, 2, cost_map=cost_map)


def test_with_obstacles_returns_copy(empty_grid) -> None:
    blocked = empty_grid.with_obstacles([(0, 1)])
    assert not blocked.is_valid((0, 1))
    assert empty_grid.is_valid((0, 1))
    assert len(blocked.free_cells()) == 24


def test_path_cells_valid(empty_grid) -> None:
    assert path_cells_valid(empty_grid, [(0, 0), (0, 1), (1, 1)])
    assert not path_cells_valid(empty_grid, [(0, 0), (1, 1)])
    assert not path_cells_valid(empty_grid, [])
