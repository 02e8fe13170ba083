import numpy as np
import pytest

import robot_algorithms
from robot_algorithms import (
    FailureReason,
    GraphSearchConfig,
    RRTConfig,
    plan,
)
from robot_algorithms.planner import manhattan


def test_version() -> None:
    assert isinstance(robot_algorithms.__version__, str)


def test_dispatch_discrete(empty_grid) -> None:
    result = plan(empty_grid, (0, 0), (4, 4), heuristic=manhattan)
    assert result.success
    assert result.metadata["algorithm"] == "A*"
    assert plan(empty_grid, (0, 0), (4, 4)).metadata["algorithm"] == "Dijkstra"


def test_dispatch_continuous(empty_box) -> None:
    result = plan(empty_box, [1.0, 1.0], [9.0, 9.0], RRTConfig(seed=1), rng=3)
    assert result.success
    assert np.array_equal(result.path[-1], [9.0, 9.0])


def test_failure_is_value(enclosed_grid) -> None:
    result = plan(enclosed_grid, (4, 0), (2, 2),
                  GraphSearchConfig(max_expansions=100))
    assert result.reason is FailureReason.NO_PATH_EXISTS


def test_config_mismatch(empty_grid, empty_box) -> None:
    with pytest.raises(TypeError):
        plan(empty_grid, (0, 0), (1, 1), RRTConfig())
    with pytest.raises(TypeError):
        plan(empty_box, [1, 1], [2, 2], GraphSearchConfig())
    with pytest.raises(TypeError):
        plan(object(), 0, 1)
