"""
A* / Dijkstra 规划器测试: 最优性、失败原因、预算与契约检查。
"""

import itertools
import logging

import numpy as np
import pytest

from robot_algorithms.planner import (
    ConfigurationSpaceViolation,
    FailureReason,
    GraphSearchConfig,
    GraphSearchPlanner,
    PlanningError,
    astar,
    dijkstra,
    manhattan,
    octile,
)
from robot_algorithms.space import GraphSpace, GridSpace, path_cells_valid


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def _brute_force_cost(graph: GraphSpace, start, goal) -> float:
    """枚举所有简单路径的最小代价"""
    best = float("inf")
    others = [n for n in graph.nodes if n not in (start, goal)]
    for k in range(len(others) + 1):
        for mid in itertools.permutations(others, k):
            seq = (start,) + mid + (goal,)
            cost = 0.0
            for u, v in zip(seq[:-1], seq[1:]):
                c = graph.edge_cost(u, v)
                if c is None:
                    break
                cost += c
            else:
                best = min(best, cost)
    return best


def _random_graph(seed: int, n_nodes: int = 6, p_edge: float = 0.5) -> GraphSpace:
    rng = np.random.default_rng(seed)
    edges = []
    for u in range(n_nodes):
        for v in range(u + 1, n_nodes):
            if rng.uniform() < p_edge:
                edges.append((u, v, float(rng.integers(1, 10))))
    return GraphSpace(edges, nodes=range(n_nodes))


def _path_cost(graph: GraphSpace, path) -> float:
    return sum(graph.edge_cost(u, v) for u, v in zip(path[:-1], path[1:]))


# ═══════════════════════════════════════════════════════════════════════════
# 成功路径
# ═══════════════════════════════════════════════════════════════════════════

class TestShortestPaths:
    def test_astar_empty_grid_manhattan(self, empty_grid):
        result = astar(empty_grid, (0, 0), (4, 4), manhattan)

        assert result.success
        assert result.n_edges == 8
        assert result.cost == pytest.approx(8.0)
        assert result.path[0] == (0, 0)
        assert result.path[-1] == (4, 4)
        assert path_cells_valid(empty_grid, result.path)
        assert result.reason is None
        assert result.metadata["algorithm"] == "A*"

    def test_dijkstra_matches_astar_cost(self):
        grid = GridSpace.from_strings([
            "..........",
            ".####.....",
            "....#.###.",
            ".##.#...#.",
            "....###.#.",
            "........#.",
        ], connectivity=8)
        r_a = astar(grid, (0, 0), (5, 9), octile)
        r_d = dijkstra(grid, (0, 0), (5, 9))

        assert r_a.success and r_d.success
        assert r_a.cost == pytest.approx(r_d.cost)
        assert r_d.metadata["algorithm"] == "Dijkstra"
        # 一致启发不会比 Dijkstra 扩展更多节点
        assert r_a.nodes_explored <= r_d.nodes_explored

    @pytest.mark.parametrize("seed", range(8))
    def test_optimal_on_random_graphs(self, seed):
        graph = _random_graph(seed)
        expected = _brute_force_cost(graph, 0, 5)
        result = dijkstra(graph, 0, 5)

        if expected == float("inf"):
            assert not result.success
            assert result.reason is FailureReason.NO_PATH_EXISTS
        else:
            assert result.success
            assert result.cost == pytest.approx(expected)
            assert _path_cost(graph, result.path) == pytest.approx(expected)

    def test_terrain_weights_are_avoided(self):
        cost_map = np.ones((3, 3))
        cost_map[1, 1] = 100.0
        grid = GridSpace.empty(3, 3, cost_map=cost_map)
        result = dijkstra(grid, (1, 0), (1, 2))

        assert result.success
        assert (1, 1) not in result.path
        assert result.cost == pytest.approx(4.0)

    def test_planner_is_reusable(self, empty_grid):
        planner = GraphSearchPlanner(heuristic=manhattan)
        r1 = planner.plan(empty_grid, (0, 0), (4, 4))
        r2 = planner.plan(empty_grid, (4, 0), (0, 4))
        r3 = planner.plan(empty_grid, (0, 0), (4, 4))

        assert r1.success and r2.success
        assert r1.path == r3.path

    def test_phase_times_recorded(self, empty_grid):
        result = dijkstra(empty_grid, (0, 0), (4, 4))
        assert "search" in result.phase_times
        assert "extract" in result.phase_times
        assert result.planning_time >= 0.0


# ═══════════════════════════════════════════════════════════════════════════
# 退化与失败
# ═══════════════════════════════════════════════════════════════════════════

class TestFailures:
    def test_degenerate_start_equals_goal(self, empty_grid):
        result = dijkstra(empty_grid, (2, 2), (2, 2))

        assert result.success
        assert result.path == [(2, 2)]
        assert result.cost == 0.0
        assert result.n_edges == 0
        assert result.degenerate

    def test_enclosed_goal_has_no_path(self, enclosed_grid):
        start = enclosed_grid.markers["S"]
        goal = enclosed_grid.markers["G"]
        result = dijkstra(enclosed_grid, start, goal)

        assert not result.success
        assert result.path is None
        assert result.reason is FailureReason.NO_PATH_EXISTS
        # 外圈 16 个空闲格子全部被扩展
        assert result.nodes_explored == 16

    @pytest.mark.parametrize("start, goal", [
        ((1, 1), (4, 4)),      # 起点在障碍上
        ((4, 0), (9, 9)),      # 终点越界
        ((1, 1), (1, 1)),      # 无效的退化输入
    ])
    def test_invalid_endpoints(self, enclosed_grid, start, goal):
        result = dijkstra(enclosed_grid, start, goal)
        assert not result.success
        assert result.reason is FailureReason.INVALID_START_OR_GOAL

    def test_expansion_budget(self):
        grid = GridSpace.empty(10, 10)
        config = GraphSearchConfig(max_expansions=3)
        result = dijkstra(grid, (0, 0), (9, 9), config)

        assert not result.success
        assert result.reason is FailureReason.BUDGET_EXHAUSTED
        assert result.nodes_explored == 3

    def test_node_capacity(self):
        grid = GridSpace.empty(10, 10)
        config = GraphSearchConfig(node_capacity=3)
        result = dijkstra(grid, (0, 0), (9, 9), config)

        assert not result.success
        assert result.reason is FailureReason.CAPACITY_EXCEEDED

    def test_unwrap_failure_raises(self, enclosed_grid):
        result = dijkstra(enclosed_grid, (4, 0), (2, 2))
        with pytest.raises(PlanningError) as exc:
            result.unwrap()
        assert exc.value.reason is FailureReason.NO_PATH_EXISTS

    def test_failure_to_dict(self, enclosed_grid):
        d = dijkstra(enclosed_grid, (4, 0), (2, 2)).to_dict()
        assert d["success"] is False
        assert d["reason"] == "no_path_exists"
        assert d["n_waypoints"] == 0


# ═══════════════════════════════════════════════════════════════════════════
# 契约检查
# ═══════════════════════════════════════════════════════════════════════════

class TestContractChecks:
    def test_negative_cost_clamped_with_warning(self, caplog):
        graph = GraphSpace([("a", "b", -1.0), ("b", "c", 2.0)])
        with caplog.at_level(logging.WARNING):
            result = dijkstra(graph, "a", "c")

        assert result.success
        assert result.path == ["a", "b", "c"]
        assert result.cost == pytest.approx(2.0)
        assert any("代价为负" in r.getMessage() for r in caplog.records)

    def test_negative_cost_raises_in_debug(self):
        graph = GraphSpace([("a", "b", -1.0), ("b", "c", 2.0)])
        with pytest.raises(ConfigurationSpaceViolation):
            dijkstra(graph, "a", "c", GraphSearchConfig(debug=True))

    def test_invalid_neighbor_raises_in_debug(self):
        class _LeakySpace:
            def is_valid(self, p):
                return p != "x"

            def neighbors(self, p):
                return [("x", 1.0), ("b", 1.0)] if p == "a" else []

        with pytest.raises(ConfigurationSpaceViolation):
            dijkstra(_LeakySpace(), "a", "b", GraphSearchConfig(debug=True))

    def test_blocked_graph_node_is_skipped(self):
        graph = GraphSpace([("a", "b", 1.0), ("b", "c", 1.0),
                            ("a", "d", 2.0), ("d", "c", 2.0)],
                           blocked=["b"])
        result = dijkstra(graph, "a", "c")
        assert result.path == ["a", "d", "c"]
        assert result.cost == pytest.approx(4.0)
