from robot_algorithms.space import DiscreteSpace, GraphSpace


def test_undirected_edges_both_ways() -> None:
    g = GraphSpace([("a", "b", 1.0), ("b", "c", 2.0)])
    assert list(g.neighbors("b")) == [("a", 1.0), ("c", 2.0)]
    assert g.edge_cost("c", "b") == 2.0
    assert g.n_edges == 2
    assert isinstance(g, DiscreteSpace)


def test_directed_and_duplicate_edges() -> None:
    g = GraphSpace([("a", "b", 3.0), ("a", "b", 1.0), ("a", "b", 2.0)],
                   directed=True)
    assert g.edge_cost("a", "b") == 1.0
    assert g.edge_cost("b", "a") is None
    assert list(g.neighbors("b")) == []
    assert g.n_edges == 1


def test_blocked_and_isolated_nodes() -> None:
    g = GraphSpace([("a", "b", 1.0)], blocked=["b"], nodes=["z"])
    assert g.is_valid("a")
    assert not g.is_valid("b")
    assert g.is_valid("z")
    assert not g.is_valid("missing")
    assert list(g.neighbors("a")) == []
