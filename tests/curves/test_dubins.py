import math

import numpy as np
import pytest

from robot_algorithms.curves import (
    DubinsPath,
    Pose,
    SegmentKind,
    mod2pi,
)


def _random_poses(seed: int, n: int):
    rng = np.random.default_rng(seed)
    for _ in range(n):
        a = rng.uniform(-5, 5, 3)
        b = rng.uniform(-5, 5, 3)
        yield (Pose(a[0], a[1], a[2] * math.pi / 5),
               Pose(b[0], b[1], b[2] * math.pi / 5))


def test_mod2pi_range() -> None:
    assert mod2pi(0.0) == 0.0
    assert mod2pi(-math.pi / 2) == pytest.approx(1.5 * math.pi)
    assert mod2pi(5 * math.pi) == pytest.approx(math.pi)


def test_straight_line() -> None:
    path = DubinsPath.shortest(Pose(0, 0, 0), Pose(10, 0, 0), max_curvature=1.0)
    assert path.length == pytest.approx(10.0)
    assert path.endpoint().isclose(path.end, tol=1e-9)


def test_length_scales_with_turning_radius() -> None:
    start, end = Pose(0, 0, 0), Pose(0, 0, math.pi)
    tight = DubinsPath.shortest(start, end, max_curvature=2.0)
    wide = DubinsPath.shortest(start.scaled(2.0), end.scaled(2.0), max_curvature=1.0)
    assert wide.length == pytest.approx(2.0 * tight.length)


@pytest.mark.parametrize("seed", range(5))
def test_every_word_reaches_end(seed) -> None:
    for start, end in _random_poses(seed, 10):
        words = DubinsPath.all_words(start, end, max_curvature=0.8)
        assert words
        for path in words:
            assert path.endpoint().isclose(end, tol=1e-6), path.word


@pytest.mark.parametrize("seed", range(3))
def test_shortest_is_minimal(seed) -> None:
    for start, end in _random_poses(seed, 10):
        best = DubinsPath.shortest(start, end, max_curvature=0.5)
        others = DubinsPath.all_words(start, end, max_curvature=0.5)
        assert all(best.length <= p.length + 1e-12 for p in others)
        assert best.length >= math.hypot(end.x - start.x, end.y - start.y) - 1e-9


def test_sample_covers_path() -> None:
    start, end = Pose(0, 0, 0), Pose(4, 4, math.pi / 2)
    path = DubinsPath.shortest(start, end, max_curvature=1.0)
    samples = path.sample(0.1)

    assert samples[0][0] == start
    assert samples[-1][0].isclose(end, tol=1e-6)
    kinds = {k for _, k in samples}
    assert kinds <= {SegmentKind.LEFT, SegmentKind.STRAIGHT, SegmentKind.RIGHT}
    for (p0, _), (p1, _) in zip(samples[:-1], samples[1:]):
        assert math.hypot(p1.x - p0.x, p1.y - p0.y) <= 0.1 + 1e-9


def test_invalid_arguments() -> None:
    with pytest.raises(ValueError):
        DubinsPath.shortest(Pose(0, 0), Pose(1, 1), max_curvature=0.0)
    path = DubinsPath.shortest(Pose(0, 0), Pose(1, 1), max_curvature=1.0)
    with pytest.raises(ValueError):
        path.sample(0.0)
