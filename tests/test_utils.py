import time

import numpy as np
import pytest

from robot_algorithms.utils import Timer, make_rng


def test_make_rng_from_seed_and_generator() -> None:
    a = make_rng(7).uniform(size=3)
    b = make_rng(7).uniform(size=3)
    assert np.array_equal(a, b)

    gen = np.random.default_rng(1)
    assert make_rng(gen) is gen


def test_make_rng_requires_seed() -> None:
    with pytest.raises(ValueError):
        make_rng(None)


def test_timer_accumulates_phases() -> None:
    timer = Timer()
    for _ in range(2):
        with timer.phase("search"):
            time.sleep(0.001)
    with timer.phase("extract"):
        pass

    d = timer.to_dict()
    assert set(d) == {"search", "extract", "total"}
    assert timer.counts["search"] == 2
    assert d["total"] == pytest.approx(d["search"] + d["extract"])
    assert "search" in timer.summary()

    timer.reset()
    assert timer.to_dict() == {"total": 0.0}
