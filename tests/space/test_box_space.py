"""
连续空间、场景与碰撞检测测试。
"""

import numpy as np
import pytest

from robot_algorithms.space import (
    BoxSpace,
    CollisionChecker,
    ContinuousSpace,
    DiscreteSpace,
    Scene,
)


# ═══════════════════════════════════════════════════════════════════════════
# Scene
# ═══════════════════════════════════════════════════════════════════════════

class TestScene:
    def test_add_remove(self):
        scene = Scene()
        scene.add_obstacle([0, 0], [1, 1], name="box")
        scene.add_sphere([3, 3], 0.5)

        assert len(scene) == 2
        assert scene.get_obstacle("box") is not None
        assert scene.remove_obstacle("box")
        assert not scene.remove_obstacle("box")
        assert scene.n_obstacles == 1

    def test_dict_list_roundtrip(self):
        scene = Scene()
        scene.add_obstacle([0, 0], [1, 2], name="a")
        scene.add_sphere([3, 3], 0.5, name="b")
        copy = Scene.from_dict_list(scene.to_dict_list())

        assert copy.to_dict_list() == scene.to_dict_list()

    def test_rejects_bad_obstacles(self):
        scene = Scene()
        with pytest.raises(ValueError):
            scene.add_obstacle([1, 1], [0, 0])
        scene.add_obstacle([0, 0], [1, 1])
        with pytest.raises(ValueError):
            scene.add_obstacle([0, 0, 0], [1, 1, 1])
        with pytest.raises(ValueError):
            Scene.from_dict_list([{"type": "cone"}])


# ═══════════════════════════════════════════════════════════════════════════
# CollisionChecker
# ═══════════════════════════════════════════════════════════════════════════

class TestCollisionChecker:
    def test_point_and_batch(self):
        scene = Scene()
        scene.add_obstacle([0.4, 0.0], [0.6, 1.0])
        checker = CollisionChecker(scene, bounds=[(0, 1), (0, 1)])

        assert checker.check_config_collision(np.array([0.5, 0.5]))
        assert not checker.check_config_collision(np.array([0.1, 0.5]))
        assert checker.check_config_collision(np.array([1.5, 0.5]))
        hits = checker.check_config_collision_batch(
            np.array([[0.1, 0.1], [0.5, 0.1], [2.0, 0.0]]))
        assert hits.tolist() == [False, True, True]
        assert checker.n_collision_checks == 6

        checker.reset_counter()
        assert checker.n_collision_checks == 0

    def test_segment_through_wall(self):
        scene = Scene()
        scene.add_obstacle([0.4, 0.0], [0.6, 1.0])
        checker = CollisionChecker(scene)

        assert checker.check_segment_collision([0.1, 0.5], [0.9, 0.5], 0.05)
        assert not checker.check_segment_collision([0.1, 0.5], [0.3, 0.9], 0.05)


# ═══════════════════════════════════════════════════════════════════════════
# BoxSpace
# ═══════════════════════════════════════════════════════════════════════════

class TestBoxSpace:
    def test_protocols(self, empty_box):
        assert isinstance(empty_box, ContinuousSpace)
        assert not isinstance(empty_box, DiscreteSpace)
        assert empty_box.ndim == 2

    def test_bad_bounds(self):
        with pytest.raises(ValueError):
            BoxSpace([(1.0, 0.0)])
        with pytest.raises(ValueError):
            BoxSpace([(0.0, 1.0)], resolution=0.0)

    def test_sample_within_bounds(self, empty_box, rng):
        qs = np.array([empty_box.sample(rng) for _ in range(200)])
        assert np.all(qs >= 0.0) and np.all(qs <= 10.0)

    def test_is_valid_checks_shape(self, empty_box):
        assert empty_box.is_valid([1.0, 2.0])
        assert not empty_box.is_valid([1.0, 2.0, 3.0])
        assert not empty_box.is_valid([-1.0, 2.0])

    def test_nearest_prefers_lowest_index_on_ties(self, empty_box):
        pts = np.array([[5.0, 5.0], [1.0, 1.0], [1.0, 1.0]])
        assert empty_box.nearest(pts, np.array([1.0, 1.5])) == 1

    def test_steer_full_step(self, empty_box):
        q = empty_box.steer([1.0, 1.0], [5.0, 1.0], 0.5)
        assert np.allclose(q, [1.5, 1.0])
        q = empty_box.steer([1.0, 1.0], [1.2, 1.0], 0.5)
        assert np.allclose(q, [1.2, 1.0])

    def test_steer_stops_before_obstacle(self, wall_box):
        q = wall_box.steer([4.0, 1.0], [6.0, 1.0], 1.0)
        assert q is not None
        assert q[0] < 4.5
        assert wall_box.is_valid_segment([4.0, 1.0], q)

    def test_steer_no_progress(self, wall_box):
        assert wall_box.steer([4.49, 1.0], [6.0, 1.0], 1.0) is None
        assert wall_box.steer([1.0, 1.0], [1.0, 1.0], 1.0) is None
        assert wall_box.steer([5.0, 1.0], [1.0, 1.0], 1.0) is None

    def test_collision_counter(self, wall_box):
        before = wall_box.n_collision_checks
        wall_box.is_valid_segment([1.0, 1.0], [2.0, 1.0])
        assert wall_box.n_collision_checks > before
