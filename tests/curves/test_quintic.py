import numpy as np
import pytest

from robot_algorithms.curves import (
    InvalidDurationError,
    InvalidTimeStepError,
    NoValidPolynomialError,
    OutOfRangeError,
    QuinticPolynomial,
    quintic_coefficients,
)

START = ([3.0, 2.0], [1.0, -1.0], [0.5, -0.5])
END = ([7.0, -1.0], [2.0, 1.0], [0.0, 0.0])


def test_coefficients() -> None:
    coeffs = quintic_coefficients((3.0, 1.0, 0.5), (7.0, 2.0, 0.0), 2.0)
    assert np.allclose(coeffs, [3.0, 1.0, 0.25, 1.125, -0.8125, 0.15625])


def test_evaluate() -> None:
    poly = QuinticPolynomial(START, END, 2.0)
    assert np.allclose(poly.evaluate(1.5), [5.9326171875, -1.1435546875])


def test_boundary_conditions() -> None:
    poly = QuinticPolynomial(START, END, 2.0)
    for t, (pos, vel, acc) in ((0.0, START), (2.0, END)):
        assert np.allclose(poly.evaluate(t), pos)
        assert np.allclose(poly.velocity(t), vel)
        assert np.allclose(poly.acceleration(t), acc)


def test_derivatives_match_finite_differences() -> None:
    poly = QuinticPolynomial(START, END, 2.0)
    h, t = 1e-5, 0.7
    fd_vel = (poly.evaluate(t + h) - poly.evaluate(t - h)) / (2 * h)
    fd_jerk = (poly.acceleration(t + h) - poly.acceleration(t - h)) / (2 * h)
    assert np.allclose(poly.velocity(t), fd_vel, atol=1e-6)
    assert np.allclose(poly.jerk(t), fd_jerk, atol=1e-4)


def test_range_checks() -> None:
    poly = QuinticPolynomial(START, END, 2.0)
    with pytest.raises(OutOfRangeError):
        poly.evaluate(2.5)
    with pytest.raises(OutOfRangeError):
        poly.evaluate(-0.1)
    assert poly.evaluate_unchecked(2.5).shape == (2,)
    with pytest.raises(InvalidDurationError):
        QuinticPolynomial(START, END, -1.0)
    with pytest.raises(InvalidDurationError):
        QuinticPolynomial(START, END, 0.0)


def test_sample_shape() -> None:
    pts = QuinticPolynomial(START, END, 2.0).sample(11)
    assert pts.shape == (11, 2)
    assert np.allclose(pts[-1], END[0])


class TestSearch:
    def test_returns_first_valid_duration(self):
        poly = QuinticPolynomial.search(START, END, lambda p: p.duration >= 1.0,
                                        min_time=0.0, max_time=5.0, time_step=0.25)
        assert poly.duration == pytest.approx(1.0)

    def test_acceleration_limit(self):
        def max_acc_ok(p):
            ts = np.linspace(0.0, p.duration, 50)
            return max(np.linalg.norm(p.acceleration(t)) for t in ts) <= 2.0

        poly = QuinticPolynomial.search(START, END, max_acc_ok,
                                        min_time=0.5, max_time=20.0, time_step=0.1)
        assert max_acc_ok(poly)
        shorter = QuinticPolynomial(START, END, poly.duration - 0.1)
        assert not max_acc_ok(shorter)

    def test_invalid_time_step(self):
        with pytest.raises(InvalidTimeStepError):
            QuinticPolynomial.search(START, END, lambda p: True, 0.0, 1.0, 0.0)
        with pytest.raises(InvalidTimeStepError):
            QuinticPolynomial.search(START, END, lambda p: True, 2.0, 1.0, 0.1)

    def test_nothing_valid(self):
        with pytest.raises(NoValidPolynomialError):
            QuinticPolynomial.search(START, END, lambda p: False, 0.0, 1.0, 0.25)
