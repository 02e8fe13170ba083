"""
curves/quintic.py - 五次多项式轨迹

给定起终点的位置 / 速度 / 加速度和时长 T, 每个坐标轴各求一个五次多项式

    x(t) = c0 + c1 t + c2 t² + c3 t³ + c4 t⁴ + c5 t⁵ ,  t ∈ [0, T]

使 6 个边界条件全部满足。``QuinticPolynomial.search`` 按时间步长递增 T,
返回第一条通过调用方校验 (如加速度 / jerk 上限) 的轨迹。
"""

from typing import Callable, Sequence, Tuple

import numpy as np

from ..planner.errors import RobotAlgorithmsError

BoundaryState = Tuple[Sequence[float], Sequence[float], Sequence[float]]


class QuinticError(RobotAlgorithmsError, ValueError):
    """五次多项式相关错误的基类"""


class InvalidDurationError(QuinticError):
    pass


class OutOfRangeError(QuinticError):
    pass


class InvalidTimeStepError(QuinticError):
    pass


class NoValidPolynomialError(QuinticError):
    pass


def quintic_coefficients(
    start: Tuple[float, float, float],
    end: Tuple[float, float, float],
    duration: float,
) -> np.ndarray:
    """单轴五次多项式系数 [c0, ..., c5]

    Args:
        start: (x0, v0, a0)
        end: (x1, v1, a1)
        duration: 时长 T (> 0)
    """
    x0, v0, a0 = start
    x1, v1, a1 = end
    t1 = duration
    inv_t = 1.0 / t1
    t1_sq = t1 * t1
    inv_t_sq = 1.0 / t1_sq
    half_a0 = 0.5 * a0

    j0 = (x1 - x0 - v0 * t1 - half_a0 * t1_sq) * inv_t_sq * inv_t
    j1 = (v1 - v0 - a0 * t1) * inv_t_sq
    j2 = 0.5 * inv_t * (a1 - a0)

    return np.array([
        x0,
        v0,
        half_a0,
        10.0 * j0 - 4.0 * j1 + j2,
        (7.0 * j1 - 15.0 * j0 - 2.0 * j2) * inv_t,
        (j2 - 3.0 * j1 + 6.0 * j0) * inv_t_sq,
    ], dtype=np.float64)


class QuinticPolynomial:
    """二维五次多项式轨迹

    Args:
        start: (位置, 速度, 加速度), 各为二维向量
        end: (位置, 速度, 加速度)
        duration: 时长 T

    Raises:
        InvalidDurationError: duration <= 0

    Example:
        >>> p = QuinticPolynomial(([3, 2], [1, -1], [0.5, -0.5]),
        ...                       ([7, -1], [2, 1], [0, 0]), 2.0)
        >>> p.evaluate(1.5)
        array([ 5.93261719, -1.14355469])
    """

    def __init__(self, start: BoundaryState, end: BoundaryState,
                 duration: float) -> None:
        if duration <= 0:
            raise InvalidDurationError(f"duration 必须为正, got {duration}")
        s = [np.asarray(v, dtype=np.float64) for v in start]
        e = [np.asarray(v, dtype=np.float64) for v in end]
        # coeffs[:, k] 为第 k 轴的系数
        self.coeffs = np.stack([
            quintic_coefficients((s[0][k], s[1][k], s[2][k]),
                                 (e[0][k], e[1][k], e[2][k]), duration)
            for k in range(2)
        ], axis=1)
        self.duration = float(duration)

    @classmethod
    def search(
        cls,
        start: BoundaryState,
        end: BoundaryState,
        validator: Callable[["QuinticPolynomial"], bool],
        min_time: float,
        max_time: float,
        time_step: float,
    ) -> "QuinticPolynomial":
        """从 min_time 起按 time_step 递增时长, 返回第一条通过 validator 的轨迹

        min_time 为 0 时从 time_step 开始。

        Raises:
            InvalidTimeStepError: time_step <= 0 或 max_time < min_time
            NoValidPolynomialError: [min_time, max_time] 内没有合格轨迹
        """
        if time_step <= 0 or max_time < min_time:
            raise InvalidTimeStepError(
                f"invalid time range [{min_time}, {max_time}] step {time_step}")
        n = 0
        t0 = min_time if min_time > 0 else time_step
        t = t0
        while t <= max_time + 1e-12:
            poly = cls(start, end, t)
            if validator(poly):
                return poly
            n += 1
            t = t0 + n * time_step
        raise NoValidPolynomialError(
            f"no valid polynomial in [{min_time}, {max_time}]")

    @staticmethod
    def _powers(t: float, order: int) -> np.ndarray:
        return np.array([t ** k for k in range(order)], dtype=np.float64)

    def evaluate(self, t: float) -> np.ndarray:
        """t 时刻位置

        Raises:
            OutOfRangeError: t 不在 [0, duration]
        """
        if t < 0.0 or t > self.duration:
            raise OutOfRangeError(f"t={t} not in [0, {self.duration}]")
        return self.evaluate_unchecked(t)

    def evaluate_unchecked(self, t: float) -> np.ndarray:
        return self._powers(t, 6) @ self.coeffs

    def velocity(self, t: float) -> np.ndarray:
        k = np.arange(1, 6, dtype=np.float64)
        return (k * self._powers(t, 5)) @ self.coeffs[1:]

    def acceleration(self, t: float) -> np.ndarray:
        k = np.arange(2, 6, dtype=np.float64)
        return (k * (k - 1) * self._powers(t, 4)) @ self.coeffs[2:]

    def jerk(self, t: float) -> np.ndarray:
        k = np.arange(3, 6, dtype=np.float64)
        return (k * (k - 1) * (k - 2) * self._powers(t, 3)) @ self.coeffs[3:]

    def sample(self, n: int = 100) -> np.ndarray:
        """在 [0, duration] 上等间隔采样 n 个位置, 返回 (n, 2)"""
        ts = np.linspace(0.0, self.duration, n)
        return np.array([self.evaluate_unchecked(t) for t in ts])
