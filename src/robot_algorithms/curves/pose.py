"""
curves/pose.py - 平面位姿

Pose(x, y, angle): 位置 + 朝向 (rad), 用于 Dubins 曲线和纯追踪。
"""

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Pose:
    """平面位姿 (不可变)"""
    x: float
    y: float
    angle: float = 0.0

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=np.float64)

    @property
    def heading(self) -> np.ndarray:
        """单位朝向向量"""
        return np.array([math.cos(self.angle), math.sin(self.angle)])

    def translated(self, dx: float, dy: float) -> "Pose":
        return Pose(self.x + dx, self.y + dy, self.angle)

    def rotated(self, theta: float) -> "Pose":
        """绕原点旋转 theta"""
        c, s = math.cos(theta), math.sin(theta)
        return Pose(c * self.x - s * self.y, s * self.x + c * self.y,
                    self.angle + theta)

    def scaled(self, scale: float) -> "Pose":
        return Pose(self.x * scale, self.y * scale, self.angle)

    def to_local(self, other: "Pose") -> "Pose":
        """把世界坐标系中的 other 变换到以本位姿为原点的局部坐标系"""
        return other.translated(-self.x, -self.y).rotated(-self.angle)

    def from_local(self, other: "Pose") -> "Pose":
        """to_local 的逆变换"""
        return other.rotated(self.angle).translated(self.x, self.y)

    def at(self, t: float) -> np.ndarray:
        """沿朝向前进 t 后的位置"""
        return self.position + t * self.heading

    def isclose(self, other: "Pose", tol: float = 1e-9) -> bool:
        """位置与朝向 (模 2π) 均在 tol 内"""
        d_angle = math.remainder(self.angle - other.angle, 2.0 * math.pi)
        return (abs(self.x - other.x) <= tol and abs(self.y - other.y) <= tol
                and abs(d_angle) <= tol)
