"""
curves/reeds_shepp.py - Reeds–Shepp 最短路径

与 Dubins 相同的车辆模型 (转弯半径不小于 1/max_curvature), 但允许倒车。
段长度带符号: 正为前进, 负为倒车; 归一化单位与 Dubins 相同。

最优路径属于 48 种词之一, 它们都可由论文中 8.1 - 8.11 的 9 个基本公式
经两种对称变换得到:

    timeflip : (x, y, φ) → (-x, y, -φ), 所有段长度取反
    reflect  : (x, y, φ) → (x, -y, -φ), 左右互换

部分公式还有"倒序"形式: 在 (xb, yb, φ) 上求解后把段顺序反转。

参考:
    Reeds & Shepp, "Optimal paths for a car that goes both forwards and
    backwards", Pacific J. Math. 145(2), 1990.
    OMPL ReedsSheppStateSpace (修正了论文 8.3 / 8.11 的笔误)
"""

import logging
import math
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .dubins import PathNotFoundError, Segment, SegmentKind, advance, sample_segments
from .pose import Pose

logger = logging.getLogger(__name__)

HALF_PI = 0.5 * math.pi
# 可行性判定的数值容差
ZERO = 10 * sys.float_info.epsilon

L, S, R = SegmentKind.LEFT, SegmentKind.STRAIGHT, SegmentKind.RIGHT

Segments = Tuple[Segment, ...]


def wrap_angle(angle: float) -> float:
    """映射到 [-π, π]"""
    v = math.fmod(angle, 2.0 * math.pi)
    if v < -math.pi:
        v += 2.0 * math.pi
    elif v > math.pi:
        v -= 2.0 * math.pi
    return v


def _polar(x: float, y: float) -> Tuple[float, float]:
    return math.hypot(x, y), math.atan2(y, x)


def _tau_omega(u, v, xi, eta, phi) -> Tuple[float, float]:
    delta = wrap_angle(u - v)
    a = math.sin(u) - math.sin(delta)
    b = math.cos(u) - math.cos(delta) - 1.0
    t1 = math.atan2(eta * a - xi * b, xi * a + eta * b)
    t2 = 2.0 * (math.cos(delta) - math.cos(v) - math.cos(u)) + 3.0
    tau = wrap_angle(t1 + math.pi) if t2 < 0 else wrap_angle(t1)
    return tau, wrap_angle(tau - u + v - phi)


def _segs(*pairs) -> Segments:
    return tuple(Segment(k, float(v)) for k, v in pairs)


# ==================== 9 个基本公式 ====================
# 输入为以起点为原点、按转弯半径归一化的终点 (x, y, φ)
# 命名: p = 前进, m = 倒车, u 表示两段长度相同

_Formula = Callable[[float, float, float], Optional[Segments]]


def _lp_sp_lp(x, y, phi):
    """8.1 CSC: L+ S+ L+"""
    u, t = _polar(x - math.sin(phi), y - 1.0 + math.cos(phi))
    if t < -ZERO:
        return None
    v = wrap_angle(phi - t)
    if v < -ZERO:
        return None
    return _segs((L, t), (S, u), (L, v))


def _lp_sp_rp(x, y, phi):
    """8.2 CSC: L+ S+ R+"""
    u1, t1 = _polar(x + math.sin(phi), y - 1.0 - math.cos(phi))
    u1_sq = u1 * u1
    if u1_sq < 4.0:
        return None
    u = math.sqrt(u1_sq - 4.0)
    t = wrap_angle(t1 + math.atan2(2.0, u))
    v = wrap_angle(t - phi)
    if t < -ZERO or v < -ZERO:
        return None
    return _segs((L, t), (S, u), (R, v))


def _lp_rm_l(x, y, phi):
    """8.3 / 8.4 C|C|C, C|CC: L+ R- L"""
    xi, eta = x - math.sin(phi), y - 1.0 + math.cos(phi)
    u1, theta = _polar(xi, eta)
    if u1 > 4.0:
        return None
    u = -2.0 * math.asin(0.25 * u1)
    t = wrap_angle(theta + 0.5 * u + math.pi)
    v = wrap_angle(phi - t + u)
    if t < -ZERO or u > ZERO:
        return None
    return _segs((L, t), (R, u), (L, v))


def _lp_rup_lum_rm(x, y, phi):
    """8.7 CC|CC: L+ R+ L- R-"""
    xi, eta = x + math.sin(phi), y - 1.0 - math.cos(phi)
    rho = 0.25 * (2.0 + math.hypot(xi, eta))
    if rho > 1.0:
        return None
    u = math.acos(rho)
    t, v = _tau_omega(u, -u, xi, eta, phi)
    if t < -ZERO or v > ZERO:
        return None
    return _segs((L, t), (R, u), (L, -u), (R, v))


def _lp_rum_lum_rp(x, y, phi):
    """8.8 C|CC|C: L+ R- L- R+"""
    xi, eta = x + math.sin(phi), y - 1.0 - math.cos(phi)
    rho = (20.0 - xi * xi - eta * eta) / 16.0
    if not 0.0 <= rho <= 1.0:
        return None
    u = -math.acos(rho)
    if u < -HALF_PI:
        return None
    t, v = _tau_omega(u, u, xi, eta, phi)
    if t < -ZERO or v < -ZERO:
        return None
    return _segs((L, t), (R, u), (L, u), (R, v))


def _lp_rm_sm_lm(x, y, phi):
    """8.9 C|C(π/2)SC: L+ R- S- L-"""
    xi, eta = x - math.sin(phi), y - 1.0 + math.cos(phi)
    rho, theta = _polar(xi, eta)
    if rho < 2.0:
        return None
    r = math.sqrt(rho * rho - 4.0)
    u = 2.0 - r
    t = wrap_angle(theta + math.atan2(r, -2.0))
    v = wrap_angle(phi - HALF_PI - t)
    if t < -ZERO or u > ZERO or v > ZERO:
        return None
    return _segs((L, t), (R, -HALF_PI), (S, u), (L, v))


def _lp_rm_sm_rm(x, y, phi):
    """8.10 C|C(π/2)SC: L+ R- S- R-"""
    xi, eta = x + math.sin(phi), y - 1.0 - math.cos(phi)
    rho, theta = _polar(-eta, xi)
    if rho < 2.0:
        return None
    t = theta
    u = 2.0 - rho
    v = wrap_angle(t + HALF_PI - phi)
    if t < -ZERO or u > ZERO or v > ZERO:
        return None
    return _segs((L, t), (R, -HALF_PI), (S, u), (R, v))


def _lp_rm_s_lm_rp(x, y, phi):
    """8.11 C|C(π/2)SC(π/2)|C: L+ R- S- L- R+"""
    xi, eta = x + math.sin(phi), y - 1.0 - math.cos(phi)
    rho, _ = _polar(xi, eta)
    if rho < 2.0:
        return None
    u = 4.0 - math.sqrt(rho * rho - 4.0)
    if u > ZERO:
        return None
    t = wrap_angle(math.atan2((4.0 - u) * xi - 2.0 * eta,
                              -2.0 * xi + (u - 4.0) * eta))
    v = wrap_angle(t - phi)
    if t < -ZERO or v < -ZERO:
        return None
    return _segs((L, t), (R, -HALF_PI), (S, u), (L, -HALF_PI), (R, v))


# (公式, 是否倒序求解)
FORMULAS: Tuple[Tuple[_Formula, bool], ...] = (
    (_lp_sp_lp, False),
    (_lp_sp_rp, False),
    (_lp_rm_l, False),
    (_lp_rm_l, True),
    (_lp_rup_lum_rm, False),
    (_lp_rum_lum_rp, False),
    (_lp_rm_sm_lm, False),
    (_lp_rm_sm_lm, True),
    (_lp_rm_sm_rm, False),
    (_lp_rm_sm_rm, True),
    (_lp_rm_s_lm_rp, False),
)


# ==================== 对称变换 ====================

def timeflip(segments: Sequence[Segment]) -> Segments:
    """前进 ↔ 倒车"""
    return tuple(Segment(s.kind, -s.length) for s in segments)


def reflect(segments: Sequence[Segment]) -> Segments:
    """左 ↔ 右"""
    swap = {L: R, R: L, S: S}
    return tuple(Segment(swap[s.kind], s.length) for s in segments)


def _variants(formula: _Formula, x: float, y: float, phi: float,
              backwards: bool) -> List[Segments]:
    """一个基本公式经 timeflip / reflect 得到的全部可行段序列"""
    if backwards:
        sp, cp = math.sin(phi), math.cos(phi)
        x, y = x * cp + y * sp, x * sp - y * cp
    out = []
    for sx, sy, sphi, flip, refl in ((1, 1, 1, False, False),
                                     (-1, 1, -1, True, False),
                                     (1, -1, -1, False, True),
                                     (-1, -1, 1, True, True)):
        segs = formula(sx * x, sy * y, sphi * phi)
        if segs is None:
            continue
        if backwards:
            segs = segs[::-1]
        if flip:
            segs = timeflip(segs)
        if refl:
            segs = reflect(segs)
        out.append(segs)
    return out


def word_name(segments: Sequence[Segment]) -> str:
    """如 "L+R-L+"; 零长度段按前进记"""
    return "".join(f"{s.kind.value}{'-' if s.length < 0 else '+'}"
                   for s in segments)


# ==================== 路径 ====================

@dataclass(frozen=True)
class ReedsSheppPath:
    """两位姿间的 Reeds–Shepp 路径

    Attributes:
        start, end: 起终位姿
        max_curvature: 最大曲率 (= 1 / 最小转弯半径)
        word: 词名, 如 "L+S+R+", 符号为行驶方向
        segments: 1 - 5 段 (kind, 带符号的归一化长度), 不含零长度段

    Example:
        >>> p = ReedsSheppPath.shortest(Pose(0, 0, 0), Pose(-2, 0, 0), 1.0)
        >>> p.word, round(p.length, 6)
        ('S-', 2.0)
    """
    start: Pose
    end: Pose
    max_curvature: float
    word: str
    segments: Segments

    @classmethod
    def shortest(cls, start: Pose, end: Pose,
                 max_curvature: float) -> "ReedsSheppPath":
        """求 start → end 的最短 Reeds–Shepp 路径

        长度相同时取 FORMULAS 中靠前的词。

        Raises:
            ValueError: max_curvature <= 0
            PathNotFoundError: 没有可行的词
        """
        if max_curvature <= 0:
            raise ValueError(f"max_curvature 必须为正, got {max_curvature}")
        candidates = cls.all_words(start, end, max_curvature)
        if not candidates:
            raise PathNotFoundError(f"no Reeds-Shepp word from {start} to {end}")
        best = min(candidates, key=lambda p: p.normalized_length)
        logger.debug("Reeds-Shepp %s: 长度 %.4f (共 %d 个候选)",
                     best.word, best.length, len(candidates))
        return best

    @classmethod
    def all_words(cls, start: Pose, end: Pose,
                  max_curvature: float) -> List["ReedsSheppPath"]:
        """所有可行词对应的路径"""
        local_end = start.to_local(end).scaled(max_curvature)
        x, y, phi = local_end.x, local_end.y, local_end.angle

        paths = []
        for formula, backwards in FORMULAS:
            for segs in _variants(formula, x, y, phi, backwards):
                # 零长度段不影响几何, 去掉后词名更短
                kept = tuple(s for s in segs if s.length != 0.0) or segs[:1]
                paths.append(cls(start, end, max_curvature, word_name(kept), kept))
        return paths

    @property
    def radius(self) -> float:
        return 1.0 / self.max_curvature

    @property
    def normalized_length(self) -> float:
        return sum(abs(s.length) for s in self.segments)

    @property
    def length(self) -> float:
        """世界坐标系中的路径长度"""
        return self.normalized_length * self.radius

    @property
    def gears(self) -> Tuple[int, ...]:
        """每段行驶方向: 1 前进, -1 倒车"""
        return tuple(-1 if s.length < 0 else 1 for s in self.segments)

    @property
    def n_cusps(self) -> int:
        """换向次数"""
        g = self.gears
        return sum(1 for a, b in zip(g[:-1], g[1:]) if a != b)

    def endpoint(self) -> Pose:
        """按段积分得到的终点位姿 (应与 end 重合)"""
        pose = self.start
        for seg in self.segments:
            pose = advance(pose, seg.kind, seg.length, self.radius)
        return pose

    def sample(self, step_size: float) -> List[Tuple[Pose, SegmentKind]]:
        """以不超过 step_size (世界长度) 的间隔采样路径, 含起点与终点"""
        return sample_segments(self.start, self.segments, self.radius, step_size)
