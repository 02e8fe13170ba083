"""
curves/dubins.py - Dubins 最短路径

只能前进、转弯半径不小于 1/max_curvature 的车辆, 两位姿间的最短路径
必为六种"词"之一: RSR, RSL, LSR, LSL, RLR, LRL。
逐一求解可行的词, 取总长最小者。

段长度采用归一化单位: 弧段为转过的角度 (rad), 直线段为转弯半径的倍数;
乘以转弯半径即为世界坐标系中的长度。

参考: Shkel & Lumelsky, "Classification of the Dubins set", 2001.
"""

import enum
import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..planner.errors import RobotAlgorithmsError
from .pose import Pose

logger = logging.getLogger(__name__)

TAU = 2.0 * math.pi


class PathNotFoundError(RobotAlgorithmsError):
    """六种词都不可行 (数值异常时才会出现)."""


class SegmentKind(str, enum.Enum):
    LEFT = "L"
    STRAIGHT = "S"
    RIGHT = "R"


@dataclass(frozen=True)
class Segment:
    kind: SegmentKind
    length: float            # 归一化长度


def mod2pi(angle: float) -> float:
    """映射到 [0, 2π)"""
    val = math.fmod(angle, TAU)
    if val < 0.0:
        val += TAU
    return val


# ==================== 六种词 ====================
# 参数均为局部坐标系下: alpha/beta 为起终点相对连线的朝向, d 为归一化距离

_Word = Callable[[float, float, float], Optional[Tuple[float, float, float]]]


def _lsl(alpha, beta, d):
    sa, sb, ca, cb = math.sin(alpha), math.sin(beta), math.cos(alpha), math.cos(beta)
    p_sq = 2.0 + d * d - 2.0 * math.cos(alpha - beta) + 2.0 * d * (sa - sb)
    if p_sq < 0.0:
        return None
    tmp = math.atan2(cb - ca, d + sa - sb)
    return mod2pi(tmp - alpha), math.sqrt(p_sq), mod2pi(beta - tmp)


def _rsr(alpha, beta, d):
    sa, sb, ca, cb = math.sin(alpha), math.sin(beta), math.cos(alpha), math.cos(beta)
    p_sq = 2.0 + d * d - 2.0 * math.cos(alpha - beta) + 2.0 * d * (sb - sa)
    if p_sq < 0.0:
        return None
    tmp = math.atan2(ca - cb, d - sa + sb)
    return mod2pi(alpha - tmp), math.sqrt(p_sq), mod2pi(tmp - beta)


def _lsr(alpha, beta, d):
    sa, sb, ca, cb = math.sin(alpha), math.sin(beta), math.cos(alpha), math.cos(beta)
    p_sq = -2.0 + d * d + 2.0 * math.cos(alpha - beta) + 2.0 * d * (sa + sb)
    if p_sq < 0.0:
        return None
    p = math.sqrt(p_sq)
    tmp = math.atan2(-ca - cb, d + sa + sb) - math.atan2(-2.0, p)
    return mod2pi(tmp - alpha), p, mod2pi(tmp - mod2pi(beta))


def _rsl(alpha, beta, d):
    sa, sb, ca, cb = math.sin(alpha), math.sin(beta), math.cos(alpha), math.cos(beta)
    p_sq = -2.0 + d * d + 2.0 * math.cos(alpha - beta) - 2.0 * d * (sa + sb)
    if p_sq < 0.0:
        return None
    p = math.sqrt(p_sq)
    tmp = math.atan2(ca + cb, d - sa - sb) - math.atan2(2.0, p)
    return mod2pi(alpha - tmp), p, mod2pi(beta - tmp)


def _rlr(alpha, beta, d):
    sa, sb, ca, cb = math.sin(alpha), math.sin(beta), math.cos(alpha), math.cos(beta)
    tmp = (6.0 - d * d + 2.0 * math.cos(alpha - beta) + 2.0 * d * (sa - sb)) / 8.0
    if abs(tmp) > 1.0:
        return None
    p = mod2pi(TAU - math.acos(tmp))
    t = mod2pi(alpha - math.atan2(ca - cb, d - sa + sb) + p / 2.0)
    return t, p, mod2pi(alpha - beta - t + p)


def _lrl(alpha, beta, d):
    sa, sb, ca, cb = math.sin(alpha), math.sin(beta), math.cos(alpha), math.cos(beta)
    tmp = (6.0 - d * d + 2.0 * math.cos(alpha - beta) + 2.0 * d * (sb - sa)) / 8.0
    if abs(tmp) > 1.0:
        return None
    p = mod2pi(TAU - math.acos(tmp))
    t = mod2pi(-alpha - math.atan2(ca - cb, d + sa - sb) + p / 2.0)
    return t, p, mod2pi(mod2pi(beta) - alpha - t + p)


L, S, R = SegmentKind.LEFT, SegmentKind.STRAIGHT, SegmentKind.RIGHT

WORDS: Dict[str, Tuple[Tuple[SegmentKind, ...], _Word]] = {
    "LSL": ((L, S, L), _lsl),
    "RSR": ((R, S, R), _rsr),
    "LSR": ((L, S, R), _lsr),
    "RSL": ((R, S, L), _rsl),
    "RLR": ((R, L, R), _rlr),
    "LRL": ((L, R, L), _lrl),
}


# ==================== 路径 ====================

def advance(origin: Pose, kind: SegmentKind, length: float,
            radius: float) -> Pose:
    """从 origin 沿一段走归一化长度 length 后的位姿 (length < 0 为倒车)"""
    if kind is SegmentKind.STRAIGHT:
        return origin.translated(*(length * radius * origin.heading))
    if kind is SegmentKind.LEFT:
        local = Pose(math.sin(length) * radius,
                     (1.0 - math.cos(length)) * radius, length)
    else:
        local = Pose(math.sin(length) * radius,
                     (math.cos(length) - 1.0) * radius, -length)
    return origin.from_local(local)


def sample_segments(start: Pose, segments: Sequence[Segment], radius: float,
                    step_size: float) -> List[Tuple[Pose, SegmentKind]]:
    """以不超过 step_size (世界长度) 的间隔采样分段路径

    段长度可为负 (倒车), 此时沿该段反向前进。

    Returns:
        [(pose, 所在段类型), ...], 含起点与终点
    """
    if step_size <= 0:
        raise ValueError(f"step_size 必须为正, got {step_size}")
    step = step_size / radius
    points = [(start, segments[0].kind)]
    origin = start
    for seg in segments:
        if seg.length == 0.0:
            continue
        sign = 1.0 if seg.length > 0 else -1.0
        s = step
        while s < abs(seg.length):
            points.append((advance(origin, seg.kind, sign * s, radius),
                           seg.kind))
            s += step
        origin = advance(origin, seg.kind, seg.length, radius)
        points.append((origin, seg.kind))
    return points


@dataclass(frozen=True)
class DubinsPath:
    """两位姿间的 Dubins 最短路径

    Attributes:
        start, end: 起终位姿
        max_curvature: 最大曲率 (= 1 / 最小转弯半径)
        word: 词名, 如 "LSL"
        segments: 三段 (kind, 归一化长度)
    """
    start: Pose
    end: Pose
    max_curvature: float
    word: str
    segments: Tuple[Segment, Segment, Segment]

    @classmethod
    def shortest(cls, start: Pose, end: Pose,
                 max_curvature: float) -> "DubinsPath":
        """求 start → end 的最短 Dubins 路径

        Raises:
            ValueError: max_curvature <= 0
            PathNotFoundError: 没有可行的词
        """
        if max_curvature <= 0:
            raise ValueError(f"max_curvature 必须为正, got {max_curvature}")
        candidates = cls.all_words(start, end, max_curvature)
        if not candidates:
            raise PathNotFoundError(f"no Dubins word from {start} to {end}")
        best = min(candidates, key=lambda p: p.normalized_length)
        logger.debug("Dubins %s: 长度 %.4f", best.word, best.length)
        return best

    @classmethod
    def all_words(cls, start: Pose, end: Pose,
                  max_curvature: float) -> List["DubinsPath"]:
        """所有可行词对应的路径 (按 WORDS 顺序)"""
        local_end = start.to_local(end)
        d = max_curvature * math.hypot(local_end.x, local_end.y)
        theta = mod2pi(math.atan2(local_end.y, local_end.x))
        alpha = mod2pi(-theta)
        beta = mod2pi(local_end.angle - theta)

        paths = []
        for word, (kinds, solve) in WORDS.items():
            lengths = solve(alpha, beta, d)
            if lengths is None:
                continue
            segments = tuple(Segment(k, v) for k, v in zip(kinds, lengths))
            paths.append(cls(start, end, max_curvature, word, segments))
        return paths

    @property
    def radius(self) -> float:
        return 1.0 / self.max_curvature

    @property
    def normalized_length(self) -> float:
        return sum(s.length for s in self.segments)

    @property
    def length(self) -> float:
        """世界坐标系中的路径长度"""
        return self.normalized_length * self.radius

    def endpoint(self) -> Pose:
        """按段积分得到的终点位姿 (应与 end 重合)"""
        pose = self.start
        for seg in self.segments:
            pose = advance(pose, seg.kind, seg.length, self.radius)
        return pose

    def sample(self, step_size: float) -> List[Tuple[Pose, SegmentKind]]:
        """以不超过 step_size (世界长度) 的间隔采样路径

        Returns:
            [(pose, 所在段类型), ...], 含起点与终点
        """
        return sample_segments(self.start, self.segments, self.radius, step_size)
