"""
planner/errors.py — 异常类型

规划失败本身以 ``PlanningResult`` 返回值表达, 这里的异常只用于:
- 调用方主动 ``unwrap()`` 失败结果
- debug 模式下检测到的配置空间契约违例
- 固定容量节点池溢出 (由规划器转换为 CAPACITY_EXCEEDED 结果)
"""


class RobotAlgorithmsError(Exception):
    """本库所有异常的基类."""


class PlanningError(RobotAlgorithmsError):
    """对失败结果调用 ``PlanningResult.unwrap()`` 时抛出."""

    def __init__(self, reason, message: str = ""):
        self.reason = reason
        super().__init__(message or f"planning failed: {reason.value}")


class ConfigurationSpaceViolation(RobotAlgorithmsError, ValueError):
    """配置空间返回了不一致或负代价的数据 (仅 debug 模式抛出)."""


class CapacityExceededError(RobotAlgorithmsError):
    """固定容量的节点存储已满."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        super().__init__(f"node capacity {capacity} exceeded")
