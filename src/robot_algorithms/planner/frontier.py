"""
planner/frontier.py - 确定性最小优先队列 (lazy deletion)

堆中只插入不删除, 另用 ``best`` 字典记录每个 key 当前权威记录的
(优先级, 序号)。relax 时直接再压入一条更小的记录; pop 时若记录的序号与
``best[key]`` 不一致, 说明它已被更新的记录取代, 直接丢弃。

失效判定不变式:
    一条记录 (p, seq, key) 是权威的 ⇔ key 仍在 best 中且 best[key] == (p, seq)。
    push 只接受严格更小的 p, 因此同一 key 最多有一条权威记录, 被丢弃的
    总是较旧/较大的那条, 永远不会丢弃更新的记录。
    key 被 pop 之后从 best 中移除, 它残留的旧记录在之后全部失效;
    即使同一 key 以相同优先级再次压入, 旧记录的 seq 也对不上。

相同优先级按插入顺序 (FIFO) 弹出, 保证结果可复现。
"""

import heapq
import itertools
from typing import Any, Dict, Hashable, List, Optional, Tuple


class PriorityFrontier:
    """支持 relax 的最小优先队列

    Example:
        >>> f = PriorityFrontier()
        >>> for key, p in [("a", 5.0), ("b", 3.0), ("c", 5.0)]:
        ...     _ = f.push(key, p)
        >>> [f.pop()[0] for _ in range(3)]
        ['b', 'a', 'c']
        >>> f.pop() is None
        True
    """

    __slots__ = ("_heap", "_best", "_counter", "n_stale")

    def __init__(self) -> None:
        self._heap: List[Tuple[float, int, Hashable]] = []
        self._best: Dict[Hashable, Tuple[float, int]] = {}
        self._counter = itertools.count()
        self.n_stale = 0

    def push(self, key: Hashable, priority: float) -> bool:
        """插入或降低 key 的优先级.

        Returns:
            是否被接受 (priority 严格小于已知最优时才接受)
        """
        best = self._best.get(key)
        if best is not None and priority >= best[0]:
            return False
        seq = next(self._counter)
        self._best[key] = (priority, seq)
        heapq.heappush(self._heap, (priority, seq, key))
        return True

    def pop(self) -> Optional[Tuple[Hashable, float]]:
        """弹出优先级最小的权威记录.

        Returns:
            (key, priority); 队列为空时返回 None
        """
        heap = self._heap
        while heap:
            priority, seq, key = heapq.heappop(heap)
            if self._best.get(key) != (priority, seq):
                self.n_stale += 1
                continue
            del self._best[key]
            return key, priority
        return None

    def peek_priority(self) -> Optional[float]:
        """当前最小的权威优先级 (会顺带清理堆顶的失效记录)"""
        heap = self._heap
        while heap:
            priority, seq, key = heap[0]
            if self._best.get(key) == (priority, seq):
                return priority
            heapq.heappop(heap)
            self.n_stale += 1
        return None

    def best_priority(self, key: Hashable) -> Optional[float]:
        best = self._best.get(key)
        return None if best is None else best[0]

    def clear(self) -> None:
        self._heap.clear()
        self._best.clear()

    def __len__(self) -> int:
        return len(self._best)

    def __bool__(self) -> bool:
        return bool(self._best)

    def __contains__(self, key: Any) -> bool:
        return key in self._best
