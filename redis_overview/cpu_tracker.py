"""
CPU 使用率增量计算

INFO 只提供累计 CPU 时间（used_cpu_sys / used_cpu_user）和运行时长，
需要两次采样计算 delta：

    CPU% = ((sys_t2 + user_t2) - (sys_t1 + user_t1)) / (uptime_t2 - uptime_t1) * 100

每个节点结果限制在 0~100，集群总和不设上限
（例如 3 个分片各 50%，总计 150%）。
"""

import asyncio
import logging
import math
import time
from typing import Callable, Dict, Iterable, List, Optional

from .config import get_config
from .models import CpuSample

logger = logging.getLogger(__name__)


def node_usage(previous: Optional[CpuSample], current: CpuSample) -> float:
    """
    计算单个节点两次采样间的 CPU 使用率

    没有上一次采样、运行时长未增加（重启或请求过于频繁）、
    数据异常时返回 0。
    """
    if previous is None or not previous.up_time < current.up_time:
        return 0.0

    current_usage = current.cpu_user + current.cpu_sys
    previous_usage = previous.cpu_user + previous.cpu_sys
    usage = (current_usage - previous_usage) / (current.up_time - previous.up_time) * 100

    if math.isnan(usage) or usage < 0:
        return 0.0

    # uptime 精度为秒，CPU 时间精度更高，可能短暂超过 100%
    return min(usage, 100.0)


class CpuDeltaTracker:
    """
    CPU 基线存储

    管理 {target_id: {"host:port": CpuSample}}，每次轮询整体覆盖。
    同一目标的"采样 + update"需在 lock(target_id) 内执行；
    超过 ttl_seconds 未轮询的目标被淘汰。

    Args:
        ttl_seconds: 基线保留时长，0 表示不淘汰
        clock: 时间函数（测试时注入）
    """

    def __init__(self, ttl_seconds: float = 3600, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._previous: Dict[str, Dict[str, CpuSample]] = {}
        self._last_seen: Dict[str, float] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def lock(self, target_id: str) -> asyncio.Lock:
        """目标的轮询锁，持有期间同一目标的其他轮询等待"""
        lock = self._locks.get(target_id)
        if lock is None:
            lock = self._locks[target_id] = asyncio.Lock()
        return lock

    async def update(self, target_id: str, samples: Iterable[CpuSample]) -> Optional[float]:
        """
        用本次采样更新基线并返回 CPU 使用率

        调用方应在 lock(target_id) 内完成采样和本次调用，
        否则先采样的轮询可能后写入，使基线回退。

        Returns:
            各节点使用率之和；首次轮询（无基线）返回 None
        """
        self.evict_expired()

        current = {sample.node: sample for sample in samples}
        previous = self._previous.get(target_id)

        self._previous[target_id] = current
        self._last_seen[target_id] = self._clock()

        if previous is None:
            logger.debug(f"No CPU baseline for {target_id} yet")
            return None

        return sum(node_usage(previous.get(node), sample) for node, sample in current.items())

    def evict_expired(self) -> List[str]:
        """淘汰超时未轮询的目标，返回被淘汰的 target_id"""
        if not self.ttl_seconds:
            return []

        now = self._clock()
        expired = [
            target_id
            for target_id, seen in self._last_seen.items()
            if now - seen > self.ttl_seconds
        ]
        for target_id in expired:
            self.remove(target_id)
            logger.info(f"Evicted stale CPU baseline for {target_id}")
        return expired

    def remove(self, target_id: str) -> bool:
        """删除目标基线（目标被删除时调用）"""
        self._last_seen.pop(target_id, None)
        lock = self._locks.get(target_id)
        if lock is not None and not lock.locked():
            self._locks.pop(target_id, None)
        return self._previous.pop(target_id, None) is not None

    def get_baseline(self, target_id: str) -> Optional[Dict[str, CpuSample]]:
        baseline = self._previous.get(target_id)
        return dict(baseline) if baseline is not None else None

    def __contains__(self, target_id: str) -> bool:
        return target_id in self._previous

    def __len__(self) -> int:
        return len(self._previous)


# 全局实例（延迟创建）
_tracker: Optional[CpuDeltaTracker] = None


def get_tracker() -> CpuDeltaTracker:
    """获取全局 CPU 基线存储"""
    global _tracker
    if _tracker is None:
        _tracker = CpuDeltaTracker(ttl_seconds=get_config().cpu_tracker.ttl_seconds)
    return _tracker


def reset_tracker():
    """重置全局实例（主要用于测试）"""
    global _tracker
    _tracker = None
