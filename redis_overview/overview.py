"""
数据库概览聚合

根据目标类型（单机/集群）拉取所有节点 INFO，按指标规则聚合：

| 指标              | 规则       | 节点范围   |
|-------------------|------------|------------|
| version           | 取第一个   | 第一个节点 |
| totalKeys         | 求和       | 主节点     |
| usedMemory        | 求和       | 主节点     |
| connectedClients  | 中位数     | 所有节点   |
| opsPerSecond      | 求和       | 所有节点   |
| networkIn/OutKbps | 求和       | 所有节点   |
| cpuUsagePercentage| 增量求和   | 所有节点   |
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Union

from .cpu_tracker import CpuDeltaTracker, get_tracker
from .info_parser import parse_bulk_string
from .models import CpuSample, OverviewRecord
from .sampler import sample_all

logger = logging.getLogger(__name__)

NodeInfo = Dict[str, Any]

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def _get(node: NodeInfo, section: str, field: str, default: Any = None) -> Any:
    return (node.get(section) or {}).get(field, default)


def _to_int(value: Any) -> int:
    """
    取字符串开头的整数（"12.5" -> 12）

    Raises:
        ValueError: 开头不是整数
    """
    if isinstance(value, int):
        return value
    match = _INT_PREFIX.match(str(value))
    if match is None:
        raise ValueError(f"Not an integer: {value!r}")
    return int(match.group(1))


def _to_int_or_zero(value: Any) -> int:
    try:
        return _to_int(value)
    except ValueError:
        return 0


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def get_median_value(values: Sequence[Union[int, float]]) -> Union[int, float]:
    """
    中位数，空列表返回 0
    """
    if not values:
        return 0

    ordered = sorted(values)
    middle = len(ordered) // 2

    if len(ordered) % 2:
        return ordered[middle]

    return (ordered[middle - 1] + ordered[middle]) / 2


def is_master(node: NodeInfo) -> bool:
    return _get(node, "replication", "role") == "master"


def get_version(nodes: Sequence[NodeInfo]) -> Optional[str]:
    """取第一个节点的 redis_version"""
    if not nodes:
        return None
    return _get(nodes[0], "server", "redis_version")


def _sum_stat(nodes: Sequence[NodeInfo], field: str) -> int:
    return sum(_to_int_or_zero(_get(node, "stats", field, 0)) for node in nodes)


def calculate_ops_per_sec(nodes: Sequence[NodeInfo]) -> int:
    """所有节点 instantaneous_ops_per_sec 之和"""
    return _sum_stat(nodes, "instantaneous_ops_per_sec")


def calculate_network_in(nodes: Sequence[NodeInfo]) -> int:
    """所有节点 instantaneous_input_kbps 之和"""
    return _sum_stat(nodes, "instantaneous_input_kbps")


def calculate_network_out(nodes: Sequence[NodeInfo]) -> int:
    """所有节点 instantaneous_output_kbps 之和"""
    return _sum_stat(nodes, "instantaneous_output_kbps")


def calculate_connected_clients(nodes: Sequence[NodeInfo]) -> Union[int, float]:
    """所有节点 connected_clients 的中位数"""
    return get_median_value(
        [_to_int_or_zero(_get(node, "clients", "connected_clients", 0)) for node in nodes]
    )


def calculate_used_memory(nodes: Sequence[NodeInfo]) -> Optional[int]:
    """主节点 used_memory 之和，解析失败返回 None"""
    try:
        return sum(
            _to_int(_get(node, "memory", "used_memory", 0))
            for node in nodes
            if is_master(node)
        )
    except (ValueError, TypeError, AttributeError) as e:
        logger.debug(f"Failed to calculate used memory: {e}")
        return None


def calculate_total_keys(nodes: Sequence[NodeInfo]) -> Optional[int]:
    """
    主节点 key 总数

    一个分片有多个逻辑库时，分片 key 数 = 所有库之和。
    keyspace 编码异常时返回 None。
    """
    try:
        total = 0
        for node in nodes:
            if not is_master(node):
                continue
            for db_keys in (node.get("keyspace") or {}).values():
                total += _to_int(parse_bulk_string(db_keys)["keys"])
        return total
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        logger.debug(f"Failed to calculate total keys: {e}")
        return None


def get_cpu_samples(nodes: Sequence[NodeInfo]) -> List[CpuSample]:
    """从 INFO 中提取每个节点的 CPU 采样"""
    return [
        CpuSample(
            node=f"{node.get('host')}:{node.get('port')}",
            cpu_sys=_to_float(_get(node, "cpu", "used_cpu_sys")),
            cpu_user=_to_float(_get(node, "cpu", "used_cpu_user")),
            up_time=_to_float(_get(node, "server", "uptime_in_seconds")),
        )
        for node in nodes
    ]


class OverviewAggregator:
    """
    概览聚合器

    Args:
        tracker: CPU 基线存储，默认使用全局实例
    """

    def __init__(self, tracker: Optional[CpuDeltaTracker] = None):
        self.tracker = tracker if tracker is not None else get_tracker()

    async def get_overview(self, target_id: str, nodes: Sequence) -> OverviewRecord:
        """
        计算目标的数据库概览

        Args:
            target_id: 目标 ID（CPU 基线按此区分）
            nodes: 节点连接列表，单机为一个

        同一目标的并发调用按到达顺序串行，CPU 基线不会回退到较旧的采样。

        Raises:
            NodeConnectionError: 任一节点拉取失败
        """
        async with self.tracker.lock(target_id):
            nodes_info = await sample_all(nodes)
            return await self.reduce(target_id, nodes_info)

    async def reduce(self, target_id: str, nodes_info: Sequence[NodeInfo]) -> OverviewRecord:
        """将已解析的节点 INFO 聚合为概览"""
        record = OverviewRecord(
            version=get_version(nodes_info),
            total_keys=calculate_total_keys(nodes_info),
            used_memory=calculate_used_memory(nodes_info),
            connected_clients=calculate_connected_clients(nodes_info),
            ops_per_second=calculate_ops_per_sec(nodes_info),
            network_in_kbps=calculate_network_in(nodes_info),
            network_out_kbps=calculate_network_out(nodes_info),
        )
        record.cpu_usage_percentage = await self.tracker.update(
            target_id, get_cpu_samples(nodes_info)
        )
        logger.debug(f"Overview for {target_id} from {len(nodes_info)} node(s): {record}")
        return record
