"""
节点采样

对每个节点执行 INFO 并解析，集群目标并发拉取所有节点。
"""

import asyncio
import logging
from typing import Any, Dict, List, Sequence

from .exceptions import NodeConnectionError
from .info_parser import parse_info_reply

logger = logging.getLogger(__name__)


async def sample_node(connection) -> Dict[str, Any]:
    """
    拉取单个节点的 INFO

    Args:
        connection: 节点连接句柄，需提供 host、port 属性和 async info() 方法

    Returns:
        解析后的 INFO 字典，附加 host、port

    Raises:
        NodeConnectionError: 节点调用失败（不重试）
    """
    try:
        reply = await connection.info()
    except NodeConnectionError:
        raise
    except (ConnectionError, OSError, asyncio.TimeoutError) as e:
        raise NodeConnectionError(f"{connection.host}:{connection.port}", str(e)) from e

    info: Dict[str, Any] = parse_info_reply(reply)
    info["host"] = connection.host
    info["port"] = connection.port
    return info


async def sample_all(nodes: Sequence) -> List[Dict[str, Any]]:
    """
    并发拉取所有节点

    任一节点失败则整体失败（其余节点的调用不会被取消，结果丢弃）。
    返回顺序与 nodes 一致。
    """
    if not nodes:
        return []

    try:
        return list(await asyncio.gather(*(sample_node(node) for node in nodes)))
    except NodeConnectionError as e:
        logger.warning(f"Sampling {len(nodes)} node(s) failed: {e}")
        raise
