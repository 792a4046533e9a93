"""
节点连接适配

基于 redis-py（redis.asyncio）为每个节点提供 INFO 原始文本：
- 单机目标：一个节点
- 集群目标：get_nodes() 返回的所有节点（主、从）

连接管理（连接池、重连、认证）由 redis-py 负责，这里只负责
单次调用超时和错误转换。
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Union

import redis.asyncio as redis_async
import redis.exceptions
from redis.asyncio.cluster import ClusterNode, RedisCluster

from .config import TargetConfig, get_config
from .exceptions import NodeConnectionError

logger = logging.getLogger(__name__)

RedisClient = Union[redis_async.Redis, RedisCluster]


def _raw_reply(response, **options):
    """INFO 回调：保留原始文本，不做 redis-py 默认解析"""
    return response


def _decode(reply: Any) -> str:
    if isinstance(reply, (bytes, bytearray)):
        return bytes(reply).decode("utf-8", errors="replace")
    return reply


class RedisNodeConnection:
    """
    单个节点的连接句柄

    Args:
        client: redis.asyncio.Redis 或 RedisCluster
        host: 节点地址
        port: 节点端口
        timeout: 单次 INFO 调用超时（秒）
        cluster_node: 集群模式下的目标节点
    """

    def __init__(
        self,
        client: RedisClient,
        host: str,
        port: int,
        timeout: float = 2.0,
        cluster_node: Optional[ClusterNode] = None,
    ):
        self.client = client
        self.host = host
        self.port = port
        self.timeout = timeout
        self.cluster_node = cluster_node

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    async def info(self) -> str:
        """
        执行 INFO 并返回原始文本

        Raises:
            NodeConnectionError: 调用失败或超时
        """
        if self.cluster_node is not None:
            call = self.client.execute_command("INFO", target_nodes=self.cluster_node)
        else:
            call = self.client.execute_command("INFO")

        try:
            reply = await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise NodeConnectionError(self.address, f"INFO timed out after {self.timeout}s") from e
        except (redis.exceptions.RedisError, OSError) as e:
            raise NodeConnectionError(self.address, str(e)) from e

        return _decode(reply)


def create_client(target: TargetConfig, timeout: float = 2.0) -> RedisClient:
    """
    根据目标配置创建 redis-py 客户端

    INFO 的响应回调被替换为原样返回，以便自行解析。
    """
    params: Dict[str, Any] = {
        "host": target.host,
        "port": target.port,
        "username": target.username,
        "password": target.password,
        "ssl": target.tls,
        "socket_timeout": timeout,
        "socket_connect_timeout": timeout,
    }

    if target.cluster:
        client = RedisCluster(**params)
    else:
        client = redis_async.Redis(db=target.db, **params)

    client.set_response_callback("INFO", _raw_reply)
    logger.debug(f"Created {'cluster' if target.cluster else 'standalone'} client for {target.id}")
    return client


async def resolve_nodes(client: RedisClient, timeout: float = 2.0) -> List[RedisNodeConnection]:
    """
    枚举目标下的所有节点

    Returns:
        单机返回一个节点；集群返回所有节点（含从节点）
    """
    if isinstance(client, RedisCluster):
        try:
            await client.initialize()
        except (redis.exceptions.RedisError, OSError) as e:
            raise NodeConnectionError("cluster", f"failed to load topology: {e}") from e
        return [
            RedisNodeConnection(client, node.host, node.port, timeout, cluster_node=node)
            for node in client.get_nodes()
        ]

    kwargs = client.connection_pool.connection_kwargs
    return [
        RedisNodeConnection(
            client,
            kwargs.get("host", "localhost"),
            kwargs.get("port", 6379),
            timeout,
        )
    ]


class ClientRegistry:
    """
    目标客户端缓存

    每个目标只创建一个客户端：{target_id: client}
    """

    def __init__(self, timeout: float = 2.0):
        self.timeout = timeout
        self._clients: Dict[str, RedisClient] = {}

    def get_client(self, target: TargetConfig) -> RedisClient:
        client = self._clients.get(target.id)
        if client is None:
            client = create_client(target, self.timeout)
            self._clients[target.id] = client
        return client

    async def get_nodes(self, target: TargetConfig) -> List[RedisNodeConnection]:
        """获取目标的节点连接列表"""
        return await resolve_nodes(self.get_client(target), self.timeout)

    async def close(self, target_id: str):
        client = self._clients.pop(target_id, None)
        if client is not None:
            await client.aclose()

    async def close_all(self):
        """关闭所有客户端"""
        for target_id in list(self._clients):
            try:
                await self.close(target_id)
            except Exception as e:
                logger.warning(f"Failed to close client for {target_id}: {e}")


# 全局实例（延迟创建）
_registry: Optional[ClientRegistry] = None


def get_registry() -> ClientRegistry:
    """获取全局客户端缓存"""
    global _registry
    if _registry is None:
        _registry = ClientRegistry(timeout=get_config().collector.timeout)
    return _registry


def reset_registry():
    """重置全局实例（主要用于测试）"""
    global _registry
    _registry = None
