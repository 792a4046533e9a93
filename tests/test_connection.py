"""
测试节点连接适配

不连接真实 Redis，使用桩客户端验证 INFO 调用和错误转换。
"""

import asyncio

import pytest
import redis.exceptions

from redis_overview.config import TargetConfig
from redis_overview.connection import (
    ClientRegistry,
    RedisNodeConnection,
    create_client,
    resolve_nodes,
)
from redis_overview.exceptions import NodeConnectionError


class StubClient:
    def __init__(self, reply=b"# Server\r\nredis_version:7.2.4\r\n", error=None, delay=0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls = []

    async def execute_command(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


class TestRedisNodeConnection:

    def test_info_decodes_bytes(self):
        client = StubClient()
        connection = RedisNodeConnection(client, "10.0.0.1", 6379)

        reply = asyncio.run(connection.info())

        assert reply == "# Server\r\nredis_version:7.2.4\r\n"
        assert client.calls == [(("INFO",), {})]

    def test_cluster_node_targeted(self):
        client = StubClient(reply="# Server\r\n")
        node = object()
        connection = RedisNodeConnection(client, "10.0.0.1", 7000, cluster_node=node)

        asyncio.run(connection.info())

        assert client.calls == [(("INFO",), {"target_nodes": node})]

    def test_redis_error_wrapped(self):
        client = StubClient(error=redis.exceptions.ConnectionError("refused"))
        connection = RedisNodeConnection(client, "10.0.0.1", 6379)

        with pytest.raises(NodeConnectionError) as exc_info:
            asyncio.run(connection.info())

        assert exc_info.value.node == "10.0.0.1:6379"

    def test_timeout_wrapped(self):
        client = StubClient(delay=1)
        connection = RedisNodeConnection(client, "10.0.0.1", 6379, timeout=0.01)

        with pytest.raises(NodeConnectionError, match="timed out"):
            asyncio.run(connection.info())


class TestCreateClient:

    def test_standalone_returns_raw_info(self):
        target = TargetConfig(id="local", host="10.1.2.3", port=7001)

        client = create_client(target)
        nodes = asyncio.run(resolve_nodes(client, timeout=1.5))

        assert client.response_callbacks["INFO"]("raw text") == "raw text"
        assert [(n.host, n.port, n.timeout) for n in nodes] == [("10.1.2.3", 7001, 1.5)]

    def test_registry_reuses_client(self):
        registry = ClientRegistry()
        target = TargetConfig(id="local")

        assert registry.get_client(target) is registry.get_client(target)
