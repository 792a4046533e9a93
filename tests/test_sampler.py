"""
测试节点采样

覆盖：
- 单节点解析并附加 host/port
- 多节点并发、顺序保持
- 任一节点失败整体失败
"""

import asyncio

import pytest

from redis_overview.exceptions import NodeConnectionError
from redis_overview.sampler import sample_all, sample_node

from conftest import FailingNode, FakeNode, build_info


class TestSampleNode:

    def test_parses_and_merges_address(self):
        """测试：解析 INFO 并附加节点地址"""
        node = FakeNode("10.0.0.1", 7000, build_info(version="7.0.11"))

        info = asyncio.run(sample_node(node))

        assert info["server"]["redis_version"] == "7.0.11"
        assert info["host"] == "10.0.0.1"
        assert info["port"] == 7000

    def test_connection_error_wrapped(self):
        """测试：内置 ConnectionError 转换为 NodeConnectionError"""
        node = FakeNode("10.0.0.1", 7000, error=ConnectionResetError("reset by peer"))

        with pytest.raises(NodeConnectionError) as exc_info:
            asyncio.run(sample_node(node))

        assert exc_info.value.node == "10.0.0.1:7000"
        assert isinstance(exc_info.value, ConnectionError)

    def test_timeout_wrapped(self):
        node = FakeNode(error=asyncio.TimeoutError())

        with pytest.raises(NodeConnectionError):
            asyncio.run(sample_node(node))


class TestSampleAll:

    def test_all_nodes_in_order(self):
        """测试：结果顺序与节点顺序一致"""
        nodes = [FakeNode("10.0.0.%d" % i, 7000 + i, build_info()) for i in range(3)]

        infos = asyncio.run(sample_all(nodes))

        assert [info["port"] for info in infos] == [7000, 7001, 7002]
        assert all(node.calls == 1 for node in nodes)

    def test_empty(self):
        assert asyncio.run(sample_all([])) == []

    def test_one_failure_fails_all(self):
        """测试：3 个节点中 1 个失败则整体失败"""
        nodes = [
            FakeNode("10.0.0.1", 7000, build_info()),
            FailingNode("10.0.0.2", 7001),
            FakeNode("10.0.0.3", 7002, build_info()),
        ]

        with pytest.raises(NodeConnectionError):
            asyncio.run(sample_all(nodes))

        # 其余节点的调用照常发出
        assert nodes[0].calls == 1
        assert nodes[2].calls == 1
