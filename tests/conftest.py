"""
测试公共设施

FakeNode 代替真实 Redis 节点，返回预设的 INFO 文本。
"""

import sys
from pathlib import Path

import pytest

# 添加项目路径到 sys.path
sys.path.insert(0, str(Path(__file__).parent.parent))

from redis_overview.config import reset_config
from redis_overview.connection import reset_registry
from redis_overview.cpu_tracker import reset_tracker
from redis_overview.exceptions import NodeConnectionError


def build_info(
    version="7.2.4",
    role="master",
    uptime=100,
    cpu_sys=1.0,
    cpu_user=1.0,
    used_memory=1024,
    clients=1,
    ops=0,
    net_in=0,
    net_out=0,
    keyspace=None,
):
    """生成 INFO 文本"""
    sections = [
        ["# Server", f"redis_version:{version}", f"uptime_in_seconds:{uptime}"],
        ["# Clients", f"connected_clients:{clients}"],
        ["# Memory", f"used_memory:{used_memory}", "used_memory_human:1.00K"],
        [
            "# Stats",
            f"instantaneous_ops_per_sec:{ops}",
            f"instantaneous_input_kbps:{net_in}",
            f"instantaneous_output_kbps:{net_out}",
        ],
        ["# Replication", f"role:{role}"],
        ["# CPU", f"used_cpu_sys:{cpu_sys}", f"used_cpu_user:{cpu_user}"],
        ["# Keyspace"] + [f"{db}:{value}" for db, value in (keyspace or {}).items()],
    ]
    return "\r\n\r\n".join("\r\n".join(lines) for lines in sections) + "\r\n"


class FakeNode:
    """模拟节点连接"""

    def __init__(self, host="127.0.0.1", port=6379, reply="", error=None):
        self.host = host
        self.port = port
        self.reply = reply
        self.error = error
        self.calls = 0

    async def info(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.reply


class FailingNode(FakeNode):
    def __init__(self, host="127.0.0.1", port=6379):
        super().__init__(
            host, port,
            error=NodeConnectionError(f"{host}:{port}", "Connection refused"),
        )


@pytest.fixture(autouse=True)
def reset_globals(monkeypatch, tmp_path):
    """每个测试使用默认配置和全新的全局实例"""
    monkeypatch.setenv("REDIS_OVERVIEW_CONFIG", str(tmp_path / "missing.yaml"))
    reset_config()
    reset_tracker()
    reset_registry()
    yield
    reset_config()
    reset_tracker()
    reset_registry()
