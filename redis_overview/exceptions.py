"""
异常定义
"""


class RedisOverviewError(Exception):
    """概览服务基础异常"""


class NodeConnectionError(ConnectionError, RedisOverviewError):
    """
    节点无法响应 INFO 命令

    继承内置 ConnectionError，调用方可以按标准连接错误处理。
    """

    def __init__(self, node: str, message: str):
        self.node = node
        super().__init__(f"Node {node}: {message}")


class FormatterNotFoundError(RedisOverviewError):
    """未知的输出格式"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown output format: {name}")


class TargetNotFoundError(RedisOverviewError):
    """未配置的监控目标"""

    def __init__(self, target_id: str):
        self.target_id = target_id
        super().__init__(f"Target {target_id} not found")
