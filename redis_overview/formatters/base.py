"""
输出格式化策略接口
"""

from abc import ABC, abstractmethod
from typing import Any


class OutputFormatter(ABC):
    """
    命令回复格式化策略

    所有策略只提供一个 format 方法，调用方不关心具体实现。
    """

    name: str = ""

    @abstractmethod
    def format(self, reply: Any) -> Any:
        """将 Redis 回复转换为输出结构"""
