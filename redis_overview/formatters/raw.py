"""
原样格式化策略

递归地将回复转换为 JSON 安全结构：
- 二进制 -> 文本
- 列表/元组 -> 列表（保持顺序）
- 映射 -> dict（保持键和顺序，只取映射自身的条目）
- 其他标量原样返回
"""

from collections.abc import Mapping
from functools import singledispatchmethod
from typing import Any, Dict, List

from .base import OutputFormatter


class RawFormatter(OutputFormatter):
    """二进制按 UTF-8 解码（无法解码的字节替换为 U+FFFD）"""

    name = "raw"

    @singledispatchmethod
    def format(self, reply: Any) -> Any:
        return reply

    @format.register(bytes)
    @format.register(bytearray)
    @format.register(memoryview)
    def _format_binary(self, reply) -> str:
        return self.format_binary(bytes(reply))

    @format.register(list)
    @format.register(tuple)
    def _format_sequence(self, reply) -> List[Any]:
        return [self.format(item) for item in reply]

    @format.register(Mapping)
    def _format_mapping(self, reply: Mapping) -> Dict[Any, Any]:
        return {self._format_key(key): self.format(value) for key, value in reply.items()}

    def _format_key(self, key: Any) -> Any:
        if isinstance(key, (bytes, bytearray)):
            return self.format_binary(bytes(key))
        return key

    def format_binary(self, reply: bytes) -> str:
        return reply.decode("utf-8", errors="replace")
