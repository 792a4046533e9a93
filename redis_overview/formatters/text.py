"""
文本格式化策略

按 redis-cli 的风格把回复渲染为多行文本：

    1) "key"
    2) (integer) 5
    3) 1) "nested"
       2) (nil)
"""

from collections.abc import Mapping
from typing import Any, List

from .base import OutputFormatter

_ESCAPES = {
    ord("\\"): "\\\\",
    ord('"'): '\\"',
    ord("\n"): "\\n",
    ord("\r"): "\\r",
    ord("\t"): "\\t",
    ord("\a"): "\\a",
    ord("\b"): "\\b",
}


def quote_bytes(value: bytes) -> str:
    """带引号输出，非可见字符转义为 \\xNN"""
    parts = []
    for byte in value:
        if byte in _ESCAPES:
            parts.append(_ESCAPES[byte])
        elif 0x20 <= byte < 0x7F:
            parts.append(chr(byte))
        else:
            parts.append(f"\\x{byte:02x}")
    return '"' + "".join(parts) + '"'


class TextFormatter(OutputFormatter):
    name = "text"

    def format(self, reply: Any) -> str:
        return "\n".join(self._lines(reply))

    def _lines(self, reply: Any) -> List[str]:
        if reply is None:
            return ["(nil)"]
        if isinstance(reply, Exception):
            return [f"(error) {reply}"]
        if isinstance(reply, bool):
            return [f"(integer) {int(reply)}"]
        if isinstance(reply, int):
            return [f"(integer) {reply}"]
        if isinstance(reply, float):
            return [f"(double) {reply}"]
        if isinstance(reply, (bytes, bytearray, memoryview)):
            return [quote_bytes(bytes(reply))]
        if isinstance(reply, str):
            return [quote_bytes(reply.encode("utf-8"))]
        if isinstance(reply, Mapping):
            flat = []
            for key, value in reply.items():
                flat.extend((key, value))
            return self._array_lines(flat)
        if isinstance(reply, (list, tuple)):
            return self._array_lines(reply)
        return [str(reply)]

    def _array_lines(self, items) -> List[str]:
        if not items:
            return ["(empty list or set)"]

        width = len(str(len(items)))
        lines = []
        for index, item in enumerate(items, start=1):
            prefix = f"{index:>{width}}) "
            item_lines = self._lines(item)
            lines.append(prefix + item_lines[0])
            lines.extend(" " * len(prefix) + line for line in item_lines[1:])
        return lines
