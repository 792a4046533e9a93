"""
二进制安全格式化策略

与 raw 相同的结构转换，但无法按 UTF-8 解码的字节以 \\xNN 形式保留，
不会替换为 U+FFFD。原始数据中的反斜杠不做转义。
"""

from .raw import RawFormatter


class Utf8Formatter(RawFormatter):
    name = "utf8"

    def format_binary(self, reply: bytes) -> str:
        return reply.decode("utf-8", errors="backslashreplace")
