"""
命令回复格式化策略

- raw: 递归转换为 JSON 安全结构，二进制按文本解码
- utf8: 同 raw，无法解码的字节转义为 \\xNN
- text: redis-cli 风格文本
"""

from typing import Dict, Optional, Type

from ..config import get_config
from ..exceptions import FormatterNotFoundError
from .base import OutputFormatter
from .raw import RawFormatter
from .text import TextFormatter
from .utf8 import Utf8Formatter

FORMATTERS: Dict[str, Type[OutputFormatter]] = {
    RawFormatter.name: RawFormatter,
    Utf8Formatter.name: Utf8Formatter,
    TextFormatter.name: TextFormatter,
}


def get_formatter(name: Optional[str] = None) -> OutputFormatter:
    """
    按名称获取格式化策略

    Args:
        name: 策略名称，默认取配置 formatter.default

    Raises:
        FormatterNotFoundError: 未知名称
    """
    if name is None:
        name = get_config().formatter.default

    formatter_class = FORMATTERS.get(name.lower())
    if formatter_class is None:
        raise FormatterNotFoundError(name)
    return formatter_class()


__all__ = [
    "FORMATTERS",
    "OutputFormatter",
    "RawFormatter",
    "TextFormatter",
    "Utf8Formatter",
    "get_formatter",
]
