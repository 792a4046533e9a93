"""
INFO 回复解析

将 Redis INFO 命令返回的分段文本解析为 {section: {field: value}}。

格式示例:
    # Server
    redis_version:7.2.4
    uptime_in_seconds:1234

    # Keyspace
    db0:keys=120,expires=3,avg_ttl=0
"""

from typing import Dict, Optional

SECTION_MARKER = "#"


def parse_info_reply(reply: Optional[str]) -> Dict[str, Dict[str, str]]:
    """
    解析 INFO 文本

    Args:
        reply: INFO 原始文本（行分隔符为 \\r\\n，也兼容 \\n）

    Returns:
        节名（小写）-> 字段名 -> 字符串值。
        没有 ":" 的行直接跳过；首个节标记之前的字段忽略。
    """
    result: Dict[str, Dict[str, str]] = {}
    if not reply:
        return result

    section = None
    for raw_line in reply.splitlines():
        line = raw_line.strip()
        if not line:
            # 空行分隔节
            section = None
            continue

        if line.startswith(SECTION_MARKER):
            name = line[len(SECTION_MARKER):].strip().lower()
            section = result.setdefault(name, {})
            continue

        if section is None:
            continue

        field, sep, value = line.partition(":")
        if not sep:
            continue
        section[field] = value

    return result


def parse_bulk_string(
    value: str,
    separator: str = ",",
    delimiter: str = "=",
) -> Dict[str, str]:
    """
    解析 "k1=v1,k2=v2" 形式的字符串

    用于 keyspace 字段，例如 "keys=5,expires=1,avg_ttl=0"。
    没有分隔符的项跳过。

    Raises:
        AttributeError: value 不是字符串
    """
    result: Dict[str, str] = {}
    for item in value.split(separator):
        key, sep, item_value = item.partition(delimiter)
        if not sep:
            continue
        result[key.strip()] = item_value.strip()
    return result
