"""
回复格式化 API
"""

import base64
import binascii
from typing import Any

from fastapi import APIRouter, HTTPException, status

from ...exceptions import FormatterNotFoundError
from ...formatters import get_formatter
from ...models import FormatRequest, FormatResponse

router = APIRouter(tags=["replies"])


def decode_base64_strings(value: Any) -> Any:
    """将回复中的字符串按 base64 解码为二进制（键保持不变）"""
    if isinstance(value, str):
        return base64.b64decode(value, validate=True)
    if isinstance(value, list):
        return [decode_base64_strings(item) for item in value]
    if isinstance(value, dict):
        return {key: decode_base64_strings(item) for key, item in value.items()}
    return value


@router.post("/api/format", response_model=FormatResponse)
async def format_reply(request: FormatRequest):
    """按指定策略格式化命令回复"""
    try:
        formatter = get_formatter(request.format)
    except FormatterNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    reply = request.reply
    if request.encoding == "base64":
        try:
            reply = decode_base64_strings(reply)
        except (binascii.Error, ValueError) as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid base64 reply: {e}"
            )

    return FormatResponse(format=formatter.name, result=formatter.format(reply))
