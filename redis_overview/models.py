"""
数据模型定义

包括：
- CPU 采样与概览记录（Pydantic 模型）
- API 请求/响应模型
- 最新概览的内存缓存
"""

import asyncio
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# 聚合数据模型
# =============================================================================

class CpuSample(BaseModel):
    """单个节点的一次 CPU 采样"""
    node: str  # "host:port"
    cpu_sys: float
    cpu_user: float
    up_time: float


class OverviewRecord(BaseModel):
    """数据库概览（单次聚合结果，对外使用 camelCase 字段名）"""
    model_config = ConfigDict(populate_by_name=True)

    version: Optional[str] = None
    total_keys: Optional[int] = Field(None, alias="totalKeys")
    used_memory: Optional[int] = Field(None, alias="usedMemory")
    connected_clients: Union[int, float] = Field(0, alias="connectedClients")
    ops_per_second: int = Field(0, alias="opsPerSecond")
    network_in_kbps: int = Field(0, alias="networkInKbps")
    network_out_kbps: int = Field(0, alias="networkOutKbps")
    cpu_usage_percentage: Optional[float] = Field(None, alias="cpuUsagePercentage")


# =============================================================================
# API 模型
# =============================================================================

class TargetResponse(BaseModel):
    """目标响应模型（GET /api/targets）"""
    id: str
    host: str
    port: int
    cluster: bool = False
    overview: Optional[OverviewRecord] = None


class FormatRequest(BaseModel):
    """格式化请求（POST /api/format）"""
    reply: Any = None
    format: Optional[str] = None
    encoding: Optional[str] = Field(
        None, description="为 base64 时，回复中的字符串按 base64 解码为二进制"
    )


class FormatResponse(BaseModel):
    """格式化响应"""
    format: str
    result: Any = None


# =============================================================================
# 内存缓存（全局状态）
# =============================================================================

class OverviewCache:
    """
    最新概览缓存

    由采集循环写入，API 读取：{target_id: OverviewRecord}
    """

    def __init__(self):
        self._latest: Dict[str, OverviewRecord] = {}
        self._lock = asyncio.Lock()

    async def get_latest(self, target_id: str) -> Optional[OverviewRecord]:
        """获取目标最新概览"""
        async with self._lock:
            return self._latest.get(target_id)

    async def set_latest(self, target_id: str, record: OverviewRecord):
        """设置目标最新概览"""
        async with self._lock:
            self._latest[target_id] = record

    async def get_all_latest(self) -> Dict[str, OverviewRecord]:
        """获取所有目标最新概览"""
        async with self._lock:
            return self._latest.copy()


# 全局缓存实例
cache = OverviewCache()
